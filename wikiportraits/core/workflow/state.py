# wikiportraits/core/workflow/state.py
"""
Step state machine of the upload wizard.

The client keeps the state and posts it back with each transition, so the
machine is a thin wrapper around a `WorkflowState` value: it never stores
anything between requests.
"""
from typing import Any, Callable, Dict, Optional

import structlog

from wikiportraits.core.domain.exceptions import UnknownWorkflowError
from wikiportraits.core.domain.models import StepStatus, UploadType, WorkflowState

logger = structlog.get_logger()

WORKFLOW_STEPS = (
    "wiki-portraits",
    "event-type",
    "event-details",
    "band-performers",
    "categories",
    "images",
    "templates",
    "wikidata",
    "commons",
    "wikipedia",
    "upload",
)

INITIAL_STEP = "wiki-portraits"


def initial_state(upload_type: UploadType = UploadType.GENERAL) -> WorkflowState:
    steps = {step: StepStatus.PENDING for step in WORKFLOW_STEPS}
    steps[INITIAL_STEP] = StepStatus.READY
    return WorkflowState(activeTab=INITIAL_STEP, uploadType=upload_type, steps=steps)


class WorkflowStateMachine:
    """
    Completing a step marks it completed and readies the next one:

    wiki-portraits -> event-type (music) | event-details (soccer) | images
    event-type -> event-details
    event-details -> band-performers (music) | categories
    band-performers -> images -> categories -> templates -> wikidata
    """

    def __init__(self, state: Optional[WorkflowState] = None):
        self.state = state.model_copy(deep=True) if state else initial_state()
        for step in WORKFLOW_STEPS:
            self.state.steps.setdefault(step, StepStatus.PENDING)
        self._handlers: Dict[str, Callable[[], None]] = {
            "wiki-portraits": self._wikiportraits_complete,
            "event-type": lambda: self._advance("event-type", "event-details"),
            "event-details": self._event_details_complete,
            "band-performers": lambda: self._advance("band-performers", "images"),
            "images": lambda: self._advance("images", "categories"),
            "categories": lambda: self._advance("categories", "templates"),
            "templates": lambda: self._advance("templates", "wikidata"),
        }

    @staticmethod
    def _check(step: str) -> None:
        if step not in WORKFLOW_STEPS:
            raise UnknownWorkflowError(step)

    def update_step_status(self, step: str, status: StepStatus) -> WorkflowState:
        self._check(step)
        self.state.steps[step] = status
        return self.state

    def set_active_tab(self, step: str) -> WorkflowState:
        self._check(step)
        self.state.activeTab = step
        return self.state

    def complete(self, step: str) -> WorkflowState:
        """Runs the completion handler of `step`; steps without one are just marked completed."""
        self._check(step)
        handler = self._handlers.get(step)
        if handler:
            handler()
        else:
            self.update_step_status(step, StepStatus.COMPLETED)
        logger.debug("workflow_step_completed", step=step, active=self.state.activeTab)
        return self.state

    def _advance(self, done: str, following: str) -> None:
        self.state.steps[done] = StepStatus.COMPLETED
        self.state.steps[following] = StepStatus.READY
        self.state.activeTab = following

    def _wikiportraits_complete(self) -> None:
        if self.state.uploadType == UploadType.MUSIC:
            self._advance("wiki-portraits", "event-type")
        elif self.state.uploadType == UploadType.SOCCER:
            self._advance("wiki-portraits", "event-details")
        else:
            self._advance("wiki-portraits", "images")

    def _event_details_complete(self) -> None:
        if self.state.uploadType == UploadType.MUSIC:
            self._advance("event-details", "band-performers")
        else:
            self._advance("event-details", "categories")

    def sync_from_form(self, form: Dict[str, Any]) -> WorkflowState:
        """
        Mirrors form values into step statuses: a WikiPortraits choice
        completes the first step, event details complete or reopen the
        details step.
        """
        wikiportraits = form.get("wikiPortraits") or {}
        if wikiportraits.get("isWikiPortraitsJob") is not None or form.get("isWikiPortraitsJob") is not None:
            self.state.steps["wiki-portraits"] = StepStatus.COMPLETED

        details = form.get("eventDetails")
        if details is not None:
            name = details.get("name") or details.get("title")
            year = details.get("year") or details.get("date")
            self.state.steps["event-details"] = StepStatus.COMPLETED if name and year else StepStatus.PENDING

        if form.get("uploadType"):
            self.state.uploadType = UploadType(form["uploadType"])
        return self.state
