# wikiportraits/core/workflow/registry.py
"""
Wizard step definitions.

A step is evaluated against the whole form: it renders a one-line summary,
names the steps it depends on and reports whether the user has started
(`has_values`) or finished (`is_finished`) it. Workflows are ordered step
lists; unknown workflow types fall back to the general upload.
"""
from dataclasses import dataclass, field, replace
from typing import Any, Callable, Dict, List

from wikiportraits.core.domain.dates import year_of
from wikiportraits.core.domain.models import StepView

Form = Dict[str, Any]


@dataclass(frozen=True)
class StepConfig:
    id: str
    title: str
    describe: Callable[[Form], str]
    has_values: Callable[[Form], bool]
    is_finished: Callable[[Form], bool]
    dependencies: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class WorkflowDefinition:
    id: str
    title: str
    steps: List[StepConfig]


def _get(form: Form, path: str, default=None):
    current: Any = form
    for part in path.split("."):
        if not isinstance(current, dict) or current.get(part) is None:
            return default
        current = current[part]
    return current


def _count(form: Form, path: str) -> int:
    return len(_get(form, path, []) or [])


def _described(form: Form) -> bool:
    queue = _get(form, "files.queue", [])
    return all((item.get("metadata") or {}).get("description") for item in queue)


# --- Shared steps ---


def _wikiportraits_description(form: Form) -> str:
    job = form.get("isWikiPortraitsJob")
    if job is True:
        return "WikiPortraits Assignment"
    if job is False:
        return "Wikimedia Commons"
    return "Select workflow type"


_UPLOAD_TYPE_TITLES = {
    "music-event": "Music Event",
    "soccer-match": "Soccer Match",
    "portrait-session": "Portrait Session",
    "general-upload": "General Upload",
}


def _images_description(form: Form) -> str:
    new, existing = _count(form, "files.queue"), _count(form, "files.existing")
    total = new + existing
    if total == 0:
        return "Upload and manage images"
    if new and existing:
        return f"{total} images ({new} new, {existing} from Commons)"
    if existing:
        return f"{existing} images from Commons"
    return f"{new} images"


def _images_finished(form: Form) -> bool:
    new, existing = _count(form, "files.queue"), _count(form, "files.existing")
    if new + existing == 0:
        return False
    return _described(form) if new else True


def _categories_count(form: Form) -> int:
    return _count(form, "computed.categories.all")


def _publish_description(form: Form) -> str:
    pending = _get(form, "computed.publish.pendingActions", 0)
    completed = _get(form, "computed.publish.completedActions", 0)
    total = _get(form, "computed.publish.totalActions", 0)
    if total == 0:
        return "Publish to Wikimedia Commons"
    if completed == total:
        return f"All {total} actions completed"
    if completed > 0:
        return f"{completed}/{total} actions completed"
    return f"{pending} pending actions"


def _publish_finished(form: Form) -> bool:
    total = _get(form, "computed.publish.totalActions", 0)
    return total > 0 and _get(form, "computed.publish.completedActions", 0) == total


SHARED_STEPS: Dict[str, StepConfig] = {
    "wiki-portraits": StepConfig(
        id="wiki-portraits",
        title="WikiPortraits",
        describe=_wikiportraits_description,
        has_values=lambda f: f.get("isWikiPortraitsJob") is not None,
        is_finished=lambda f: f.get("isWikiPortraitsJob") is not None,
    ),
    "upload-type": StepConfig(
        id="upload-type",
        title="Upload Type",
        describe=lambda f: _UPLOAD_TYPE_TITLES.get(f.get("workflowType"), "Choose upload type"),
        has_values=lambda f: f.get("workflowType") is not None,
        is_finished=lambda f: f.get("workflowType") is not None,
        dependencies=["wiki-portraits"],
    ),
    "images": StepConfig(
        id="images",
        title="Images",
        describe=_images_description,
        has_values=lambda f: _count(f, "files.queue") + _count(f, "files.existing") > 0,
        is_finished=_images_finished,
        dependencies=["band-performers"],
    ),
    "categories": StepConfig(
        id="categories",
        title="Categories",
        describe=lambda f: f"{_categories_count(f)} categories" if _categories_count(f) else "Organize with categories",
        has_values=lambda f: _categories_count(f) > 0,
        is_finished=lambda f: _categories_count(f) > 0,
        dependencies=["event-details"],
    ),
    "publish": StepConfig(
        id="upload",
        title="Publish",
        describe=_publish_description,
        has_values=lambda f: _get(f, "computed.publish.pendingActions", 0) > 0,
        is_finished=_publish_finished,
        dependencies=["event-details"],
    ),
}


# --- Music workflow ---


def _event_type_description(form: Form) -> str:
    event_type = _get(form, "eventDetails.type")
    return event_type[:1].upper() + event_type[1:] if event_type else "Choose event type"


def _event_details_description(form: Form) -> str:
    name = _get(form, "eventDetails.title")
    year = year_of(_get(form, "eventDetails.date"))
    if name and year:
        return f"{name} ({year})"
    if name:
        return name
    if year:
        return f"Event {year}"
    return "Configure event details"


def _event_details_set(form: Form) -> bool:
    return bool(_get(form, "eventDetails.title") and _get(form, "eventDetails.date"))


def _has_wikidata_data(form: Form) -> bool:
    return bool(_get(form, "eventDetails.title")) or _count(form, "entities.people") > 0 or _count(
        form, "entities.organizations"
    ) > 0


MUSIC_WORKFLOW = WorkflowDefinition(
    id="music",
    title="Music Event",
    steps=[
        SHARED_STEPS["wiki-portraits"],
        SHARED_STEPS["upload-type"],
        StepConfig(
            id="event-type",
            title="Event Type",
            describe=_event_type_description,
            has_values=lambda f: _get(f, "eventDetails.type") is not None,
            is_finished=lambda f: _get(f, "eventDetails.type") is not None,
            dependencies=["wiki-portraits"],
        ),
        StepConfig(
            id="event-details",
            title="Event Details",
            describe=_event_details_description,
            has_values=_event_details_set,
            is_finished=_event_details_set,
            dependencies=["event-type"],
        ),
        StepConfig(
            id="band-performers",
            title="Band & Performers",
            describe=lambda f: (
                f"{_count(f, 'entities.people')} performer(s)" if _count(f, "entities.people")
                else "Select band and performers"
            ),
            has_values=lambda f: _count(f, "entities.people") > 0,
            is_finished=lambda f: _count(f, "entities.people") > 0,
            dependencies=["event-details"],
        ),
        SHARED_STEPS["images"],
        SHARED_STEPS["categories"],
        StepConfig(
            id="wikidata",
            title="Wikidata",
            describe=lambda f: (
                f"{_get(f, 'computed.wikidata.entityCount')} entities" if _get(f, "computed.wikidata.entityCount")
                else "Link to Wikidata"
            ),
            has_values=_has_wikidata_data,
            is_finished=_has_wikidata_data,
            dependencies=["event-details"],
        ),
        SHARED_STEPS["publish"],
    ],
)

GENERAL_WORKFLOW = WorkflowDefinition(
    id="general",
    title="General Upload",
    steps=[
        SHARED_STEPS["wiki-portraits"],
        SHARED_STEPS["upload-type"],
        replace(
            SHARED_STEPS["images"],
            describe=lambda f: "Upload and manage images",
            is_finished=lambda f: _count(f, "files.queue") > 0 and _described(f),
            dependencies=["wiki-portraits"],
        ),
        replace(SHARED_STEPS["publish"], dependencies=["images"]),
    ],
)

_registry: Dict[str, WorkflowDefinition] = {
    "music": MUSIC_WORKFLOW,
    "music-event": MUSIC_WORKFLOW,
    "general": GENERAL_WORKFLOW,
    "general-upload": GENERAL_WORKFLOW,
}


def get_workflow_config(workflow_type: str) -> WorkflowDefinition:
    return _registry.get(workflow_type, GENERAL_WORKFLOW)


def register_workflow(workflow_id: str, definition: WorkflowDefinition) -> None:
    _registry[workflow_id] = definition


def list_workflows() -> List[str]:
    return sorted(_registry)


def evaluate_workflow(workflow_type: str, form: Form) -> List[StepView]:
    """Every step of the workflow rendered against `form`."""
    return [
        StepView(
            id=step.id,
            title=step.title,
            description=step.describe(form),
            dependencies=list(step.dependencies),
            hasValues=bool(step.has_values(form)),
            isFinished=bool(step.is_finished(form)),
        )
        for step in get_workflow_config(workflow_type).steps
    ]
