# wikiportraits/adapters/api/routers/workflow.py
from typing import List

import structlog
from fastapi import APIRouter, HTTPException, status

from wikiportraits.adapters.api.dependencies import domain_http_error
from wikiportraits.adapters.api.schemas import EvaluateWorkflowRequest, WorkflowTransitionRequest
from wikiportraits.core.domain.exceptions import DomainError
from wikiportraits.core.domain.models import StepView, WorkflowState
from wikiportraits.core.workflow.event_types import get_event_types_for_workflow, needs_event_type_selection
from wikiportraits.core.workflow.registry import evaluate_workflow, list_workflows
from wikiportraits.core.workflow.state import WorkflowStateMachine

logger = structlog.get_logger()

router = APIRouter(prefix="/workflow", tags=["Workflow"])

TRANSITION_ACTIONS = ("complete", "set-status", "activate", "sync")


@router.get("")
async def workflows():
    return {"workflows": list_workflows()}


@router.get("/{workflow_type}/event-types")
async def event_types(workflow_type: str):
    return {
        "workflowType": workflow_type,
        "needsSelection": needs_event_type_selection(workflow_type),
        "eventTypes": list(get_event_types_for_workflow(workflow_type)),
    }


@router.post("/{workflow_type}/evaluate", response_model=List[StepView])
async def evaluate(workflow_type: str, body: EvaluateWorkflowRequest):
    """Every step of the workflow with its description and progress for the given form."""
    return evaluate_workflow(workflow_type, body.formData)


@router.post("/transition", response_model=WorkflowState)
async def transition(body: WorkflowTransitionRequest):
    """
    Applies one action to the wizard state and returns the new state.
    The machine is stateless on the server; the client keeps the state.
    """
    if body.action not in TRANSITION_ACTIONS:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"Unknown action: {body.action}")
    if body.action != "sync" and not body.step:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="step is required")

    machine = WorkflowStateMachine(body.state)
    try:
        if body.action == "complete":
            return machine.complete(body.step)
        if body.action == "set-status":
            if body.status is None:
                raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="status is required")
            return machine.update_step_status(body.step, body.status)
        if body.action == "activate":
            return machine.set_active_tab(body.step)
        return machine.sync_from_form(body.formData or {})
    except DomainError as e:
        raise domain_http_error(e, "workflow_transition")
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
