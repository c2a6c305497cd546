# tests/core/test_workflow.py
import pytest

from wikiportraits.core.domain.exceptions import UnknownWorkflowError
from wikiportraits.core.domain.models import StepStatus, UploadType, WorkflowState
from wikiportraits.core.workflow import event_types, registry
from wikiportraits.core.workflow.state import INITIAL_STEP, WORKFLOW_STEPS, WorkflowStateMachine, initial_state

MUSIC_FORM = {
    "isWikiPortraitsJob": True,
    "workflowType": "music-event",
    "eventDetails": {"title": "Jærnåttå", "date": "2025-06-15", "type": "festival"},
    "entities": {"people": [{"id": "Q2"}, {"id": "Q3"}]},
    "files": {
        "queue": [{"metadata": {"description": "Kari performing"}}],
        "existing": [{"title": "File:A.jpg"}, {"title": "File:B.jpg"}],
    },
    "computed": {
        "categories": {"all": ["Jærnåttå 2025", "FordRekord"]},
        "publish": {"totalActions": 4, "completedActions": 2, "pendingActions": 2},
    },
}


class TestWorkflowRegistry:

    def test_music_steps_in_order(self):
        steps = registry.evaluate_workflow("music-event", {})

        assert [s.id for s in steps] == [
            "wiki-portraits", "upload-type", "event-type", "event-details",
            "band-performers", "images", "categories", "wikidata", "upload",
        ]

    def test_empty_form_has_nothing_finished(self):
        steps = {s.id: s for s in registry.evaluate_workflow("music", {})}

        assert not any(s.isFinished for s in steps.values())
        assert steps["wiki-portraits"].description == "Select workflow type"
        assert steps["event-details"].description == "Configure event details"
        assert steps["images"].description == "Upload and manage images"
        assert steps["upload"].description == "Publish to Wikimedia Commons"

    def test_filled_music_form(self):
        """
        Scenario: A music form that is filled in up to publishing.
        Expected: Every step but publish reports finished, with form-derived summaries.
        """
        steps = {s.id: s for s in registry.evaluate_workflow("music-event", MUSIC_FORM)}

        assert steps["wiki-portraits"].description == "WikiPortraits Assignment"
        assert steps["upload-type"].description == "Music Event"
        assert steps["event-type"].description == "Festival"
        assert steps["event-details"].description == "Jærnåttå (2025)"
        assert steps["band-performers"].description == "2 performer(s)"
        assert steps["images"].description == "3 images (1 new, 2 from Commons)"
        assert steps["categories"].description == "2 categories"
        assert steps["upload"].description == "2/4 actions completed"

        assert all(steps[i].isFinished for i in ("wiki-portraits", "event-details", "images", "wikidata"))
        assert steps["upload"].hasValues is True
        assert steps["upload"].isFinished is False

    def test_images_need_descriptions(self):
        form = {"files": {"queue": [{"metadata": {}}]}}

        images = {s.id: s for s in registry.evaluate_workflow("music", form)}["images"]

        assert images.description == "1 images"
        assert images.hasValues is True
        assert images.isFinished is False

    def test_publish_summaries(self):
        def publish(total, completed, pending):
            form = {"computed": {"publish": {
                "totalActions": total, "completedActions": completed, "pendingActions": pending,
            }}}
            return registry.evaluate_workflow("general", form)[-1]

        assert publish(3, 3, 0).description == "All 3 actions completed"
        assert publish(3, 3, 0).isFinished is True
        assert publish(3, 0, 3).description == "3 pending actions"

    def test_wikimedia_commons_choice(self):
        step = registry.evaluate_workflow("general", {"isWikiPortraitsJob": False})[0]

        assert step.description == "Wikimedia Commons"
        assert step.isFinished is True

    def test_general_workflow(self):
        steps = registry.evaluate_workflow("general-upload", {"files": {"existing": [{}]}})

        assert [s.id for s in steps] == ["wiki-portraits", "upload-type", "images", "upload"]
        assert steps[2].description == "Upload and manage images"
        assert steps[2].dependencies == ["wiki-portraits"]
        assert steps[3].dependencies == ["images"]

    def test_unknown_type_falls_back_to_general(self):
        assert registry.get_workflow_config("red-carpet-event") is registry.GENERAL_WORKFLOW

    def test_register_workflow(self):
        definition = registry.WorkflowDefinition(id="portraits", title="Portraits", steps=[
            registry.SHARED_STEPS["wiki-portraits"],
        ])
        registry.register_workflow("portraits", definition)
        try:
            assert "portraits" in registry.list_workflows()
            assert [s.id for s in registry.evaluate_workflow("portraits", {})] == ["wiki-portraits"]
        finally:
            registry._registry.pop("portraits")

    def test_list_workflows_is_sorted(self):
        assert registry.list_workflows() == ["general", "general-upload", "music", "music-event"]


class TestEventTypes:

    def test_music_needs_selection(self):
        assert event_types.needs_event_type_selection("music-event") is True
        assert event_types.needs_event_type_selection("soccer-match") is False

    def test_event_types_for_workflow(self):
        assert event_types.get_event_types_for_workflow("music-event") == ("festival", "concert")
        assert event_types.get_event_types_for_workflow("custom") == ()
        assert event_types.get_event_types_for_workflow("unknown") == ()


class TestWorkflowStateMachine:

    def test_initial_state(self):
        state = initial_state(UploadType.MUSIC)

        assert state.activeTab == INITIAL_STEP
        assert state.uploadType == UploadType.MUSIC
        assert set(state.steps) == set(WORKFLOW_STEPS)
        assert state.steps["wiki-portraits"] == StepStatus.READY
        assert state.steps["upload"] == StepStatus.PENDING

    @pytest.mark.parametrize("upload_type, following", [
        (UploadType.MUSIC, "event-type"),
        (UploadType.SOCCER, "event-details"),
        (UploadType.GENERAL, "images"),
    ])
    def test_first_step_branches_on_upload_type(self, upload_type, following):
        machine = WorkflowStateMachine(initial_state(upload_type))

        state = machine.complete("wiki-portraits")

        assert state.steps["wiki-portraits"] == StepStatus.COMPLETED
        assert state.steps[following] == StepStatus.READY
        assert state.activeTab == following

    def test_music_path(self):
        """
        Scenario: A music upload walks through the wizard.
        Expected: Each completion readies the next music step.
        """
        machine = WorkflowStateMachine(initial_state(UploadType.MUSIC))

        for step in ("wiki-portraits", "event-type", "event-details", "band-performers", "images", "categories"):
            machine.complete(step)
        state = machine.complete("templates")

        assert state.activeTab == "wikidata"
        assert state.steps["wikidata"] == StepStatus.READY
        assert all(state.steps[s] == StepStatus.COMPLETED for s in (
            "wiki-portraits", "event-type", "event-details", "band-performers", "images", "categories", "templates",
        ))

    def test_general_event_details_go_to_categories(self):
        machine = WorkflowStateMachine(initial_state())

        state = machine.complete("event-details")

        assert state.activeTab == "categories"

    def test_steps_without_handler_are_only_marked(self):
        machine = WorkflowStateMachine(initial_state())

        state = machine.complete("upload")

        assert state.steps["upload"] == StepStatus.COMPLETED
        assert state.activeTab == INITIAL_STEP

    def test_input_state_is_not_mutated(self):
        original = initial_state()

        WorkflowStateMachine(original).complete("wiki-portraits")

        assert original.steps["wiki-portraits"] == StepStatus.READY

    def test_partial_state_is_filled(self):
        machine = WorkflowStateMachine(WorkflowState(steps={"images": StepStatus.COMPLETED}))

        assert machine.state.steps["images"] == StepStatus.COMPLETED
        assert machine.state.steps["wikidata"] == StepStatus.PENDING

    def test_status_and_active_tab(self):
        machine = WorkflowStateMachine()

        machine.update_step_status("images", StepStatus.ERROR)
        state = machine.set_active_tab("images")

        assert state.steps["images"] == StepStatus.ERROR
        assert state.activeTab == "images"

    def test_unknown_step(self):
        machine = WorkflowStateMachine()

        with pytest.raises(UnknownWorkflowError):
            machine.complete("teleport")
        with pytest.raises(UnknownWorkflowError):
            machine.set_active_tab("teleport")

    def test_sync_from_form(self):
        machine = WorkflowStateMachine()

        state = machine.sync_from_form({
            "wikiPortraits": {"isWikiPortraitsJob": False},
            "eventDetails": {"name": "Jærnåttå", "year": "2025"},
            "uploadType": "soccer",
        })

        assert state.steps["wiki-portraits"] == StepStatus.COMPLETED
        assert state.steps["event-details"] == StepStatus.COMPLETED
        assert state.uploadType == UploadType.SOCCER

    def test_sync_reopens_incomplete_details(self):
        machine = WorkflowStateMachine()
        machine.update_step_status("event-details", StepStatus.COMPLETED)

        state = machine.sync_from_form({"eventDetails": {"title": "Jærnåttå"}})

        assert state.steps["event-details"] == StepStatus.PENDING
        assert state.steps["wiki-portraits"] == StepStatus.READY
