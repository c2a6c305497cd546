# wikiportraits/core/workflow/event_types.py
from typing import Dict, Tuple

WORKFLOW_EVENT_TYPES: Dict[str, Tuple[str, ...]] = {
    "music-event": ("festival", "concert"),
    "soccer-match": ("match",),
    "portraits": ("session",),
    "general-upload": ("upload",),
    "awards-event": ("nobel-prize", "oscars", "grammys", "golden-globes", "emmys", "other-award"),
    "red-carpet-event": ("movie-premiere", "fashion-show", "gala", "charity-event"),
    "press-event": ("political-press", "movie-junket", "product-launch", "corporate-press"),
    "sports-event": ("soccer", "olympics", "tennis", "basketball", "motorsport", "other-sport"),
    "production-event": ("movie-shoot", "tv-filming", "behind-scenes", "documentary"),
    "political-event": ("rally", "debate", "summit", "campaign", "inauguration"),
    "cultural-event": ("theatre", "opera", "art-exhibition", "ballet", "performance"),
    "corporate-event": ("tech-conference", "product-launch", "shareholder-meeting", "trade-show"),
    "custom": (),
}


def needs_event_type_selection(workflow_type: str) -> bool:
    """Only music events ask which kind of event it was."""
    return workflow_type == "music-event" and len(WORKFLOW_EVENT_TYPES["music-event"]) > 1


def get_event_types_for_workflow(workflow_type: str) -> Tuple[str, ...]:
    return WORKFLOW_EVENT_TYPES.get(workflow_type, ())
