# wikiportraits/adapters/api/schemas.py
"""Request bodies of the HTTP API. Response shapes reuse the domain models."""
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from wikiportraits.core.domain.models import (
    Caption,
    CategoryCreationInfo,
    DepictsItem,
    PendingEntity,
    StepStatus,
    UploadType,
    WorkflowState,
)

# --- Commons ---


class CreateCategoryRequest(CategoryCreationInfo):
    pass


class EditPageRequest(BaseModel):
    filename: str = Field(..., min_length=1)
    wikitext: str
    summary: Optional[str] = None


class UpdateCaptionsRequest(BaseModel):
    pageId: int
    captions: List[Caption] = Field(..., min_length=1)


class UpdateDepictsRequest(BaseModel):
    pageId: int
    depicts: List[DepictsItem]


class CreateTemplateRequest(BaseModel):
    templateName: str = Field(..., min_length=1)
    content: str = Field(..., min_length=1)
    summary: Optional[str] = None

# --- Wikidata ---


class CreateClaimRequest(BaseModel):
    entityId: str
    propertyId: str
    value: Any


class CreateEntityRequest(BaseModel):
    """
    Either a typed `entity` (band, band_member, photographer) to build,
    or ready-made Wikibase JSON in `entityData`.
    """
    entity: Optional[PendingEntity] = None
    entityData: Optional[Dict[str, Any]] = None


class CreateEntitiesRequest(BaseModel):
    entities: List[PendingEntity] = Field(..., min_length=1)

# --- Wikipedia ---


class UpdateInfoboxRequest(BaseModel):
    lang: str = ""
    title: str = ""
    image: str = ""
    summary: str = ""

# --- Categories ---


class MusicCategoriesRequest(BaseModel):
    eventData: Optional[Dict[str, Any]] = None
    includeBand: bool = True
    includeEvent: bool = True
    includeWikiPortraits: bool = True
    selectedBand: Optional[str] = None


class MusicCategoriesToCreateRequest(BaseModel):
    eventData: Dict[str, Any]
    bands: Optional[List[Dict[str, str]]] = None
    onlyMissing: bool = True


class SoccerCategoriesRequest(BaseModel):
    matchData: Dict[str, Any]
    selectedPlayers: List[Dict[str, Any]] = Field(default_factory=list)
    includePlayer: bool = True
    includeTeam: bool = True
    includeMatch: bool = True


class CategoryPreferencesBody(BaseModel):
    language: str = "en"
    includeYear: bool = True
    includeLocation: bool = True
    includeGenre: bool = True
    maxAutoCategories: int = 0


class GenerateCategoriesRequest(BaseModel):
    formData: Dict[str, Any] = Field(default_factory=dict)
    entityData: Dict[str, Any] = Field(default_factory=dict)
    workflowConfig: Dict[str, Any] = Field(default_factory=dict)
    rules: Optional[List[Dict[str, Any]]] = None
    preferences: CategoryPreferencesBody = Field(default_factory=CategoryPreferencesBody)


class WikiPortraitsCategoriesRequest(BaseModel):
    eventName: str = Field(..., min_length=1)
    year: str = Field(..., min_length=4)
    eventType: str = "music events"
    onlyMissing: bool = False

# --- Wikitext ---


class CommonsPageRequest(BaseModel):
    metadata: Dict[str, Any]
    forceRegenerate: bool = False


class FilenameRequest(BaseModel):
    """
    With `formData` the name is built from the event and made unique against
    `existingFilenames` and Commons. With `metadata` only, the per-image
    formatter is used and nothing is checked remotely.
    """
    originalFilename: str = Field(..., min_length=1)
    formData: Optional[Dict[str, Any]] = None
    metadata: Optional[Dict[str, Any]] = None
    imageIndex: int = Field(0, ge=0)
    existingFilenames: List[str] = Field(default_factory=list)


class CaptionsRequest(BaseModel):
    formData: Dict[str, Any] = Field(default_factory=dict)
    location: Optional[str] = None
    date: Optional[str] = None
    languages: Optional[List[str]] = None


class TemplateRequest(BaseModel):
    uploadType: UploadType = UploadType.MUSIC
    musicEventData: Optional[Dict[str, Any]] = None
    language: str = "en"

# --- Workflow ---


class EvaluateWorkflowRequest(BaseModel):
    formData: Dict[str, Any] = Field(default_factory=dict)


class WorkflowTransitionRequest(BaseModel):
    """
    `action` is one of ``complete``, ``set-status``, ``activate`` or ``sync``.
    Without `state` the machine starts from the initial state.
    """
    action: str
    step: Optional[str] = None
    status: Optional[StepStatus] = None
    state: Optional[WorkflowState] = None
    formData: Optional[Dict[str, Any]] = None
