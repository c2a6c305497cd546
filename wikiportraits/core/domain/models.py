# wikiportraits/core/domain/models.py
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

# --- Enums ---


class CategoryRuleType(str, Enum):
    """How a generated category reaches the user."""
    AUTO = "auto"             # Applied without asking
    SUGGESTED = "suggested"   # Offered, not applied
    REQUIRED = "required"     # Always applied
    USER = "user"             # Added by hand


class UploadType(str, Enum):
    MUSIC = "music"
    SOCCER = "soccer"
    GENERAL = "general"
    PORTRAITS = "portraits"


class StepStatus(str, Enum):
    """Lifecycle of a wizard step."""
    PENDING = "pending"
    READY = "ready"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"
    ERROR = "error"


class EntityType(str, Enum):
    """Kinds of Wikidata item the uploader can create."""
    BAND = "band"
    BAND_MEMBER = "band_member"
    PHOTOGRAPHER = "photographer"

# --- Credentials ---


class WikimediaCredentials(BaseModel):
    """
    OAuth 1.0a access token of the logged-in photographer.
    Every write to Commons/Wikidata/Wikipedia is signed with it.
    """
    username: str
    user_id: Optional[str] = None
    token: str
    token_secret: str = ""

# --- Categories ---


class CategoryCreationInfo(BaseModel):
    """A Commons category that may need to be created, with its parents and description."""
    model_config = ConfigDict(populate_by_name=True)

    categoryName: str = Field(..., description="Category title without the 'Category:' prefix")
    shouldCreate: bool = True
    parentCategory: Optional[str] = None
    description: str = ""
    eventName: Optional[str] = None
    additionalParents: Optional[List[str]] = None
    teamName: Optional[str] = None


class GeneratedCategory(BaseModel):
    """Output of the category rule engine."""
    name: str
    type: CategoryRuleType
    source: str
    confidence: float = Field(..., ge=0.0, le=1.0)
    rule: Optional[str] = None
    priority: int = 5
    alternatives: List[str] = Field(default_factory=list)


class CategoryGenerationResult(BaseModel):
    categories: List[GeneratedCategory] = Field(default_factory=list)
    suggestions: List[GeneratedCategory] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)
    totalGenerated: int = 0
    duplicatesRemoved: int = 0
    processingTime: float = 0.0


class PerformerCategory(BaseModel):
    performerName: str
    performerQid: str
    commonsCategory: str
    source: str = Field(..., description="'p373', 'base' or 'disambiguated'")
    needsCreation: bool
    description: Optional[str] = None

# --- Structured data ---


class Caption(BaseModel):
    """A MediaInfo label (file caption) in one language."""
    language: str
    text: str


class DepictsItem(BaseModel):
    """A P180 (depicts) target."""
    qid: str = Field(..., pattern=r"^Q\d+$")
    label: Optional[str] = None

# --- Upload results ---


class UploadResult(BaseModel):
    success: bool = True
    filename: str
    url: Optional[str] = None
    descriptionUrl: Optional[str] = None
    pageId: Optional[int] = None


class CategoryCreationResult(BaseModel):
    success: bool = True
    categoryName: str
    exists: bool = False
    pageId: Optional[int] = None
    newRevision: Optional[int] = None
    message: str


class TemplateCreationResult(BaseModel):
    success: bool = True
    templateName: str
    templateUrl: str
    pageId: Optional[int] = None
    message: str
    alreadyExists: bool = False

# --- Wikidata entity input ---


class PendingEntity(BaseModel):
    """
    A Wikidata item the photographer asked us to create.
    `data` carries the type-specific fields (gender, instruments, bandId,
    nationality, birthDate, legalName, wikimediaUsername, website).
    """
    type: str
    name: str
    description: Optional[str] = None
    data: Dict[str, Any] = Field(default_factory=dict)


class CreatedEntity(BaseModel):
    success: bool = True
    wikidataId: str
    entity: Dict[str, Any] = Field(default_factory=dict)
    message: str
    wikidataUrl: str

# --- Workflow ---


class StepView(BaseModel):
    """One evaluated wizard step as presented to the client."""
    id: str
    title: str
    description: str
    dependencies: List[str] = Field(default_factory=list)
    hasValues: bool = False
    isFinished: bool = False


class WorkflowState(BaseModel):
    """Serializable state of the step state machine."""
    activeTab: str = "wiki-portraits"
    uploadType: UploadType = UploadType.GENERAL
    steps: Dict[str, StepStatus] = Field(default_factory=dict)


class BandCategoryInfo(BaseModel):
    """Category hierarchy for one band's performance at one event."""
    bandName: str
    bandQid: str
    mainCategory: str = Field(..., description="e.g. 'FordRekord' or 'Ingenting (band)'")
    needsDisambiguation: bool
    year: str
    eventName: str
    categoriesToCreate: List[CategoryCreationInfo] = Field(default_factory=list)
