# deal-coach/models.py
import enum
import math
from datetime import datetime
from typing import Optional, List, Dict, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from utils import parse_timestamp


class Stage(str, enum.Enum):
    """Challenger pipeline stages, declared in funnel order."""
    OUTREACH = "outreach"
    TEACH = "teach"
    QUALIFY = "qualify"
    EXPAND = "expand"
    PROPOSE = "propose"
    CLOSE = "close"
    WON = "won"

    @property
    def order(self) -> int:
        return list(Stage).index(self)

    @classmethod
    def resolve(cls, value) -> "Stage":
        """Maps any stage value onto a catalog stage. Unknown values, None and 'lost' become OUTREACH."""
        try:
            return cls(value)
        except ValueError:
            return cls.OUTREACH


class Severity(str, enum.Enum):
    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"


QUALIFICATION_FIELDS = (
    "metrics",
    "economic_buyer",
    "decision_criteria",
    "decision_process",
    "paper_process",
    "identified_pain",
    "champion",
    "competition",
)


# --- Input ---
class Deal(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: Optional[Union[int, str]] = None
    organization: Optional[str] = None
    stage: str = Stage.OUTREACH.value
    updated_at: Optional[datetime] = None
    stage_entered_at: Optional[datetime] = None
    next_action: Optional[str] = None
    next_action_date: Optional[datetime] = None
    deal_value: float = 0
    interaction_count: Optional[int] = None

    metrics: Optional[str] = None
    economic_buyer: Optional[str] = None
    decision_criteria: Optional[str] = None
    decision_process: Optional[str] = None
    paper_process: Optional[str] = None
    identified_pain: Optional[str] = None
    champion: Optional[str] = None
    competition: Optional[str] = None

    @field_validator("id", mode="before")
    @classmethod
    def _normalize_id(cls, value):
        if isinstance(value, bool) or not isinstance(value, (int, str)):
            return None
        return value

    @field_validator("updated_at", "stage_entered_at", "next_action_date", mode="before")
    @classmethod
    def _normalize_timestamp(cls, value):
        return parse_timestamp(value)

    # Anything that isn't text counts as blank.
    @field_validator("organization", "next_action", *QUALIFICATION_FIELDS, mode="before")
    @classmethod
    def _normalize_text(cls, value):
        return value if isinstance(value, str) else None

    @field_validator("stage", mode="before")
    @classmethod
    def _normalize_stage(cls, value):
        if isinstance(value, str) and value.strip():
            return value
        return Stage.OUTREACH.value

    @field_validator("deal_value", mode="before")
    @classmethod
    def _normalize_value(cls, value):
        try:
            value = float(value)
        except (TypeError, ValueError, OverflowError):
            return 0
        return value if math.isfinite(value) else 0

    @field_validator("interaction_count", mode="before")
    @classmethod
    def _normalize_count(cls, value):
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return None
        if isinstance(value, float) and not math.isfinite(value):
            return None
        return int(value)

    def field_value(self, field_id: str) -> Optional[str]:
        return getattr(self, field_id, None)

    @property
    def resolved_stage(self) -> Stage:
        return Stage.resolve(self.stage)


# --- Catalog Models ---
class FieldDefinition(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    label: str
    letter: str
    question: str
    examples: str
    coaching: str


class StageDefinition(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: Stage
    label: str
    objective: str
    actions: List[str] = Field(min_length=1)
    next_stage_requires: str


# --- Guidance Output ---
class FieldStatus(FieldDefinition):
    filled: bool
    value: Optional[str] = None


class DealWarning(BaseModel):
    severity: Severity
    message: str
    action: str


class StageHealth(BaseModel):
    severity: Severity
    suggested_stage: Optional[Stage]
    reason: str
    explanation: str
    current_stage: Stage


class NextBestAction(BaseModel):
    message: str
    action: str


class GuidanceResult(BaseModel):
    completeness_score: int = Field(ge=0, le=100)
    days_since_update: int
    field_status: Dict[str, FieldStatus]
    warnings: List[DealWarning]
    stage_health: Optional[StageHealth] = None
    stage_guidance: StageDefinition
    next_best_action: NextBestAction


# --- Pipeline Reports ---
class Nudge(BaseModel):
    priority: Severity
    message: str
    deal_id: Optional[Union[int, str]]
    action_suggestion: str


class StageTotals(BaseModel):
    count: int
    value: float


class PipelineStats(BaseModel):
    by_stage: Dict[str, StageTotals]
    total_value: float
    avg_days: Dict[str, int]
