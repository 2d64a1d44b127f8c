"""Pydantic schemas for stage kinds and the shape of every stage output.

Real model output and fallback output are validated against the same
models, so downstream consumers cannot tell them apart structurally.
"""

import math
from datetime import datetime
from enum import Enum
from typing import Annotated, List

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, model_validator

from docforge.utils.rounding import round_half_up

UPLOADED_FILE_TYPE = "uploaded_file"
CONSISTENCY_CHECK_TYPE = "整合性"

QUALITY_SCORE_MIN = 60
QUALITY_SCORE_MAX = 100


class StageKind(str, Enum):
    """Every artifact-producing pipeline stage."""
    DOCUMENT_GENERATION = "document_generation"
    CODE_GENERATION = "code_generation"
    CONSISTENCY_CHECK = "consistency_check"
    QUALITY_CHECK = "quality_check"
    WORK_ESTIMATION = "work_estimation"
    PROGRESS_REPORT = "progress_report"
    PROPOSAL_CREATION = "proposal_creation"


class CheckItemKind(str, Enum):
    """Artifact families a quality check can review."""
    DOCUMENT = "ドキュメント"
    SOURCE_CODE = "ソースコード"


class Phase(str, Enum):
    """Fixed project phases used by progress reporting."""
    REQUIREMENTS = "requirements"
    DESIGN = "design"
    DEVELOPMENT = "development"
    TEST = "test"


class PhaseStatus(str, Enum):
    COMPLETED = "completed"
    IN_PROGRESS = "in progress"
    NOT_STARTED = "not started"


ACTIVITY_COMPLETED = "completed"


def _round_score(value):
    if isinstance(value, float):
        return round_half_up(value)
    return value


class GeneratedDocument(BaseModel):
    """Body stored in ``Document.content`` for generated documents."""
    content: str = Field(..., min_length=1)


class ReviewIssue(BaseModel):
    """A single inconsistency found between documents."""
    type: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)
    severity: str = Field(..., min_length=1)


class ConsistencyReport(BaseModel):
    """Consistency check result."""
    score: Annotated[int, BeforeValidator(_round_score)] = Field(..., ge=0, le=100)
    issues: List[ReviewIssue] = Field(default_factory=list)
    suggestions: List[str] = Field(default_factory=list)


class QualityItemResult(BaseModel):
    """Quality review of one item kind."""
    item: CheckItemKind
    score: int = Field(..., ge=QUALITY_SCORE_MIN, le=QUALITY_SCORE_MAX)
    result: str = Field(..., min_length=1)


class QualityCheckReport(BaseModel):
    """Aggregated quality check result."""
    items: List[QualityItemResult] = Field(..., min_length=1)


class EstimatePhase(BaseModel):
    phase: str = Field(..., min_length=1)
    hours: float = Field(..., ge=0, allow_inf_nan=False)


class WorkEstimateBody(BaseModel):
    """Effort estimate whose total always equals the sum of its breakdown."""

    model_config = ConfigDict(populate_by_name=True)

    total_hours: float = Field(..., ge=0, allow_inf_nan=False, alias="totalHours")
    breakdown: List[EstimatePhase] = Field(..., min_length=1)

    @model_validator(mode="after")
    def _total_matches_breakdown(self) -> "WorkEstimateBody":
        expected = sum(p.hours for p in self.breakdown)
        if self.total_hours != expected:
            raise ValueError(
                f"totalHours {self.total_hours} does not equal breakdown sum {expected}"
            )
        return self

    @classmethod
    def from_breakdown(cls, breakdown: List[EstimatePhase]) -> "WorkEstimateBody":
        """Build an estimate whose total is recomputed from the breakdown."""
        phases = [EstimatePhase.model_validate(p) for p in breakdown]
        total = sum(p.hours for p in phases)
        if not math.isfinite(total):
            raise ValueError(f"Breakdown sum {total} is not a finite number of hours")
        return cls(total_hours=total, breakdown=phases)

    def to_record(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


class EstimateDraft(BaseModel):
    """What a model is asked to return; the total is recomputed, not trusted."""

    model_config = ConfigDict(populate_by_name=True)

    total_hours: float | None = Field(default=None, alias="totalHours")
    breakdown: List[EstimatePhase] = Field(..., min_length=1)


class PhaseProgress(BaseModel):
    name: Phase
    progress: int = Field(..., ge=0, le=100)
    status: PhaseStatus


class ProgressPeriod(BaseModel):
    start: datetime
    end: datetime


class ProgressReportBody(BaseModel):
    """Progress report; overall progress is the rounded mean of the phases."""
    overall_progress: int = Field(..., ge=0, le=100)
    phases: List[PhaseProgress] = Field(..., min_length=1)
    issues: List[str] = Field(default_factory=list, max_length=3)
    period: ProgressPeriod
    generated_at: datetime

    @model_validator(mode="after")
    def _overall_is_mean_of_phases(self) -> "ProgressReportBody":
        expected = round_half_up(sum(p.progress for p in self.phases) / len(self.phases))
        if self.overall_progress != expected:
            raise ValueError(
                f"overall_progress {self.overall_progress} does not match phase mean {expected}"
            )
        return self

    def to_record(self) -> dict:
        return self.model_dump(mode="json")

