"""Request models accepted by the HTTP surface and the orchestrator."""

from datetime import datetime, timezone
from typing import Annotated, List, Optional
from uuid import UUID

from pydantic import AfterValidator, BaseModel, Field

from docforge.schemas.artifacts import CheckItemKind, EstimatePhase, Phase


def _to_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


# Naive timestamps are taken as UTC
UTCDateTime = Annotated[datetime, AfterValidator(_to_utc)]


class ProjectCreateRequest(BaseModel):
    """Request model for creating a project."""
    name: str = Field(..., min_length=1, description="Project name", examples=["Inventory system renewal"])
    description: Optional[str] = Field(default=None, description="Free-form project description")


class ActivityLogCreateRequest(BaseModel):
    """A task event for progress reporting."""
    phase: Phase
    status: str = Field(..., description="'completed' marks the task done; anything else is open")
    description: Optional[str] = None
    created_at: Optional[UTCDateTime] = Field(
        default=None, description="Event time; defaults to now"
    )


class TemplateCreateRequest(BaseModel):
    name: str = Field(..., min_length=1)
    description: Optional[str] = None
    structure: List[str] = Field(default_factory=list, description="Section headings in order")


class DocumentGenerationRequest(BaseModel):
    project_id: Optional[UUID] = None
    document_type: Optional[str] = Field(default=None, examples=["requirements"])


class CodeGenerationRequest(BaseModel):
    document_id: Optional[UUID] = None
    language: Optional[str] = Field(default=None, examples=["python"])


class ConsistencyCheckRequest(BaseModel):
    document_ids: List[UUID] = Field(default_factory=list)


class QualityCheckRequest(BaseModel):
    project_id: Optional[UUID] = None
    items: List[CheckItemKind] = Field(default_factory=list)


class WorkEstimationRequest(BaseModel):
    project_id: Optional[UUID] = None


class ProgressReportRequest(BaseModel):
    project_id: Optional[UUID] = None
    start_date: Optional[UTCDateTime] = None
    end_date: Optional[UTCDateTime] = None


class ProposalCreationRequest(BaseModel):
    project_id: Optional[UUID] = None
    template_id: Optional[UUID] = None


class WorkEstimateAdjustmentRequest(BaseModel):
    """New per-phase hours; the total is always recomputed."""
    breakdown: List[EstimatePhase] = Field(default_factory=list)
