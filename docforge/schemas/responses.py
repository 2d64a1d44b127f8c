"""Response envelope and read models."""

from datetime import datetime
from typing import Any, Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from docforge.schemas.artifacts import StageKind


class ResponseMeta(BaseModel):
    timestamp: datetime
    request_id: str
    api_version: str = "v1"


class ApiResponse(BaseModel):
    """Standard success envelope."""
    status: bool = True
    message: str
    data: Dict[str, Any] = Field(default_factory=dict)
    meta: ResponseMeta


class ErrorDetail(BaseModel):
    """RFC 7807 problem details."""
    title: str
    status: int
    detail: str
    field: Optional[str] = None
    instance: Optional[str] = None
    request_id: str
    timestamp: datetime


class StageResponse(BaseModel):
    """What every stage returns to its caller."""
    stage: StageKind
    artifact_id: UUID
    summary: str
    is_fallback: bool = False


class _ORMModel(BaseModel):
    model_config = ConfigDict(from_attributes=True)


class ProjectResponse(_ORMModel):
    id: UUID
    name: str
    description: Optional[str] = None
    created_at: datetime


class DocumentResponse(_ORMModel):
    id: UUID
    project_id: UUID
    type: str
    content: Any
    is_fallback: bool
    created_at: datetime
    updated_at: datetime


class SourceCodeResponse(_ORMModel):
    id: UUID
    project_id: UUID
    document_id: Optional[UUID] = None
    file_name: str
    language: str
    content: str
    is_fallback: bool
    created_at: datetime


class QualityCheckResponse(_ORMModel):
    id: UUID
    project_id: UUID
    type: str
    result: Any
    is_fallback: bool
    created_at: datetime


class WorkEstimateResponse(_ORMModel):
    id: UUID
    project_id: UUID
    estimate: Dict[str, Any]
    is_fallback: bool
    created_at: datetime
    updated_at: datetime


class ProgressReportResponse(_ORMModel):
    id: UUID
    project_id: UUID
    report: Dict[str, Any]
    is_fallback: bool
    created_at: datetime


class ProposalResponse(_ORMModel):
    id: UUID
    project_id: UUID
    template_id: Optional[UUID] = None
    content: str
    pdf_url: Optional[str] = None
    is_fallback: bool
    created_at: datetime


class TemplateResponse(_ORMModel):
    id: UUID
    name: str
    description: Optional[str] = None
    structure: List[str] = Field(default_factory=list)
    created_at: datetime


class ActivityLogResponse(_ORMModel):
    id: UUID
    project_id: UUID
    phase: str
    status: str
    description: Optional[str] = None
    created_at: datetime
