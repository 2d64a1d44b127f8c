"""Structured inputs handed to the prompt builder, one model per stage."""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from docforge.schemas.artifacts import CheckItemKind, PhaseProgress


class DocumentGenerationInput(BaseModel):
    document_type: str
    source_content: Any = None


class CodeGenerationInput(BaseModel):
    language: str
    document_type: str
    document_content: Any = None


class ReviewedDocument(BaseModel):
    id: str
    type: str
    content: Any = None


class ConsistencyCheckInput(BaseModel):
    documents: List[ReviewedDocument] = Field(default_factory=list)


class QualityItemInput(BaseModel):
    item: CheckItemKind
    artifacts: List[Dict[str, Any]] = Field(default_factory=list)


class WorkEstimationInput(BaseModel):
    project_name: str
    project_description: Optional[str] = None
    document_count: int = 0
    source_code_count: int = 0
    document_types: List[str] = Field(default_factory=list)
    languages: List[str] = Field(default_factory=list)


class ProgressReportInput(BaseModel):
    overall_progress: int
    phases: List[PhaseProgress] = Field(default_factory=list)


class ProposalInput(BaseModel):
    project_name: str
    project_description: Optional[str] = None
    template_name: str
    template_description: Optional[str] = None
    template_structure: List[str] = Field(default_factory=list)
    documents: List[ReviewedDocument] = Field(default_factory=list)
