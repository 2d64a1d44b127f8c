from typing import Annotated, Type
from uuid import UUID

from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel

from docforge.api.dependencies import get_orchestrator, get_project_service
from docforge.schemas.requests import WorkEstimateAdjustmentRequest
from docforge.schemas.responses import (
    ApiResponse,
    DocumentResponse,
    ProgressReportResponse,
    ProposalResponse,
    QualityCheckResponse,
    SourceCodeResponse,
    WorkEstimateResponse,
)
from docforge.services.orchestrator import PipelineOrchestrator
from docforge.services.project_service import ProjectService
from docforge.utils.responses import create_api_response

router = APIRouter()

Projects = Annotated[ProjectService, Depends(get_project_service)]


async def _read(
    request: Request,
    project_service: ProjectService,
    repository_name: str,
    artifact_id: UUID,
    schema: Type[BaseModel],
    label: str,
) -> dict:
    record = await project_service.get_artifact(repository_name, artifact_id)
    return create_api_response(
        data=schema.model_validate(record), message=f"{label} retrieved", request=request
    )


@router.get("/documents/{artifact_id}", response_model=ApiResponse, operation_id="get_document")
async def get_document(request: Request, artifact_id: UUID, project_service: Projects) -> ApiResponse:
    return await _read(request, project_service, "documents", artifact_id, DocumentResponse, "Document")


@router.get("/source-codes/{artifact_id}", response_model=ApiResponse, operation_id="get_source_code")
async def get_source_code(request: Request, artifact_id: UUID, project_service: Projects) -> ApiResponse:
    return await _read(request, project_service, "source_codes", artifact_id, SourceCodeResponse, "Source code")


@router.get("/quality-checks/{artifact_id}", response_model=ApiResponse, operation_id="get_quality_check")
async def get_quality_check(request: Request, artifact_id: UUID, project_service: Projects) -> ApiResponse:
    return await _read(
        request, project_service, "quality_checks", artifact_id, QualityCheckResponse, "Quality check"
    )


@router.get("/work-estimates/{artifact_id}", response_model=ApiResponse, operation_id="get_work_estimate")
async def get_work_estimate(request: Request, artifact_id: UUID, project_service: Projects) -> ApiResponse:
    return await _read(
        request, project_service, "work_estimates", artifact_id, WorkEstimateResponse, "Work estimate"
    )


@router.get("/progress-reports/{artifact_id}", response_model=ApiResponse, operation_id="get_progress_report")
async def get_progress_report(request: Request, artifact_id: UUID, project_service: Projects) -> ApiResponse:
    return await _read(
        request, project_service, "progress_reports", artifact_id, ProgressReportResponse, "Progress report"
    )


@router.get("/proposals/{artifact_id}", response_model=ApiResponse, operation_id="get_proposal")
async def get_proposal(request: Request, artifact_id: UUID, project_service: Projects) -> ApiResponse:
    return await _read(request, project_service, "proposals", artifact_id, ProposalResponse, "Proposal")


@router.patch(
    "/work-estimates/{artifact_id}",
    response_model=ApiResponse,
    summary="Adjust per-phase hours of a work estimate",
    operation_id="adjust_work_estimate",
)
async def adjust_work_estimate(
    request: Request,
    artifact_id: UUID,
    payload: WorkEstimateAdjustmentRequest,
    orchestrator: Annotated[PipelineOrchestrator, Depends(get_orchestrator)],
) -> ApiResponse:
    """Replace the breakdown; totalHours is recomputed from it."""
    record = await orchestrator.adjust_work_estimate(artifact_id, payload.breakdown)
    return create_api_response(
        data=WorkEstimateResponse.model_validate(record),
        message="Work estimate adjusted",
        request=request,
    )
