"""One endpoint per pipeline stage.

Stages always succeed once their inputs exist; a provider failure shows up
only as ``is_fallback`` in the response.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request, status

from docforge.api.dependencies import get_orchestrator
from docforge.schemas.requests import (
    CodeGenerationRequest,
    ConsistencyCheckRequest,
    DocumentGenerationRequest,
    ProgressReportRequest,
    ProposalCreationRequest,
    QualityCheckRequest,
    WorkEstimationRequest,
)
from docforge.schemas.responses import ApiResponse, StageResponse
from docforge.services.orchestrator import PipelineOrchestrator
from docforge.utils.responses import create_api_response

router = APIRouter()

Orchestrator = Annotated[PipelineOrchestrator, Depends(get_orchestrator)]


def _stage_response(result: StageResponse, message: str, request: Request) -> dict:
    if result.is_fallback:
        message = f"{message} (fallback output)"
    return create_api_response(data=result, message=message, request=request)


@router.post(
    "/document-generation",
    response_model=ApiResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Generate a document from the latest upload",
    operation_id="run_document_generation",
)
async def document_generation(
    request: Request, payload: DocumentGenerationRequest, orchestrator: Orchestrator
) -> ApiResponse:
    result = await orchestrator.generate_document(payload)
    return _stage_response(result, "Document generated", request)


@router.post(
    "/code-generation",
    response_model=ApiResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Generate source code from a document",
    operation_id="run_code_generation",
)
async def code_generation(
    request: Request, payload: CodeGenerationRequest, orchestrator: Orchestrator
) -> ApiResponse:
    result = await orchestrator.generate_code(payload)
    return _stage_response(result, "Source code generated", request)


@router.post(
    "/consistency-check",
    response_model=ApiResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Check documents for mutual consistency",
    operation_id="run_consistency_check",
)
async def consistency_check(
    request: Request, payload: ConsistencyCheckRequest, orchestrator: Orchestrator
) -> ApiResponse:
    result = await orchestrator.check_consistency(payload)
    return _stage_response(result, "Consistency check completed", request)


@router.post(
    "/quality-check",
    response_model=ApiResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Review documents and/or source code quality",
    operation_id="run_quality_check",
)
async def quality_check(
    request: Request, payload: QualityCheckRequest, orchestrator: Orchestrator
) -> ApiResponse:
    result = await orchestrator.check_quality(payload)
    return _stage_response(result, "Quality check completed", request)


@router.post(
    "/work-estimation",
    response_model=ApiResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Estimate project effort",
    operation_id="run_work_estimation",
)
async def work_estimation(
    request: Request, payload: WorkEstimationRequest, orchestrator: Orchestrator
) -> ApiResponse:
    result = await orchestrator.estimate_work(payload)
    return _stage_response(result, "Work estimate created", request)


@router.post(
    "/progress-report",
    response_model=ApiResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Report progress over a date range",
    operation_id="run_progress_report",
)
async def progress_report(
    request: Request, payload: ProgressReportRequest, orchestrator: Orchestrator
) -> ApiResponse:
    result = await orchestrator.create_progress_report(payload)
    return _stage_response(result, "Progress report generated", request)


@router.post(
    "/proposal-creation",
    response_model=ApiResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a proposal and its PDF",
    operation_id="run_proposal_creation",
)
async def proposal_creation(
    request: Request, payload: ProposalCreationRequest, orchestrator: Orchestrator
) -> ApiResponse:
    result = await orchestrator.create_proposal(payload)
    return _stage_response(result, "Proposal created", request)
