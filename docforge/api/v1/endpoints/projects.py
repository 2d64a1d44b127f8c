from typing import Annotated, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, File, Query, Request, UploadFile, status

from docforge.api.dependencies import get_project_service
from docforge.schemas.requests import ActivityLogCreateRequest, ProjectCreateRequest
from docforge.schemas.responses import (
    ActivityLogResponse,
    ApiResponse,
    DocumentResponse,
    ProjectResponse,
    QualityCheckResponse,
)
from docforge.services.project_service import ProjectService
from docforge.utils.logging import get_logger
from docforge.utils.responses import create_api_response

LOGGER = get_logger(__name__)

router = APIRouter()


@router.post(
    "",
    response_model=ApiResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a project",
    operation_id="create_project",
)
async def create_project(
    request: Request,
    payload: ProjectCreateRequest,
    project_service: Annotated[ProjectService, Depends(get_project_service)],
) -> ApiResponse:
    project = await project_service.create_project(payload)
    return create_api_response(
        data=ProjectResponse.model_validate(project),
        message="Project created",
        request=request,
    )


@router.get(
    "",
    response_model=ApiResponse,
    summary="List projects",
    operation_id="list_projects",
)
async def list_projects(
    request: Request,
    project_service: Annotated[ProjectService, Depends(get_project_service)],
    skip: int = Query(0, ge=0),
    limit: int = Query(50, ge=1, le=200),
) -> ApiResponse:
    projects = await project_service.list_projects(skip=skip, limit=limit)
    return create_api_response(
        data={
            "items": [ProjectResponse.model_validate(p).model_dump() for p in projects],
            "total": len(projects),
        },
        message="Projects retrieved",
        request=request,
    )


@router.get(
    "/{project_id}",
    response_model=ApiResponse,
    summary="Get a project",
    operation_id="get_project",
)
async def get_project(
    request: Request,
    project_id: UUID,
    project_service: Annotated[ProjectService, Depends(get_project_service)],
) -> ApiResponse:
    project = await project_service.get_project(project_id)
    return create_api_response(
        data=ProjectResponse.model_validate(project),
        message="Project retrieved",
        request=request,
    )


@router.post(
    "/{project_id}/files",
    response_model=ApiResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Upload a source file",
    operation_id="upload_project_file",
)
async def upload_file(
    request: Request,
    project_id: UUID,
    project_service: Annotated[ProjectService, Depends(get_project_service)],
    file: UploadFile = File(..., description="Source file the pipeline starts from"),
) -> ApiResponse:
    """Store the file and record it as the project's latest upload."""
    data = await file.read()
    LOGGER.info(f"Received upload '{file.filename}' for project {project_id}")
    document = await project_service.ingest_upload(
        project_id=project_id,
        file_name=file.filename,
        mime_type=file.content_type,
        data=data,
    )
    return create_api_response(
        data=DocumentResponse.model_validate(document),
        message="File uploaded",
        request=request,
    )


@router.post(
    "/{project_id}/activity-logs",
    response_model=ApiResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Record a task event",
    operation_id="create_activity_log",
)
async def create_activity_log(
    request: Request,
    project_id: UUID,
    payload: ActivityLogCreateRequest,
    project_service: Annotated[ProjectService, Depends(get_project_service)],
) -> ApiResponse:
    log = await project_service.add_activity_log(project_id, payload)
    return create_api_response(
        data=ActivityLogResponse.model_validate(log),
        message="Activity log recorded",
        request=request,
    )


@router.get(
    "/{project_id}/activity-logs",
    response_model=ApiResponse,
    summary="List a project's task events",
    operation_id="list_activity_logs",
)
async def list_activity_logs(
    request: Request,
    project_id: UUID,
    project_service: Annotated[ProjectService, Depends(get_project_service)],
) -> ApiResponse:
    logs = await project_service.list_activity_logs(project_id)
    return create_api_response(
        data=[ActivityLogResponse.model_validate(log) for log in logs],
        message="Activity logs retrieved",
        request=request,
    )


@router.get(
    "/{project_id}/quality-checks/latest",
    response_model=ApiResponse,
    summary="Latest consistency or quality check of a project",
    operation_id="get_latest_quality_check",
)
async def get_latest_quality_check(
    request: Request,
    project_id: UUID,
    project_service: Annotated[ProjectService, Depends(get_project_service)],
    type: Optional[str] = Query(None, description="Restrict to one result type, e.g. 整合性"),
) -> ApiResponse:
    record = await project_service.latest_quality_check(project_id, type=type)
    return create_api_response(
        data=QualityCheckResponse.model_validate(record),
        message="Quality check retrieved",
        request=request,
    )
