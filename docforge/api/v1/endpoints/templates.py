from typing import Annotated

from fastapi import APIRouter, Depends, Request, status

from docforge.api.dependencies import get_project_service
from docforge.schemas.requests import TemplateCreateRequest
from docforge.schemas.responses import ApiResponse, TemplateResponse
from docforge.services.project_service import ProjectService
from docforge.utils.responses import create_api_response

router = APIRouter()


@router.post(
    "",
    response_model=ApiResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a proposal template",
    operation_id="create_template",
)
async def create_template(
    request: Request,
    payload: TemplateCreateRequest,
    project_service: Annotated[ProjectService, Depends(get_project_service)],
) -> ApiResponse:
    template = await project_service.create_template(payload)
    return create_api_response(
        data=TemplateResponse.model_validate(template),
        message="Template created",
        request=request,
    )


@router.get(
    "",
    response_model=ApiResponse,
    summary="List proposal templates",
    operation_id="list_templates",
)
async def list_templates(
    request: Request,
    project_service: Annotated[ProjectService, Depends(get_project_service)],
) -> ApiResponse:
    templates = await project_service.list_templates()
    return create_api_response(
        data=[TemplateResponse.model_validate(t) for t in templates],
        message="Templates retrieved",
        request=request,
    )
