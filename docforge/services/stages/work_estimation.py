from dataclasses import dataclass
from typing import List

from docforge.core.exceptions import OutputShapeError, PreconditionNotMetError
from docforge.database.models import Document, Project, SourceCode, WorkEstimate
from docforge.schemas.artifacts import EstimateDraft, StageKind, WorkEstimateBody
from docforge.schemas.requests import WorkEstimationRequest
from docforge.schemas.stage_inputs import WorkEstimationInput
from docforge.services.fallbacks import fallback_estimate
from docforge.services.stages.base import BaseStage, Generation
from docforge.services.validation import JsonContract
from docforge.utils.logging import get_logger

LOGGER = get_logger(__name__)


@dataclass
class WorkEstimationContext:
    project: Project
    documents: List[Document]
    source_codes: List[SourceCode]


class WorkEstimationStage(BaseStage[WorkEstimationContext, WorkEstimateBody]):
    """Estimates project effort from the project and its artifacts."""

    kind = StageKind.WORK_ESTIMATION
    contract = JsonContract(EstimateDraft)

    async def fetch_inputs(self, request: WorkEstimationRequest) -> WorkEstimationContext:
        project = await self.store.projects.get_by_id(request.project_id)
        if project is None:
            raise PreconditionNotMetError(f"Project {request.project_id} not found")

        return WorkEstimationContext(
            project=project,
            documents=await self.store.documents.list_by_project(project.id),
            source_codes=await self.store.source_codes.list_by_project(project.id),
        )

    def prompt_inputs(self, context: WorkEstimationContext) -> List[WorkEstimationInput]:
        return [
            WorkEstimationInput(
                project_name=context.project.name,
                project_description=context.project.description,
                document_count=len(context.documents),
                source_code_count=len(context.source_codes),
                document_types=sorted({doc.type for doc in context.documents}),
                languages=sorted({code.language for code in context.source_codes}),
            )
        ]

    def finalize(self, context, prompt_input, value: EstimateDraft) -> WorkEstimateBody:
        try:
            estimate = WorkEstimateBody.from_breakdown(value.breakdown)
        except ValueError as e:
            raise OutputShapeError(f"Unusable estimate breakdown: {e}", original_error=e) from e
        if value.total_hours is not None and value.total_hours != estimate.total_hours:
            LOGGER.info(
                f"Normalized model totalHours {value.total_hours} to breakdown sum {estimate.total_hours}"
            )
        return estimate

    def fallback(self, context, prompt_input) -> WorkEstimateBody:
        return fallback_estimate()

    async def persist(self, context: WorkEstimationContext, generation: Generation) -> WorkEstimate:
        return await self.store.work_estimates.create_estimate(
            project_id=context.project.id,
            estimate=generation.value.to_record(),
            is_fallback=generation.is_fallback,
        )
