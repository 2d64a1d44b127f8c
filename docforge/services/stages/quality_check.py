from dataclasses import dataclass, field
from typing import Any, Dict, List

from docforge.core.exceptions import PreconditionNotMetError
from docforge.database.models import Project, QualityCheckResult
from docforge.schemas.artifacts import (
    CheckItemKind,
    QualityCheckReport,
    QualityItemResult,
    StageKind,
)
from docforge.schemas.requests import QualityCheckRequest
from docforge.schemas.stage_inputs import QualityItemInput
from docforge.services.fallbacks import fallback_quality_result, quality_score
from docforge.services.stages.base import BaseStage, Generation
from docforge.services.validation import TextContract
from docforge.utils.logging import get_logger

LOGGER = get_logger(__name__)


@dataclass
class QualityCheckContext:
    project: Project
    items: List[CheckItemKind]
    artifacts: Dict[CheckItemKind, List[Dict[str, Any]]] = field(default_factory=dict)


def check_type(items: List[CheckItemKind]) -> str:
    return ",".join(item.value for item in items)


class QualityCheckStage(BaseStage[QualityCheckContext, QualityItemResult]):
    """Reviews each selected item kind with its own concurrent gateway call.

    Scores are derived from the review text, so they are reproducible and
    always within the allowed range.
    """

    kind = StageKind.QUALITY_CHECK
    contract = TextContract()

    async def fetch_inputs(self, request: QualityCheckRequest) -> QualityCheckContext:
        project = await self.store.projects.get_by_id(request.project_id)
        if project is None:
            raise PreconditionNotMetError(f"Project {request.project_id} not found")

        items = list(dict.fromkeys(request.items))
        context = QualityCheckContext(project=project, items=items)

        if CheckItemKind.DOCUMENT in items:
            documents = await self.store.documents.list_generated(project.id)
            context.artifacts[CheckItemKind.DOCUMENT] = [
                {"id": str(doc.id), "type": doc.type, "content": doc.content} for doc in documents
            ]
        if CheckItemKind.SOURCE_CODE in items:
            source_codes = await self.store.source_codes.list_by_project(project.id)
            context.artifacts[CheckItemKind.SOURCE_CODE] = [
                {
                    "id": str(code.id),
                    "file_name": code.file_name,
                    "language": code.language,
                    "content": code.content,
                }
                for code in source_codes
            ]

        return context

    def prompt_inputs(self, context: QualityCheckContext) -> List[QualityItemInput]:
        return [
            QualityItemInput(item=item, artifacts=context.artifacts.get(item, []))
            for item in context.items
        ]

    def finalize(self, context, prompt_input: QualityItemInput, value: str) -> QualityItemResult:
        return QualityItemResult(
            item=prompt_input.item, score=quality_score(prompt_input.item, value), result=value
        )

    def fallback(self, context, prompt_input: QualityItemInput) -> QualityItemResult:
        result = fallback_quality_result(prompt_input)
        return QualityItemResult(
            item=prompt_input.item, score=quality_score(prompt_input.item, result), result=result
        )

    def combine(self, context: QualityCheckContext, generations: List[Generation]) -> Generation:
        fallback_items = [g.value.item.value for g in generations if g.is_fallback]
        if fallback_items:
            LOGGER.info(f"Quality check fell back for: {', '.join(fallback_items)}")
        return Generation(
            value=QualityCheckReport(items=[g.value for g in generations]),
            is_fallback=bool(fallback_items),
        )

    async def persist(self, context: QualityCheckContext, generation: Generation) -> QualityCheckResult:
        return await self.store.quality_checks.create_result(
            project_id=context.project.id,
            type=check_type(context.items),
            result=generation.value.model_dump(mode="json"),
            is_fallback=generation.is_fallback,
        )
