"""Pipeline orchestrator: one entry point per stage."""

from typing import List, Optional, Type
from uuid import UUID

from docforge.core.config import Settings
from docforge.core.exceptions import InvalidRequestError, NotFoundError
from docforge.core.gateway import LLMGateway
from docforge.database.models import WorkEstimate
from docforge.repositories.artifact_store import ArtifactStore
from docforge.schemas.artifacts import (
    ConsistencyReport,
    EstimatePhase,
    GeneratedDocument,
    ProgressReportBody,
    QualityCheckReport,
    WorkEstimateBody,
)
from docforge.schemas.requests import (
    CodeGenerationRequest,
    ConsistencyCheckRequest,
    DocumentGenerationRequest,
    ProgressReportRequest,
    ProposalCreationRequest,
    QualityCheckRequest,
    WorkEstimationRequest,
)
from docforge.schemas.responses import StageResponse
from docforge.services.stages import (
    BaseStage,
    CodeGenerationStage,
    ConsistencyCheckStage,
    DocumentGenerationStage,
    ProgressReportStage,
    ProposalCreationStage,
    QualityCheckStage,
    StageResult,
    WorkEstimationStage,
)
from docforge.services.storage_service import StorageService
from docforge.utils.logging import get_logger

LOGGER = get_logger(__name__)


def _require(value, field: str) -> None:
    if value is None or (isinstance(value, str) and not value.strip()):
        raise InvalidRequestError(f"'{field}' is required", field=field)


def _first_line(text: str, default: str = "") -> str:
    for line in text.splitlines():
        if line.strip():
            return line.strip()
    return default


def _format_hours(hours: float) -> str:
    return f"{hours:g}"


class PipelineOrchestrator:
    """Validates stage requests, runs the stage and summarizes the result.

    Provider failures are absorbed by the stages; only invalid requests,
    missing predecessors and storage failures reach the caller.
    """

    def __init__(
        self,
        store: ArtifactStore,
        gateway: LLMGateway,
        settings: Settings,
        storage: Optional[StorageService] = None,
    ):
        self.store = store
        self.gateway = gateway
        self.settings = settings
        self.storage = storage

    def _stage(self, stage_cls: Type[BaseStage]) -> BaseStage:
        return stage_cls(self.store, self.gateway, self.settings)

    @staticmethod
    def _response(result: StageResult, summary: str) -> StageResponse:
        return StageResponse(
            stage=result.stage,
            artifact_id=result.artifact_id,
            summary=summary,
            is_fallback=result.is_fallback,
        )

    async def generate_document(self, request: DocumentGenerationRequest) -> StageResponse:
        _require(request.project_id, "project_id")
        _require(request.document_type, "document_type")

        result = await self._stage(DocumentGenerationStage).run(request)
        document: GeneratedDocument = result.value
        return self._response(result, _first_line(document.content, default=request.document_type))

    async def generate_code(self, request: CodeGenerationRequest) -> StageResponse:
        _require(request.document_id, "document_id")
        _require(request.language, "language")

        result = await self._stage(CodeGenerationStage).run(request)
        line_count = len(result.value.splitlines())
        return self._response(result, f"{result.record.file_name} ({line_count} lines)")

    async def check_consistency(self, request: ConsistencyCheckRequest) -> StageResponse:
        if not request.document_ids:
            raise InvalidRequestError("At least one document id is required", field="document_ids")

        result = await self._stage(ConsistencyCheckStage).run(request)
        report: ConsistencyReport = result.value
        summary = f"Consistency score: {report.score}\nIssues found: {len(report.issues)}"
        return self._response(result, summary)

    async def check_quality(self, request: QualityCheckRequest) -> StageResponse:
        _require(request.project_id, "project_id")
        if not request.items:
            raise InvalidRequestError("At least one check item is required", field="items")

        result = await self._stage(QualityCheckStage).run(request)
        report: QualityCheckReport = result.value
        summary = "\n".join(f"{item.item.value}: {item.score}" for item in report.items)
        return self._response(result, summary)

    async def estimate_work(self, request: WorkEstimationRequest) -> StageResponse:
        _require(request.project_id, "project_id")

        result = await self._stage(WorkEstimationStage).run(request)
        estimate: WorkEstimateBody = result.value
        lines = [f"Total: {_format_hours(estimate.total_hours)} hours"]
        lines.extend(f"{p.phase}: {_format_hours(p.hours)} hours" for p in estimate.breakdown)
        return self._response(result, "\n".join(lines))

    async def create_progress_report(self, request: ProgressReportRequest) -> StageResponse:
        _require(request.project_id, "project_id")
        _require(request.start_date, "start_date")
        _require(request.end_date, "end_date")
        if request.start_date > request.end_date:
            raise InvalidRequestError("'start_date' must not be after 'end_date'", field="start_date")

        result = await self._stage(ProgressReportStage).run(request)
        report: ProgressReportBody = result.value
        lines = [
            "Project progress report:",
            f"Overall progress: {report.overall_progress}%",
            "Key issues:",
        ]
        lines.extend(f"{index}. {issue}" for index, issue in enumerate(report.issues, start=1))
        return self._response(result, "\n".join(lines))

    async def create_proposal(self, request: ProposalCreationRequest) -> StageResponse:
        _require(request.project_id, "project_id")
        _require(request.template_id, "template_id")

        stage = ProposalCreationStage(self.store, self.gateway, self.settings, storage=self.storage)
        result = await stage.run(request)
        summary = _first_line(result.value, default="Proposal")
        if result.record.pdf_url:
            summary = f"{summary}\nPDF: {result.record.pdf_url}"
        return self._response(result, summary)

    async def adjust_work_estimate(self, estimate_id: UUID, breakdown: List[EstimatePhase]) -> WorkEstimate:
        """Replace an estimate's breakdown; the total is recomputed from it."""
        _require(estimate_id, "estimate_id")
        if not breakdown:
            raise InvalidRequestError("'breakdown' must not be empty", field="breakdown")

        try:
            estimate = WorkEstimateBody.from_breakdown(breakdown)
        except ValueError as e:
            raise InvalidRequestError(str(e), field="breakdown") from e
        record = await self.store.work_estimates.update_estimate(estimate_id, estimate.to_record())
        if record is None:
            raise NotFoundError(f"Work estimate {estimate_id} not found")

        LOGGER.info(
            f"Adjusted work estimate {estimate_id} to {_format_hours(estimate.total_hours)} hours",
            extra={"estimate_id": str(estimate_id)},
        )
        return record
