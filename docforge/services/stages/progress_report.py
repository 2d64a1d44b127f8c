from dataclasses import dataclass
from datetime import datetime
from typing import List

from docforge.core.exceptions import PreconditionNotMetError
from docforge.database.models import Project, ProgressReport, utc_now
from docforge.schemas.artifacts import (
    PhaseProgress,
    ProgressPeriod,
    ProgressReportBody,
    StageKind,
)
from docforge.schemas.requests import ProgressReportRequest
from docforge.schemas.stage_inputs import ProgressReportInput
from docforge.services.fallbacks import fallback_progress_issues
from docforge.services.progress import compute_phase_progress, overall_progress
from docforge.services.stages.base import BaseStage, Generation
from docforge.services.validation import LinesContract

MAX_ISSUES = 3


@dataclass
class ProgressReportContext:
    project: Project
    phases: List[PhaseProgress]
    overall_progress: int
    period: ProgressPeriod
    generated_at: datetime


class ProgressReportStage(BaseStage[ProgressReportContext, ProgressReportBody]):
    """Reports phase progress over a date range.

    Progress figures are computed from activity logs; only the issue list
    comes from the model.
    """

    kind = StageKind.PROGRESS_REPORT
    contract = LinesContract(max_lines=MAX_ISSUES)

    async def fetch_inputs(self, request: ProgressReportRequest) -> ProgressReportContext:
        project = await self.store.projects.get_by_id(request.project_id)
        if project is None:
            raise PreconditionNotMetError(f"Project {request.project_id} not found")

        logs = await self.store.activity_logs.list_in_range(project.id, request.start_date, request.end_date)
        phases = compute_phase_progress(logs)

        return ProgressReportContext(
            project=project,
            phases=phases,
            overall_progress=overall_progress(phases),
            period=ProgressPeriod(start=request.start_date, end=request.end_date),
            generated_at=utc_now(),
        )

    def prompt_inputs(self, context: ProgressReportContext) -> List[ProgressReportInput]:
        return [ProgressReportInput(overall_progress=context.overall_progress, phases=context.phases)]

    def _report(self, context: ProgressReportContext, issues: List[str]) -> ProgressReportBody:
        return ProgressReportBody(
            overall_progress=context.overall_progress,
            phases=context.phases,
            issues=issues[:MAX_ISSUES],
            period=context.period,
            generated_at=context.generated_at,
        )

    def finalize(self, context: ProgressReportContext, prompt_input, value: List[str]) -> ProgressReportBody:
        return self._report(context, value)

    def fallback(self, context: ProgressReportContext, prompt_input) -> ProgressReportBody:
        return self._report(context, fallback_progress_issues(context.phases))

    async def persist(self, context: ProgressReportContext, generation: Generation) -> ProgressReport:
        return await self.store.progress_reports.create_report(
            project_id=context.project.id,
            report=generation.value.to_record(),
            is_fallback=generation.is_fallback,
        )
