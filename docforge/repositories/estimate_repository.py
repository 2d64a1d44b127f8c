"""Repositories for WorkEstimate and ProgressReport persistence."""

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from docforge.database.models import ActivityLog, ProgressReport, WorkEstimate
from docforge.repositories.base_repository import BaseRepository


class WorkEstimateRepository(BaseRepository[WorkEstimate]):
    """Repository for WorkEstimate records."""

    def __init__(self, session: AsyncSession):
        super().__init__(session, WorkEstimate)

    async def create_estimate(
        self, project_id: UUID, estimate: dict, is_fallback: bool = False
    ) -> WorkEstimate:
        return await self.create(project_id=project_id, estimate=estimate, is_fallback=is_fallback)

    async def update_estimate(self, estimate_id: UUID, estimate: dict) -> Optional[WorkEstimate]:
        """Replace the stored estimate body."""
        return await self.update(estimate_id, estimate=estimate)


class ProgressReportRepository(BaseRepository[ProgressReport]):
    """Repository for ProgressReport records."""

    def __init__(self, session: AsyncSession):
        super().__init__(session, ProgressReport)

    async def create_report(
        self, project_id: UUID, report: dict, is_fallback: bool = False
    ) -> ProgressReport:
        return await self.create(project_id=project_id, report=report, is_fallback=is_fallback)


class ActivityLogRepository(BaseRepository[ActivityLog]):
    """Repository for ActivityLog records."""

    def __init__(self, session: AsyncSession):
        super().__init__(session, ActivityLog)

    async def create_log(
        self,
        project_id: UUID,
        phase: str,
        status: str,
        description: Optional[str] = None,
        created_at: Optional[datetime] = None,
    ) -> ActivityLog:
        kwargs = dict(project_id=project_id, phase=phase, status=status, description=description)
        if created_at is not None:
            kwargs["created_at"] = created_at
        return await self.create(**kwargs)

    async def list_in_range(
        self, project_id: UUID, start: datetime, end: datetime
    ) -> List[ActivityLog]:
        """Logs created within [start, end]."""
        return await self.list_by_project(project_id, created_from=start, created_to=end)
