"""Repository for QualityCheckResult persistence."""

from typing import Any, Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from docforge.database.models import QualityCheckResult
from docforge.repositories.base_repository import BaseRepository


class QualityCheckRepository(BaseRepository[QualityCheckResult]):
    """Repository for consistency and quality check results."""

    def __init__(self, session: AsyncSession):
        super().__init__(session, QualityCheckResult)

    async def create_result(
        self,
        project_id: UUID,
        type: str,
        result: Any,
        is_fallback: bool = False,
    ) -> QualityCheckResult:
        return await self.create(
            project_id=project_id,
            type=type,
            result=result,
            is_fallback=is_fallback,
        )

    async def get_latest_of_type(
        self, project_id: UUID, type: Optional[str] = None
    ) -> Optional[QualityCheckResult]:
        filters = {"type": type} if type else None
        return await self.get_latest(project_id, filters=filters)
