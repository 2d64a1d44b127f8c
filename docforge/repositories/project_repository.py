"""Repository for projects and proposal templates."""

from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from docforge.core.exceptions import StorageError
from docforge.database.models import Project, ProposalTemplate
from docforge.repositories.base_repository import BaseRepository


class ProjectRepository(BaseRepository[Project]):
    """Repository for Project records.

    The pipeline only reads projects; creation happens through the API.
    """

    def __init__(self, session: AsyncSession):
        super().__init__(session, Project)

    async def create_project(self, name: str, description: Optional[str] = None) -> Project:
        return await self.create(name=name, description=description)

    async def list_all(self, skip: int = 0, limit: int = 50) -> List[Project]:
        """List projects, newest first."""
        try:
            query = (
                select(Project)
                .order_by(Project.created_at.desc())
                .offset(skip)
                .limit(limit)
            )
            result = await self.session.execute(query)
            return list(result.scalars().all())
        except SQLAlchemyError as e:
            self.logger.error(f"Error listing projects: {str(e)}", exc_info=True)
            raise StorageError("Failed to list projects", original_error=e) from e


class ProposalTemplateRepository(BaseRepository[ProposalTemplate]):
    """Repository for ProposalTemplate records."""

    def __init__(self, session: AsyncSession):
        super().__init__(session, ProposalTemplate)

    async def create_template(
        self,
        name: str,
        structure: List[str],
        description: Optional[str] = None,
    ) -> ProposalTemplate:
        return await self.create(name=name, structure=list(structure), description=description)

    async def list_all(self) -> List[ProposalTemplate]:
        try:
            result = await self.session.execute(
                select(ProposalTemplate).order_by(ProposalTemplate.name)
            )
            return list(result.scalars().all())
        except SQLAlchemyError as e:
            self.logger.error(f"Error listing proposal templates: {str(e)}", exc_info=True)
            raise StorageError("Failed to list proposal templates", original_error=e) from e
