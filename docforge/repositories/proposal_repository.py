"""Repository for managing Proposal persistence."""

from typing import Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from docforge.database.models import Proposal
from docforge.repositories.base_repository import BaseRepository


class ProposalRepository(BaseRepository[Proposal]):
    """Repository for Proposal database operations."""

    def __init__(self, session: AsyncSession):
        super().__init__(session, Proposal)

    async def create_proposal(
        self,
        project_id: UUID,
        content: str,
        template_id: Optional[UUID] = None,
        is_fallback: bool = False,
    ) -> Proposal:
        """Create a new proposal record; the PDF location is filled in later."""
        return await self.create(
            project_id=project_id,
            template_id=template_id,
            content=content,
            pdf_url=None,
            is_fallback=is_fallback,
        )

    async def update_pdf_url(self, proposal_id: UUID, pdf_url: str) -> Optional[Proposal]:
        """Update the PDF location for a proposal."""
        return await self.update(proposal_id, pdf_url=pdf_url)
