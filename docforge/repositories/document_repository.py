"""Repository for Document and SourceCode persistence."""

from typing import Any, List, Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from docforge.database.models import Document, SourceCode
from docforge.repositories.base_repository import BaseRepository
from docforge.schemas.artifacts import UPLOADED_FILE_TYPE


class DocumentRepository(BaseRepository[Document]):
    """Repository for Document records."""

    def __init__(self, session: AsyncSession):
        super().__init__(session, Document)

    async def create_document(
        self,
        project_id: UUID,
        type: str,
        content: Any,
        is_fallback: bool = False,
    ) -> Document:
        """Store an uploaded or generated document."""
        return await self.create(
            project_id=project_id,
            type=type,
            content=content,
            is_fallback=is_fallback,
        )

    async def get_latest_upload(self, project_id: UUID) -> Optional[Document]:
        """Most recent ``uploaded_file`` document of a project."""
        return await self.get_latest(project_id, filters={"type": UPLOADED_FILE_TYPE})

    async def list_generated(self, project_id: UUID) -> List[Document]:
        """Documents of a project other than raw uploads, newest first."""
        documents = await self.list_by_project(project_id)
        return [doc for doc in documents if doc.type != UPLOADED_FILE_TYPE]


class SourceCodeRepository(BaseRepository[SourceCode]):
    """Repository for SourceCode records."""

    def __init__(self, session: AsyncSession):
        super().__init__(session, SourceCode)

    async def create_source_code(
        self,
        project_id: UUID,
        file_name: str,
        language: str,
        content: str,
        document_id: Optional[UUID] = None,
        is_fallback: bool = False,
    ) -> SourceCode:
        return await self.create(
            project_id=project_id,
            document_id=document_id,
            file_name=file_name,
            language=language,
            content=content,
            is_fallback=is_fallback,
        )
