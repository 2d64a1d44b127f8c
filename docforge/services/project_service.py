"""Project, upload, activity-log, template and artifact read operations."""

from pathlib import PurePath
from typing import Any, Dict, List, Optional
from uuid import UUID, uuid4

from docforge.core.exceptions import InvalidRequestError, NotFoundError
from docforge.database.models import ActivityLog, Document, Project, ProposalTemplate, QualityCheckResult
from docforge.repositories.artifact_store import ArtifactStore
from docforge.schemas.artifacts import UPLOADED_FILE_TYPE
from docforge.schemas.requests import (
    ActivityLogCreateRequest,
    ProjectCreateRequest,
    TemplateCreateRequest,
)
from docforge.services.storage_service import StorageService
from docforge.utils.logging import get_logger

LOGGER = get_logger(__name__)

TEXT_MIME_PREFIXES = ("text/",)
TEXT_MIME_TYPES = {"application/json", "application/xml", "application/x-yaml", "application/yaml"}


def extract_text(data: bytes, mime_type: Optional[str]) -> Optional[str]:
    """Decode uploads that are text; binary uploads yield None."""
    mime_type = (mime_type or "").split(";")[0].strip().lower()
    is_text = mime_type.startswith(TEXT_MIME_PREFIXES) or mime_type in TEXT_MIME_TYPES
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError:
        if is_text:
            return data.decode("utf-8", errors="replace")
        return None


class ProjectService:
    """Manages the records the pipeline stages read from."""

    def __init__(self, store: ArtifactStore, storage: Optional[StorageService] = None):
        self.store = store
        self.storage = storage

    async def create_project(self, request: ProjectCreateRequest) -> Project:
        project = await self.store.projects.create_project(
            name=request.name.strip(), description=request.description
        )
        LOGGER.info(f"Created project {project.id}", extra={"project_id": str(project.id)})
        return project

    async def list_projects(self, skip: int = 0, limit: int = 50) -> List[Project]:
        return await self.store.projects.list_all(skip=skip, limit=limit)

    async def get_project(self, project_id: UUID) -> Project:
        project = await self.store.projects.get_by_id(project_id)
        if project is None:
            raise NotFoundError(f"Project {project_id} not found")
        return project

    async def ingest_upload(
        self, project_id: UUID, file_name: Optional[str], mime_type: Optional[str], data: bytes
    ) -> Document:
        """Store an uploaded file and record it as an ``uploaded_file`` document."""
        project = await self.get_project(project_id)
        if not data:
            raise InvalidRequestError("Uploaded file is empty", field="file")

        safe_name = PurePath(file_name or "upload.bin").name or "upload.bin"
        file_path = None
        if self.storage is not None:
            file_path = await self.storage.save_bytes(
                self.storage.uploads_bucket, f"{project.id}/{uuid4()}_{safe_name}", data
            )

        content: Dict[str, Any] = {
            "file_name": safe_name,
            "mime_type": mime_type or "application/octet-stream",
            "file_path": file_path,
            "text": extract_text(data, mime_type),
        }
        document = await self.store.documents.create_document(
            project_id=project.id, type=UPLOADED_FILE_TYPE, content=content
        )
        LOGGER.info(
            f"Ingested upload '{safe_name}' ({len(data)} bytes) as document {document.id}",
            extra={"project_id": str(project.id), "document_id": str(document.id)},
        )
        return document

    async def add_activity_log(self, project_id: UUID, request: ActivityLogCreateRequest) -> ActivityLog:
        project = await self.get_project(project_id)
        return await self.store.activity_logs.create_log(
            project_id=project.id,
            phase=request.phase.value,
            status=request.status,
            description=request.description,
            created_at=request.created_at,
        )

    async def list_activity_logs(self, project_id: UUID) -> List[ActivityLog]:
        project = await self.get_project(project_id)
        return await self.store.activity_logs.list_by_project(project.id)

    async def create_template(self, request: TemplateCreateRequest) -> ProposalTemplate:
        return await self.store.templates.create_template(
            name=request.name.strip(),
            structure=[heading for heading in request.structure if heading.strip()],
            description=request.description,
        )

    async def list_templates(self) -> List[ProposalTemplate]:
        return await self.store.templates.list_all()

    async def get_artifact(self, repository_name: str, artifact_id: UUID) -> Any:
        """Fetch one artifact from the named repository of the store."""
        repository = getattr(self.store, repository_name)
        record = await repository.get_by_id(artifact_id)
        if record is None:
            raise NotFoundError(f"{repository.model.__name__} {artifact_id} not found")
        return record

    async def latest_quality_check(self, project_id: UUID, type: Optional[str] = None) -> QualityCheckResult:
        project = await self.get_project(project_id)
        record = await self.store.quality_checks.get_latest_of_type(project.id, type=type)
        if record is None:
            raise NotFoundError(f"Project {project_id} has no quality check results")
        return record
