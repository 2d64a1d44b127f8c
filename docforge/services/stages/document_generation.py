from dataclasses import dataclass
from typing import Any, List

from docforge.core.exceptions import PreconditionNotMetError
from docforge.database.models import Document, Project
from docforge.schemas.artifacts import GeneratedDocument, StageKind
from docforge.schemas.requests import DocumentGenerationRequest
from docforge.schemas.stage_inputs import DocumentGenerationInput
from docforge.services.fallbacks import fallback_document
from docforge.services.stages.base import BaseStage, Generation
from docforge.services.validation import TextContract


@dataclass
class DocumentGenerationContext:
    project: Project
    upload: Document
    document_type: str


def upload_source(content: Any) -> Any:
    """Extracted text of an upload, or its metadata when no text was extracted."""
    if isinstance(content, dict) and content.get("text"):
        return content["text"]
    return content


class DocumentGenerationStage(BaseStage[DocumentGenerationContext, GeneratedDocument]):
    """Generates a typed document from the project's latest uploaded file."""

    kind = StageKind.DOCUMENT_GENERATION
    contract = TextContract()

    async def fetch_inputs(self, request: DocumentGenerationRequest) -> DocumentGenerationContext:
        project = await self.store.projects.get_by_id(request.project_id)
        if project is None:
            raise PreconditionNotMetError(f"Project {request.project_id} not found")

        upload = await self.store.documents.get_latest_upload(project.id)
        if upload is None:
            raise PreconditionNotMetError(f"Project {project.id} has no uploaded file")

        return DocumentGenerationContext(
            project=project, upload=upload, document_type=request.document_type.strip()
        )

    def prompt_inputs(self, context: DocumentGenerationContext) -> List[DocumentGenerationInput]:
        return [
            DocumentGenerationInput(
                document_type=context.document_type,
                source_content=upload_source(context.upload.content),
            )
        ]

    def finalize(self, context, prompt_input, value: str) -> GeneratedDocument:
        return GeneratedDocument(content=value)

    def fallback(self, context, prompt_input: DocumentGenerationInput) -> GeneratedDocument:
        return fallback_document(prompt_input)

    async def persist(self, context: DocumentGenerationContext, generation: Generation) -> Document:
        return await self.store.documents.create_document(
            project_id=context.project.id,
            type=context.document_type,
            content=generation.value.model_dump(),
            is_fallback=generation.is_fallback,
        )
