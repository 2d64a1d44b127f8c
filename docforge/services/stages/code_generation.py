from dataclasses import dataclass
from typing import List

from docforge.core.exceptions import PreconditionNotMetError
from docforge.database.models import Document, SourceCode
from docforge.schemas.artifacts import StageKind
from docforge.schemas.requests import CodeGenerationRequest
from docforge.schemas.stage_inputs import CodeGenerationInput
from docforge.services.fallbacks import fallback_code
from docforge.services.stages.base import BaseStage, Generation
from docforge.services.validation import CodeContract


@dataclass
class CodeGenerationContext:
    document: Document
    language: str


def generated_file_name(language: str) -> str:
    return f"generated_code.{language.strip().lower()}"


class CodeGenerationStage(BaseStage[CodeGenerationContext, str]):
    """Generates source code in a target language from one document."""

    kind = StageKind.CODE_GENERATION
    contract = CodeContract()

    async def fetch_inputs(self, request: CodeGenerationRequest) -> CodeGenerationContext:
        document = await self.store.documents.get_by_id(request.document_id)
        if document is None:
            raise PreconditionNotMetError(f"Document {request.document_id} not found")
        return CodeGenerationContext(document=document, language=request.language.strip())

    def prompt_inputs(self, context: CodeGenerationContext) -> List[CodeGenerationInput]:
        return [
            CodeGenerationInput(
                language=context.language,
                document_type=context.document.type,
                document_content=context.document.content,
            )
        ]

    def fallback(self, context, prompt_input: CodeGenerationInput) -> str:
        return fallback_code(prompt_input)

    async def persist(self, context: CodeGenerationContext, generation: Generation) -> SourceCode:
        return await self.store.source_codes.create_source_code(
            project_id=context.document.project_id,
            document_id=context.document.id,
            file_name=generated_file_name(context.language),
            language=context.language,
            content=generation.value,
            is_fallback=generation.is_fallback,
        )
