from dataclasses import dataclass
from typing import List

from docforge.core.exceptions import PreconditionNotMetError
from docforge.database.models import Document, QualityCheckResult
from docforge.schemas.artifacts import CONSISTENCY_CHECK_TYPE, ConsistencyReport, StageKind
from docforge.schemas.requests import ConsistencyCheckRequest
from docforge.schemas.stage_inputs import ConsistencyCheckInput, ReviewedDocument
from docforge.services.fallbacks import fallback_consistency
from docforge.services.stages.base import BaseStage, Generation
from docforge.services.validation import JsonContract


@dataclass
class ConsistencyCheckContext:
    documents: List[Document]


class ConsistencyCheckStage(BaseStage[ConsistencyCheckContext, ConsistencyReport]):
    """Reviews a set of documents for mutual consistency."""

    kind = StageKind.CONSISTENCY_CHECK
    contract = JsonContract(ConsistencyReport)

    async def fetch_inputs(self, request: ConsistencyCheckRequest) -> ConsistencyCheckContext:
        # Preserve request order, drop duplicates
        ids = list(dict.fromkeys(request.document_ids))
        found = {doc.id: doc for doc in await self.store.documents.get_many(ids)}

        missing = [str(doc_id) for doc_id in ids if doc_id not in found]
        if missing:
            raise PreconditionNotMetError(f"Documents not found: {', '.join(missing)}")

        return ConsistencyCheckContext(documents=[found[doc_id] for doc_id in ids])

    def prompt_inputs(self, context: ConsistencyCheckContext) -> List[ConsistencyCheckInput]:
        return [
            ConsistencyCheckInput(
                documents=[
                    ReviewedDocument(id=str(doc.id), type=doc.type, content=doc.content)
                    for doc in context.documents
                ]
            )
        ]

    def fallback(self, context, prompt_input: ConsistencyCheckInput) -> ConsistencyReport:
        return fallback_consistency(prompt_input)

    async def persist(self, context: ConsistencyCheckContext, generation: Generation) -> QualityCheckResult:
        # Results belong to the project of the first document
        return await self.store.quality_checks.create_result(
            project_id=context.documents[0].project_id,
            type=CONSISTENCY_CHECK_TYPE,
            result=generation.value.model_dump(mode="json"),
            is_fallback=generation.is_fallback,
        )
