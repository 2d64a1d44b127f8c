from dataclasses import dataclass
from typing import List, Optional

from fpdf.errors import FPDFException

from docforge.core.config import Settings
from docforge.core.exceptions import PreconditionNotMetError, StorageError
from docforge.core.gateway import LLMGateway
from docforge.database.models import Document, Project, Proposal, ProposalTemplate
from docforge.repositories.artifact_store import ArtifactStore
from docforge.schemas.artifacts import StageKind
from docforge.schemas.requests import ProposalCreationRequest
from docforge.schemas.stage_inputs import ProposalInput, ReviewedDocument
from docforge.services.fallbacks import fallback_proposal
from docforge.services.pdf_service import PDFProposalService
from docforge.services.stages.base import BaseStage, Generation
from docforge.services.storage_service import StorageService
from docforge.services.validation import TextContract
from docforge.utils.logging import get_logger

LOGGER = get_logger(__name__)


@dataclass
class ProposalContext:
    project: Project
    template: ProposalTemplate
    documents: List[Document]


class ProposalCreationStage(BaseStage[ProposalContext, str]):
    """Writes a proposal from project documents and a template, then renders it to PDF.

    The PDF is produced after the proposal is committed. If rendering or
    storing it fails, the proposal is kept with ``pdf_url`` left null.
    """

    kind = StageKind.PROPOSAL_CREATION
    contract = TextContract()

    def __init__(
        self,
        store: ArtifactStore,
        gateway: LLMGateway,
        settings: Settings,
        storage: Optional[StorageService] = None,
        pdf_service: Optional[PDFProposalService] = None,
    ):
        super().__init__(store, gateway, settings)
        self.storage = storage
        self.pdf_service = pdf_service or PDFProposalService()

    async def fetch_inputs(self, request: ProposalCreationRequest) -> ProposalContext:
        project = await self.store.projects.get_by_id(request.project_id)
        if project is None:
            raise PreconditionNotMetError(f"Project {request.project_id} not found")

        template = await self.store.templates.get_by_id(request.template_id)
        if template is None:
            raise PreconditionNotMetError(f"Proposal template {request.template_id} not found")

        documents = await self.store.documents.list_by_project(project.id)
        if not documents:
            raise PreconditionNotMetError(f"Project {project.id} has no documents to base a proposal on")

        return ProposalContext(project=project, template=template, documents=documents)

    def prompt_inputs(self, context: ProposalContext) -> List[ProposalInput]:
        return [
            ProposalInput(
                project_name=context.project.name,
                project_description=context.project.description,
                template_name=context.template.name,
                template_description=context.template.description,
                template_structure=list(context.template.structure or []),
                documents=[
                    ReviewedDocument(id=str(doc.id), type=doc.type, content=doc.content)
                    for doc in context.documents
                ],
            )
        ]

    def fallback(self, context, prompt_input: ProposalInput) -> str:
        return fallback_proposal(prompt_input)

    async def persist(self, context: ProposalContext, generation: Generation) -> Proposal:
        return await self.store.proposals.create_proposal(
            project_id=context.project.id,
            template_id=context.template.id,
            content=generation.value,
            is_fallback=generation.is_fallback,
        )

    async def after_persist(self, context: ProposalContext, record: Proposal) -> Proposal:
        if self.storage is None:
            LOGGER.warning("No storage configured; proposal PDF not rendered")
            return record

        proposal_id = record.id
        try:
            pdf_bytes = self.pdf_service.generate_pdf(
                title=f"Proposal: {context.project.name}", content=record.content
            )
            pdf_path = await self.storage.save_bytes(
                self.storage.proposals_bucket, f"{context.project.id}/{proposal_id}.pdf", pdf_bytes
            )
            updated = await self.store.proposals.update_pdf_url(proposal_id, pdf_path)
            return updated or record
        except (FPDFException, StorageError) as e:
            LOGGER.error(
                f"Proposal {proposal_id} stored without PDF: {e}",
                exc_info=True,
                extra={"proposal_id": str(proposal_id)},
            )
            # A failed update rolls the session back and expires loaded records
            return await self.store.proposals.get_by_id(proposal_id) or record
