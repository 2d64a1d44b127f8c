"""Aggregate of the per-artifact repositories sharing one session."""

from sqlalchemy.ext.asyncio import AsyncSession

from docforge.repositories.document_repository import DocumentRepository, SourceCodeRepository
from docforge.repositories.estimate_repository import (
    ActivityLogRepository,
    ProgressReportRepository,
    WorkEstimateRepository,
)
from docforge.repositories.project_repository import ProjectRepository, ProposalTemplateRepository
from docforge.repositories.proposal_repository import ProposalRepository
from docforge.repositories.quality_check_repository import QualityCheckRepository


class ArtifactStore:
    """Typed access to every artifact kind, scoped to a single session."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.projects = ProjectRepository(session)
        self.documents = DocumentRepository(session)
        self.source_codes = SourceCodeRepository(session)
        self.quality_checks = QualityCheckRepository(session)
        self.work_estimates = WorkEstimateRepository(session)
        self.progress_reports = ProgressReportRepository(session)
        self.proposals = ProposalRepository(session)
        self.activity_logs = ActivityLogRepository(session)
        self.templates = ProposalTemplateRepository(session)
