"""Database module for SQLAlchemy models."""

from docforge.database.models import (
    ActivityLog,
    Document,
    ProgressReport,
    Project,
    Proposal,
    ProposalTemplate,
    QualityCheckResult,
    SourceCode,
    WorkEstimate,
)

__all__ = [
    "ActivityLog",
    "Document",
    "ProgressReport",
    "Project",
    "Proposal",
    "ProposalTemplate",
    "QualityCheckResult",
    "SourceCode",
    "WorkEstimate",
]
