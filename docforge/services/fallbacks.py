"""Deterministic placeholder generators.

Each function depends only on the stage inputs, never on the failed model
output, and returns a value that satisfies the same schema as a real
result.
"""

import hashlib
from typing import List

from docforge.schemas.artifacts import (
    QUALITY_SCORE_MAX,
    QUALITY_SCORE_MIN,
    CheckItemKind,
    ConsistencyReport,
    EstimatePhase,
    GeneratedDocument,
    PhaseProgress,
    PhaseStatus,
    ReviewIssue,
    WorkEstimateBody,
)
from docforge.schemas.stage_inputs import (
    CodeGenerationInput,
    ConsistencyCheckInput,
    DocumentGenerationInput,
    ProposalInput,
    QualityItemInput,
)

FALLBACK_ESTIMATE_PHASES = (
    ("requirements", 200),
    ("design", 300),
    ("development", 400),
    ("test", 100),
)

_HASH_COMMENT_LANGUAGES = {"python", "ruby", "perl", "shell", "bash", "sh", "r", "yaml", "powershell"}
_DASH_COMMENT_LANGUAGES = {"sql", "lua", "haskell"}


def quality_score(item: CheckItemKind, result: str) -> int:
    """Deterministic score in [60, 100] derived from the item and its review text."""
    digest = hashlib.sha256(f"{item.value}{result}".encode("utf-8")).hexdigest()
    span = QUALITY_SCORE_MAX - QUALITY_SCORE_MIN + 1
    return QUALITY_SCORE_MIN + int(digest, 16) % span


def comment_prefix(language: str) -> str:
    lang = language.strip().lower()
    if lang in _HASH_COMMENT_LANGUAGES:
        return "#"
    if lang in _DASH_COMMENT_LANGUAGES:
        return "--"
    return "//"


def fallback_document(inputs: DocumentGenerationInput) -> GeneratedDocument:
    doc_type = inputs.document_type
    return GeneratedDocument(
        content=(
            f"Sample {doc_type}:\n\n"
            "1. Introduction\n"
            "2. Overview\n"
            "3. Details\n"
            "4. Summary"
        )
    )


def fallback_code(inputs: CodeGenerationInput) -> str:
    prefix = comment_prefix(inputs.language)
    return (
        f"{prefix} Sample {inputs.language} code\n"
        f"{prefix} Generated from the {inputs.document_type} document.\n"
        f"{prefix} Replace this placeholder with the real implementation.\n"
    )


def fallback_consistency(inputs: ConsistencyCheckInput) -> ConsistencyReport:
    count = len(inputs.documents)
    return ConsistencyReport(
        score=0,
        issues=[
            ReviewIssue(
                type="review_unavailable",
                description=f"Automated consistency review of {count} document(s) could not be completed.",
                severity="low",
            )
        ],
        suggestions=["Review the documents manually or re-run the consistency check."],
    )


def fallback_quality_result(inputs: QualityItemInput) -> str:
    return (
        f"Automated quality review of {inputs.item.value} was unavailable. "
        f"{len(inputs.artifacts)} artifact(s) require manual review."
    )


def fallback_estimate() -> WorkEstimateBody:
    return WorkEstimateBody.from_breakdown(
        [EstimatePhase(phase=phase, hours=hours) for phase, hours in FALLBACK_ESTIMATE_PHASES]
    )


def fallback_progress_issues(phases: List[PhaseProgress]) -> List[str]:
    """Up to three issues read off the least advanced open phases."""
    open_phases = sorted(
        (p for p in phases if p.status != PhaseStatus.COMPLETED),
        key=lambda p: p.progress,
    )
    issues = []
    for phase in open_phases[:3]:
        if phase.status == PhaseStatus.NOT_STARTED:
            issues.append(f"The {phase.name.value} phase has not started.")
        else:
            issues.append(f"The {phase.name.value} phase is at {phase.progress}% and still in progress.")
    return issues or ["All phases are completed; no open issues were identified."]


def fallback_proposal(inputs: ProposalInput) -> str:
    lines = [f"Proposal: {inputs.project_name}", ""]
    if inputs.project_description:
        lines.extend([inputs.project_description, ""])
    sections = inputs.template_structure or ["Overview", "Scope", "Schedule", "Cost"]
    for index, heading in enumerate(sections, start=1):
        lines.append(f"{index}. {heading}")
        lines.append(f"   To be completed for {inputs.project_name}.")
    if inputs.documents:
        lines.extend(["", "Reference documents:"])
        lines.extend(f"- {doc.type}" for doc in inputs.documents)
    return "\n".join(lines)
