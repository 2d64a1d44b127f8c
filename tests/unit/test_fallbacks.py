"""Tests for the deterministic fallback generators."""

import pytest

from docforge.schemas.artifacts import (
    QUALITY_SCORE_MAX,
    QUALITY_SCORE_MIN,
    CheckItemKind,
    Phase,
    PhaseProgress,
    PhaseStatus,
)
from docforge.schemas.stage_inputs import (
    CodeGenerationInput,
    ConsistencyCheckInput,
    DocumentGenerationInput,
    ProposalInput,
    ReviewedDocument,
)
from docforge.services import fallbacks


def test_fallback_document_names_the_type():
    doc = fallbacks.fallback_document(DocumentGenerationInput(document_type="design", source_content="x"))

    assert doc.content.startswith("Sample design:")
    assert "4. Summary" in doc.content


@pytest.mark.parametrize(
    "language, prefix",
    [("python", "#"), ("Python", "#"), ("sql", "--"), ("java", "//"), ("typescript", "//")],
)
def test_fallback_code_uses_language_comment_style(language, prefix):
    code = fallbacks.fallback_code(
        CodeGenerationInput(language=language, document_type="requirements", document_content="x")
    )

    lines = code.strip().splitlines()
    assert len(lines) == 3
    assert all(line.startswith(prefix) for line in lines)
    assert f"Sample {language} code" in lines[0]


def test_fallback_consistency_scores_zero():
    inputs = ConsistencyCheckInput(
        documents=[ReviewedDocument(id="a", type="requirements"), ReviewedDocument(id="b", type="design")]
    )

    report = fallbacks.fallback_consistency(inputs)

    assert report.score == 0
    assert report.issues[0].type == "review_unavailable"
    assert "2 document(s)" in report.issues[0].description
    assert report.suggestions


def test_quality_score_is_deterministic_and_bounded():
    first = fallbacks.quality_score(CheckItemKind.DOCUMENT, "Looks fine")
    second = fallbacks.quality_score(CheckItemKind.DOCUMENT, "Looks fine")

    assert first == second
    for text in ("a", "b", "c", "longer review text", ""):
        for item in CheckItemKind:
            assert QUALITY_SCORE_MIN <= fallbacks.quality_score(item, text) <= QUALITY_SCORE_MAX


def test_fallback_estimate_totals_one_thousand_hours():
    estimate = fallbacks.fallback_estimate()

    assert estimate.total_hours == 1000
    assert [p.phase for p in estimate.breakdown] == ["requirements", "design", "development", "test"]
    assert estimate.to_record()["totalHours"] == 1000


def test_fallback_progress_issues_pick_least_advanced_open_phases():
    phases = [
        PhaseProgress(name=Phase.REQUIREMENTS, progress=100, status=PhaseStatus.COMPLETED),
        PhaseProgress(name=Phase.DESIGN, progress=40, status=PhaseStatus.IN_PROGRESS),
        PhaseProgress(name=Phase.DEVELOPMENT, progress=0, status=PhaseStatus.NOT_STARTED),
        PhaseProgress(name=Phase.TEST, progress=0, status=PhaseStatus.NOT_STARTED),
    ]

    issues = fallbacks.fallback_progress_issues(phases)

    assert len(issues) == 3
    assert issues[0] == "The development phase has not started."
    assert issues[2] == "The design phase is at 40% and still in progress."


def test_fallback_progress_issues_when_all_completed():
    phases = [PhaseProgress(name=p, progress=100, status=PhaseStatus.COMPLETED) for p in Phase]

    assert fallbacks.fallback_progress_issues(phases) == [
        "All phases are completed; no open issues were identified."
    ]


def test_fallback_proposal_follows_template_structure():
    inputs = ProposalInput(
        project_name="Inventory renewal",
        template_name="Standard",
        template_structure=["Background", "Plan"],
        documents=[ReviewedDocument(id="d1", type="requirements")],
    )

    text = fallbacks.fallback_proposal(inputs)

    assert text.splitlines()[0] == "Proposal: Inventory renewal"
    assert "1. Background" in text
    assert "2. Plan" in text
    assert "- requirements" in text
