"""Tests for artifact and request schemas."""

from datetime import datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from docforge.schemas.artifacts import (
    EstimatePhase,
    Phase,
    PhaseProgress,
    PhaseStatus,
    ProgressPeriod,
    ProgressReportBody,
    QualityItemResult,
    CheckItemKind,
    WorkEstimateBody,
)
from docforge.schemas.requests import ActivityLogCreateRequest, ProgressReportRequest


class TestWorkEstimateBody:

    def test_total_must_equal_breakdown_sum(self):
        with pytest.raises(ValidationError):
            WorkEstimateBody(total_hours=10, breakdown=[EstimatePhase(phase="design", hours=4)])

    def test_from_breakdown_recomputes_total(self):
        body = WorkEstimateBody.from_breakdown(
            [{"phase": "design", "hours": 12.5}, {"phase": "test", "hours": 7.5}]
        )

        assert body.total_hours == 20
        assert body.to_record() == {
            "totalHours": 20.0,
            "breakdown": [{"phase": "design", "hours": 12.5}, {"phase": "test", "hours": 7.5}],
        }

    def test_accepts_camel_case_alias(self):
        body = WorkEstimateBody.model_validate(
            {"totalHours": 5, "breakdown": [{"phase": "design", "hours": 5}]}
        )

        assert body.total_hours == 5

    def test_negative_hours_rejected(self):
        with pytest.raises(ValidationError):
            WorkEstimateBody.from_breakdown([{"phase": "design", "hours": -1}])

    @pytest.mark.parametrize("hours", [float("inf"), float("nan")])
    def test_non_finite_hours_rejected(self, hours):
        with pytest.raises(ValidationError):
            EstimatePhase(phase="design", hours=hours)

    def test_overflowing_total_rejected(self):
        with pytest.raises(ValueError, match="not a finite"):
            WorkEstimateBody.from_breakdown(
                [{"phase": "design", "hours": 1e308}, {"phase": "test", "hours": 1e308}]
            )


def _phases(*values):
    return [
        PhaseProgress(name=phase, progress=value, status=PhaseStatus.IN_PROGRESS)
        for phase, value in zip(Phase, values)
    ]


class TestProgressReportBody:

    def _period(self):
        now = datetime(2024, 4, 1, tzinfo=timezone.utc)
        return ProgressPeriod(start=now - timedelta(days=7), end=now)

    def test_overall_must_match_phase_mean(self):
        with pytest.raises(ValidationError):
            ProgressReportBody(
                overall_progress=50,
                phases=_phases(100, 40, 0, 0),
                issues=[],
                period=self._period(),
                generated_at=datetime.now(timezone.utc),
            )

    def test_at_most_three_issues(self):
        with pytest.raises(ValidationError):
            ProgressReportBody(
                overall_progress=35,
                phases=_phases(100, 40, 0, 0),
                issues=["a", "b", "c", "d"],
                period=self._period(),
                generated_at=datetime.now(timezone.utc),
            )

    def test_valid_report_serializes(self):
        body = ProgressReportBody(
            overall_progress=35,
            phases=_phases(100, 40, 0, 0),
            issues=["Design is behind"],
            period=self._period(),
            generated_at=datetime(2024, 4, 1, tzinfo=timezone.utc),
        )

        record = body.to_record()
        assert record["phases"][1] == {"name": "design", "progress": 40, "status": "in progress"}
        assert record["issues"] == ["Design is behind"]


def test_quality_score_bounds():
    with pytest.raises(ValidationError):
        QualityItemResult(item=CheckItemKind.DOCUMENT, score=59, result="x")


def test_request_datetimes_are_normalized_to_utc():
    request = ProgressReportRequest(
        project_id="p",
        start_date="2024-04-01T09:00:00+09:00",
        end_date="2024-04-02T00:00:00",
    )

    assert request.start_date == datetime(2024, 4, 1, 0, 0, tzinfo=timezone.utc)
    assert request.end_date.tzinfo == timezone.utc


def test_activity_log_phase_must_be_known():
    with pytest.raises(ValidationError):
        ActivityLogCreateRequest(phase="marketing", status="completed", description="x")
