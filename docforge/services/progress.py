"""Deterministic progress computation from activity logs."""

from collections import defaultdict
from typing import Dict, Iterable, List, Tuple

from docforge.schemas.artifacts import ACTIVITY_COMPLETED, Phase, PhaseProgress, PhaseStatus
from docforge.utils.rounding import round_half_up

PHASE_ORDER: Tuple[Phase, ...] = (Phase.REQUIREMENTS, Phase.DESIGN, Phase.DEVELOPMENT, Phase.TEST)


def phase_status(completed: int, total: int) -> PhaseStatus:
    if total == 0:
        return PhaseStatus.NOT_STARTED
    if completed == total:
        return PhaseStatus.COMPLETED
    return PhaseStatus.IN_PROGRESS


def compute_phase_progress(logs: Iterable) -> List[PhaseProgress]:
    """Per-phase progress for the four fixed phases.

    Each log needs ``phase`` and ``status`` attributes. Logs for unknown
    phases are ignored. A phase with no logs reports 0 and ``not started``.
    """
    totals: Dict[Phase, int] = defaultdict(int)
    completed: Dict[Phase, int] = defaultdict(int)

    for log in logs:
        try:
            phase = Phase(log.phase)
        except ValueError:
            continue
        totals[phase] += 1
        if log.status == ACTIVITY_COMPLETED:
            completed[phase] += 1

    phases = []
    for phase in PHASE_ORDER:
        total = totals[phase]
        done = completed[phase]
        progress = round_half_up(100 * done / total) if total else 0
        phases.append(PhaseProgress(name=phase, progress=progress, status=phase_status(done, total)))
    return phases


def overall_progress(phases: List[PhaseProgress]) -> int:
    """Unweighted mean of phase progress, rounded half-up."""
    if not phases:
        return 0
    return round_half_up(sum(p.progress for p in phases) / len(phases))
