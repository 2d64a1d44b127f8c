from .artifacts import (
    CheckItemKind,
    Phase,
    PhaseStatus,
    StageKind,
)
from .responses import ApiResponse, ErrorDetail, StageResponse

__all__ = [
    "ApiResponse",
    "CheckItemKind",
    "ErrorDetail",
    "Phase",
    "PhaseStatus",
    "StageKind",
    "StageResponse",
]
