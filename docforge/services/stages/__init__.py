from .base import BaseStage, Generation, StageResult, StageState, StageStateMachine
from .code_generation import CodeGenerationStage
from .consistency_check import ConsistencyCheckStage
from .document_generation import DocumentGenerationStage
from .progress_report import ProgressReportStage
from .proposal_creation import ProposalCreationStage
from .quality_check import QualityCheckStage
from .work_estimation import WorkEstimationStage

__all__ = [
    "BaseStage",
    "CodeGenerationStage",
    "ConsistencyCheckStage",
    "DocumentGenerationStage",
    "Generation",
    "ProgressReportStage",
    "ProposalCreationStage",
    "QualityCheckStage",
    "StageResult",
    "StageState",
    "StageStateMachine",
    "WorkEstimationStage",
]
