"""Prompt builder.

Maps a stage kind and its structured input record to a system/user prompt
pair. Pure: no I/O, no clock, no randomness. A missing required field is
returned as a ``MissingPromptField`` value rather than raised.
"""

import json
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Tuple, Type, Union

from pydantic import BaseModel

from docforge.prompts import system_prompts as prompts
from docforge.schemas.artifacts import StageKind
from docforge.schemas.stage_inputs import (
    CodeGenerationInput,
    ConsistencyCheckInput,
    DocumentGenerationInput,
    ProgressReportInput,
    ProposalInput,
    QualityItemInput,
    WorkEstimationInput,
)

TRUNCATION_MARKER = "\n...[truncated]"


@dataclass(frozen=True)
class PromptPair:
    system_prompt: str
    user_prompt: str


@dataclass(frozen=True)
class MissingPromptField:
    """A required input field was absent or empty."""
    stage: StageKind
    field: str

    @property
    def message(self) -> str:
        return f"{self.stage.value} prompt requires '{self.field}'"


PromptResult = Union[PromptPair, MissingPromptField]


def serialize(value: Any) -> str:
    """Render structured data with a stable key order."""
    if isinstance(value, BaseModel):
        value = value.model_dump(mode="json")
    if isinstance(value, str):
        return value
    return json.dumps(value, sort_keys=True, ensure_ascii=False, indent=2, default=str)


def _truncate(text: str, max_chars: Optional[int]) -> str:
    if max_chars is None or len(text) <= max_chars:
        return text
    return text[: max(max_chars - len(TRUNCATION_MARKER), 0)] + TRUNCATION_MARKER


def _is_empty(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, dict, tuple)):
        return len(value) == 0
    return False


def _document_generation(inputs: DocumentGenerationInput, max_chars: Optional[int]) -> PromptPair:
    return PromptPair(
        system_prompt=prompts.DOCUMENT_GENERATION_SYSTEM_PROMPT.format(document_type=inputs.document_type),
        user_prompt=prompts.DOCUMENT_GENERATION_USER_PROMPT.format(
            document_type=inputs.document_type,
            payload=_truncate(serialize(inputs.source_content), max_chars),
        ),
    )


def _code_generation(inputs: CodeGenerationInput, max_chars: Optional[int]) -> PromptPair:
    return PromptPair(
        system_prompt=prompts.CODE_GENERATION_SYSTEM_PROMPT.format(language=inputs.language),
        user_prompt=prompts.CODE_GENERATION_USER_PROMPT.format(
            language=inputs.language,
            document_type=inputs.document_type,
            payload=_truncate(serialize(inputs.document_content), max_chars),
        ),
    )


def _consistency_check(inputs: ConsistencyCheckInput, max_chars: Optional[int]) -> PromptPair:
    documents = [doc.model_dump(mode="json") for doc in inputs.documents]
    return PromptPair(
        system_prompt=prompts.CONSISTENCY_CHECK_SYSTEM_PROMPT,
        user_prompt=prompts.CONSISTENCY_CHECK_USER_PROMPT.format(
            payload=_truncate(serialize(documents), max_chars)
        ),
    )


def _quality_check(inputs: QualityItemInput, max_chars: Optional[int]) -> PromptPair:
    return PromptPair(
        system_prompt=prompts.QUALITY_CHECK_SYSTEM_PROMPT,
        user_prompt=prompts.QUALITY_CHECK_USER_PROMPT.format(
            item=inputs.item.value,
            payload=_truncate(serialize(inputs.artifacts), max_chars),
        ),
    )


def _work_estimation(inputs: WorkEstimationInput, max_chars: Optional[int]) -> PromptPair:
    return PromptPair(
        system_prompt=prompts.WORK_ESTIMATION_SYSTEM_PROMPT,
        user_prompt=prompts.WORK_ESTIMATION_USER_PROMPT.format(
            payload=_truncate(serialize(inputs), max_chars)
        ),
    )


def _progress_report(inputs: ProgressReportInput, max_chars: Optional[int]) -> PromptPair:
    phase_lines = "\n".join(
        f"{p.name.value}: {p.progress}% ({p.status.value})" for p in inputs.phases
    )
    return PromptPair(
        system_prompt=prompts.PROGRESS_REPORT_SYSTEM_PROMPT,
        user_prompt=prompts.PROGRESS_REPORT_USER_PROMPT.format(
            overall_progress=inputs.overall_progress,
            phase_lines=_truncate(phase_lines, max_chars),
        ),
    )


def _proposal_creation(inputs: ProposalInput, max_chars: Optional[int]) -> PromptPair:
    return PromptPair(
        system_prompt=prompts.PROPOSAL_CREATION_SYSTEM_PROMPT,
        user_prompt=prompts.PROPOSAL_CREATION_USER_PROMPT.format(
            payload=_truncate(serialize(inputs), max_chars)
        ),
    )


# kind -> (input model, required fields, renderer)
_BUILDERS: Dict[StageKind, Tuple[Type[BaseModel], Tuple[str, ...], Callable[..., PromptPair]]] = {
    StageKind.DOCUMENT_GENERATION: (
        DocumentGenerationInput, ("document_type", "source_content"), _document_generation
    ),
    StageKind.CODE_GENERATION: (
        CodeGenerationInput, ("language", "document_type", "document_content"), _code_generation
    ),
    StageKind.CONSISTENCY_CHECK: (ConsistencyCheckInput, ("documents",), _consistency_check),
    StageKind.QUALITY_CHECK: (QualityItemInput, ("item",), _quality_check),
    StageKind.WORK_ESTIMATION: (WorkEstimationInput, ("project_name",), _work_estimation),
    StageKind.PROGRESS_REPORT: (ProgressReportInput, ("phases",), _progress_report),
    StageKind.PROPOSAL_CREATION: (
        ProposalInput, ("project_name", "template_name", "documents"), _proposal_creation
    ),
}


def build_prompt(kind: StageKind, inputs: BaseModel, max_chars: Optional[int] = None) -> PromptResult:
    """Build the prompt pair for a stage.

    Args:
        kind: Stage the prompt is for
        inputs: The stage's input record
        max_chars: Optional cap on the serialized payload length

    Returns:
        PromptPair, or MissingPromptField naming the first absent required field

    Raises:
        TypeError: If ``inputs`` is not the input model for ``kind``
    """
    model, required, render = _BUILDERS[kind]
    if not isinstance(inputs, model):
        raise TypeError(f"{kind.value} expects {model.__name__}, got {type(inputs).__name__}")

    for field in required:
        if _is_empty(getattr(inputs, field, None)):
            return MissingPromptField(stage=kind, field=field)

    return render(inputs, max_chars)
