"""Output contracts: turn raw model text into typed stage results.

Every contract raises ``OutputShapeError`` when the text cannot be turned
into a valid value. Stages treat that exactly like a provider failure.
"""

import re
from abc import ABC, abstractmethod
from typing import Any, Generic, List, Type, TypeVar

from pydantic import BaseModel, ValidationError

from docforge.core.exceptions import OutputShapeError
from docforge.utils.json_parser import parse_json_safely, strip_code_fences
from docforge.utils.logging import get_logger

LOGGER = get_logger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

_LIST_MARKER = re.compile(r"^\s*(?:[-*•]\s+|\d+[.)]\s+|\(\d+\)\s+)")


class OutputContract(ABC):
    """Base contract. Subclasses implement ``parse``."""

    name = "output"

    @abstractmethod
    def parse(self, raw: str) -> Any:
        ...


class TextContract(OutputContract):
    """Free text; only emptiness is rejected."""

    name = "text"

    def parse(self, raw: str) -> str:
        text = (raw or "").strip()
        if not text:
            raise OutputShapeError("Model returned empty text")
        return text


class CodeContract(OutputContract):
    """Source code, with any surrounding Markdown fence removed."""

    name = "code"

    def parse(self, raw: str) -> str:
        code = strip_code_fences(raw or "")
        if not code:
            raise OutputShapeError("Model returned no code")
        return code


class JsonContract(OutputContract, Generic[ModelT]):
    """A JSON object validated by a pydantic model."""

    name = "json"

    def __init__(self, model: Type[ModelT]):
        self.model = model

    def parse(self, raw: str) -> ModelT:
        data = parse_json_safely(raw or "")
        if data is None:
            raise OutputShapeError(f"No JSON found for {self.model.__name__}")
        try:
            return self.model.model_validate(data)
        except ValidationError as e:
            LOGGER.warning(
                f"Model output failed {self.model.__name__} validation",
                extra={"error_count": e.error_count()},
            )
            raise OutputShapeError(
                f"Output does not match {self.model.__name__}: {e.errors()[0]['msg']}",
                original_error=e,
            ) from e


def strip_list_marker(line: str) -> str:
    return _LIST_MARKER.sub("", line, count=1).strip()


class LinesContract(OutputContract):
    """The first ``max_lines`` non-empty lines, list markers removed."""

    name = "lines"

    def __init__(self, max_lines: int = 3):
        self.max_lines = max_lines

    def parse(self, raw: str) -> List[str]:
        lines = []
        for line in (raw or "").splitlines():
            cleaned = strip_list_marker(line)
            if cleaned:
                lines.append(cleaned)
            if len(lines) == self.max_lines:
                break
        if not lines:
            raise OutputShapeError("Model returned no usable lines")
        return lines
