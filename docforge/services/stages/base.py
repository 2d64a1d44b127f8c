"""Base stage interface for all artifact-generation stages.

A stage invocation walks a fixed state machine:

    PENDING -> FETCHING_INPUTS -> PROMPTING -> GENERATING -> VALIDATING
            -> PERSISTING -> DONE

FAILED is reachable only from FETCHING_INPUTS (a predecessor artifact or a
required prompt field is missing) and from PERSISTING (the store rejected
the write). Provider failures and malformed output never fail a stage; the
stage's fallback generator supplies the value instead.
"""

import asyncio
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Generic, List, Optional, Set, Tuple, TypeVar
from uuid import UUID

from pydantic import BaseModel

from docforge.core.config import Settings
from docforge.core.exceptions import (
    OutputShapeError,
    PreconditionNotMetError,
    ProviderFailure,
    ProviderTimeoutError,
    ProviderUnavailableError,
    StorageError,
)
from docforge.core.gateway import LLMGateway
from docforge.prompts.builder import MissingPromptField, PromptPair, build_prompt
from docforge.repositories.artifact_store import ArtifactStore
from docforge.schemas.artifacts import StageKind
from docforge.services.validation import OutputContract
from docforge.utils.logging import get_logger

LOGGER = get_logger(__name__)

ContextT = TypeVar("ContextT")
OutputT = TypeVar("OutputT")

RETRYABLE_FAILURES = (ProviderUnavailableError, ProviderTimeoutError)


class StageState(str, Enum):
    PENDING = "pending"
    FETCHING_INPUTS = "fetching_inputs"
    PROMPTING = "prompting"
    GENERATING = "generating"
    VALIDATING = "validating"
    PERSISTING = "persisting"
    DONE = "done"
    FAILED = "failed"


ALLOWED_TRANSITIONS: Dict[StageState, Set[StageState]] = {
    StageState.PENDING: {StageState.FETCHING_INPUTS},
    StageState.FETCHING_INPUTS: {StageState.PROMPTING, StageState.FAILED},
    StageState.PROMPTING: {StageState.GENERATING},
    StageState.GENERATING: {StageState.VALIDATING},
    StageState.VALIDATING: {StageState.PERSISTING},
    StageState.PERSISTING: {StageState.DONE, StageState.FAILED},
    StageState.DONE: set(),
    StageState.FAILED: set(),
}


class StageStateMachine:
    """Tracks and logs the state of one stage invocation."""

    def __init__(self, stage: StageKind):
        self.stage = stage
        self.state = StageState.PENDING
        self.history: List[StageState] = [StageState.PENDING]

    def advance(self, target: StageState) -> None:
        if target not in ALLOWED_TRANSITIONS[self.state]:
            raise RuntimeError(
                f"Illegal transition for {self.stage.value}: {self.state.value} -> {target.value}"
            )
        LOGGER.info(
            f"[{self.stage.value}] {self.state.value} -> {target.value}",
            extra={"stage": self.stage.value, "from_state": self.state.value, "to_state": target.value},
        )
        self.state = target
        self.history.append(target)

    def fail(self, reason: str) -> None:
        self.advance(StageState.FAILED)
        LOGGER.error(f"[{self.stage.value}] failed: {reason}", extra={"stage": self.stage.value})


@dataclass
class StageResult:
    """Standard result from stage execution."""
    stage: StageKind
    state: StageState
    artifact_id: UUID
    record: Any
    value: Any
    is_fallback: bool
    attempts: int = 0
    history: List[StageState] = field(default_factory=list)


@dataclass
class Generation:
    """Outcome of the generate/validate steps."""
    value: Any
    is_fallback: bool
    attempts: int = 0
    failure: Optional[str] = None


class BaseStage(ABC, Generic[ContextT, OutputT]):
    """Template for a stage: fetch -> prompt -> generate -> validate -> persist.

    Subclasses supply the input gathering, the prompt input records, the
    output contract, the fallback generator and the persistence call.
    """

    kind: StageKind
    contract: OutputContract

    def __init__(self, store: ArtifactStore, gateway: LLMGateway, settings: Settings):
        self.store = store
        self.gateway = gateway
        self.settings = settings

    @property
    def provider_name(self) -> str:
        return self.settings.llm.provider_for(self.kind.value)

    # ------------------------------------------------------------------
    # Hooks
    # ------------------------------------------------------------------

    @abstractmethod
    async def fetch_inputs(self, request: Any) -> ContextT:
        """Load predecessor artifacts. Raise PreconditionNotMetError if any is missing."""

    @abstractmethod
    def prompt_inputs(self, context: ContextT) -> List[BaseModel]:
        """Input records handed to the prompt builder, one per gateway call."""

    @abstractmethod
    def fallback(self, context: ContextT, prompt_input: BaseModel) -> OutputT:
        """Deterministic value for one call, used when generation fails."""

    @abstractmethod
    async def persist(self, context: ContextT, generation: Generation) -> Any:
        """Store the artifact and return the ORM record."""

    def finalize(self, context: ContextT, prompt_input: BaseModel, value: Any) -> OutputT:
        """Post-process a validated model value. Raise OutputShapeError to reject it."""
        return value

    def combine(self, context: ContextT, generations: List[Generation]) -> Generation:
        """Join per-call generations into the stage output."""
        return generations[0]

    async def after_persist(self, context: ContextT, record: Any) -> Any:
        """Non-fatal follow-up work once the artifact is committed."""
        return record

    # ------------------------------------------------------------------
    # Template
    # ------------------------------------------------------------------

    async def run(self, request: Any) -> StageResult:
        machine = StageStateMachine(self.kind)

        machine.advance(StageState.FETCHING_INPUTS)
        try:
            context = await self.fetch_inputs(request)
            prompt_inputs = self.prompt_inputs(context)
            prompts = self._build_prompts(prompt_inputs)
        except PreconditionNotMetError as e:
            machine.fail(str(e))
            raise

        machine.advance(StageState.PROMPTING)
        LOGGER.debug(
            f"[{self.kind.value}] built {len(prompts)} prompt(s) for provider '{self.provider_name}'",
            extra={"user_chars": [len(p.user_prompt) for p in prompts]},
        )

        machine.advance(StageState.GENERATING)
        outcomes = await self._generate_all(prompts)

        machine.advance(StageState.VALIDATING)
        generations = [
            self._validate(context, prompt_input, raw, failure)
            for prompt_input, (raw, failure, attempts) in zip(prompt_inputs, outcomes)
        ]
        for generation, (_, _, attempts) in zip(generations, outcomes):
            generation.attempts = attempts
        generation = self.combine(context, generations)

        machine.advance(StageState.PERSISTING)
        try:
            record = await self.persist(context, generation)
        except StorageError as e:
            machine.fail(str(e))
            raise
        machine.advance(StageState.DONE)

        record = await self.after_persist(context, record)

        LOGGER.info(
            f"[{self.kind.value}] stored artifact {record.id}",
            extra={"stage": self.kind.value, "artifact_id": str(record.id), "is_fallback": generation.is_fallback},
        )
        return StageResult(
            stage=self.kind,
            state=machine.state,
            artifact_id=record.id,
            record=record,
            value=generation.value,
            is_fallback=generation.is_fallback,
            attempts=sum(g.attempts for g in generations),
            history=list(machine.history),
        )

    def _build_prompts(self, prompt_inputs: List[BaseModel]) -> List[PromptPair]:
        prompts = []
        for prompt_input in prompt_inputs:
            built = build_prompt(self.kind, prompt_input, max_chars=self.settings.pipeline.max_prompt_chars)
            if isinstance(built, MissingPromptField):
                raise PreconditionNotMetError(built.message)
            prompts.append(built)
        return prompts

    async def _generate_all(self, prompts: List[PromptPair]) -> List[Tuple[Optional[str], Optional[str], int]]:
        if len(prompts) == 1:
            return [await self._generate(prompts[0])]
        return list(await asyncio.gather(*(self._generate(p) for p in prompts)))

    async def _generate(self, prompt: PromptPair) -> Tuple[Optional[str], Optional[str], int]:
        """Call the gateway with the stage retry policy.

        Returns:
            (raw text or None, failure description or None, attempts made)
        """
        max_attempts = self.settings.pipeline.max_generation_attempts
        delay = self.settings.pipeline.retry_delay_seconds

        for attempt in range(1, max_attempts + 1):
            try:
                raw = await self.gateway.generate(self.provider_name, prompt.system_prompt, prompt.user_prompt)
                return raw, None, attempt
            except RETRYABLE_FAILURES as e:
                if attempt == max_attempts:
                    return None, f"{type(e).__name__}: {e}", attempt
                backoff = delay * (2 ** (attempt - 1))
                LOGGER.warning(
                    f"[{self.kind.value}] attempt {attempt}/{max_attempts} failed ({type(e).__name__}), "
                    f"retrying in {backoff}s"
                )
                await asyncio.sleep(backoff)
            except ProviderFailure as e:
                return None, f"{type(e).__name__}: {e}", attempt

        return None, "no generation attempts made", 0

    def _validate(
        self, context: ContextT, prompt_input: BaseModel, raw: Optional[str], failure: Optional[str]
    ) -> Generation:
        if raw is not None:
            try:
                parsed = self.contract.parse(raw)
                return Generation(value=self.finalize(context, prompt_input, parsed), is_fallback=False)
            except OutputShapeError as e:
                failure = f"OutputShapeError: {e}"

        LOGGER.warning(
            f"[{self.kind.value}] using fallback output: {failure}",
            extra={"stage": self.kind.value, "provider": self.provider_name},
        )
        return Generation(value=self.fallback(context, prompt_input), is_fallback=True, failure=failure)
