"""LLM gateway.

Provides one call surface over every configured provider. The gateway owns
provider lookup, the per-call timeout and failure classification. It never
retries; retry policy belongs to the pipeline stages.
"""

import asyncio
from enum import Enum
from typing import Dict, Optional, Protocol, runtime_checkable

from docforge.core.config import LLMSettings
from docforge.core.exceptions import (
    ProviderFailure,
    ProviderTimeoutError,
    ProviderUnavailableError,
)
from docforge.core.gemini_client import GeminiClient
from docforge.core.openrouter_client import OpenRouterClient
from docforge.utils.logging import get_logger

LOGGER = get_logger(__name__)


class ProviderName(str, Enum):
    """Built-in LLM providers."""
    GEMINI = "gemini"
    OPENROUTER = "openrouter"


@runtime_checkable
class LLMProvider(Protocol):
    """Anything that turns a system/user prompt pair into text."""

    name: str

    async def invoke(self, system_prompt: str, user_prompt: str) -> str:
        ...


class LLMGateway:
    """Routes prompts to named providers under a bounded timeout."""

    def __init__(self, providers: Optional[Dict[str, LLMProvider]] = None, timeout: float = 30.0):
        self.providers: Dict[str, LLMProvider] = dict(providers or {})
        self.timeout = timeout

    def register(self, provider: LLMProvider) -> None:
        self.providers[provider.name] = provider
        LOGGER.info(f"Registered LLM provider '{provider.name}'")

    def has_provider(self, name: str) -> bool:
        return name in self.providers

    async def generate(self, provider_name: str, system_prompt: str, user_prompt: str) -> str:
        """Invoke one provider once.

        Args:
            provider_name: Registered provider to call
            system_prompt: Instructions for the model
            user_prompt: Task content

        Returns:
            Raw reply text

        Raises:
            ProviderUnavailableError: Unknown provider or unreachable backend
            ProviderTimeoutError: No answer within the gateway timeout
            ProviderRejectedError: Backend refused the request
        """
        provider = self.providers.get(provider_name)
        if provider is None:
            raise ProviderUnavailableError(
                f"LLM provider '{provider_name}' is not configured", provider=provider_name
            )

        LOGGER.debug(
            f"Invoking provider '{provider_name}'",
            extra={"system_chars": len(system_prompt), "user_chars": len(user_prompt)},
        )

        try:
            reply = await asyncio.wait_for(
                provider.invoke(system_prompt, user_prompt), timeout=self.timeout
            )
        except asyncio.TimeoutError as e:
            raise ProviderTimeoutError(
                f"LLM provider '{provider_name}' did not answer within {self.timeout}s",
                provider=provider_name,
                original_error=e,
            ) from e
        except ProviderFailure:
            raise
        except Exception as e:
            LOGGER.warning(f"Provider '{provider_name}' raised {type(e).__name__}: {e}")
            raise ProviderUnavailableError(
                f"LLM provider '{provider_name}' failed: {e}",
                provider=provider_name,
                original_error=e,
            ) from e

        if not reply or not reply.strip():
            raise ProviderUnavailableError(
                f"LLM provider '{provider_name}' returned an empty reply", provider=provider_name
            )
        return reply


def create_gateway_from_settings(llm_settings: LLMSettings) -> LLMGateway:
    """Build a gateway with every provider that has credentials.

    Stages mapped to a provider without credentials still run; their calls
    fail as unavailable and fall back.
    """
    gateway = LLMGateway(timeout=llm_settings.timeout_seconds)

    if llm_settings.gemini_api_key:
        gateway.register(
            GeminiClient(
                api_key=llm_settings.gemini_api_key,
                model=llm_settings.gemini_model,
                temperature=llm_settings.temperature,
                name=ProviderName.GEMINI.value,
            )
        )
    if llm_settings.openrouter_api_key:
        gateway.register(
            OpenRouterClient(
                api_key=llm_settings.openrouter_api_key,
                model=llm_settings.openrouter_model,
                base_url=llm_settings.openrouter_api_url,
                timeout=llm_settings.timeout_seconds,
                temperature=llm_settings.temperature,
                name=ProviderName.OPENROUTER.value,
            )
        )

    for stage, provider_name in sorted(llm_settings.stage_providers.items()):
        if not gateway.has_provider(provider_name):
            LOGGER.warning(
                f"Stage '{stage}' is mapped to provider '{provider_name}' which is not configured; "
                f"it will use fallback output"
            )

    return gateway
