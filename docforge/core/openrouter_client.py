"""OpenRouter LLM client implementation."""

from typing import Any, Dict, List, Optional

from docforge.core.exceptions import ProviderRejectedError, ProviderUnavailableError
from docforge.core.llm_client import BaseLLMClient
from docforge.utils.logging import get_logger

LOGGER = get_logger(__name__)


class OpenRouterClient:
    """Chat-completions provider backed by the OpenRouter HTTP API."""

    def __init__(
        self,
        api_key: str,
        model: str = "openai/gpt-4o-mini",
        base_url: str = "https://openrouter.ai/api/v1/chat/completions",
        timeout: float = 60,
        temperature: float = 0.2,
        name: str = "openrouter",
    ):
        """Initialize OpenRouter client.

        Args:
            api_key: OpenRouter API key
            model: Model name to use (e.g., "openai/gpt-4o-mini")
            base_url: OpenRouter API base URL
            timeout: Transport timeout in seconds
            temperature: Sampling temperature
            name: Provider name this client is registered under
        """
        self.name = name
        self.model = model
        self.temperature = temperature
        self.client = BaseLLMClient(
            provider=name,
            api_key=api_key,
            base_url=base_url,
            timeout=timeout,
        )

        LOGGER.info(f"Initialized OpenRouter client with model {self.model}")

    def _build_payload(self, system_prompt: str, user_prompt: str) -> Dict[str, Any]:
        messages: List[Dict[str, str]] = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.append({"role": "user", "content": user_prompt})
        return {
            "model": self.model,
            "messages": messages,
            "temperature": self.temperature,
        }

    async def invoke(self, system_prompt: str, user_prompt: str) -> str:
        """Send a two-part prompt and return the reply text.

        Raises:
            ProviderFailure: Any transport, status or refusal failure
        """
        response = await self.client.call_api(payload=self._build_payload(system_prompt, user_prompt))

        choices = response.get("choices") or []
        if not choices:
            LOGGER.error(f"Unexpected OpenRouter response format: {response}")
            raise ProviderRejectedError("Invalid response format from OpenRouter", provider=self.name)

        choice = choices[0]
        content: Optional[str] = (choice.get("message") or {}).get("content")
        if choice.get("finish_reason") == "content_filter":
            raise ProviderRejectedError("OpenRouter filtered the reply", provider=self.name)
        if not content:
            raise ProviderUnavailableError("OpenRouter returned an empty reply", provider=self.name)
        return content
