from typing import Optional

import httpx
from google import genai
from google.genai import errors as genai_errors
from google.genai import types

from docforge.core.exceptions import (
    ConfigurationError,
    ProviderRejectedError,
    ProviderTimeoutError,
    ProviderUnavailableError,
)
from docforge.core.llm_client import classify_status
from docforge.utils.logging import get_logger

LOGGER = get_logger(__name__)


class GeminiClient:
    """Wrapper for Google Gemini API client."""

    def __init__(
        self,
        api_key: str,
        model: str = "gemini-2.0-flash",
        temperature: float = 0.2,
        name: str = "gemini",
        client: Optional[genai.Client] = None,
    ):
        """Initialize Gemini client.

        Args:
            api_key: Gemini API key
            model: Model name to use
            temperature: Sampling temperature
            name: Provider name this client is registered under
            client: Pre-built SDK client (tests)
        """
        self.name = name
        self.model = model
        self.temperature = temperature

        try:
            self.client = client or genai.Client(api_key=api_key)
            LOGGER.info(f"Initialized Gemini client with model {self.model}")
        except Exception as e:
            LOGGER.error(f"Failed to initialize Gemini client: {e}")
            raise ConfigurationError(f"Failed to initialize Gemini client: {e}", original_error=e)

    async def invoke(self, system_prompt: str, user_prompt: str) -> str:
        """Generate content for a two-part prompt.

        One SDK call, no retries.

        Raises:
            ProviderFailure: Any SDK, transport or refusal failure
        """
        config = types.GenerateContentConfig(temperature=self.temperature)
        if system_prompt:
            config.system_instruction = system_prompt

        try:
            response = await self.client.aio.models.generate_content(
                model=self.model,
                contents=user_prompt,
                config=config,
            )
        except genai_errors.APIError as e:
            LOGGER.warning(f"Gemini API error {e.code}: {e}")
            raise classify_status(self.name, e.code or 0, str(e)) from e
        except httpx.TimeoutException as e:
            raise ProviderTimeoutError("Gemini request timed out", provider=self.name, original_error=e) from e
        except httpx.TransportError as e:
            raise ProviderUnavailableError(f"Gemini unreachable: {e}", provider=self.name, original_error=e) from e

        feedback = getattr(response, "prompt_feedback", None)
        if feedback is not None and getattr(feedback, "block_reason", None):
            raise ProviderRejectedError(
                f"Gemini blocked the prompt: {feedback.block_reason}", provider=self.name
            )

        if not response.text:
            LOGGER.warning("Empty response from Gemini")
            raise ProviderUnavailableError("Gemini returned an empty reply", provider=self.name)

        return response.text
