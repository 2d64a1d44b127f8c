from typing import Any, Dict, Optional

import httpx
from httpx import HTTPStatusError, TimeoutException, TransportError

from docforge.core.exceptions import (
    ProviderRejectedError,
    ProviderTimeoutError,
    ProviderUnavailableError,
)
from docforge.utils.logging import get_logger

LOGGER = get_logger(__name__)

# Statuses that mean "cannot reach/authenticate", as opposed to "refused".
UNAVAILABLE_STATUS_CODES = {401, 403, 429, 500, 502, 503, 504}


def classify_status(provider: str, status_code: int, body: str) -> Exception:
    """Map a non-2xx status to the matching provider failure."""
    if status_code == 408:
        return ProviderTimeoutError(f"{provider} request timed out (408)", provider=provider)
    if status_code in UNAVAILABLE_STATUS_CODES:
        return ProviderUnavailableError(
            f"{provider} unavailable ({status_code}): {body[:200]}", provider=provider
        )
    return ProviderRejectedError(f"{provider} rejected request ({status_code}): {body[:200]}", provider=provider)


class BaseLLMClient:
    """Base client for HTTP LLM API interactions.

    Performs exactly one request per call and translates transport and
    status failures into provider failures. Retry policy lives with the
    calling stage.
    """

    def __init__(
        self,
        provider: str,
        api_key: str,
        base_url: str,
        timeout: float = 60,
    ):
        """Initialize the LLM client.

        Args:
            provider: Provider name used in error messages and logs
            api_key: API key for authentication
            base_url: Base URL for the API
            timeout: Transport timeout in seconds
        """
        self.provider = provider
        self.api_key = api_key
        self.base_url = base_url
        self.timeout = timeout
        self.logger = LOGGER

    async def call_api(
        self,
        endpoint: str = "",
        payload: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> Dict[str, Any]:
        """POST a JSON payload and return the parsed JSON response.

        Raises:
            ProviderUnavailableError: Network, auth or server-side failure
            ProviderTimeoutError: Transport timeout
            ProviderRejectedError: Any other non-2xx status
        """
        url = f"{self.base_url}{endpoint}" if endpoint else self.base_url

        default_headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }
        if headers:
            default_headers.update(headers)

        self.logger.debug(f"Calling LLM API: {url}", extra={"timeout": self.timeout})

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(url, headers=default_headers, json=payload)
                response.raise_for_status()
                return response.json()
        except HTTPStatusError as e:
            status_code = e.response.status_code
            body = e.response.text or ""
            self.logger.warning(
                f"{self.provider} HTTP error {status_code}",
                extra={"url": url, "status_code": status_code, "error_body": body[:500]},
            )
            raise classify_status(self.provider, status_code, body) from e
        except TimeoutException as e:
            self.logger.warning(f"{self.provider} transport timeout", extra={"url": url})
            raise ProviderTimeoutError(f"{self.provider} timed out", provider=self.provider, original_error=e) from e
        except TransportError as e:
            self.logger.warning(f"{self.provider} transport error: {e}", extra={"url": url})
            raise ProviderUnavailableError(
                f"{self.provider} unreachable: {e}", provider=self.provider, original_error=e
            ) from e
        except ValueError as e:
            # Body was not JSON
            raise ProviderRejectedError(
                f"{self.provider} returned a non-JSON body", provider=self.provider, original_error=e
            ) from e
