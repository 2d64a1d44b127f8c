"""Tests for the LLM gateway."""

import pytest

from docforge.core.config import LLMSettings
from docforge.core.exceptions import (
    ProviderRejectedError,
    ProviderTimeoutError,
    ProviderUnavailableError,
)
from docforge.core.gateway import LLMGateway, LLMProvider, create_gateway_from_settings
from docforge.core.openrouter_client import OpenRouterClient


@pytest.mark.asyncio
async def test_generate_routes_to_named_provider(make_gateway):
    gateway, provider = make_gateway("hello")

    result = await gateway.generate("gemini", "system", "user")

    assert result == "hello"
    assert provider.calls == [("system", "user")]


@pytest.mark.asyncio
async def test_unknown_provider_is_unavailable():
    gateway = LLMGateway()

    with pytest.raises(ProviderUnavailableError) as exc_info:
        await gateway.generate("missing", "system", "user")

    assert exc_info.value.provider == "missing"


@pytest.mark.asyncio
async def test_slow_provider_times_out(make_gateway):
    gateway, _ = make_gateway("late", timeout=0.01, delay=1.0)

    with pytest.raises(ProviderTimeoutError):
        await gateway.generate("gemini", "system", "user")


@pytest.mark.asyncio
async def test_rejection_is_surfaced_without_retry(make_gateway):
    gateway, provider = make_gateway(ProviderRejectedError("refused", provider="fake"))

    with pytest.raises(ProviderRejectedError):
        await gateway.generate("gemini", "system", "user")

    assert len(provider.calls) == 1


@pytest.mark.asyncio
async def test_unexpected_exception_becomes_unavailable(make_gateway):
    gateway, provider = make_gateway(RuntimeError("socket closed"))

    with pytest.raises(ProviderUnavailableError) as exc_info:
        await gateway.generate("openrouter", "system", "user")

    assert isinstance(exc_info.value.original_error, RuntimeError)
    assert len(provider.calls) == 1


@pytest.mark.asyncio
async def test_blank_reply_is_unavailable(make_gateway):
    gateway, _ = make_gateway("   \n")

    with pytest.raises(ProviderUnavailableError):
        await gateway.generate("gemini", "system", "user")


def test_fake_provider_satisfies_protocol(make_gateway):
    _, provider = make_gateway("x")

    assert isinstance(provider, LLMProvider)


def test_gateway_from_settings_registers_only_configured_providers():
    llm_settings = LLMSettings().model_copy(
        update={"gemini_api_key": "", "openrouter_api_key": "or-key", "timeout_seconds": 12.0}
    )

    gateway = create_gateway_from_settings(llm_settings)

    assert gateway.timeout == 12.0
    assert gateway.has_provider("openrouter")
    assert not gateway.has_provider("gemini")
    assert isinstance(gateway.providers["openrouter"], OpenRouterClient)
