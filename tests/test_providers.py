"""Tests for LLM provider adapters and provider configuration."""

from __future__ import annotations

import json
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock, patch

import anthropic
import httpx
import pytest
import respx

import deal_hunter.providers.claude as claude_module
import deal_hunter.providers.registry as registry_module
from deal_hunter.config import ProviderName
from deal_hunter.errors import MalformedResponse, ProviderCallFailure
from deal_hunter.pipeline.settings_store import AppSettings
from deal_hunter.providers import (
    ClaudeAdapter,
    GeminiAdapter,
    OpenAIAdapter,
    PerplexityAdapter,
    build_deal_prompt,
)
from deal_hunter.providers.registry import build_provider_config, resolve_api_key

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

OPENAI_URL = "https://api.openai.com/v1/chat/completions"
PERPLEXITY_URL = "https://api.perplexity.ai/chat/completions"
GEMINI_URL = (
    "https://generativelanguage.googleapis.com/v1beta/models/gemini-2.0-flash:generateContent"
)
ANTHROPIC_URL = "https://api.anthropic.com/v1/messages"

DEALS_TEXT = '[{"title": "Dyson V15", "salePrice": "499.00"}]'


def _chat_completion(content: str) -> dict:
    return {
        "id": "chatcmpl-1",
        "object": "chat.completion",
        "choices": [{"index": 0, "message": {"role": "assistant", "content": content}}],
    }


def _claude_message(*blocks: SimpleNamespace) -> SimpleNamespace:
    return SimpleNamespace(id="msg_01", type="message", role="assistant", content=list(blocks))


def _text(text: str) -> SimpleNamespace:
    return SimpleNamespace(type="text", text=text)


def _mock_anthropic_client(create: AsyncMock) -> MagicMock:
    """AsyncAnthropic stand-in usable as `async with AsyncAnthropic(...) as client`."""
    client = MagicMock()
    client.messages.create = create
    client_cls = MagicMock()
    client_cls.return_value.__aenter__.return_value = client
    client_cls.return_value.__aexit__.return_value = None
    return client_cls


# ---------------------------------------------------------------------------
# Prompt
# ---------------------------------------------------------------------------


class TestPrompt:
    def test_prompt_includes_query_category_and_fields(self) -> None:
        prompt = build_deal_prompt("robot vacuum", "Home & Kitchen")

        assert "robot vacuum" in prompt
        assert "Home & Kitchen" in prompt
        for field in ("originalPrice", "salePrice", "savings", "discountPercent", "shippingCost"):
            assert field in prompt

    def test_all_category_lists_every_category(self) -> None:
        prompt = build_deal_prompt("", "all")

        assert '"all"' not in prompt
        assert "Electronics, Home & Kitchen, Fashion" in prompt
        assert "across popular products" in prompt


# ---------------------------------------------------------------------------
# OpenAI-compatible adapters
# ---------------------------------------------------------------------------


class TestOpenAIAdapter:
    @pytest.mark.asyncio
    async def test_returns_message_content(self) -> None:
        with respx.mock:
            route = respx.post(OPENAI_URL).mock(
                return_value=httpx.Response(200, json=_chat_completion(DEALS_TEXT))
            )
            text = await OpenAIAdapter("sk-test").call("find deals")

        assert text == DEALS_TEXT
        request = route.calls.last.request
        assert request.headers["Authorization"] == "Bearer sk-test"
        body = json.loads(request.content)
        assert body["model"] == "gpt-4o-mini"
        assert body["messages"][-1] == {"role": "user", "content": "find deals"}

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status", [401, 429, 500])
    async def test_http_error_raises_call_failure(self, status: int) -> None:
        with respx.mock:
            respx.post(OPENAI_URL).mock(return_value=httpx.Response(status))
            with pytest.raises(ProviderCallFailure, match=str(status)):
                await OpenAIAdapter("sk-test").call("find deals")

    @pytest.mark.asyncio
    async def test_network_error_raises_call_failure(self) -> None:
        with respx.mock:
            respx.post(OPENAI_URL).mock(side_effect=httpx.ConnectError("connection refused"))
            with pytest.raises(ProviderCallFailure):
                await OpenAIAdapter("sk-test").call("find deals")

    @pytest.mark.asyncio
    async def test_envelope_without_choices_is_malformed(self) -> None:
        with respx.mock:
            respx.post(OPENAI_URL).mock(return_value=httpx.Response(200, json={"choices": []}))
            with pytest.raises(MalformedResponse):
                await OpenAIAdapter("sk-test").call("find deals")

    @pytest.mark.asyncio
    async def test_non_json_body_is_malformed(self) -> None:
        with respx.mock:
            respx.post(OPENAI_URL).mock(return_value=httpx.Response(200, text="<html>oops</html>"))
            with pytest.raises(MalformedResponse):
                await OpenAIAdapter("sk-test").call("find deals")

    @pytest.mark.asyncio
    async def test_custom_base_url(self) -> None:
        with respx.mock:
            route = respx.post("http://localhost:8080/v1/chat/completions").mock(
                return_value=httpx.Response(200, json=_chat_completion("[]"))
            )
            adapter = OpenAIAdapter("sk-test", base_url="http://localhost:8080/v1/")
            assert await adapter.call("x") == "[]"

        assert route.called


class TestPerplexityAdapter:
    @pytest.mark.asyncio
    async def test_uses_perplexity_endpoint_and_model(self) -> None:
        with respx.mock:
            route = respx.post(PERPLEXITY_URL).mock(
                return_value=httpx.Response(200, json=_chat_completion(DEALS_TEXT))
            )
            text = await PerplexityAdapter("pplx-test").call("find deals")

        assert text == DEALS_TEXT
        assert json.loads(route.calls.last.request.content)["model"] == "sonar"
        assert route.calls.last.request.headers["Authorization"] == "Bearer pplx-test"


# ---------------------------------------------------------------------------
# Gemini
# ---------------------------------------------------------------------------


class TestGeminiAdapter:
    @pytest.mark.asyncio
    async def test_joins_candidate_parts(self) -> None:
        response = {
            "candidates": [
                {"content": {"role": "model", "parts": [{"text": "[{\"title\": "}, {"text": "\"Kindle\"}]"}]}}
            ]
        }
        with respx.mock:
            route = respx.post(GEMINI_URL).mock(return_value=httpx.Response(200, json=response))
            text = await GeminiAdapter("AIza-test").call("find deals")

        assert text == '[{"title": "Kindle"}]'
        request = route.calls.last.request
        assert request.headers["x-goog-api-key"] == "AIza-test"
        body = json.loads(request.content)
        assert body["contents"][0]["parts"][0]["text"] == "find deals"
        assert "systemInstruction" in body

    @pytest.mark.asyncio
    async def test_missing_candidates_is_malformed(self) -> None:
        with respx.mock:
            respx.post(GEMINI_URL).mock(return_value=httpx.Response(200, json={"candidates": []}))
            with pytest.raises(MalformedResponse):
                await GeminiAdapter("AIza-test").call("find deals")

    @pytest.mark.asyncio
    async def test_server_error_raises_call_failure(self) -> None:
        with respx.mock:
            respx.post(GEMINI_URL).mock(return_value=httpx.Response(503))
            with pytest.raises(ProviderCallFailure):
                await GeminiAdapter("AIza-test").call("find deals")


# ---------------------------------------------------------------------------
# Claude
# ---------------------------------------------------------------------------


class TestClaudeAdapter:
    @pytest.mark.asyncio
    async def test_joins_text_blocks_and_sends_web_search_tool(self) -> None:
        """Tool-use blocks interleaved with text are skipped."""
        create = AsyncMock(return_value=_claude_message(
            _text('[{"title": '),
            SimpleNamespace(type="server_tool_use", name="web_search"),
            _text('"Echo"}]'),
        ))
        client_cls = _mock_anthropic_client(create)

        with patch.object(claude_module.anthropic, "AsyncAnthropic", client_cls):
            text = await ClaudeAdapter("sk-ant-test").call("find deals")

        assert text == '[{"title": "Echo"}]'
        client_kwargs = client_cls.call_args.kwargs
        assert client_kwargs["api_key"] == "sk-ant-test"
        assert client_kwargs["max_retries"] == 0
        request = create.call_args.kwargs
        assert request["model"] == claude_module.settings.ANTHROPIC_MODEL
        assert request["tools"][0]["type"] == "web_search_20250305"
        assert request["tools"][0]["name"] == "web_search"
        assert request["messages"] == [{"role": "user", "content": "find deals"}]

    @pytest.mark.asyncio
    async def test_web_search_can_be_disabled(self) -> None:
        create = AsyncMock(return_value=_claude_message(_text("[]")))

        with patch.object(claude_module.anthropic, "AsyncAnthropic", _mock_anthropic_client(create)):
            text = await ClaudeAdapter("sk-ant-test", web_search=False).call("find deals")

        assert text == "[]"
        assert "tools" not in create.call_args.kwargs

    @pytest.mark.asyncio
    async def test_auth_error_raises_call_failure(self) -> None:
        error = anthropic.AuthenticationError(
            "invalid x-api-key",
            response=MagicMock(status_code=401, headers={}),
            body=None,
        )
        create = AsyncMock(side_effect=error)

        with patch.object(claude_module.anthropic, "AsyncAnthropic", _mock_anthropic_client(create)):
            with pytest.raises(ProviderCallFailure):
                await ClaudeAdapter("bad-key").call("find deals")

    @pytest.mark.asyncio
    async def test_connection_error_raises_call_failure(self) -> None:
        error = anthropic.APIConnectionError(request=httpx.Request("POST", ANTHROPIC_URL))
        create = AsyncMock(side_effect=error)

        with patch.object(claude_module.anthropic, "AsyncAnthropic", _mock_anthropic_client(create)):
            with pytest.raises(ProviderCallFailure):
                await ClaudeAdapter("sk-ant-test").call("find deals")


# ---------------------------------------------------------------------------
# Provider configuration
# ---------------------------------------------------------------------------


class TestProviderConfig:
    def test_adapters_built_only_for_providers_with_keys(self) -> None:
        config = build_provider_config(AppSettings(
            active_provider=ProviderName.OPENAI,
            api_keys={ProviderName.OPENAI: "sk-1", ProviderName.ANTHROPIC: "sk-ant-2"},
        ))

        assert set(config.adapters) == {ProviderName.OPENAI, ProviderName.ANTHROPIC}
        assert isinstance(config.active_adapter(), OpenAIAdapter)
        assert isinstance(config.adapters[ProviderName.ANTHROPIC], ClaudeAdapter)
        assert config.has_key(ProviderName.OPENAI)
        assert not config.has_key(ProviderName.GEMINI)

    def test_mock_provider_has_no_active_adapter(self) -> None:
        config = build_provider_config(AppSettings(api_keys={ProviderName.OPENAI: "sk-1"}))

        assert config.active_provider == ProviderName.MOCK
        assert config.active_adapter() is None
        assert not config.has_key(ProviderName.MOCK)

    def test_selected_provider_without_key_has_no_adapter(self) -> None:
        config = build_provider_config(AppSettings(active_provider=ProviderName.GEMINI))
        assert config.active_adapter() is None

    def test_environment_key_used_when_none_stored(self) -> None:
        with patch.object(registry_module.settings, "GEMINI_API_KEY", "AIza-env"):
            config = build_provider_config(AppSettings(active_provider=ProviderName.GEMINI))
            assert resolve_api_key(AppSettings(), ProviderName.GEMINI) == "AIza-env"

        assert isinstance(config.active_adapter(), GeminiAdapter)

    def test_stored_key_wins_over_environment(self) -> None:
        app_settings = AppSettings(api_keys={ProviderName.OPENAI: "sk-stored"})
        with patch.object(registry_module.settings, "OPENAI_API_KEY", "sk-env"):
            assert resolve_api_key(app_settings, ProviderName.OPENAI) == "sk-stored"

    def test_custom_factories(self) -> None:
        built: list[str] = []

        def factory(api_key: str) -> OpenAIAdapter:
            built.append(api_key)
            return OpenAIAdapter(api_key, model="gpt-test")

        config = build_provider_config(
            AppSettings(active_provider=ProviderName.OPENAI, api_keys={ProviderName.OPENAI: "k"}),
            factories={ProviderName.OPENAI: factory},
        )

        assert built == ["k"]
        assert config.active_adapter().model == "gpt-test"
