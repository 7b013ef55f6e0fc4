"""Unit tests for provider_api (request bodies, reply and error handling).

The HTTP boundary is replaced with ``httpx.MockTransport``; no network.
"""

import json

import httpx
import pytest

from image_descriptor.errors import ProviderRequestError
from image_descriptor.prompt import (
    DESCRIBE_SYSTEM_PROMPT,
    DESCRIBE_USER_PROMPT,
    TRANSLATE_SYSTEM_PROMPT,
)
from image_descriptor.provider_api import (
    MAX_REPLY_TOKENS,
    ProviderApi,
    _error_message,
)
from image_descriptor.providers import resolve_provider_config
from image_descriptor.resolver import DataUriPayload, UrlPayload


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _reply(content, usage=None) -> dict:
    body = {"choices": [{"message": {"role": "assistant", "content": content}}]}
    if usage is not None:
        body["usage"] = usage
    return body


def _make_api(handler, provider: str = "openai") -> tuple[ProviderApi, list[httpx.Request]]:
    """Build a ProviderApi whose transport records requests and calls *handler*."""
    seen: list[httpx.Request] = []

    def _handle(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return handler(request)

    client = httpx.Client(transport=httpx.MockTransport(_handle))
    config = resolve_provider_config(provider, "test-key")
    return ProviderApi(config, client), seen


# ---------------------------------------------------------------------------
# Successful requests
# ---------------------------------------------------------------------------


class TestDescribeImage:
    """Tests for ProviderApi.describe_image()."""

    def test_returns_stripped_reply(self):
        api, _ = _make_api(lambda r: httpx.Response(200, json=_reply("  A red bicycle.\n")))
        assert api.describe_image(UrlPayload("https://example.com/a.png")) == "A red bicycle."

    def test_request_shape(self):
        api, seen = _make_api(lambda r: httpx.Response(200, json=_reply("ok")))
        payload = DataUriPayload("image/png", "AAAA")
        api.describe_image(payload)

        request = seen[0]
        assert request.method == "POST"
        assert str(request.url) == "https://api.openai.com/v1/chat/completions"
        assert request.headers["Authorization"] == "Bearer test-key"

        body = json.loads(request.content)
        assert body["model"] == "gpt-4o-mini"
        assert body["max_tokens"] == MAX_REPLY_TOKENS
        system, user = body["messages"]
        assert system == {"role": "system", "content": DESCRIBE_SYSTEM_PROMPT}
        assert user["role"] == "user"
        assert user["content"] == [
            {"type": "text", "text": DESCRIBE_USER_PROMPT},
            {"type": "image_url", "image_url": {"url": "data:image/png;base64,AAAA"}},
        ]

    def test_mistral_endpoint_and_model(self):
        api, seen = _make_api(lambda r: httpx.Response(200, json=_reply("ok")), "mistral")
        api.describe_image(UrlPayload("https://example.com/a.png"))
        assert seen[0].url.host == "api.mistral.ai"
        assert json.loads(seen[0].content)["model"] == "mistral-small-latest"


class TestTranslateText:
    """Tests for ProviderApi.translate_text()."""

    def test_text_only_request(self):
        api, seen = _make_api(lambda r: httpx.Response(200, json=_reply("A cat")))
        assert api.translate_text("Un chat") == "A cat"

        system, user = json.loads(seen[0].content)["messages"]
        assert system["content"] == TRANSLATE_SYSTEM_PROMPT
        assert user["content"] == "Translate the following text into English: Un chat"


class TestSendChat:
    """Tests for ProviderApi.send_chat() usage parsing."""

    def test_usage_counts(self):
        usage = {"prompt_tokens": 120, "completion_tokens": 12}
        api, _ = _make_api(lambda r: httpx.Response(200, json=_reply("x", usage)))
        resp = api.send_chat("sys", "user")
        assert (resp.text, resp.input_tokens, resp.output_tokens) == ("x", 120, 12)

    def test_missing_usage_defaults_to_zero(self):
        api, _ = _make_api(lambda r: httpx.Response(200, json=_reply("x")))
        resp = api.send_chat("sys", "user")
        assert resp.input_tokens == 0
        assert resp.output_tokens == 0

    @pytest.mark.parametrize("usage", [[], "n/a", 42])
    def test_non_object_usage_defaults_to_zero(self, usage):
        api, _ = _make_api(lambda r: httpx.Response(200, json=_reply("x", usage)))
        resp = api.send_chat("sys", "user")
        assert (resp.text, resp.input_tokens, resp.output_tokens) == ("x", 0, 0)

    def test_non_integer_token_counts_default_to_zero(self):
        usage = {"prompt_tokens": "120", "completion_tokens": None}
        api, _ = _make_api(lambda r: httpx.Response(200, json=_reply("x", usage)))
        resp = api.send_chat("sys", "user")
        assert (resp.input_tokens, resp.output_tokens) == (0, 0)


class TestClientOwnership:
    """The HTTP client is always supplied by the caller."""

    def test_client_is_required(self):
        config = resolve_provider_config("openai", "test-key")
        with pytest.raises(TypeError):
            ProviderApi(config)

    def test_uses_given_client_and_leaves_it_open(self):
        api, seen = _make_api(lambda r: httpx.Response(200, json=_reply("ok")))
        api.translate_text("x")
        assert len(seen) == 1
        assert not api._client.is_closed


# ---------------------------------------------------------------------------
# Failures
# ---------------------------------------------------------------------------


class TestErrors:
    """Tests for ProviderRequestError mapping."""

    def test_http_error_with_openai_body(self):
        body = {"error": {"message": "Incorrect API key provided", "type": "invalid_request_error"}}
        api, _ = _make_api(lambda r: httpx.Response(401, json=body))
        with pytest.raises(ProviderRequestError, match="Incorrect API key") as exc_info:
            api.translate_text("x")
        assert exc_info.value.status_code == 401

    def test_http_error_with_mistral_body(self):
        api, _ = _make_api(lambda r: httpx.Response(429, json={"message": "Requests rate limit exceeded"}))
        with pytest.raises(ProviderRequestError, match="rate limit"):
            api.translate_text("x")

    def test_http_error_unparseable_body_falls_back(self):
        api, _ = _make_api(lambda r: httpx.Response(503, text="<html>down</html>"))
        with pytest.raises(ProviderRequestError, match="Service Unavailable") as exc_info:
            api.translate_text("x")
        assert exc_info.value.status_code == 503

    def test_transport_error(self):
        def _fail(request):
            raise httpx.ConnectError("connection refused", request=request)

        api, _ = _make_api(_fail)
        with pytest.raises(ProviderRequestError, match="ConnectError") as exc_info:
            api.translate_text("x")
        assert exc_info.value.status_code is None
        assert isinstance(exc_info.value.__cause__, httpx.ConnectError)

    def test_malformed_reply(self):
        api, _ = _make_api(lambda r: httpx.Response(200, json={"choices": []}))
        with pytest.raises(ProviderRequestError, match="Malformed reply"):
            api.translate_text("x")

    @pytest.mark.parametrize("content", ["", "   ", None])
    def test_empty_reply(self, content):
        api, _ = _make_api(lambda r: httpx.Response(200, json=_reply(content)))
        with pytest.raises(ProviderRequestError, match="Empty reply"):
            api.translate_text("x")

    def test_single_attempt_only(self):
        api, seen = _make_api(lambda r: httpx.Response(500, json={}))
        with pytest.raises(ProviderRequestError):
            api.translate_text("x")
        assert len(seen) == 1


class TestErrorMessage:
    """Tests for _error_message() best-effort parsing."""

    def test_string_error_field(self):
        resp = httpx.Response(400, json={"error": "bad model"})
        assert _error_message(resp) == "bad model"

    def test_list_body_falls_back(self):
        resp = httpx.Response(400, json=[1, 2])
        assert _error_message(resp) == "Bad Request"
