"""Chat-completions client for the describe/translate requests.

Wraps an :class:`httpx.Client` and posts OpenAI-compatible request
bodies to the configured provider.  Transport concerns (authentication,
status handling, error-body parsing) live here so that the pipeline only
deals with prompts and replies.

There is no retry and no cancellation point: a failed request surfaces
immediately as :class:`~image_descriptor.errors.ProviderRequestError`.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass

import httpx

from image_descriptor.errors import ProviderRequestError
from image_descriptor.prompt import (
    DESCRIBE_SYSTEM_PROMPT,
    DESCRIBE_USER_PROMPT,
    TRANSLATE_SYSTEM_PROMPT,
    build_translate_prompt,
)
from image_descriptor.providers import ProviderConfig
from image_descriptor.resolver import ImagePayload

_log = logging.getLogger("provider_api")

MAX_REPLY_TOKENS = 150
"""``max_tokens`` sent with every request."""

DEFAULT_TIMEOUT_S = 60.0
"""Default HTTP timeout for the client passed to :class:`ProviderApi`."""


@dataclass
class ChatResponse:
    """Reply text and token usage from a single chat-completions call."""

    text: str
    input_tokens: int = 0
    output_tokens: int = 0


def _error_message(response: httpx.Response) -> str:
    """Best-effort human message from a failed response.

    Looks for ``{"error": {"message": ...}}`` (OpenAI) or
    ``{"message": ...}`` (Mistral); falls back to the reason phrase.
    """
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        err = body.get("error")
        if isinstance(err, dict) and err.get("message"):
            return str(err["message"])
        if isinstance(err, str) and err:
            return err
        if body.get("message"):
            return str(body["message"])
    return response.reason_phrase or f"HTTP {response.status_code}"


def _token_count(usage: dict, key: str) -> int:
    """Integer token count from a ``usage`` block, 0 when absent or invalid."""
    value = usage.get(key)
    if isinstance(value, bool) or not isinstance(value, int):
        return 0
    return value


class ProviderApi:
    """Chat-completions client bound to one :class:`ProviderConfig`.

    Usage::

        config = resolve_provider_config("openai", api_key)
        with httpx.Client(timeout=DEFAULT_TIMEOUT_S) as http:
            api = ProviderApi(config, http)
            alt = api.describe_image(payload)
    """

    def __init__(
        self,
        config: ProviderConfig,
        client: httpx.Client,
    ) -> None:
        """Initialize the client.

        Args:
            config: Provider endpoint, model and API key.
            client: HTTP client to send requests with.  The caller owns
                it and is responsible for closing it.
        """
        self._config = config
        self._client = client

    @property
    def config(self) -> ProviderConfig:
        """The provider configuration used by this client."""
        return self._config

    def send_chat(self, system: str, user_content: str | list[dict]) -> ChatResponse:
        """Send one system + user exchange and return the reply.

        Raises:
            ProviderRequestError: Transport failure, non-2xx status, or a
                reply without message content.
        """
        body = {
            "model": self._config.model,
            "messages": [
                {"role": "system", "content": system},
                {"role": "user", "content": user_content},
            ],
            "max_tokens": MAX_REPLY_TOKENS,
        }
        headers = {
            "Authorization": f"Bearer {self._config.api_key}",
            "Content-Type": "application/json",
        }

        start = time.time()
        try:
            response = self._client.post(
                self._config.endpoint, json=body, headers=headers,
            )
        except httpx.HTTPError as exc:
            raise ProviderRequestError(
                f"Request to {self._config.provider} failed: "
                f"{type(exc).__name__}: {exc}"
            ) from exc

        if not response.is_success:
            raise ProviderRequestError(
                f"{self._config.provider} returned {response.status_code}: "
                f"{_error_message(response)}",
                status_code=response.status_code,
            )

        try:
            data = response.json()
            text = data["choices"][0]["message"]["content"]
        except (ValueError, KeyError, IndexError, TypeError) as exc:
            raise ProviderRequestError(
                f"Malformed reply from {self._config.provider}: {exc!r}",
                status_code=response.status_code,
            ) from exc
        if not isinstance(text, str) or not text.strip():
            raise ProviderRequestError(
                f"Empty reply from {self._config.provider}",
                status_code=response.status_code,
            )

        usage = data.get("usage")
        if not isinstance(usage, dict):
            usage = {}
        resp = ChatResponse(
            text=text.strip(),
            input_tokens=_token_count(usage, "prompt_tokens"),
            output_tokens=_token_count(usage, "completion_tokens"),
        )
        _log.debug(
            "%s/%s: %.1fs, %d in / %d out tokens",
            self._config.provider, self._config.model,
            time.time() - start, resp.input_tokens, resp.output_tokens,
        )
        return resp

    def describe_image(self, payload: ImagePayload) -> str:
        """Ask the model for alt text describing the image in *payload*."""
        content = [
            {"type": "text", "text": DESCRIBE_USER_PROMPT},
            {"type": "image_url", "image_url": {"url": payload.uri}},
        ]
        return self.send_chat(DESCRIBE_SYSTEM_PROMPT, content).text

    def translate_text(self, alt_text: str) -> str:
        """Ask the model for an English translation of *alt_text*."""
        return self.send_chat(
            TRANSLATE_SYSTEM_PROMPT, build_translate_prompt(alt_text),
        ).text
