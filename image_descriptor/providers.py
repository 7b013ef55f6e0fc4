"""AI provider registry and per-invocation configuration.

Both providers expose an OpenAI-compatible chat-completions endpoint,
so they differ only in URL and model name.
"""

from __future__ import annotations

from dataclasses import dataclass

from image_descriptor.errors import ProviderConfigError


@dataclass(frozen=True)
class ProviderDef:
    """Static description of a supported provider."""

    name: str
    display_name: str
    endpoint: str
    model: str


OPENAI = ProviderDef(
    name="openai",
    display_name="OpenAI",
    endpoint="https://api.openai.com/v1/chat/completions",
    model="gpt-4o-mini",
)

MISTRAL = ProviderDef(
    name="mistral",
    display_name="Mistral",
    endpoint="https://api.mistral.ai/v1/chat/completions",
    model="mistral-small-latest",
)

PROVIDERS: dict[str, ProviderDef] = {
    "openai": OPENAI,
    "mistral": MISTRAL,
}

DEFAULT_PROVIDER = "openai"


@dataclass(frozen=True)
class ProviderConfig:
    """Everything the AI request boundary needs, passed explicitly."""

    provider: str
    api_key: str
    endpoint: str
    model: str

    def __repr__(self) -> str:
        # Keep the key out of logs and tracebacks.
        return (
            f"ProviderConfig(provider={self.provider!r}, "
            f"endpoint={self.endpoint!r}, model={self.model!r})"
        )


def resolve_provider_config(
    provider: str | None,
    api_key: str | None,
) -> ProviderConfig:
    """Build a :class:`ProviderConfig` for *provider*.

    Raises:
        ProviderConfigError: *provider* is unset or unknown, or *api_key*
            is unset.
    """
    if not provider:
        raise ProviderConfigError(
            "Provider not configured. Choose one of: "
            + ", ".join(PROVIDERS)
        )
    pdef = PROVIDERS.get(provider)
    if pdef is None:
        raise ProviderConfigError(
            f"Unknown provider {provider!r}. Choose one of: "
            + ", ".join(PROVIDERS)
        )
    if not api_key:
        raise ProviderConfigError(
            f"API key not configured for {pdef.display_name}"
        )
    return ProviderConfig(
        provider=pdef.name,
        api_key=api_key,
        endpoint=pdef.endpoint,
        model=pdef.model,
    )
