"""AI-generated alternative text for HTML ``<img>`` elements.

Locates the ``<img>`` tag around a cursor position by lexical scanning,
resolves its ``src`` into a URL or base64 data URI, asks an AI provider
(OpenAI or Mistral) for a description or an English translation of the
existing ``alt``, and writes the result back into the tag's ``alt``
attribute without touching anything else in the document.

Key features:
- Regex-based tag location (no DOM), inclusive of the closing ``>``
- ``alt`` insert-or-replace that preserves every other byte
- Re-validation of the tag against the current text before editing
- Local images embedded as data URIs, remote URLs passed through

Note: Imports are deferred to avoid requiring ``httpx`` at import time.
Use explicit imports from submodules (e.g.
``from image_descriptor.locator import locate_img_tag``) or access via
this package.
"""

from importlib.metadata import version, PackageNotFoundError

try:
    __version__ = version("image-descriptor")
except PackageNotFoundError:
    __version__ = "0.0.0"  # fallback for uninstalled dev usage


def __getattr__(name: str):
    """Lazy imports to avoid requiring httpx at package import time."""
    _lazy_imports = {
        # image_descriptor.locator
        "TagSpan": "image_descriptor.locator",
        "find_img_tags": "image_descriptor.locator",
        "locate_img_tag": "image_descriptor.locator",
        "offset_at": "image_descriptor.locator",
        # image_descriptor.attributes
        "extract_attr": "image_descriptor.attributes",
        "extract_alt": "image_descriptor.attributes",
        "extract_src": "image_descriptor.attributes",
        # image_descriptor.resolver
        "DataUriPayload": "image_descriptor.resolver",
        "UrlPayload": "image_descriptor.resolver",
        "guess_mime_type": "image_descriptor.resolver",
        "resolve_source": "image_descriptor.resolver",
        # image_descriptor.rewriter
        "RewriteResult": "image_descriptor.rewriter",
        "apply_rewrite": "image_descriptor.rewriter",
        "build_alt_tag": "image_descriptor.rewriter",
        "rewrite_alt": "image_descriptor.rewriter",
        # image_descriptor.providers
        "PROVIDERS": "image_descriptor.providers",
        "ProviderConfig": "image_descriptor.providers",
        "resolve_provider_config": "image_descriptor.providers",
        # image_descriptor.provider_api
        "ProviderApi": "image_descriptor.provider_api",
        # image_descriptor.pipeline
        "AltTextEdit": "image_descriptor.pipeline",
        "suggest_alt_text": "image_descriptor.pipeline",
        "translate_alt_text": "image_descriptor.pipeline",
    }

    if name in _lazy_imports:
        import importlib
        module = importlib.import_module(_lazy_imports[name])
        return getattr(module, name)

    raise AttributeError(f"module 'image_descriptor' has no attribute {name!r}")


__all__ = [
    "AltTextEdit",
    "apply_rewrite",
    "build_alt_tag",
    "DataUriPayload",
    "extract_alt",
    "extract_attr",
    "extract_src",
    "find_img_tags",
    "guess_mime_type",
    "locate_img_tag",
    "offset_at",
    "PROVIDERS",
    "ProviderApi",
    "ProviderConfig",
    "resolve_provider_config",
    "resolve_source",
    "rewrite_alt",
    "RewriteResult",
    "suggest_alt_text",
    "TagSpan",
    "translate_alt_text",
    "UrlPayload",
]
