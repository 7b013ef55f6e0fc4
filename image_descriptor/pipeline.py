"""Single-invocation flow for the two alt-text commands.

``suggest_alt_text``::

    locate tag -> extract src -> resolve payload -> describe -> rewrite

``translate_alt_text``::

    locate tag -> extract alt -> translate -> rewrite

The AI call is an injected callable, so these functions know nothing
about providers or HTTP.  Between locating the tag and rewriting it the
document may have changed; the rewrite therefore runs against the text
returned by *current_text* (re-read after the AI call) and fails with
:class:`~image_descriptor.errors.TagNotFoundError` if the tag is gone.
No edit is produced on any failure.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from image_descriptor.attributes import extract_alt, extract_src
from image_descriptor.errors import AttributeMissingError
from image_descriptor.locator import TagSpan, locate_img_tag
from image_descriptor.resolver import ImagePayload, resolve_source
from image_descriptor.rewriter import RewriteResult, apply_rewrite, rewrite_alt

_log = logging.getLogger("pipeline")

DescribeFn = Callable[[ImagePayload], str]
"""Image payload -> suggested alt text."""

TranslateFn = Callable[[str], str]
"""Existing alt text -> English translation."""


@dataclass(frozen=True)
class AltTextEdit:
    """A ready-to-apply edit produced by one command invocation."""

    tag: TagSpan
    """The tag as located in the original snapshot."""

    alt_text: str
    """Text returned by the AI backend."""

    rewrite: RewriteResult
    """Replacement range in the *current* text."""

    def apply(self, text: str) -> str:
        """Apply the edit to *text* (the text the rewrite was computed on)."""
        return apply_rewrite(text, self.rewrite)


def _rewrite(
    span: TagSpan,
    alt_text: str,
    snapshot: str,
    current_text: Callable[[], str] | None,
) -> AltTextEdit:
    text = current_text() if current_text is not None else snapshot
    if text != snapshot:
        _log.debug("Document changed during request; re-validating tag")
    result = rewrite_alt(text, span.text, alt_text, start_hint=span.start)
    return AltTextEdit(tag=span, alt_text=alt_text, rewrite=result)


def suggest_alt_text(
    text: str,
    offset: int,
    document_path: str | Path,
    describe: DescribeFn,
    workspace_root: str | Path | None = None,
    current_text: Callable[[], str] | None = None,
) -> AltTextEdit:
    """Generate alt text for the ``<img>`` at *offset*.

    Args:
        text: Document text snapshot at invocation time.
        offset: Cursor offset into *text*.
        document_path: Path of the document (for relative ``src``).
        describe: AI call turning an image payload into alt text.
        workspace_root: Root for ``/``-prefixed ``src`` values.
        current_text: Returns the document text after the AI call.
            Defaults to the snapshot.

    Raises:
        TagNotFoundError: No tag at *offset*, or it vanished meanwhile.
        AttributeMissingError: The tag has no (or an empty) ``src``.
        UnresolvedSourceError, FileReadError: See
            :func:`~image_descriptor.resolver.resolve_source`.
        ProviderRequestError: The AI call failed.
    """
    span = locate_img_tag(text, offset)

    src = extract_src(span.text)
    if not src:
        raise AttributeMissingError("src")

    payload = resolve_source(src, document_path, workspace_root)
    _log.info("Generating alt text for %s", src)
    alt_text = describe(payload)
    return _rewrite(span, alt_text, text, current_text)


def translate_alt_text(
    text: str,
    offset: int,
    translate: TranslateFn,
    current_text: Callable[[], str] | None = None,
) -> AltTextEdit:
    """Translate the existing ``alt`` of the ``<img>`` at *offset*.

    An empty ``alt=""`` (decorative image) has nothing to translate and
    is refused like a missing one.

    Raises:
        TagNotFoundError: No tag at *offset*, or it vanished meanwhile.
        AttributeMissingError: The tag has no ``alt`` or an empty one.
        ProviderRequestError: The AI call failed.
    """
    span = locate_img_tag(text, offset)

    alt = extract_alt(span.text)
    if alt is None:
        raise AttributeMissingError("alt", "No alt text found for the img element")
    if not alt:
        raise AttributeMissingError(
            "alt", "alt text is empty (decorative image); nothing to translate",
        )

    _log.info("Translating alt text: %s", alt)
    translated = translate(alt)
    return _rewrite(span, translated, text, current_text)
