"""Minimal in-place rewrite of an ``<img>`` tag's ``alt`` attribute.

The rewrite touches only the tag itself: an existing ``alt`` attribute
is replaced in place, otherwise ``alt="..."`` is inserted before the
closing ``>``.  Output is always double-quoted and the new value is
inserted verbatim -- quotes or angle brackets in it are NOT escaped.

Because the document may change while the AI request is in flight, the
tag is re-located in the *current* text by its exact content before any
range is produced.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from image_descriptor.attributes import ALT_ATTR_RE
from image_descriptor.errors import TagNotFoundError

_log = logging.getLogger("rewriter")


@dataclass(frozen=True)
class RewriteResult:
    """Replacement for ``text[start:end]`` in the current document."""

    new_tag_text: str
    start: int
    end: int


def build_alt_tag(tag_text: str, alt_text: str) -> str:
    """Return *tag_text* with its ``alt`` attribute set to *alt_text*.

    >>> build_alt_tag('<img src="a.png">', "A cat")
    '<img src="a.png" alt="A cat">'
    >>> build_alt_tag("<img alt='old' src=a.png>", "new")
    '<img alt="new" src=a.png>'
    """
    new_attr = f'alt="{alt_text}"'
    if ALT_ATTR_RE.search(tag_text):
        # Callable replacement: backslashes in alt_text stay literal.
        return ALT_ATTR_RE.sub(lambda _m: new_attr, tag_text, count=1)
    # Tags from the locator always end with ">".
    return f"{tag_text[:-1]} {new_attr}>"


def rewrite_alt(
    current_text: str,
    original_tag_text: str,
    alt_text: str,
    start_hint: int | None = None,
) -> RewriteResult:
    """Compute the edit that sets ``alt`` on a previously located tag.

    Args:
        current_text: Document text as it is *now*.
        original_tag_text: Verbatim tag text captured at location time.
        alt_text: New ``alt`` value.
        start_hint: Start offset captured at location time.  When the
            tag is still at that offset, that occurrence is used;
            otherwise the first occurrence in *current_text* is.

    Raises:
        TagNotFoundError: The tag text no longer occurs in *current_text*.
    """
    if (
        start_hint is not None
        and current_text[start_hint:start_hint + len(original_tag_text)]
        == original_tag_text
    ):
        start = start_hint
    else:
        start = current_text.find(original_tag_text)

    if start == -1:
        raise TagNotFoundError("Could not locate img element in document")

    if start_hint is not None and start != start_hint:
        _log.debug("img tag moved: %d -> %d", start_hint, start)

    return RewriteResult(
        new_tag_text=build_alt_tag(original_tag_text, alt_text),
        start=start,
        end=start + len(original_tag_text),
    )


def apply_rewrite(text: str, result: RewriteResult) -> str:
    """Splice *result* into *text*, leaving every other character as-is."""
    return text[:result.start] + result.new_tag_text + text[result.end:]
