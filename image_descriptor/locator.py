"""Lexical ``<img>`` tag locator.

Finds the ``<img ...>`` substring that encloses a document offset by
scanning raw text with a regular expression -- no HTML parse tree is
built.

Known limitation: a ``>`` inside a quoted attribute value (``alt=">"``)
ends the match early.  The truncated span is still returned as-is, since
the rewriter later re-locates the tag by its exact text.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from image_descriptor.errors import TagNotFoundError

_log = logging.getLogger("locator")

IMG_TAG_RE = re.compile(r"<img[^>]*>", re.IGNORECASE)
"""Regex matching a single ``<img ...>`` tag (no capture groups)."""


@dataclass(frozen=True)
class TagSpan:
    """A located ``<img>`` tag and its position in the document text.

    ``end`` is exclusive: ``text[start:end] == self.text``.
    """

    text: str
    start: int
    end: int

    def contains(self, offset: int) -> bool:
        """Whether *offset* is inside or touching the tag.

        Inclusive on both ends, so a cursor placed right after the
        closing ``>`` still counts.
        """
        return self.start <= offset <= self.end


def find_img_tags(text: str) -> list[TagSpan]:
    """Return every ``<img ...>`` span in *text*, in document order."""
    return [
        TagSpan(m.group(0), m.start(), m.end())
        for m in IMG_TAG_RE.finditer(text)
    ]


def locate_img_tag(text: str, offset: int) -> TagSpan:
    """Return the first ``<img>`` span containing *offset*.

    Args:
        text: Document text snapshot.
        offset: Zero-based character offset (the cursor).

    Raises:
        TagNotFoundError: No tag spans the offset.
    """
    for m in IMG_TAG_RE.finditer(text):
        span = TagSpan(m.group(0), m.start(), m.end())
        if span.contains(offset):
            _log.debug("img tag at offset %d: [%d, %d)", offset, span.start, span.end)
            return span
    raise TagNotFoundError("No img element found at current position")


def offset_at(text: str, line: int, column: int) -> int:
    """Convert a zero-based line/column position into a character offset.

    Lines past the end clamp to the end of *text*; columns past the end
    of a line clamp to that line's end (before its line break).  Line
    breaks count as they appear in *text*, so ``\\r\\n`` is two characters.
    """
    if line < 0 or column < 0:
        raise ValueError(f"Negative position: line={line}, column={column}")
    lines = text.split("\n")
    if line >= len(lines):
        return len(text)
    # +1 for the "\n" consumed by split(); a "\r" stays on its line.
    offset = sum(len(l) + 1 for l in lines[:line])
    content = lines[line].removesuffix("\r")
    return offset + min(column, len(content))
