"""Attribute extraction from a located ``<img>`` tag.

Values are matched lexically; the quote character (single or double) is
not remembered.  An absent attribute is ``None``, distinct from an empty
value ``""`` (``alt=""`` marks a decorative image).
"""

from __future__ import annotations

import re
from functools import lru_cache

ALT_ATTR_RE = re.compile(r"""alt\s*=\s*["'][^"']*["']""", re.IGNORECASE)
"""Regex matching a whole quoted ``alt`` attribute (no capture groups)."""


@lru_cache(maxsize=None)
def _attr_re(name: str) -> re.Pattern[str]:
    return re.compile(
        rf"""{re.escape(name)}\s*=\s*["']([^"']*)["']""",
        re.IGNORECASE,
    )


def extract_attr(tag_text: str, name: str) -> str | None:
    """Return the value of attribute *name* in *tag_text*, or ``None``.

    The first match wins.

    >>> extract_attr('<img src="a.png" alt="">', "alt")
    ''
    >>> extract_attr('<img src="a.png">', "alt") is None
    True
    """
    m = _attr_re(name).search(tag_text)
    return m.group(1) if m else None


def extract_src(tag_text: str) -> str | None:
    """Value of the ``src`` attribute, or ``None``."""
    return extract_attr(tag_text, "src")


def extract_alt(tag_text: str) -> str | None:
    """Value of the ``alt`` attribute, or ``None``."""
    return extract_attr(tag_text, "alt")
