"""Shared test fixtures for image-descriptor tests."""

from __future__ import annotations

from pathlib import Path

import pytest

PNG_BYTES = b"\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR"
"""Small stand-in for PNG file contents (content is never decoded)."""


@pytest.fixture
def project(tmp_path: Path) -> Path:
    """A workspace with ``page.html`` and ``a.png`` side by side.

    Layout::

        <tmp>/page.html        <div><img src="a.png"></div>
        <tmp>/a.png
        <tmp>/images/cat.png
    """
    (tmp_path / "page.html").write_text(
        '<div><img src="a.png"></div>', encoding="utf-8",
    )
    (tmp_path / "a.png").write_bytes(PNG_BYTES)
    (tmp_path / "images").mkdir()
    (tmp_path / "images" / "cat.png").write_bytes(PNG_BYTES)
    return tmp_path
