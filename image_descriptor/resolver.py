"""Resolve an ``<img>`` ``src`` value into AI-consumable image data.

Remote images (``http://`` / ``https://``) are passed through as URLs;
the provider fetches them.  Anything else is a local file: it is read in
full and embedded as a base64 data URI, because local paths are not
reachable from the provider.

Path resolution:

- ``/images/cat.png`` -- relative to the workspace root.
- ``images/cat.png`` -- relative to the directory of the document.

Either form needs a workspace root; a local file outside any workspace
is unresolved.  No size limit is applied to the file read.
"""

from __future__ import annotations

import base64
import logging
from dataclasses import dataclass
from pathlib import Path

from image_descriptor.errors import FileReadError, UnresolvedSourceError

_log = logging.getLogger("resolver")

_REMOTE_PREFIXES = ("http://", "https://")

DEFAULT_MIME_TYPE = "image/jpeg"
"""MIME type used for extensions not in :data:`MIME_TYPES`."""

MIME_TYPES: dict[str, str] = {
    ".png": "image/png",
    ".gif": "image/gif",
    ".webp": "image/webp",
    ".svg": "image/svg+xml",
}
"""Lower-cased file extension -> MIME type."""


@dataclass(frozen=True)
class UrlPayload:
    """Remote image, sent to the provider verbatim."""

    url: str

    @property
    def uri(self) -> str:
        return self.url


@dataclass(frozen=True)
class DataUriPayload:
    """Local image embedded as base64."""

    mime_type: str
    data: str
    """Base64-encoded file bytes."""

    @property
    def uri(self) -> str:
        """``data:<mime>;base64,<data>``."""
        return f"data:{self.mime_type};base64,{self.data}"


ImagePayload = UrlPayload | DataUriPayload


def guess_mime_type(path: str | Path) -> str:
    """Infer the image MIME type from the file extension.

    >>> guess_mime_type("logo.SVG")
    'image/svg+xml'
    >>> guess_mime_type("photo.xyz")
    'image/jpeg'
    """
    return MIME_TYPES.get(Path(path).suffix.lower(), DEFAULT_MIME_TYPE)


def is_remote(src: str) -> bool:
    """Whether *src* is an ``http(s)`` URL."""
    return src.startswith(_REMOTE_PREFIXES)


def resolve_image_path(
    src: str,
    document_path: str | Path,
    workspace_root: str | Path | None,
) -> Path:
    """Map a local ``src`` value to a filesystem path.

    Raises:
        UnresolvedSourceError: No *workspace_root* is available.  Both
            root-relative and document-relative paths require one.
    """
    if workspace_root is None:
        raise UnresolvedSourceError(
            f"Cannot resolve {src!r}: no workspace folder found"
        )
    if src.startswith("/"):
        return Path(workspace_root) / src.lstrip("/")
    return Path(document_path).parent / src


def resolve_source(
    src: str,
    document_path: str | Path,
    workspace_root: str | Path | None,
) -> ImagePayload:
    """Turn a ``src`` attribute value into an :data:`ImagePayload`.

    Args:
        src: Raw ``src`` attribute value.
        document_path: Path of the HTML document containing the tag.
        workspace_root: Workspace root; required for local files.

    Returns:
        :class:`UrlPayload` for remote URLs (no filesystem access),
        otherwise a :class:`DataUriPayload` built from the file bytes.

    Raises:
        UnresolvedSourceError: Local *src* without a workspace root.
        FileReadError: The resolved file cannot be read.
    """
    if is_remote(src):
        _log.debug("Remote image, passing URL through: %s", src)
        return UrlPayload(src)

    path = resolve_image_path(src, document_path, workspace_root)
    try:
        image_bytes = path.read_bytes()
    except OSError as exc:
        raise FileReadError(str(path), exc.strerror or str(exc)) from exc

    mime_type = guess_mime_type(path)
    _log.debug("Read %s (%d bytes, %s)", path, len(image_bytes), mime_type)
    return DataUriPayload(
        mime_type=mime_type,
        data=base64.standard_b64encode(image_bytes).decode("utf-8"),
    )
