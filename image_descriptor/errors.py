"""Exception hierarchy for alt-text generation.

Every failure is local to a single invocation and surfaces to the caller
as a one-line, user-facing message.  Nothing here is retried.
"""

from __future__ import annotations


class ImageDescriptorError(Exception):
    """Base class for all expected failures."""


class TagNotFoundError(ImageDescriptorError):
    """No ``<img>`` tag at the offset, or the tag vanished before rewrite."""


class AttributeMissingError(ImageDescriptorError):
    """A required attribute (``src`` or ``alt``) is absent from the tag."""

    def __init__(self, name: str, message: str | None = None) -> None:
        self.name = name
        super().__init__(message or f"No {name} attribute found in img element")


class UnresolvedSourceError(ImageDescriptorError):
    """A root-relative ``src`` was given but no workspace root is known."""


class FileReadError(ImageDescriptorError):
    """The resolved local image file could not be read."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        super().__init__(f"Cannot read image file {path}: {reason}")


class ProviderConfigError(ImageDescriptorError):
    """Provider or API key is unset (or the provider is unknown)."""


class ProviderRequestError(ImageDescriptorError):
    """The AI call failed: transport error, non-2xx status, or bad reply.

    ``status_code`` is set when an HTTP response was received.
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.status_code = status_code
        super().__init__(message)
