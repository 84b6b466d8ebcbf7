"""Exception types raised by texdoc.

Each error also derives from the closest built-in exception so callers
that only know about ``ValueError``/``OSError`` still catch them.
"""


class TexDocError(Exception):
    """Base class for all texdoc errors."""


class ConfigurationError(TexDocError, ValueError):
    """Invalid builder configuration (folder path, margins)."""


class UnsupportedElementError(TexDocError, TypeError):
    """An element cannot be placed where it was given (e.g. inside columns)."""


class ResourceIOError(TexDocError, OSError):
    """Copying a resource (image) into the document folder failed."""


class RendererExecutionError(TexDocError, RuntimeError):
    """The renderer process could not be launched at all."""
