"""
Exceptions raised by the importer.

Every error carries the server (or transport) error code and its details so
the failing request can be diagnosed from the message alone.
"""

from typing import Optional


class MediaWikiError(Exception):
    """Base class for importer errors."""

    def __init__(self, code: str, details: Optional[str] = None):
        self.code = code
        self.details = details or ""
        super().__init__(f"{self.code}: {self.details}")


class ConfigError(MediaWikiError):
    """Invalid importer configuration."""

    def __init__(self, details: str):
        super().__init__("invalidconfig", details)


class InvalidGeneratorError(ConfigError):
    """Generator name is not one that enumerates pages."""

    def __init__(self, generator):
        self.generator = generator
        MediaWikiError.__init__(self, "invalidgenerator", f"invalid generator {generator!r}")


class AuthError(MediaWikiError):
    """Login was attempted and rejected."""


class QueryError(MediaWikiError):
    """A listing or revisions request failed."""
