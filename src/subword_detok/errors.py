"""Exception taxonomy for the detokenization pipeline.

Every failure is fatal at this layer; only the command-line entry point turns
these into an exit status.
"""
from __future__ import annotations


class DetokError(RuntimeError):
    """Base class for all pipeline failures."""


class ConfigError(DetokError):
    """Raised for a missing model, bad decode options, or unknown format names."""


class SourceError(DetokError):
    """Raised when an input source or the output destination cannot be opened."""


class DecodeError(DetokError):
    """Raised when the decode engine rejects a record."""
