"""Exception hierarchy for csvcols.

Only ``ConfigError`` is ever surfaced to the user (as a warning message).
Surface failures are absorbed at the overlay boundary and logged at debug.
"""

from __future__ import annotations


class CsvColsError(Exception):
    """Base class for all csvcols errors."""


class ConfigError(CsvColsError, ValueError):
    """A configuration value or command argument was rejected."""


class SurfaceError(CsvColsError):
    """The host refused to create or reposition a secondary surface."""
