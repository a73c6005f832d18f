"""Lineport exception hierarchy.

This module defines traceable domain errors with clear boundaries.
Each subsystem raises a specific error type for debuggability.
"""

from __future__ import annotations


class LineportError(Exception):
    """Base exception for all Lineport failures."""


class LineportConfigError(LineportError):
    """Raised for invalid runtime configuration or command arguments."""


class LineportIngestError(LineportError):
    """Raised for source reading and line splitting failures."""


class LineportTransformError(LineportError):
    """Raised when a line transform fails or returns an invalid result."""


class LineportStoreError(LineportError):
    """Raised for document store connection failures."""


class LineportDependencyError(LineportError):
    """Raised when a runtime dependency is missing."""
