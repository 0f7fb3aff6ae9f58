# src/core/errors.py - v1
"""Exception taxonomy for community detection."""

from __future__ import annotations


class IRRGraphError(Exception):
    """Base class for all irrgraph errors."""


class ConfigurationError(IRRGraphError):
    """Raised when a parameter is missing or outside its legal values."""


class DataError(IRRGraphError):
    """Raised when the input graph is empty or lacks required attributes."""
