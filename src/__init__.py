# src/__init__.py - v1
"""irrgraph: community detection and occupancy statistics on clone similarity graphs."""

from __future__ import annotations

from irrgraph.core.errors import ConfigurationError, DataError, IRRGraphError
from irrgraph.pipeline.orchestrator import (
    detect_communities,
    detect_communities_from_settings,
)

__all__ = [
    "ConfigurationError",
    "DataError",
    "IRRGraphError",
    "detect_communities",
    "detect_communities_from_settings",
]

__version__ = "0.1.0"
