# src/config/__init__.py - v1
"""Runtime configuration."""
