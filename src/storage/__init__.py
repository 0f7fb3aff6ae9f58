# src/storage/__init__.py - v1
"""Result export."""
