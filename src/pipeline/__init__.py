# src/pipeline/__init__.py - v1
"""End-to-end community detection."""
