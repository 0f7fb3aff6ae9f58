# src/analysis/__init__.py - v1
"""Tables derived from a partitioned clone graph."""
