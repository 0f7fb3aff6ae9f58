# src/graph/__init__.py - v1
"""Graph validation, edge consolidation and partitioning."""
