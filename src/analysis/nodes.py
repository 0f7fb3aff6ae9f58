# src/analysis/nodes.py - v2
"""Per-node (clone) table extracted from a partitioned graph."""

from __future__ import annotations

import networkx as nx
import pandas as pd

from irrgraph.core.errors import DataError
from irrgraph.core.models import NODE_ID_COLUMN

__all__ = ["NODE_ID_COLUMN", "node_table"]


def node_table(graph: nx.Graph) -> pd.DataFrame:
    """One row per node: the node id in ``node`` followed by every node attribute.

    Attributes missing on some nodes are left as NaN; column order follows
    first appearance.

    Raises:
        DataError: If a node attribute is itself named ``node``.
    """
    ids = []
    records = []
    for node, data in graph.nodes(data=True):
        if NODE_ID_COLUMN in data:
            raise DataError(
                f"node {node!r} has an attribute named {NODE_ID_COLUMN!r}, "
                "which is reserved for the node id"
            )
        ids.append(node)
        records.append(data)
    if not ids:
        return pd.DataFrame(columns=[NODE_ID_COLUMN])

    df = pd.DataFrame.from_records(records)
    df.insert(0, NODE_ID_COLUMN, ids)
    return df
