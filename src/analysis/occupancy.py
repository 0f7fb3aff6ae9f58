# src/analysis/occupancy.py - v1
"""Community occupancy matrix: total cells per community and sample.

The matrix is the input of downstream differential-occupancy modelling.
"""

from __future__ import annotations

import logging

import networkx as nx
import pandas as pd

from irrgraph.analysis.nodes import node_table
from irrgraph.core.models import COMMUNITY_ATTR

logger = logging.getLogger(__name__)


def community_matrix(graph: nx.Graph) -> pd.DataFrame:
    """Cross-tabulate summed ``clone_size`` by community (rows) and sample (columns).

    Args:
        graph: Partitioned graph; every node carries ``community``,
            ``sample`` and ``clone_size``.

    Returns:
        Dense int64 DataFrame indexed by community label (sorted) with one
        column per observed sample (sorted). Empty cells hold 0.
    """
    nodes = node_table(graph)
    if nodes.empty:
        return pd.DataFrame(
            dtype="int64",
            index=pd.Index([], name=COMMUNITY_ATTR),
            columns=pd.Index([], name="sample"),
        )

    matrix = pd.pivot_table(
        nodes,
        index=COMMUNITY_ATTR,
        columns="sample",
        values="clone_size",
        aggfunc="sum",
        fill_value=0,
    )
    matrix = matrix.sort_index(axis=0).sort_index(axis=1).astype("int64")
    matrix.index.name = COMMUNITY_ATTR
    matrix.columns.name = "sample"

    logger.debug(
        "Occupancy matrix: %d communities x %d samples, %d cells",
        matrix.shape[0],
        matrix.shape[1],
        int(matrix.to_numpy().sum()),
    )
    return matrix
