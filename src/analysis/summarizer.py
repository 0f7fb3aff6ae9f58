# src/analysis/summarizer.py - v2
"""Per-community summary statistics over a partitioned clone graph.

Two families of statistics are computed and merged on the community label:

Vertex statistics
    distinct clones and total cells per community, overall and per sample.

Edge statistics (on the subgraph induced by each community)
    ``w``          mean combined weight over internal edges
    ``w_<chain>``  mean of the chain's weight, 0 where the chain is absent,
                   averaged over *all* internal edges
    ``n_<chain>``  number of internal edges carrying the chain

A community without internal edges (a singleton, typically) gets 0 for
every edge statistic. Results come in a wide layout (one row per
community) and a tall layout (one row per community x sample).
"""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import Any, Sequence

import networkx as nx
import numpy as np
import pandas as pd

from irrgraph.analysis.nodes import node_table
from irrgraph.core.errors import DataError
from irrgraph.core.models import COMMUNITY_ATTR, TOTAL_SUFFIX, CommunitySummary

logger = logging.getLogger(__name__)


def summarize_communities(graph: nx.Graph, chains: Sequence[str]) -> CommunitySummary:
    """Build wide and tall community summaries.

    Args:
        graph: Partitioned graph (nodes carry ``community``, ``sample``,
            ``clone_size``; edges carry ``combined_weight`` and ``chain_weights``).
        chains: Allowed chains, in the order their columns should appear.

    Returns:
        CommunitySummary with ``wide`` and ``tall`` DataFrames.
    """
    nodes = node_table(graph)
    estats = edge_stats(graph, chains)
    stat_columns = [c for c in estats.columns if c != COMMUNITY_ATTR]

    vs_tall = vertex_stats_tall(nodes)
    vs_wide = vertex_stats_wide(vs_tall)

    wide = _left_join(vs_wide, estats, stat_columns, chains)
    wide = wide.sort_values(COMMUNITY_ATTR, kind="stable").reset_index(drop=True)

    tall = _left_join(vs_tall, estats, stat_columns, chains)
    tall = tall.sort_values([COMMUNITY_ATTR, "sample"], kind="stable").reset_index(
        drop=True
    )

    logger.info(
        "Summarized %d communities across %d samples",
        len(wide),
        vs_tall["sample"].nunique(),
    )
    return CommunitySummary(wide=wide, tall=tall)


def vertex_stats_tall(nodes: pd.DataFrame) -> pd.DataFrame:
    """Clones and cells per (community, sample), zero-filled over the full cross product."""
    communities = sorted(nodes[COMMUNITY_ATTR].unique())
    samples = sorted(nodes["sample"].unique())

    counts = nodes.groupby([COMMUNITY_ATTR, "sample"]).agg(
        clones=("clone_size", "size"),
        cells=("clone_size", "sum"),
    )
    full_index = pd.MultiIndex.from_product(
        [communities, samples], names=[COMMUNITY_ATTR, "sample"]
    )
    tall = counts.reindex(full_index, fill_value=0).reset_index()
    tall["clones"] = tall["clones"].astype("int64")
    tall["cells"] = tall["cells"].astype("int64")
    return tall


def vertex_stats_wide(tall: pd.DataFrame) -> pd.DataFrame:
    """Pivot tall vertex statistics to one row per community.

    Columns: ``clones_<sample>``..., ``clones_n``, ``cells_<sample>``..., ``cells_n``.

    Raises:
        DataError: If a sample is named ``n`` and would shadow the totals.
    """
    if (tall["sample"] == TOTAL_SUFFIX).any():
        raise DataError(
            f"sample name {TOTAL_SUFFIX!r} is reserved for the per-community totals"
        )
    blocks = []
    for value in ("clones", "cells"):
        pivot = tall.pivot(index=COMMUNITY_ATTR, columns="sample", values=value)
        block = pivot.add_prefix(f"{value}_")
        block[f"{value}_{TOTAL_SUFFIX}"] = pivot.sum(axis=1)
        blocks.append(block)
    wide = pd.concat(blocks, axis=1)
    wide.columns.name = None
    return wide.reset_index()


def edge_stats(graph: nx.Graph, chains: Sequence[str]) -> pd.DataFrame:
    """Edge statistics for every observed community label."""
    members: dict[Any, list[Any]] = defaultdict(list)
    for node, label in graph.nodes(data=COMMUNITY_ATTR):
        members[label].append(node)

    rows = []
    for label in sorted(members):
        stats = community_edge_stats(graph.subgraph(members[label]), chains)
        rows.append({COMMUNITY_ATTR: label, **stats})

    columns = [COMMUNITY_ATTR, *_stat_columns(chains)]
    return pd.DataFrame.from_records(rows, columns=columns)


def community_edge_stats(subgraph: nx.Graph, chains: Sequence[str]) -> dict[str, Any]:
    """Aggregate the internal edges of one community."""
    stats: dict[str, Any] = dict.fromkeys(_stat_columns(chains), 0.0)
    for chain in chains:
        stats[f"n_{chain}"] = 0

    edges = [data for _, _, data in subgraph.edges(data=True)]
    if not edges:
        return stats

    stats["w"] = float(np.mean([data["combined_weight"] for data in edges]))
    for chain in chains:
        weights = [data["chain_weights"].get(chain) for data in edges]
        stats[f"w_{chain}"] = float(
            np.mean([0.0 if w is None else w for w in weights])
        )
        stats[f"n_{chain}"] = sum(1 for w in weights if w is not None)
    return stats


def _stat_columns(chains: Sequence[str]) -> list[str]:
    return ["w", *(f"w_{c}" for c in chains), *(f"n_{c}" for c in chains)]


def _left_join(
    vertex_stats: pd.DataFrame,
    estats: pd.DataFrame,
    stat_columns: list[str],
    chains: Sequence[str],
) -> pd.DataFrame:
    merged = vertex_stats.merge(estats, on=COMMUNITY_ATTR, how="left")
    merged[stat_columns] = merged[stat_columns].fillna(0)
    for chain in chains:
        merged[f"n_{chain}"] = merged[f"n_{chain}"].astype("int64")
    return merged
