# src/analysis/resolution.py - v1
"""Resolution scan: how community count responds to the resolution parameter.

The graph is consolidated once and partitioned at every requested
resolution, so only the partitioning step is repeated.
"""

from __future__ import annotations

import logging
from collections import Counter
from typing import Iterable, Sequence

import networkx as nx
import pandas as pd

from irrgraph.core.errors import ConfigurationError
from irrgraph.core.models import COMMUNITY_ATTR
from irrgraph.graph.consolidator import consolidate_edges
from irrgraph.graph.partitioner import WEIGHT_ATTR, partition_graph
from irrgraph.graph.validation import check_inputs, check_resolution

logger = logging.getLogger(__name__)


def scan_resolution(
    graph: nx.Graph,
    resolutions: Iterable[float],
    algorithm: str = "leiden",
    weight: str = "ncweight",
    metric: str = "average",
    chains: Sequence[str] | str | None = None,
    seed: int | None = None,
    n_iterations: int = 100,
) -> pd.DataFrame:
    """Partition the same consolidated graph at several resolutions.

    Args:
        graph: Raw clone graph, as for detect_communities.
        resolutions: Resolution values (each > 0).
        algorithm, weight, metric, chains, seed, n_iterations: As for
            detect_communities.

    Returns:
        DataFrame with columns ``resolution``, ``communities``,
        ``singletons`` and ``modularity``, sorted by resolution.

    Raises:
        ConfigurationError: If no resolution is given or any is invalid.
    """
    values = list(resolutions)
    if not values:
        raise ConfigurationError("resolutions must contain at least one value")
    config = check_inputs(
        graph=graph,
        algorithm=algorithm,
        resolution=values[0],
        weight=weight,
        metric=metric,
        chains=chains,
        seed=seed,
        n_iterations=n_iterations,
    )
    for value in values:
        check_resolution(value)

    consolidated = consolidate_edges(
        graph, weight=config.weight, chains=config.chains, metric=config.metric
    )

    rows = []
    for value in sorted(set(float(v) for v in values)):
        partitioned = partition_graph(
            consolidated,
            algorithm=config.algorithm,
            resolution=value,
            seed=config.seed,
            n_iterations=config.n_iterations,
        )
        sizes = Counter(label for _, label in partitioned.nodes(data=COMMUNITY_ATTR))
        rows.append(
            {
                "resolution": value,
                "communities": len(sizes),
                "singletons": sum(1 for size in sizes.values() if size == 1),
                "modularity": _modularity(partitioned, value),
            }
        )

    logger.info("Scanned %d resolutions with %s", len(rows), config.algorithm)
    return pd.DataFrame.from_records(
        rows, columns=["resolution", "communities", "singletons", "modularity"]
    )


def _modularity(partitioned: nx.Graph, resolution: float) -> float:
    if partitioned.number_of_edges() == 0:
        return 0.0
    groups: dict[int, set] = {}
    for node, label in partitioned.nodes(data=COMMUNITY_ATTR):
        groups.setdefault(label, set()).add(node)
    return float(
        nx.community.modularity(
            partitioned,
            list(groups.values()),
            weight=WEIGHT_ATTR,
            resolution=resolution,
        )
    )
