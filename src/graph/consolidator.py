# src/graph/consolidator.py - v1
"""Edge consolidation: collapse per-chain parallel edges into one weighted edge.

Takes the raw clone graph (one edge per chain between two clones) and
returns a fresh, frozen simple graph:
  1. Each raw edge contributes the score stored under the chosen weight field.
  2. Edges whose chain is outside the allowed chain set are dropped.
  3. Parallel edges between a node pair are grouped into a ChainWeights record.
  4. A combination policy reduces the record to ``combined_weight``.
  5. Edges whose combined weight is not finite or is <= 0 are pruned.

The input graph is never modified.
"""

from __future__ import annotations

import logging
import math
from typing import Any, Callable, Iterator, Sequence

import networkx as nx

from irrgraph.core.errors import ConfigurationError
from irrgraph.core.models import CHAINS, METRICS, WEIGHT_FIELDS, ChainWeights

logger = logging.getLogger(__name__)


def _to_score(value: Any) -> float:
    """Coerce a raw edge score to float; missing scores become NaN."""
    if value is None:
        return math.nan
    try:
        return float(value)
    except (TypeError, ValueError):
        return math.nan


def combine_average(scores: Sequence[float]) -> float:
    """Mean over the chains actually present on the edge."""
    if not scores or any(math.isnan(s) for s in scores):
        return math.nan
    return sum(scores) / len(scores)


def combine_strict(scores: Sequence[float]) -> float:
    """Minimum of both chains; a lone chain is capped at 0."""
    if not scores or any(math.isnan(s) for s in scores):
        return math.nan
    if len(scores) == 2:
        return min(scores)
    return min(scores[0], 0.0)


def combine_loose(scores: Sequence[float]) -> float:
    """Maximum of both chains; a lone chain is floored at 0."""
    if not scores or any(math.isnan(s) for s in scores):
        return math.nan
    if len(scores) == 2:
        return max(scores)
    return max(scores[0], 0.0)


COMBINATION_POLICIES: dict[str, Callable[[Sequence[float]], float]] = {
    "average": combine_average,
    "strict": combine_strict,
    "loose": combine_loose,
}


def consolidate_edges(
    graph: nx.Graph,
    weight: str,
    chains: Sequence[str],
    metric: str,
) -> nx.Graph:
    """Build the consolidated similarity graph.

    Args:
        graph: Raw clone graph (MultiGraph or Graph) with per-chain edges.
        weight: Edge field holding the score to use ("nweight" or "ncweight").
        chains: Allowed chains (one or two).
        metric: Combination policy ("average", "strict" or "loose").

    Returns:
        Frozen nx.Graph with every raw node and only edges carrying a
        finite, strictly positive ``combined_weight``.

    Raises:
        ConfigurationError: If weight, chains or metric is not a legal value.
    """
    if weight not in WEIGHT_FIELDS:
        raise ConfigurationError(f"weight must be one of {', '.join(WEIGHT_FIELDS)}")
    if metric not in METRICS:
        raise ConfigurationError(f"metric must be one of {', '.join(METRICS)}")
    allowed = tuple(chains)
    if not 1 <= len(allowed) <= 2 or any(c not in CHAINS for c in allowed):
        raise ConfigurationError("chains must contain 1 or 2 known chain names")
    combine = COMBINATION_POLICIES[metric]

    order = {n: i for i, n in enumerate(graph.nodes)}
    grouped: dict[tuple[Any, Any], dict[str, float]] = {}
    n_raw = 0
    n_filtered = 0
    for u, v, data in _iter_edges(graph):
        n_raw += 1
        if u == v:
            logger.debug("Skipping self-loop on %r", u)
            continue
        chain = data.get("chain")
        if chain not in allowed:
            n_filtered += 1
            continue
        score = _to_score(data.get(weight))
        key = (u, v) if order[u] <= order[v] else (v, u)
        per_chain = grouped.setdefault(key, {})
        if chain in per_chain:
            logger.warning(
                "Duplicate %s edge between %r and %r; keeping the larger score",
                chain, u, v,
            )
            score = _max_score(per_chain[chain], score)
        per_chain[chain] = score

    consolidated = nx.Graph()
    consolidated.graph.update(graph.graph)
    consolidated.add_nodes_from(graph.nodes(data=True))

    n_pruned = 0
    for (u, v), per_chain in grouped.items():
        chain_weights = ChainWeights.from_mapping(per_chain)
        combined = combine(chain_weights.scores)
        if not math.isfinite(combined) or combined <= 0:
            n_pruned += 1
            continue
        consolidated.add_edge(
            u, v, chain_weights=chain_weights, combined_weight=combined
        )

    logger.info(
        "Consolidated %d raw edges into %d edges "
        "(%d outside chains %s, %d pruned by %s policy)",
        n_raw,
        consolidated.number_of_edges(),
        n_filtered,
        ",".join(allowed),
        n_pruned,
        metric,
    )
    return nx.freeze(consolidated)


def _iter_edges(graph: nx.Graph) -> Iterator[tuple[Any, Any, dict[str, Any]]]:
    if graph.is_multigraph():
        for u, v, _key, data in graph.edges(keys=True, data=True):
            yield u, v, data
    else:
        yield from graph.edges(data=True)


def _max_score(a: float, b: float) -> float:
    if math.isnan(a):
        return b
    if math.isnan(b):
        return a
    return max(a, b)
