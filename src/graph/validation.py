# src/graph/validation.py - v2
"""Eager validation of detection parameters and of the raw clone graph.

Checks run in a fixed order and the first violation is raised. Nothing in
the pipeline executes until every check has passed.
"""

from __future__ import annotations

import logging
import math
import numbers
from typing import Any, Sequence

import networkx as nx

from irrgraph.core.errors import ConfigurationError, DataError
from irrgraph.core.models import (
    ALGORITHMS,
    CHAINS,
    METRICS,
    NODE_ID_COLUMN,
    TOTAL_SUFFIX,
    WEIGHT_FIELDS,
    CommunityConfig,
)

logger = logging.getLogger(__name__)

REQUIRED_NODE_ATTRS = ("sample", "clone_size")


def check_inputs(
    graph: Any,
    algorithm: Any,
    resolution: Any,
    weight: Any,
    metric: Any,
    chains: Any,
    seed: Any = None,
    n_iterations: Any = 100,
) -> CommunityConfig:
    """Validate every argument of ``detect_communities``.

    Order: graph type, algorithm, resolution, weight, metric, chains,
    seed, n_iterations, then graph contents.

    Returns:
        The validated CommunityConfig.

    Raises:
        ConfigurationError: On the first invalid parameter.
        DataError: If the graph is empty or misses required attributes.
    """
    check_graph_type(graph)
    config = check_parameters(
        algorithm=algorithm,
        resolution=resolution,
        weight=weight,
        metric=metric,
        chains=chains,
        seed=seed,
        n_iterations=n_iterations,
    )
    check_graph(graph, weight=config.weight)
    return config


def check_graph_type(graph: Any) -> None:
    if graph is None or not isinstance(graph, nx.Graph):
        raise ConfigurationError("graph must be a networkx graph")
    if graph.is_directed():
        raise ConfigurationError("graph must be undirected")


def check_parameters(
    algorithm: Any,
    resolution: Any,
    weight: Any,
    metric: Any,
    chains: Any,
    seed: Any = None,
    n_iterations: Any = 100,
) -> CommunityConfig:
    """Validate the non-graph parameters and build a CommunityConfig."""
    check_algorithm(algorithm)
    check_resolution(resolution)
    check_choice(weight, WEIGHT_FIELDS, "weight")
    check_choice(metric, METRICS, "metric")
    chain_tuple = check_chains(chains)
    check_seed(seed)
    check_n_iterations(n_iterations)
    return CommunityConfig(
        algorithm=algorithm,
        resolution=float(resolution),
        weight=weight,
        metric=metric,
        chains=chain_tuple,
        seed=None if seed is None else int(seed),
        n_iterations=int(n_iterations),
    )


def check_algorithm(algorithm: Any) -> None:
    check_choice(algorithm, ALGORITHMS, "algorithm")


def check_resolution(resolution: Any) -> None:
    if (
        isinstance(resolution, bool)
        or not isinstance(resolution, numbers.Real)
        or not math.isfinite(resolution)
        or resolution <= 0
    ):
        raise ConfigurationError("resolution must be a number > 0")


def check_choice(value: Any, legal: Sequence[str], name: str) -> None:
    if not isinstance(value, str) or value not in legal:
        raise ConfigurationError(f"{name} must be one of {', '.join(legal)}")


def check_chains(chains: Any) -> tuple[str, ...]:
    """Normalize ``chains`` to a tuple of one or two distinct chain names."""
    if isinstance(chains, str):
        chains = (chains,)
    if chains is None or not isinstance(chains, Sequence):
        raise ConfigurationError("chains must be a sequence of 1 or 2 chain names")
    chain_tuple = tuple(chains)
    if not 1 <= len(chain_tuple) <= 2:
        raise ConfigurationError("chains must contain 1 or 2 chain names")
    for chain in chain_tuple:
        if not isinstance(chain, str) or chain not in CHAINS:
            raise ConfigurationError(
                f"chains must be drawn from {', '.join(CHAINS)}, got {chain!r}"
            )
    if len(set(chain_tuple)) != len(chain_tuple):
        raise ConfigurationError("chains must not repeat a chain name")
    return chain_tuple


def check_seed(seed: Any) -> None:
    if seed is None:
        return
    if isinstance(seed, bool) or not isinstance(seed, numbers.Integral) or seed < 0:
        raise ConfigurationError("seed must be a non-negative integer or None")


def check_n_iterations(n_iterations: Any) -> None:
    if (
        isinstance(n_iterations, bool)
        or not isinstance(n_iterations, numbers.Integral)
        or n_iterations == 0
    ):
        raise ConfigurationError("n_iterations must be a non-zero integer")


def check_graph(graph: nx.Graph, weight: str) -> None:
    """Check that the clone graph carries the attributes the pipeline reads.

    Missing weight *values* (None or NaN) are allowed; only a missing
    attribute key is an error.

    The sample name ``n`` and a node attribute named ``node`` are rejected,
    since both would collide with columns of the output tables.
    """
    if graph.number_of_nodes() == 0:
        raise DataError("graph has no nodes")

    for node, data in graph.nodes(data=True):
        for attr in REQUIRED_NODE_ATTRS:
            if attr not in data:
                raise DataError(f"node {node!r} is missing attribute {attr!r}")
        if not isinstance(data["sample"], str):
            raise DataError(f"node {node!r} has a non-string sample label")
        if data["sample"] == TOTAL_SUFFIX:
            raise DataError(
                f"node {node!r} uses sample name {TOTAL_SUFFIX!r}, "
                "which is reserved for the per-community totals"
            )
        if NODE_ID_COLUMN in data:
            raise DataError(
                f"node {node!r} has an attribute named {NODE_ID_COLUMN!r}, "
                "which is reserved for the node id"
            )
        if not _is_positive_count(data["clone_size"]):
            raise DataError(
                f"node {node!r} has clone_size {data['clone_size']!r}, "
                "expected a positive integer"
            )

    for u, v, data in graph.edges(data=True):
        if "chain" not in data:
            raise DataError(f"edge {u!r}-{v!r} is missing attribute 'chain'")
        if weight not in data:
            raise DataError(f"edge {u!r}-{v!r} is missing attribute {weight!r}")

    logger.debug(
        "Graph validated: %d nodes, %d edges",
        graph.number_of_nodes(),
        graph.number_of_edges(),
    )


def _is_positive_count(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        return False
    if not math.isfinite(value) or value <= 0:
        return False
    return float(value).is_integer()
