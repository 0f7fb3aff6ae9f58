# src/pipeline/orchestrator.py - v2
"""Community detection orchestrator.

Runs the five stages in order on immutable intermediate graphs:
  1. Edge consolidation (graph/consolidator.py)
  2. Community partitioning (graph/partitioner.py)
  3. Community summary (analysis/summarizer.py)
  4. Occupancy matrix (analysis/occupancy.py)
  5. Node table (analysis/nodes.py)

All arguments are validated before stage 1 starts; a failure leaves no
partial result behind.
"""

from __future__ import annotations

import logging
import time
import uuid
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any, Iterator, Sequence

from irrgraph.analysis.nodes import node_table
from irrgraph.analysis.occupancy import community_matrix
from irrgraph.analysis.summarizer import summarize_communities
from irrgraph.core.models import CommunityResult
from irrgraph.graph.consolidator import consolidate_edges
from irrgraph.graph.partitioner import partition_graph
from irrgraph.graph.validation import check_inputs
from irrgraph.logging.context import clear_context, set_run_context, set_stage_context
from irrgraph.storage.result_writer import write_result

if TYPE_CHECKING:
    import networkx as nx

    from irrgraph.config.settings import Settings

logger = logging.getLogger(__name__)

_N_STAGES = 5


def detect_communities(
    graph: nx.Graph,
    algorithm: str = "leiden",
    resolution: float = 1.0,
    weight: str = "ncweight",
    metric: str = "average",
    chains: Sequence[str] | str | None = None,
    seed: int | None = None,
    n_iterations: int = 100,
) -> CommunityResult:
    """Detect communities of similar clones and summarize them per sample.

    Args:
        graph: Undirected clone graph. Nodes carry ``sample`` and
            ``clone_size``; edges carry ``chain`` and per-chain scores
            (``nweight``, ``ncweight``, ...).
        algorithm: "leiden" or "louvain".
        resolution: Partitioning resolution (> 0).
        weight: Edge score to use, "nweight" or "ncweight".
        metric: How two chain scores combine: "average", "strict" or "loose".
        chains: One or two chains to take into account (required).
        seed: Random seed for the partitioning algorithm.
        n_iterations: Leiden iterations (ignored by louvain).

    Returns:
        CommunityResult bundling the occupancy matrix, community summaries,
        node table, partitioned graph and the validated configuration.

    Raises:
        ConfigurationError: If a parameter is invalid.
        DataError: If the graph is empty or misses required attributes.
    """
    config = check_inputs(
        graph=graph,
        algorithm=algorithm,
        resolution=resolution,
        weight=weight,
        metric=metric,
        chains=chains,
        seed=seed,
        n_iterations=n_iterations,
    )

    run_id = f"run_{uuid.uuid4().hex[:12]}"
    set_run_context(run_id)
    timings: dict[str, int] = {}
    try:
        with _stage(1, "formatting graph", timings):
            consolidated = consolidate_edges(
                graph,
                weight=config.weight,
                chains=config.chains,
                metric=config.metric,
            )

        with _stage(2, "community detection", timings):
            partitioned = partition_graph(
                consolidated,
                algorithm=config.algorithm,
                resolution=config.resolution,
                seed=config.seed,
                n_iterations=config.n_iterations,
            )

        with _stage(3, "community summary", timings):
            summary = summarize_communities(partitioned, chains=config.chains)

        with _stage(4, "extracting community occupancy matrix", timings):
            matrix = community_matrix(partitioned)

        with _stage(5, "extracting nodes", timings):
            nodes = node_table(partitioned)
    finally:
        clear_context()

    stats: dict[str, Any] = {
        "run_id": run_id,
        "nodes": partitioned.number_of_nodes(),
        "raw_edges": graph.number_of_edges(),
        "edges": partitioned.number_of_edges(),
        "communities": int(matrix.shape[0]),
        "samples": int(matrix.shape[1]),
        "duration_ms": timings,
    }
    logger.info("Community detection finished: %s", stats)

    return CommunityResult(
        community_occupancy_matrix=matrix,
        community_summary=summary,
        node_summary=nodes,
        graph=partitioned,
        input_config=config,
        input_graph=graph,
        stats=stats,
    )


def detect_communities_from_settings(
    graph: nx.Graph,
    settings: Settings | None = None,
    export: bool = False,
) -> CommunityResult:
    """Run ``detect_communities`` with parameters taken from Settings.

    With ``export=True`` the result is also written to ``settings.output_dir``.
    """
    if settings is None:
        from irrgraph.config.settings import load_settings

        settings = load_settings()

    result = detect_communities(
        graph,
        algorithm=settings.community_algorithm,
        resolution=settings.community_resolution,
        weight=settings.community_weight,
        metric=settings.community_metric,
        chains=settings.community_chains_list,
        seed=settings.community_seed,
        n_iterations=settings.leiden_iterations,
    )
    if export:
        write_result(result, settings.output_dir)
    return result


@contextmanager
def _stage(index: int, name: str, timings: dict[str, int]) -> Iterator[None]:
    """Log and time one pipeline stage."""
    set_stage_context(name)
    logger.info("[%d/%d] %s...", index, _N_STAGES, name)
    start = time.monotonic()
    try:
        yield
    finally:
        timings[name] = int((time.monotonic() - start) * 1000)
