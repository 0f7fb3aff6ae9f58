# src/storage/result_writer.py - v1
"""Write a CommunityResult to a local output directory.

Layout:
    community_occupancy_matrix.csv
    community_summary_wide.csv
    community_summary_tall.csv
    node_summary.csv
    graph.graphml
    input_config.json
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import networkx as nx
import numpy as np

from irrgraph.core.models import ChainWeights, CommunityResult

logger = logging.getLogger(__name__)


def write_result(result: CommunityResult, output_dir: str | Path) -> dict[str, Path]:
    """Write every table, the partitioned graph and the config echo.

    Args:
        result: Output of detect_communities.
        output_dir: Target directory (created if missing).

    Returns:
        Mapping artifact name -> written path.
    """
    base = Path(output_dir).expanduser()
    base.mkdir(parents=True, exist_ok=True)

    paths = {
        "community_occupancy_matrix": base / "community_occupancy_matrix.csv",
        "community_summary_wide": base / "community_summary_wide.csv",
        "community_summary_tall": base / "community_summary_tall.csv",
        "node_summary": base / "node_summary.csv",
        "graph": base / "graph.graphml",
        "input_config": base / "input_config.json",
    }

    result.community_occupancy_matrix.to_csv(paths["community_occupancy_matrix"])
    result.community_summary.wide.to_csv(paths["community_summary_wide"], index=False)
    result.community_summary.tall.to_csv(paths["community_summary_tall"], index=False)
    result.node_summary.to_csv(paths["node_summary"], index=False)
    nx.write_graphml(graphml_ready(result.graph), str(paths["graph"]))

    config = result.input_config.model_dump(mode="json")
    paths["input_config"].write_text(
        json.dumps(config, indent=2, sort_keys=True), encoding="utf-8"
    )

    logger.info("Wrote %d artifacts to %s", len(paths), base)
    return paths


def graphml_ready(graph: nx.Graph) -> nx.Graph:
    """Copy of ``graph`` whose attributes are all GraphML scalars.

    Chain weights are flattened into ``w_<chain>`` edge attributes and the
    chain list into a comma-joined ``chain`` string. Other non-scalar values
    are stringified.
    """
    g = nx.Graph()
    g.graph.update({k: _scalar(v) for k, v in graph.graph.items() if v is not None})
    for node, data in graph.nodes(data=True):
        g.add_node(node, **{k: _scalar(v) for k, v in data.items() if v is not None})
    for u, v, data in graph.edges(data=True):
        attrs: dict[str, Any] = {}
        for key, value in data.items():
            if isinstance(value, ChainWeights):
                attrs["chain"] = ",".join(value.chains)
                for chain, score in value:
                    attrs[f"w_{chain}"] = score
            elif value is not None:
                attrs[key] = _scalar(value)
        g.add_edge(u, v, **attrs)
    return g


def _scalar(value: Any) -> Any:
    if isinstance(value, (str, int, float, bool)):
        return value
    if isinstance(value, np.generic):
        return value.item()
    return str(value)
