# src/core/models.py - v2
"""Shared models: closed vocabularies, per-edge chain weights, result bundle.

The policy names accepted by ``detect_communities`` form closed sets. They
are typed as ``Literal`` aliases and mirrored as tuples so validation and
strategy dispatch read from the same source.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Iterator, Literal, Mapping

from pydantic import BaseModel, ConfigDict, Field

if TYPE_CHECKING:
    import networkx as nx
    import pandas as pd


Chain = Literal["CDR3a", "CDR3b", "CDR3g", "CDR3d", "CDR3h", "CDR3l"]
Algorithm = Literal["louvain", "leiden"]
WeightField = Literal["nweight", "ncweight"]
Metric = Literal["average", "strict", "loose"]

CHAINS: tuple[str, ...] = ("CDR3a", "CDR3b", "CDR3g", "CDR3d", "CDR3h", "CDR3l")
ALGORITHMS: tuple[str, ...] = ("louvain", "leiden")
WEIGHT_FIELDS: tuple[str, ...] = ("nweight", "ncweight")
METRICS: tuple[str, ...] = ("average", "strict", "loose")

# Node attribute written by the partitioner.
COMMUNITY_ATTR = "community"

# Column holding the node id in the node table; may not be a node attribute.
NODE_ID_COLUMN = "node"

# Suffix of the per-community total columns (clones_n, cells_n); may not be a sample.
TOTAL_SUFFIX = "n"


@dataclass(frozen=True)
class ChainWeights:
    """Per-chain scalar weights carried by one consolidated edge.

    Holds at most one score per chain, in the order the chains were first
    seen on the raw parallel edges. A score may be NaN when the upstream
    scorer could not produce one.
    """

    items: tuple[tuple[str, float], ...] = ()

    @classmethod
    def from_mapping(cls, weights: Mapping[str, float]) -> ChainWeights:
        return cls(items=tuple((c, float(w)) for c, w in weights.items()))

    @property
    def chains(self) -> tuple[str, ...]:
        return tuple(c for c, _ in self.items)

    @property
    def scores(self) -> tuple[float, ...]:
        return tuple(w for _, w in self.items)

    def get(self, chain: str, default: float | None = None) -> float | None:
        for c, w in self.items:
            if c == chain:
                return w
        return default

    def as_dict(self) -> dict[str, float]:
        return dict(self.items)

    def __contains__(self, chain: object) -> bool:
        return any(c == chain for c, _ in self.items)

    def __iter__(self) -> Iterator[tuple[str, float]]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)


class CommunityConfig(BaseModel):
    """Validated inputs of one community detection run."""

    model_config = ConfigDict(frozen=True)

    algorithm: Algorithm = "leiden"
    resolution: float = 1.0
    weight: WeightField = "ncweight"
    metric: Metric = "average"
    chains: tuple[Chain, ...] = Field(default=("CDR3b",), min_length=1, max_length=2)
    seed: int | None = None
    n_iterations: int = 100


@dataclass(frozen=True)
class CommunitySummary:
    """Per-community statistics in wide (one row per community) and tall
    (one row per community x sample) layouts."""

    wide: pd.DataFrame
    tall: pd.DataFrame


@dataclass(frozen=True)
class CommunityResult:
    """Everything produced by one ``detect_communities`` call."""

    community_occupancy_matrix: pd.DataFrame
    community_summary: CommunitySummary
    node_summary: pd.DataFrame
    graph: nx.Graph
    input_config: CommunityConfig
    input_graph: nx.Graph | None = None
    stats: dict[str, Any] = field(default_factory=dict)

    @property
    def n_communities(self) -> int:
        return int(self.community_occupancy_matrix.shape[0])
