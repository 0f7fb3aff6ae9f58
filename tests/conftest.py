# tests/conftest.py - v1
"""Shared fixtures: small synthetic clone graphs.

No I/O beyond pytest's tmp_path; every graph is built in memory.
"""

from __future__ import annotations

from itertools import combinations

import networkx as nx
import pytest


def add_clone(graph: nx.MultiGraph, name: str, sample: str, size: int, **meta) -> None:
    graph.add_node(name, sample=sample, clone_size=size, **meta)


def add_chain_edge(
    graph: nx.MultiGraph,
    u: str,
    v: str,
    chain: str,
    nweight: float | None,
    ncweight: float | None = None,
) -> None:
    graph.add_edge(
        u,
        v,
        chain=chain,
        weight=None if nweight is None else nweight * 100,
        nweight=nweight,
        cweight=None if ncweight is None else ncweight * 100,
        ncweight=nweight if ncweight is None else ncweight,
    )


@pytest.fixture
def example_graph() -> nx.MultiGraph:
    """Three clones: A-B linked on both chains, B-C on CDR3a only."""
    g = nx.MultiGraph()
    add_clone(g, "A", "x", 3)
    add_clone(g, "B", "x", 5)
    add_clone(g, "C", "y", 2)
    add_chain_edge(g, "A", "B", "CDR3a", 0.9)
    add_chain_edge(g, "A", "B", "CDR3b", 0.8)
    add_chain_edge(g, "B", "C", "CDR3a", 0.1)
    return g


A_CLUSTER = [("a1", "x", 3), ("a2", "x", 2), ("a3", "y", 4), ("a4", "y", 1)]
B_CLUSTER = [("b1", "x", 5), ("b2", "y", 5), ("b3", "y", 2), ("b4", "z", 1)]


@pytest.fixture
def two_cluster_graph() -> nx.MultiGraph:
    """Two dense four-clone clusters, a weak bridge and one isolated clone.

    a-cluster: every pair has CDR3a=0.9 and CDR3b=0.7.
    b-cluster: every pair has CDR3a=0.6; only the pairs touching b1 add CDR3b=0.4.
    Bridge a4-b1: CDR3a=0.05. Clone "s" (sample z, 7 cells) has no edges.
    """
    g = nx.MultiGraph()
    for name, sample, size in A_CLUSTER + B_CLUSTER:
        add_clone(g, name, sample, size, v_gene="TRBV5-1")
    add_clone(g, "s", "z", 7, v_gene="TRBV7-2")

    for (u, _, _), (v, _, _) in combinations(A_CLUSTER, 2):
        add_chain_edge(g, u, v, "CDR3a", 0.9)
        add_chain_edge(g, u, v, "CDR3b", 0.7)

    for (u, _, _), (v, _, _) in combinations(B_CLUSTER, 2):
        add_chain_edge(g, u, v, "CDR3a", 0.6)
        if "b1" in (u, v):
            add_chain_edge(g, u, v, "CDR3b", 0.4)

    add_chain_edge(g, "a4", "b1", "CDR3a", 0.05)
    return g


@pytest.fixture
def cluster_labels() -> dict[str, int]:
    """Expected partition of two_cluster_graph, as explicit labels."""
    labels = {name: 1 for name, _, _ in A_CLUSTER}
    labels.update({name: 2 for name, _, _ in B_CLUSTER})
    labels["s"] = 3
    return labels
