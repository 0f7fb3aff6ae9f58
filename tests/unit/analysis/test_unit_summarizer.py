# tests/unit/analysis/test_unit_summarizer.py - v1
"""Tests for analysis/summarizer.py - vertex/edge statistics, wide and tall layouts."""

from __future__ import annotations

import networkx as nx
import pandas as pd
import pytest

from irrgraph.analysis.summarizer import (
    community_edge_stats,
    edge_stats,
    summarize_communities,
    vertex_stats_tall,
    vertex_stats_wide,
)
from irrgraph.analysis.nodes import node_table
from irrgraph.core.errors import DataError
from irrgraph.core.models import CommunitySummary
from irrgraph.graph.consolidator import consolidate_edges

BOTH = ["CDR3a", "CDR3b"]


@pytest.fixture
def labelled(two_cluster_graph, cluster_labels):
    cg = consolidate_edges(two_cluster_graph, "nweight", BOTH, "average")
    g = cg.copy()
    nx.set_node_attributes(g, cluster_labels, "community")
    return nx.freeze(g)


@pytest.fixture
def summary(labelled) -> CommunitySummary:
    return summarize_communities(labelled, BOTH)


def _row(df, community):
    return df.loc[df["community"] == community].iloc[0]


class TestEdgeStats:
    def test_both_chain_cluster(self, labelled):
        es = edge_stats(labelled, BOTH)
        a = _row(es, 1)
        assert a["w"] == pytest.approx(0.8)
        assert a["w_CDR3a"] == pytest.approx(0.9)
        assert a["w_CDR3b"] == pytest.approx(0.7)
        assert a["n_CDR3a"] == 6
        assert a["n_CDR3b"] == 6

    def test_partial_chain_cluster_uses_all_edges_as_denominator(self, labelled):
        b = _row(edge_stats(labelled, BOTH), 2)
        assert b["w"] == pytest.approx((3 * 0.5 + 3 * 0.6) / 6)
        assert b["w_CDR3a"] == pytest.approx(0.6)
        assert b["w_CDR3b"] == pytest.approx(3 * 0.4 / 6)
        assert b["n_CDR3a"] == 6
        assert b["n_CDR3b"] == 3

    def test_singleton_all_zero(self, labelled):
        s = _row(edge_stats(labelled, BOTH), 3)
        assert s["w"] == 0
        assert s["w_CDR3a"] == 0 and s["w_CDR3b"] == 0
        assert s["n_CDR3a"] == 0 and s["n_CDR3b"] == 0

    def test_bridge_edge_not_counted(self, labelled):
        es = edge_stats(labelled, BOTH)
        assert es["n_CDR3a"].sum() == 12

    def test_multi_node_community_without_edges(self):
        g = nx.Graph()
        g.add_node("A", sample="x", clone_size=1, community=5)
        g.add_node("B", sample="x", clone_size=1, community=5)
        stats = community_edge_stats(g, ["CDR3b"])
        assert stats == {"w": 0.0, "w_CDR3b": 0.0, "n_CDR3b": 0}

    def test_columns_follow_chain_order(self, labelled):
        es = edge_stats(labelled, ["CDR3b", "CDR3a"])
        assert list(es.columns) == [
            "community", "w", "w_CDR3b", "w_CDR3a", "n_CDR3b", "n_CDR3a",
        ]

    def test_non_contiguous_labels(self, labelled):
        g = labelled.copy()
        nx.set_node_attributes(g, {n: 40 for n in ("a1", "a2", "a3", "a4")}, "community")
        nx.set_node_attributes(g, {"s": -3}, "community")
        es = edge_stats(g, BOTH)
        assert sorted(es["community"]) == [-3, 2, 40]
        assert _row(es, 40)["n_CDR3b"] == 6


class TestVertexStats:
    def test_tall_zero_filled_cross_product(self, labelled):
        tall = vertex_stats_tall(node_table(labelled))
        assert len(tall) == 3 * 3
        s_x = tall[(tall["community"] == 3) & (tall["sample"] == "x")].iloc[0]
        assert s_x["clones"] == 0 and s_x["cells"] == 0

    def test_tall_counts(self, labelled):
        tall = vertex_stats_tall(node_table(labelled))
        a_y = tall[(tall["community"] == 1) & (tall["sample"] == "y")].iloc[0]
        assert a_y["clones"] == 2
        assert a_y["cells"] == 5

    def test_wide_columns(self, labelled):
        wide = vertex_stats_wide(vertex_stats_tall(node_table(labelled)))
        assert list(wide.columns) == [
            "community",
            "clones_x", "clones_y", "clones_z", "clones_n",
            "cells_x", "cells_y", "cells_z", "cells_n",
        ]
        b = _row(wide, 2)
        assert b["clones_n"] == 4
        assert b["cells_n"] == 13
        assert b["cells_z"] == 1


class TestSummarizeCommunities:
    def test_returns_summary(self, summary):
        assert isinstance(summary, CommunitySummary)
        assert list(summary.wide["community"]) == [1, 2, 3]

    def test_wide_has_vertex_and_edge_columns(self, summary):
        for col in ("clones_n", "cells_n", "w", "w_CDR3a", "n_CDR3b"):
            assert col in summary.wide.columns

    def test_singleton_row_kept_with_zero_edge_stats(self, summary):
        s = _row(summary.wide, 3)
        assert s["cells_n"] == 7
        assert s["w"] == 0 and s["n_CDR3a"] == 0

    def test_tall_totals_match_wide(self, summary):
        totals = summary.tall.groupby("community")[["clones", "cells"]].sum()
        wide = summary.wide.set_index("community")
        pd.testing.assert_series_equal(
            totals["clones"], wide["clones_n"], check_names=False
        )
        pd.testing.assert_series_equal(
            totals["cells"], wide["cells_n"], check_names=False
        )

    def test_tall_repeats_edge_stats_per_sample(self, summary):
        a_rows = summary.tall[summary.tall["community"] == 1]
        assert len(a_rows) == 3
        assert a_rows["w"].tolist() == pytest.approx([0.8] * 3)

    def test_count_columns_are_integers(self, summary):
        for col in ("clones_n", "cells_n", "n_CDR3a", "n_CDR3b"):
            assert pd.api.types.is_integer_dtype(summary.wide[col])
        for col in ("clones", "cells", "n_CDR3a"):
            assert pd.api.types.is_integer_dtype(summary.tall[col])


class TestNodeTable:
    def test_id_column_first(self, labelled):
        nodes = node_table(labelled)
        assert nodes.columns[0] == "node"
        assert set(nodes["node"]) == set(labelled.nodes)

    def test_metadata_passed_through(self, labelled):
        nodes = node_table(labelled).set_index("node")
        assert nodes.loc["s", "v_gene"] == "TRBV7-2"
        assert nodes.loc["a1", "v_gene"] == "TRBV5-1"

    def test_attribute_shadowing_id_rejected(self):
        g = nx.Graph()
        g.add_node("A", sample="x", clone_size=1, node="meta")
        g.add_node("B", sample="x", clone_size=2)
        with pytest.raises(DataError, match="reserved"):
            node_table(g)

    def test_empty_graph(self):
        assert list(node_table(nx.Graph()).columns) == ["node"]


class TestReservedSampleName:
    def test_sample_named_n_rejected(self):
        g = nx.Graph()
        g.add_node("A", sample="n", clone_size=1, community=1)
        g.add_node("B", sample="x", clone_size=2, community=1)
        g.add_node("C", sample="x", clone_size=3, community=2)
        tall = vertex_stats_tall(node_table(g))
        with pytest.raises(DataError, match="reserved"):
            vertex_stats_wide(tall)
