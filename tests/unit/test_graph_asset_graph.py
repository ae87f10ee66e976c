"""
Unit tests for graph/asset_graph.py and graph/nodes.py
"""

import networkx as nx
import pytest

from buildgraph.core import AssetId
from buildgraph.errors import AssetNotFoundError, DuplicateAssetError
from buildgraph.graph import (
    AssetGraph,
    AssetNode,
    GeneratedAssetNode,
    NodeKind,
    SourceAssetNode,
)


def asset(path: str, package: str = "app") -> AssetId:
    return AssetId(package, path)


class TestNodes:
    """Test node variants."""

    def test_base_node_is_abstract(self):
        """Test a node must be one of the concrete variants."""
        with pytest.raises(TypeError):
            AssetNode(id=asset("a.txt"))

    def test_source_kind(self):
        node = SourceAssetNode(id=asset("a.txt"))
        assert node.kind == NodeKind.SOURCE
        assert node.outputs == set()

    def test_generated_kind(self):
        node = GeneratedAssetNode(id=asset("a.g"), phase_number=2, primary_input=asset("a.txt"))
        assert node.kind == NodeKind.GENERATED
        assert node.phase_number == 2

    def test_hashable(self):
        node = SourceAssetNode(id=asset("a.txt"))
        assert node in {node}

    def test_to_dict(self):
        node = GeneratedAssetNode(id=asset("a.g"), phase_number=1, primary_input=asset("a.txt"))
        data = node.to_dict()
        assert data["kind"] == "generated"
        assert data["primary_input"] == "app|a.txt"
        assert data["phase_number"] == 1


class TestAssetGraphConstruction:
    """Test adding and removing assets."""

    def test_add_source(self):
        graph = AssetGraph()
        node = graph.add_source(asset("a.txt"))
        assert graph.get(asset("a.txt")) is node
        assert asset("a.txt") in graph
        assert len(graph) == 1

    def test_add_duplicate_raises(self):
        graph = AssetGraph()
        graph.add_source(asset("a.txt"))
        with pytest.raises(DuplicateAssetError):
            graph.add_source(asset("a.txt"))

    def test_add_generated_links_primary_input(self):
        """Test the primary input gains the generated asset as an output."""
        graph = AssetGraph()
        graph.add_source(asset("a.txt"))
        node = graph.add_generated(asset("a.g"), 0, primary_input=asset("a.txt"))

        assert node.primary_input == asset("a.txt")
        assert node.inputs == {asset("a.txt")}
        assert graph.get(asset("a.txt")).outputs == {asset("a.g")}
        assert graph.graph.has_edge(asset("a.txt"), asset("a.g"))

    def test_add_generated_extra_inputs(self):
        graph = AssetGraph()
        graph.add_source(asset("a.txt"))
        graph.add_source(asset("b.txt"))
        node = graph.add_generated(
            asset("a.g"), 0, primary_input=asset("a.txt"), inputs=[asset("b.txt")]
        )
        assert node.inputs == {asset("a.txt"), asset("b.txt")}
        assert asset("a.g") in graph.get(asset("b.txt")).outputs

    def test_add_generated_unknown_input(self):
        """Test an unknown primary input is rejected before anything is added."""
        graph = AssetGraph()
        with pytest.raises(AssetNotFoundError):
            graph.add_generated(asset("a.g"), 0, primary_input=asset("missing"))
        assert asset("a.g") not in graph

    def test_add_input_unknown_output(self):
        graph = AssetGraph()
        graph.add_source(asset("a.txt"))
        with pytest.raises(AssetNotFoundError):
            graph.add_input(asset("missing"), asset("a.txt"))

    def test_remove_input(self):
        graph = AssetGraph()
        graph.add_source(asset("a.txt"))
        graph.add_source(asset("b.txt"))
        graph.add_generated(asset("a.g"), 0, primary_input=asset("a.txt"), inputs=[asset("b.txt")])

        graph.remove_input(asset("a.g"), asset("b.txt"))

        assert graph.get(asset("b.txt")).outputs == set()
        assert graph.get(asset("a.g")).inputs == {asset("a.txt")}
        assert not graph.graph.has_edge(asset("b.txt"), asset("a.g"))

    def test_remove_clears_edges(self):
        graph = AssetGraph()
        graph.add_source(asset("a.txt"))
        graph.add_generated(asset("a.g"), 0, primary_input=asset("a.txt"))
        graph.add_generated(asset("a.gg"), 1, primary_input=asset("a.g"))

        graph.remove(asset("a.g"))

        assert asset("a.g") not in graph
        assert graph.get(asset("a.txt")).outputs == set()
        assert graph.get(asset("a.gg")).inputs == set()
        assert graph.outputs_for_phase("app", 0) == []

    def test_remove_unknown(self):
        with pytest.raises(AssetNotFoundError):
            AssetGraph().remove(asset("missing"))


class TestAssetGraphQueries:
    """Test lookups."""

    def test_get_unknown_returns_none(self):
        assert AssetGraph().get(asset("missing")) is None
        assert not AssetGraph().contains(asset("missing"))

    def test_outputs_for_phase_scoped_by_package(self):
        graph = AssetGraph()
        graph.add_source(asset("a.txt"))
        graph.add_source(asset("a.txt", package="lib"))
        graph.add_generated(asset("a.g"), 0, primary_input=asset("a.txt"))
        graph.add_generated(asset("a.h"), 0, primary_input=asset("a.txt"))
        graph.add_generated(asset("a.g", package="lib"), 0, primary_input=asset("a.txt", package="lib"))
        graph.add_generated(asset("a.x"), 1, primary_input=asset("a.txt"))

        ids = [n.id for n in graph.outputs_for_phase("app", 0)]
        assert ids == [asset("a.g"), asset("a.h")]
        assert [n.id for n in graph.outputs_for_phase("lib", 0)] == [asset("a.g", package="lib")]
        assert graph.outputs_for_phase("app", 5) == []

    def test_outputs_for_phase_tracks_changes(self):
        """Test repeated lookups see additions and removals, and return copies."""
        graph = AssetGraph()
        graph.add_source(asset("a.txt"))
        graph.add_generated(asset("b.g"), 0, primary_input=asset("a.txt"))
        first = graph.outputs_for_phase("app", 0)
        first.clear()
        assert [n.id for n in graph.outputs_for_phase("app", 0)] == [asset("b.g")]

        graph.add_generated(asset("a.g"), 0, primary_input=asset("a.txt"))
        assert [n.id for n in graph.outputs_for_phase("app", 0)] == [asset("a.g"), asset("b.g")]

        graph.remove(asset("b.g"))
        assert [n.id for n in graph.outputs_for_phase("app", 0)] == [asset("a.g")]

    def test_iteration_sorted(self):
        graph = AssetGraph()
        graph.add_source(asset("b.txt"))
        graph.add_source(asset("a.txt"))
        assert list(graph) == [asset("a.txt"), asset("b.txt")]

    def test_generated_nodes(self, scenario_graph):
        paths = [n.id.path for n in scenario_graph.generated_nodes()]
        assert paths == ["bundle", "x", "y", "z1", "z2"]

    def test_find_cycles(self):
        graph = AssetGraph()
        graph.add_source(asset("s"))
        graph.add_generated(asset("a"), 0, primary_input=asset("s"))
        graph.add_generated(asset("b"), 0, primary_input=asset("a"))
        assert graph.find_cycles() == []

        graph.add_input(asset("a"), asset("b"))
        cycles = graph.find_cycles()
        assert len(cycles) == 1
        assert set(cycles[0]) == {asset("a"), asset("b")}

    def test_underlying_graph(self, scenario_graph):
        assert isinstance(scenario_graph.graph, nx.DiGraph)
        assert scenario_graph.graph.number_of_edges() == 5
