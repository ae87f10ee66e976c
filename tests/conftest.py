"""
buildgraph Test Configuration and Fixtures

Provides the phase sequence and asset graph used across the
requiredness tests.
"""

import pytest

from buildgraph.core import AssetId, BuildPhase
from buildgraph.graph import AssetGraph


PACKAGE = "app"


def asset(path: str, package: str = PACKAGE) -> AssetId:
    """Shorthand for an AssetId in the test package."""
    return AssetId(package, path)


@pytest.fixture
def phases():
    """
    P0 non-optional, P1 optional, P2 optional, P3 non-optional.
    """
    return [
        BuildPhase("compile", is_optional=False),
        BuildPhase("summarize", is_optional=True),
        BuildPhase("split", is_optional=True),
        BuildPhase("bundle", is_optional=False),
    ]


@pytest.fixture
def scenario_graph():
    """
    src.txt -P0-> x -P1-> y -P2-> z1, z2 (primary input y); z2 -P3-> bundle.

    Nothing reads z1.
    """
    graph = AssetGraph()
    graph.add_source(asset("src.txt"))
    graph.add_generated(asset("x"), 0, primary_input=asset("src.txt"))
    graph.add_generated(asset("y"), 1, primary_input=asset("x"))
    graph.add_generated(asset("z1"), 2, primary_input=asset("y"))
    graph.add_generated(asset("z2"), 2, primary_input=asset("y"))
    graph.add_generated(asset("bundle"), 3, primary_input=asset("z2"))
    return graph
