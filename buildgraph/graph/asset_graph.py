"""
graph/asset_graph.py - In-memory asset graph

Edges run from an input asset to each asset generated by reading it.
The networkx graph holds the edge structure; each networkx node carries
its AssetNode under the "node" attribute, whose `outputs` / `inputs`
sets mirror the edges for direct lookups.
"""

from __future__ import annotations
from collections import defaultdict
from typing import Dict, Iterable, Iterator, List, Optional, Set, Tuple
import logging

import networkx as nx

from ..core.asset_id import AssetId
from ..errors.taxonomy import AssetNotFoundError, DuplicateAssetError
from .nodes import AssetNode, GeneratedAssetNode, SourceAssetNode

__all__ = ['AssetGraph']

logger = logging.getLogger(__name__)


class AssetGraph:
    """
    Graph of source and generated assets.

    Usage:
        graph = AssetGraph()
        graph.add_source(lib)
        graph.add_generated(lib_g, phase_number=0, primary_input=lib)

        for node in graph.outputs_for_phase("app", 0):
            ...
    """

    def __init__(self):
        self._graph = nx.DiGraph()
        # (package, phase_number) -> generated asset ids
        self._by_phase: Dict[Tuple[str, int], Set[AssetId]] = defaultdict(set)
        # Sorted nodes per phase key, rebuilt after the key changes
        self._phase_nodes: Dict[Tuple[str, int], List[GeneratedAssetNode]] = {}

    @property
    def graph(self) -> nx.DiGraph:
        """Get the underlying networkx graph."""
        return self._graph

    # =========================================================================
    # CONSTRUCTION
    # =========================================================================

    def add_source(self, asset_id: AssetId) -> SourceAssetNode:
        """Add a source asset."""
        node = SourceAssetNode(id=asset_id)
        self._add_node(node)
        return node

    def add_generated(
        self,
        asset_id: AssetId,
        phase_number: int,
        primary_input: AssetId,
        inputs: Iterable[AssetId] = (),
    ) -> GeneratedAssetNode:
        """
        Add an asset generated by a phase invocation.

        The primary input is always recorded as an input.

        Args:
            asset_id: The generated asset
            phase_number: Index of the producing phase
            primary_input: Asset that triggered the phase invocation
            inputs: Further assets read by the invocation

        Raises:
            DuplicateAssetError: If asset_id is already in the graph
            AssetNotFoundError: If primary_input or any input is unknown
        """
        inputs = list(inputs)
        for input_id in [primary_input, *inputs]:
            if input_id not in self._graph:
                raise AssetNotFoundError(input_id)

        node = GeneratedAssetNode(
            id=asset_id,
            phase_number=phase_number,
            primary_input=primary_input,
        )
        self._add_node(node)
        self._by_phase[(asset_id.package, phase_number)].add(asset_id)
        self._phase_nodes.pop((asset_id.package, phase_number), None)

        self.add_input(asset_id, primary_input)
        for input_id in inputs:
            self.add_input(asset_id, input_id)

        return node

    def add_input(self, output: AssetId, input_id: AssetId) -> None:
        """Record that `output` was generated by reading `input_id`."""
        output_node = self._require(output)
        input_node = self._require(input_id)

        input_node.outputs.add(output)
        if isinstance(output_node, GeneratedAssetNode):
            output_node.inputs.add(input_id)
        self._graph.add_edge(input_id, output)

    def remove_input(self, output: AssetId, input_id: AssetId) -> None:
        """Drop the edge from `input_id` to `output` if present."""
        output_node = self._require(output)
        input_node = self._require(input_id)

        input_node.outputs.discard(output)
        if isinstance(output_node, GeneratedAssetNode):
            output_node.inputs.discard(input_id)
        if self._graph.has_edge(input_id, output):
            self._graph.remove_edge(input_id, output)

    def remove(self, asset_id: AssetId) -> AssetNode:
        """
        Remove an asset and every edge touching it.

        Generated assets whose primary input is removed keep their
        primary_input reference; removing them is the caller's decision.
        """
        node = self._require(asset_id)

        for input_id in list(self._graph.predecessors(asset_id)):
            self.get(input_id).outputs.discard(asset_id)
        for output in list(self._graph.successors(asset_id)):
            output_node = self.get(output)
            if isinstance(output_node, GeneratedAssetNode):
                output_node.inputs.discard(asset_id)

        if isinstance(node, GeneratedAssetNode):
            self._by_phase[(asset_id.package, node.phase_number)].discard(asset_id)
            self._phase_nodes.pop((asset_id.package, node.phase_number), None)

        self._graph.remove_node(asset_id)
        logger.debug(f"Removed asset {asset_id}")
        return node

    # =========================================================================
    # QUERIES
    # =========================================================================

    def get(self, asset_id: AssetId) -> Optional[AssetNode]:
        """Get the node for an asset, or None if unknown."""
        data = self._graph.nodes.get(asset_id)
        return data["node"] if data is not None else None

    def contains(self, asset_id: AssetId) -> bool:
        return asset_id in self._graph

    def outputs_for_phase(self, package: str, phase_number: int) -> List[GeneratedAssetNode]:
        """All generated nodes produced by a phase within one package."""
        key = (package, phase_number)
        nodes = self._phase_nodes.get(key)
        if nodes is None:
            nodes = [self.get(asset_id) for asset_id in sorted(self._by_phase.get(key, ()))]
            self._phase_nodes[key] = nodes
        return list(nodes)

    def find_cycles(self) -> List[List[AssetId]]:
        """Return every elementary cycle of input -> output edges."""
        return [list(cycle) for cycle in nx.simple_cycles(self._graph)]

    def generated_nodes(self) -> List[GeneratedAssetNode]:
        return [
            node for node in (self.get(a) for a in sorted(self._graph.nodes))
            if isinstance(node, GeneratedAssetNode)
        ]

    def __contains__(self, asset_id: object) -> bool:
        return asset_id in self._graph

    def __len__(self) -> int:
        return self._graph.number_of_nodes()

    def __iter__(self) -> Iterator[AssetId]:
        return iter(sorted(self._graph.nodes))

    # =========================================================================
    # INTERNALS
    # =========================================================================

    def _add_node(self, node: AssetNode) -> None:
        if node.id in self._graph:
            raise DuplicateAssetError(node.id)
        self._graph.add_node(node.id, node=node)
        logger.debug(f"Added {node.kind.value} asset {node.id}")

    def _require(self, asset_id: AssetId) -> AssetNode:
        node = self.get(asset_id)
        if node is None:
            raise AssetNotFoundError(asset_id)
        return node
