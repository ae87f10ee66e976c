"""
graph/nodes.py - Asset graph nodes

Nodes are either source assets (present on disk, never produced by the
build) or generated assets (produced by one invocation of a build phase).
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Set

from ..core.asset_id import AssetId


class NodeKind(Enum):
    """Variant of an asset node."""
    SOURCE = "source"
    GENERATED = "generated"


@dataclass
class AssetNode(ABC):
    """Base node: an asset and the assets generated by reading it."""
    id: AssetId

    # Forward edges: assets generated from reading this one
    outputs: Set[AssetId] = field(default_factory=set)

    @property
    @abstractmethod
    def kind(self) -> NodeKind:
        """Which variant this node is."""

    def __hash__(self):
        return hash(self.id)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": str(self.id),
            "kind": self.kind.value,
            "outputs": sorted(str(o) for o in self.outputs),
        }


@dataclass
class SourceAssetNode(AssetNode):
    """An asset that exists before the build runs."""

    @property
    def kind(self) -> NodeKind:
        return NodeKind.SOURCE

    def __hash__(self):
        return hash(self.id)


@dataclass
class GeneratedAssetNode(AssetNode):
    """An asset produced by a build phase."""
    phase_number: int = 0
    primary_input: Optional[AssetId] = None

    # Backward edges: every asset read while producing this one
    inputs: Set[AssetId] = field(default_factory=set)

    @property
    def kind(self) -> NodeKind:
        return NodeKind.GENERATED

    def __hash__(self):
        return hash(self.id)

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data.update({
            "phase_number": self.phase_number,
            "primary_input": str(self.primary_input) if self.primary_input else None,
            "inputs": sorted(str(i) for i in self.inputs),
        })
        return data
