"""
graph/ - Asset graph

Provides:
- AssetGraph: networkx-backed graph of source and generated assets
- AssetNode / SourceAssetNode / GeneratedAssetNode: node variants
"""

from .nodes import (
    NodeKind,
    AssetNode,
    SourceAssetNode,
    GeneratedAssetNode,
)
from .asset_graph import AssetGraph

__all__ = [
    "NodeKind",
    "AssetNode",
    "SourceAssetNode",
    "GeneratedAssetNode",
    "AssetGraph",
]
