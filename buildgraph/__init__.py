"""
buildgraph: required-output classification for incremental builds.

Main interface: RequirednessClassifier
"""

__version__ = "0.1.0"

from .core import AssetId, BuildPhase
from .graph import AssetGraph, GeneratedAssetNode, SourceAssetNode
from .requiredness import (
    RequirednessClassifier,
    SynchronizedRequirednessClassifier,
    create_classifier,
)

__all__ = [
    "AssetId",
    "BuildPhase",
    "AssetGraph",
    "GeneratedAssetNode",
    "SourceAssetNode",
    "RequirednessClassifier",
    "SynchronizedRequirednessClassifier",
    "create_classifier",
]
