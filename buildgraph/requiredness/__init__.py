"""
requiredness/ - Required-output classification

Provides:
- RequirednessClassifier: memoized, cycle-safe requiredness queries
- SynchronizedRequirednessClassifier: lock-guarded variant
- create_classifier: config-driven factory
"""

from .classifier import (
    AssetGraphView,
    ClassifierStats,
    RequirednessClassifier,
    SynchronizedRequirednessClassifier,
    create_classifier,
)

__all__ = [
    "AssetGraphView",
    "ClassifierStats",
    "RequirednessClassifier",
    "SynchronizedRequirednessClassifier",
    "create_classifier",
]
