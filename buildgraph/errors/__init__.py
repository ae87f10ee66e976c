"""
errors/ - Error Taxonomy

Structured exception hierarchy for graph contract violations,
malformed identifiers and configuration problems.
"""

from .taxonomy import (
    ErrorCategory,
    ErrorCode,
    BuildGraphError,
    InvalidAssetIdError,
    AssetNotFoundError,
    DuplicateAssetError,
    InvalidPhaseIndexError,
    ConfigurationError,
)

__all__ = [
    "ErrorCategory",
    "ErrorCode",
    "BuildGraphError",
    "InvalidAssetIdError",
    "AssetNotFoundError",
    "DuplicateAssetError",
    "InvalidPhaseIndexError",
    "ConfigurationError",
]
