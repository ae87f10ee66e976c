"""
errors/taxonomy.py - Error classification system

Every failure the package raises is a BuildGraphError carrying a code and
category, so hosts can report them in a structured way. Cycles in the
asset graph are not errors and have no entry here.
"""

from __future__ import annotations
from enum import Enum
from typing import Any, Dict, Optional


class ErrorCategory(Enum):
    """Error categories."""
    # Validation errors (1xxx)
    VALIDATION = "validation"

    # Graph contract errors (2xxx)
    GRAPH = "graph"

    # Phase errors (3xxx)
    PHASE = "phase"

    # Configuration errors (6xxx)
    CONFIGURATION = "configuration"


class ErrorCode(Enum):
    """Specific error codes."""

    # Validation (1xxx)
    VAL_ASSET_ID = 1001

    # Graph (2xxx)
    GRA_ASSET_NOT_FOUND = 2001
    GRA_DUPLICATE_ASSET = 2002

    # Phase (3xxx)
    PHS_INVALID_INDEX = 3001

    # System (6xxx)
    SYS_CONFIG = 6001


class BuildGraphError(Exception):
    """Base exception for build graph errors."""

    code: ErrorCode = ErrorCode.VAL_ASSET_ID
    category: ErrorCategory = ErrorCategory.VALIDATION

    def __init__(self, message: str, asset_id: Optional[Any] = None):
        self.message = message
        self.asset_id = asset_id
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code.value,
            "category": self.category.value,
            "message": self.message,
            "asset_id": str(self.asset_id) if self.asset_id is not None else None,
        }


class InvalidAssetIdError(BuildGraphError):
    """Raised when an asset id is malformed."""
    code = ErrorCode.VAL_ASSET_ID
    category = ErrorCategory.VALIDATION


class AssetNotFoundError(BuildGraphError):
    """Raised when an asset id does not resolve to any node in the graph."""
    code = ErrorCode.GRA_ASSET_NOT_FOUND
    category = ErrorCategory.GRAPH

    def __init__(self, asset_id: Any):
        super().__init__(f"Asset not found in graph: {asset_id}", asset_id=asset_id)


class DuplicateAssetError(BuildGraphError):
    """Raised when an asset id is added to a graph twice."""
    code = ErrorCode.GRA_DUPLICATE_ASSET
    category = ErrorCategory.GRAPH

    def __init__(self, asset_id: Any):
        super().__init__(f"Asset already in graph: {asset_id}", asset_id=asset_id)


class InvalidPhaseIndexError(BuildGraphError):
    """Raised when a generated node refers to a phase outside the sequence."""
    code = ErrorCode.PHS_INVALID_INDEX
    category = ErrorCategory.PHASE

    def __init__(self, phase_number: int, phase_count: int, asset_id: Optional[Any] = None):
        self.phase_number = phase_number
        self.phase_count = phase_count
        super().__init__(
            f"Phase index {phase_number} out of range for {phase_count} phases",
            asset_id=asset_id,
        )

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["phase_number"] = self.phase_number
        data["phase_count"] = self.phase_count
        return data


class ConfigurationError(BuildGraphError):
    """Raised when configuration cannot be loaded."""
    code = ErrorCode.SYS_CONFIG
    category = ErrorCategory.CONFIGURATION
