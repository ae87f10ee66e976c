"""Core identifier and phase types."""

from .asset_id import AssetId
from .phases import BuildPhase, phase_at

__all__ = [
    "AssetId",
    "BuildPhase",
    "phase_at",
]
