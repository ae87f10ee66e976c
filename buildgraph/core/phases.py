"""
core/phases.py - Build phases

A build phase is one stage of the build pipeline. Phases are held in a
fixed, ordered sequence; generated assets refer to the phase that produced
them by index into that sequence.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, Sequence

from ..errors.taxonomy import InvalidPhaseIndexError


@dataclass(frozen=True)
class BuildPhase:
    """One stage of the build pipeline."""
    name: str
    is_optional: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "is_optional": self.is_optional,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BuildPhase":
        return cls(
            name=data["name"],
            is_optional=data.get("is_optional", False),
        )


def phase_at(phases: Sequence[BuildPhase], phase_number: int) -> BuildPhase:
    """
    Look up a phase by index.

    Negative indices are rejected rather than wrapped around.

    Raises:
        InvalidPhaseIndexError: If phase_number is outside the sequence
    """
    if phase_number < 0 or phase_number >= len(phases):
        raise InvalidPhaseIndexError(phase_number, len(phases))
    return phases[phase_number]
