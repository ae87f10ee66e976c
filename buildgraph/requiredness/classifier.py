"""
requiredness/classifier.py - Required-output classification

An output of an optional build phase is required if:
- Any asset generated by reading it is required.
- It was produced by the same phase invocation (same phase, same primary
  input) as a required output.

Outputs of non-optional phases and source assets are always required.

Non-required optional outputs may still exist in the generated directory
and in the graph, but the host should not serve them, copy them into
merged output directories, or let their failures fail the build.
"""

from __future__ import annotations
from dataclasses import dataclass
from itertools import chain
from typing import (
    TYPE_CHECKING, Any, Dict, Iterable, Iterator, List, Optional, Protocol, Sequence, Set,
)
import logging
import threading

from ..core.asset_id import AssetId
from ..core.phases import BuildPhase, phase_at
from ..errors.taxonomy import AssetNotFoundError
from ..graph.nodes import AssetNode, GeneratedAssetNode

if TYPE_CHECKING:
    from ..bootstrap.config import ClassifierConfig

logger = logging.getLogger(__name__)


class AssetGraphView(Protocol):
    """The part of an asset graph the classifier reads."""

    def get(self, asset_id: AssetId) -> Optional[AssetNode]:
        ...

    def outputs_for_phase(self, package: str, phase_number: int) -> Iterable[GeneratedAssetNode]:
        ...


@dataclass
class ClassifierStats:
    """Counters for one classifier instance."""
    evaluations: int = 0
    cache_hits: int = 0
    cycle_guards: int = 0
    resets: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "evaluations": self.evaluations,
            "cache_hits": self.cache_hits,
            "cycle_guards": self.cycle_guards,
            "resets": self.resets,
        }


class RequirednessClassifier:
    """
    Cache of which optional outputs are required in the current build.

    The graph and phases are treated as unchanging until reset() is called.
    Not safe for concurrent use; see SynchronizedRequirednessClassifier.
    """

    def __init__(
        self,
        asset_graph: AssetGraphView,
        build_phases: Sequence[BuildPhase],
        trace_verdicts: bool = False,
    ):
        self._graph = asset_graph
        self._phases = build_phases
        self._trace = trace_verdicts
        self._checked_outputs: Dict[AssetId, bool] = {}
        self.stats = ClassifierStats()

    def is_required(self, output: AssetId) -> bool:
        """
        Returns whether `output` is required.

        Crawls assets generated from `output`, and other outputs of the same
        phase invocation, until one of them is required.

        Raises:
            AssetNotFoundError: If `output`, or an asset reached from it,
                is not in the graph
            InvalidPhaseIndexError: If a generated node names an unknown phase
        """
        return self._is_required(output, set())

    def required_outputs(self, outputs: Iterable[AssetId]) -> List[AssetId]:
        """The subset of `outputs` that are required, in input order."""
        return [output for output in outputs if self.is_required(output)]

    def cached_verdict(self, output: AssetId) -> Optional[bool]:
        """Cached verdict for `output`, without traversing the graph."""
        return self._checked_outputs.get(output)

    def reset(self) -> None:
        """
        Clears the cache of which assets were required.

        Must be called between builds when the classifier is reused.
        """
        logger.debug(f"Resetting requiredness cache ({len(self._checked_outputs)} entries)")
        self._checked_outputs.clear()
        self.stats.resets += 1

    def _is_required(self, output: AssetId, currently_checking: Set[AssetId]) -> bool:
        """
        Depth-first search with an explicit stack of frames.

        Each frame is an optional output under evaluation; its candidates
        are its downstream assets, then its siblings, consumed in order.
        """
        verdict, node = self._visit(output, currently_checking)
        if verdict is not None:
            return verdict

        stack: List[_Frame] = [self._enter(node, currently_checking)]
        child_verdict: Optional[bool] = None
        while stack:
            frame = stack[-1]
            if child_verdict:
                required = True
            else:
                required = self._scan(frame, stack, currently_checking)
                if required is None:
                    child_verdict = None
                    continue

            stack.pop()
            child_verdict = self._commit(frame, required, currently_checking)

        return child_verdict

    def _visit(self, output: AssetId, currently_checking: Set[AssetId]):
        """
        Resolve `output` without traversal where possible.

        Returns (verdict, None), or (None, node) when the node must be evaluated.
        """
        cached = self._checked_outputs.get(output)
        if cached is not None:
            self.stats.cache_hits += 1
            return cached, None

        # Only optional outputs are ever added, so this is a genuine re-entry
        if output in currently_checking:
            self.stats.cycle_guards += 1
            logger.debug(f"Cycle guard hit for {output}, treating branch as not required")
            return False, None

        node = self._graph.get(output)
        if node is None:
            raise AssetNotFoundError(output)
        if not isinstance(node, GeneratedAssetNode):
            return True, None
        if not phase_at(self._phases, node.phase_number).is_optional:
            return True, None
        return None, node

    def _enter(self, node: GeneratedAssetNode, currently_checking: Set[AssetId]) -> "_Frame":
        self.stats.evaluations += 1
        currently_checking.add(node.id)
        return _Frame(
            output=node.id,
            candidates=chain(sorted(node.outputs), self._siblings(node)),
        )

    def _scan(
        self,
        frame: "_Frame",
        stack: List["_Frame"],
        currently_checking: Set[AssetId],
    ) -> Optional[bool]:
        """
        Advance through the frame's remaining candidates.

        Returns True on the first required candidate, False once they are
        exhausted, or None after pushing a frame for a candidate that needs
        its own evaluation.
        """
        for candidate in frame.candidates:
            verdict, node = self._visit(candidate, currently_checking)
            if verdict is None:
                stack.append(self._enter(node, currently_checking))
                return None
            if verdict:
                return True
        return False

    def _commit(self, frame: "_Frame", required: bool, currently_checking: Set[AssetId]) -> bool:
        currently_checking.discard(frame.output)
        verdict = self._checked_outputs.setdefault(frame.output, required)
        if self._trace:
            logger.debug(f"{frame.output} required={verdict}")
        return verdict

    def _siblings(self, node: GeneratedAssetNode) -> Iterator[AssetId]:
        """Other outputs of the same phase invocation, looked up on first use."""
        for other in self._graph.outputs_for_phase(node.id.package, node.phase_number):
            if other.primary_input == node.primary_input and other.id != node.id:
                yield other.id


@dataclass
class _Frame:
    """An optional output whose verdict is being computed."""
    output: AssetId
    candidates: Iterator[AssetId]


class SynchronizedRequirednessClassifier(RequirednessClassifier):
    """RequirednessClassifier serialized behind a lock for multi-worker hosts."""

    def __init__(
        self,
        asset_graph: AssetGraphView,
        build_phases: Sequence[BuildPhase],
        trace_verdicts: bool = False,
    ):
        super().__init__(asset_graph, build_phases, trace_verdicts=trace_verdicts)
        # Reentrant: required_outputs() calls is_required() while holding it
        self._lock = threading.RLock()

    def is_required(self, output: AssetId) -> bool:
        with self._lock:
            return super().is_required(output)

    def required_outputs(self, outputs: Iterable[AssetId]) -> List[AssetId]:
        with self._lock:
            return super().required_outputs(outputs)

    def cached_verdict(self, output: AssetId) -> Optional[bool]:
        with self._lock:
            return super().cached_verdict(output)

    def reset(self) -> None:
        with self._lock:
            super().reset()


def create_classifier(
    asset_graph: AssetGraphView,
    build_phases: Sequence[BuildPhase],
    config: Optional["ClassifierConfig"] = None,
) -> RequirednessClassifier:
    """
    Build a classifier for one build.

    Args:
        asset_graph: Graph snapshot for the build
        build_phases: Ordered phase sequence
        config: Classifier settings (defaults to the loaded configuration)
    """
    if config is None:
        from ..bootstrap.config import get_config
        config = get_config().classifier

    cls = SynchronizedRequirednessClassifier if config.synchronized else RequirednessClassifier
    logger.debug(f"Creating {cls.__name__} over {len(build_phases)} phases")
    return cls(asset_graph, build_phases, trace_verdicts=config.trace_verdicts)
