"""
Loop detection for turtle graphics programs and functions.

Code generation walks a program's commands in sequence; any cycle in the
sequencing relations would make it emit code forever. ``LoopDetector``
checks a Program or Function root with three strategies in fixed order
(next pointers, containment, connection nodes) and stops at the first
loop found.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Protocol, Tuple

from model.accessor import GraphAccessor
from model.meta import ROOT_TYPES, TypeTag, classify

from .api.builders import error_result, loop_result, not_applicable_result, not_found_result, safe_result
from .api.models import DetectionMethod, DetectionResult
from .config import DetectorSettings
from .traversal import (
    SuccessorFn,
    connection_successors,
    containment_successors,
    find_cycle,
    next_pointer_successors,
)


class LogSink(Protocol):
    def info(self, msg: str, *args: Any, **kwargs: Any) -> Any: ...

    def warning(self, msg: str, *args: Any, **kwargs: Any) -> Any: ...

    def error(self, msg: str, *args: Any, **kwargs: Any) -> Any: ...


STRATEGY_LABELS: Dict[DetectionMethod, str] = {
    DetectionMethod.NEXT_POINTER: "Next Pointer",
    DetectionMethod.CONTAINMENT: "Containment",
    DetectionMethod.CONNECTION: "Connection",
}


class LoopDetector:
    """Detects loops reachable from Program and Function roots."""

    def __init__(
        self,
        accessor: GraphAccessor,
        logger: Optional[LogSink] = None,
        settings: Optional[DetectorSettings] = None,
    ) -> None:
        self._accessor = accessor
        self._logger = logger if logger is not None else logging.getLogger(__name__)
        self._settings = settings or DetectorSettings()
        self._strategies: List[Tuple[DetectionMethod, SuccessorFn]] = [
            (DetectionMethod.NEXT_POINTER, next_pointer_successors(accessor)),
            (DetectionMethod.CONTAINMENT, containment_successors(accessor)),
            (DetectionMethod.CONNECTION, connection_successors(accessor)),
        ]

    @property
    def settings(self) -> DetectorSettings:
        return self._settings

    def detect_loops(self, node_id: str) -> DetectionResult:
        """
        Analyse the root ``node_id``.

        Never raises: unresolvable ids, non-root nodes and accessor failures
        all come back as results with ``has_loop`` False, the latter with
        ``error`` set.
        """
        try:
            node = self._accessor.get_node(node_id)
            if node is None:
                self._logger.info(f"[LoopDetector] Node not found: {node_id}")
                return not_found_result()

            node_type = classify(node)
            node_name = self._display_name(node, node_id)
            self._logger.info(f"[LoopDetector] Analyzing: {node_name} (Type: {node_type.value})")

            if node_type not in ROOT_TYPES:
                return not_applicable_result(node_type.value)

            for method, successors in self._strategies:
                result = self._run_strategy(node_id, method, successors)
                if result.has_loop:
                    self._log_loop(result, node_name, method)
                    if node_type is TypeTag.PROGRAM:
                        result.nested_functions = []
                    return result

            self._logger.info(f"[LoopDetector] No loops detected in {node_name}")

            nested: Optional[List[DetectionResult]] = None
            if node_type is TypeTag.PROGRAM:
                nested = []
                if self._settings.analyze_nested_functions:
                    nested = self._analyze_nested_functions(node)
            return safe_result(nested)

        except Exception as e:
            self._logger.error(f"[LoopDetector] Error while analyzing {node_id}: {e}")
            return error_result(str(e))

    def check_strategy(self, node_id: str, method: DetectionMethod) -> DetectionResult:
        """Run a single strategy from ``node_id`` regardless of the node's type."""
        for candidate, successors in self._strategies:
            if candidate == method:
                return self._run_strategy(node_id, candidate, successors)
        raise ValueError(f"Not a traversal strategy: {method}")

    def _run_strategy(self, node_id: str, method: DetectionMethod, successors: SuccessorFn) -> DetectionResult:
        loop_ids = find_cycle(
            node_id,
            successors,
            max_depth=self._settings.max_depth,
            max_steps=self._settings.max_steps,
        )
        if loop_ids is None:
            return DetectionResult(has_loop=False, elements=[])
        names = [self._display_name(self._accessor.get_node(i), i) for i in loop_ids]
        return loop_result(loop_ids, names, method)

    def _analyze_nested_functions(self, program) -> List[DetectionResult]:
        results: List[DetectionResult] = []
        for child_id in program.get_children_ids():
            child = self._accessor.get_node(child_id)
            if child is None or classify(child) is not TypeTag.FUNCTION:
                continue

            function_name = self._display_name(child, child_id)
            self._logger.info(f"[LoopDetector] Analyzing nested function: {function_name}")

            result = self.detect_loops(child_id)
            result.function_name = function_name
            result.function_id = child_id
            results.append(result)

            if result.has_loop:
                self._logger.warning(f"[LoopDetector] Loop detected in function: {function_name}")
            else:
                self._logger.info(f"[LoopDetector] Function {function_name} is safe")
        return results

    def _log_loop(self, result: DetectionResult, node_name: str, method: DetectionMethod) -> None:
        self._logger.warning(f"[LoopDetector] Loop detected in {node_name}")
        self._logger.warning(f"[LoopDetector] Detection method: {STRATEGY_LABELS[method]}")
        self._logger.warning(f"[LoopDetector] Loop path: {result.loop_path}")

    @staticmethod
    def _display_name(node, node_id: str) -> str:
        if node is None:
            return node_id
        name = node.get_attribute("name")
        return str(name) if name else node_id
