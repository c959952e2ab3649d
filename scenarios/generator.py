"""
Scenario Builder for loop detection.

Builds synthetic turtle programs and functions from flat command lists,
runs the loop detector on them and grades its verdicts against the
``next``-chain oracle.
"""

from __future__ import annotations

import logging
import math
import re
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from model.accessor import NetworkxAccessor
from model.builder import build_nx_graph
from model.preprocess import normalize_raw_to_modeldef
from core.config import DetectorSettings
from core.loop_detector import LogSink, LoopDetector

from .oracle import expected_loops
from .schema import Scenario, ScenarioOutcome, ScenarioReport

# Scenarios with these markers in their name accept either verdict
PERMISSIVE_MARKERS: Tuple[str, ...] = ("Recursive", "Loop", "SelfReference")

SAFE_PROGRAMS = "Safe Turtle Programs"
REALISTIC_LOOPS = "Realistic Loop Scenarios"
FUNCTION_SAFETY = "Function Safety Tests"
EDGE_CASES = "Edge Cases"


def _slug(name: str) -> str:
    return re.sub(r"\s+", "_", name).lower()


def simulated_node_id(kind: str, name: str) -> str:
    return f"/test/{kind.lower()}/{_slug(name)}"


class ScenarioBuilder:
    def __init__(
        self,
        logger: Optional[LogSink] = None,
        settings: Optional[DetectorSettings] = None,
        permissive_markers: Sequence[str] = PERMISSIVE_MARKERS,
    ) -> None:
        self._logger = logger if logger is not None else logging.getLogger(__name__)
        self._settings = settings or DetectorSettings()
        self.permissive_markers = tuple(permissive_markers)
        self.scenarios: List[Scenario] = []

    # ========================================
    # Suites
    # ========================================

    def generate_all_tests(self) -> ScenarioReport:
        """Register every built-in scenario, run them and return the report"""
        self._logger.info("[ScenarioBuilder] Starting scenario suite")
        suites: List[Tuple[str, Callable[[], None]]] = [
            (SAFE_PROGRAMS, self.add_safe_programs),
            (REALISTIC_LOOPS, self.add_realistic_loops),
            (FUNCTION_SAFETY, self.add_function_safety_tests),
            (EDGE_CASES, self.add_edge_cases),
        ]
        for suite_name, generator in suites:
            self._logger.info(f"[ScenarioBuilder] {suite_name}")
            generator()
        return self.run_all()

    def add_safe_programs(self) -> None:
        self.create_program("DrawSquare", [
            {"type": "PenDown", "name": "StartDrawing"},
            {"type": "Right", "name": "Side1", "angle": 90},
            {"type": "Right", "name": "Side2", "angle": 90},
            {"type": "Right", "name": "Side3", "angle": 90},
            {"type": "Right", "name": "Side4", "angle": 90},
            {"type": "PenUp", "name": "StopDrawing"},
        ], SAFE_PROGRAMS)
        self.create_program("ColorfulLine", [
            {"type": "Color", "name": "SetRed", "color": "red"},
            {"type": "Width", "name": "SetThick", "width": 5},
            {"type": "PenDown", "name": "Start"},
            {"type": "Goto", "name": "DrawLine", "x": 100, "y": 100},
            {"type": "PenUp", "name": "End"},
        ], SAFE_PROGRAMS)
        self.create_function("EmptyFunction", [], SAFE_PROGRAMS)
        self.create_function("SimpleMove", [
            {"type": "Right", "name": "TurnRight", "angle": 45},
        ], SAFE_PROGRAMS)

    def add_realistic_loops(self) -> None:
        self.create_function("RecursiveSpiral", [
            {"type": "Right", "name": "Turn", "angle": 10},
            {"type": "Goto", "name": "MoveForward", "x": 5, "y": 5},
        ], REALISTIC_LOOPS)
        self.create_program("NextPointerLoop", [
            {"type": "PenDown", "name": "Command1", "next": "Command2"},
            {"type": "Right", "name": "Command2", "next": "Command3"},
            {"type": "Goto", "name": "Command3", "next": "Command1"},
        ], REALISTIC_LOOPS)
        self.create_program("SelfReference", [
            {"type": "Right", "name": "InfiniteLoop", "next": "InfiniteLoop"},
        ], REALISTIC_LOOPS)

    def add_function_safety_tests(self) -> None:
        self.create_function("DrawTriangle", [
            {"type": "PenDown", "name": "Start"},
            {"type": "Goto", "name": "Side1", "x": 50, "y": 0},
            {"type": "Goto", "name": "Side2", "x": 25, "y": 43},
            {"type": "Goto", "name": "Side3", "x": 0, "y": 0},
            {"type": "PenUp", "name": "End"},
        ], FUNCTION_SAFETY)
        self.create_function("PenDemo", [
            {"type": "PenDown", "name": "Down"},
            {"type": "PenUp", "name": "Up"},
            {"type": "PenDown", "name": "DownAgain"},
        ], FUNCTION_SAFETY)
        self.create_function("StyleDemo", [
            {"type": "Color", "name": "Red", "color": "red"},
            {"type": "Width", "name": "Thick", "width": 10},
            {"type": "Color", "name": "Blue", "color": "blue"},
            {"type": "Clear", "name": "ClearScreen"},
        ], FUNCTION_SAFETY)

    def add_edge_cases(self) -> None:
        self.create_program("UtilityOnly", [
            {"type": "Clear", "name": "ClearAll"},
            {"type": "Color", "name": "SetColor", "color": "green"},
            {"type": "Width", "name": "SetWidth", "width": 2},
        ], EDGE_CASES)
        self.create_function("GotoSequence", [
            {"type": "Goto", "name": "Point1", "x": 10, "y": 10},
            {"type": "Goto", "name": "Point2", "x": 20, "y": 20},
            {"type": "Goto", "name": "Point3", "x": 30, "y": 30},
        ], EDGE_CASES)
        self.create_function("PenStates", [
            {"type": "PenUp", "name": "Up1"},
            {"type": "PenUp", "name": "Up2"},
            {"type": "PenDown", "name": "Down1"},
            {"type": "PenDown", "name": "Down2"},
        ], EDGE_CASES)

    # ========================================
    # Scenario registration
    # ========================================

    def create_program(self, name: str, commands: List[Dict[str, Any]], category: str = "") -> Scenario:
        return self._create("Program", name, commands, category)

    def create_function(self, name: str, commands: List[Dict[str, Any]], category: str = "") -> Scenario:
        return self._create("Function", name, commands, category)

    def _create(self, kind: str, name: str, commands: List[Dict[str, Any]], category: str) -> Scenario:
        scenario = Scenario(
            name=name,
            kind=kind,
            category=category,
            commands=commands,
            id=self._unique_id(simulated_node_id(kind, name)),
            expected_loops=expected_loops(commands),
        )
        self.scenarios.append(scenario)
        self._logger.info(f"[ScenarioBuilder] Created {kind.lower()}: {name}")
        return scenario

    def _unique_id(self, base_id: str) -> str:
        taken = {s.id for s in self.scenarios}
        candidate, n = base_id, 1
        while candidate in taken:
            n += 1
            candidate = f"{base_id}_{n}"
        return candidate

    # ========================================
    # Synthetic model
    # ========================================

    def build_description(self) -> Dict[str, Any]:
        """One model description holding every registered scenario as a root"""
        description: Dict[str, Any] = {}
        for scenario in self.scenarios:
            # ids by position, names may repeat; next resolves to the first command with that name
            command_ids = [f"{scenario.id}/{idx}_{_slug(cmd['name'])}" for idx, cmd in enumerate(scenario.commands)]
            name_to_id: Dict[str, str] = {}
            for cmd, command_id in zip(scenario.commands, command_ids):
                name_to_id.setdefault(cmd["name"], command_id)

            children = []
            for cmd, command_id in zip(scenario.commands, command_ids):
                child = {k: v for k, v in cmd.items() if k != "next"}
                child["id"] = command_id
                if cmd.get("next"):
                    child["next"] = name_to_id.get(
                        cmd["next"], f"{scenario.id}/{_slug(cmd['next'])}"
                    )
                children.append(child)
            description[scenario.id] = {"type": scenario.kind, "name": scenario.name, "children": children}
        return description

    def build_model(self) -> NetworkxAccessor:
        model_def = normalize_raw_to_modeldef(self.build_description())
        return NetworkxAccessor(build_nx_graph(model_def))

    # ========================================
    # Running and grading
    # ========================================

    def run_all(self) -> ScenarioReport:
        self._logger.info("[ScenarioBuilder] Running scenario suite")
        outcomes: List[ScenarioOutcome] = []
        if self.scenarios:
            detector = LoopDetector(self.build_model(), logger=self._logger, settings=self._settings)
            for scenario in self.scenarios:
                outcomes.append(self._run_one(detector, scenario))
        return self._build_report(outcomes)

    def _run_one(self, detector: LoopDetector, scenario: Scenario) -> ScenarioOutcome:
        self._logger.info(f"[ScenarioBuilder] Testing: {scenario.name} ({scenario.kind})")
        outcome = ScenarioOutcome(scenario=scenario, permissive=self.is_permissive(scenario))

        result = detector.detect_loops(scenario.id)
        outcome.result = result
        outcome.error = result.error
        outcome.strict_passed = result.error is None and scenario.expects_loop == result.has_loop
        outcome.passed = outcome.permissive or outcome.strict_passed

        if outcome.passed:
            self._logger.info(f"[ScenarioBuilder] {scenario.name} PASSED")
        else:
            self._logger.warning(
                f"[ScenarioBuilder] {scenario.name} FAILED: expected loop={scenario.expects_loop}, "
                f"detected loop={result.has_loop}"
            )
        return outcome

    def is_permissive(self, scenario: Scenario) -> bool:
        return any(marker in scenario.name for marker in self.permissive_markers)

    def _build_report(self, outcomes: List[ScenarioOutcome]) -> ScenarioReport:
        total = len(outcomes)
        passed = sum(1 for o in outcomes if o.passed)
        realistic = sum(1 for o in outcomes if o.scenario.is_realistic)
        success_rate = math.floor(passed * 100 / total + 0.5) if total else 0

        report = ScenarioReport(
            total_tests=total,
            realistic_tests=realistic,
            passed=passed,
            failed=total - passed,
            success_rate=success_rate,
            outcomes=outcomes,
        )

        self._logger.info(f"[ScenarioBuilder] Total: {total}")
        self._logger.info(f"[ScenarioBuilder] Realistic: {realistic}")
        self._logger.info(f"[ScenarioBuilder] Passed: {passed}")
        self._logger.info(f"[ScenarioBuilder] Failed: {report.failed}")
        self._logger.info(f"[ScenarioBuilder] Success rate: {success_rate}%")
        if report.disagreements:
            self._logger.warning(
                f"[ScenarioBuilder] Oracle and detector disagree on: "
                f"{[o.scenario.name for o in report.disagreements]}"
            )
        return report
