import logging

import pytest

from core.api.models import (
    ANALYSIS_ERROR,
    ANALYSIS_LOOP,
    ANALYSIS_NOT_APPLICABLE,
    ANALYSIS_NOT_FOUND,
    ANALYSIS_SAFE,
    DetectionMethod,
)
from core.config import DetectorSettings
from core.loop_detector import LoopDetector

from conftest import make_accessor


def test_three_node_next_loop(next_loop_program):
    result = LoopDetector(next_loop_program).detect_loops("prog")

    assert result.has_loop
    assert result.elements == ["C1", "C2", "C3", "C1"]
    assert result.loop_elements == ["c1", "c2", "c3", "c1"]
    assert result.detection_method == DetectionMethod.NEXT_POINTER
    assert result.loop_path == "C1 -> C2 -> C3 -> C1"
    assert result.analysis == ANALYSIS_LOOP


def test_self_referencing_command():
    accessor = make_accessor({
        "prog": {"type": "Program", "name": "SelfReference", "children": ["x"]},
        "x": {"type": "Right", "name": "InfiniteLoop", "next": "x"},
    })
    result = LoopDetector(accessor).detect_loops("prog")

    assert result.has_loop
    assert result.elements == ["InfiniteLoop", "InfiniteLoop"]
    assert result.detection_method == DetectionMethod.NEXT_POINTER


def test_safe_function_with_sequential_commands():
    accessor = make_accessor({
        "tri": {"type": "Function", "name": "DrawTriangle", "children": ["s", "a", "b", "c"]},
        "s": {"type": "PenDown", "name": "Start"},
        "a": {"type": "Goto", "name": "Side1", "x": 50, "y": 0},
        "b": {"type": "Goto", "name": "Side2", "x": 25, "y": 43},
        "c": {"type": "Goto", "name": "Side3", "x": 0, "y": 0},
    })
    result = LoopDetector(accessor).detect_loops("tri")

    assert not result.has_loop
    assert result.elements == []
    assert result.detection_method == DetectionMethod.COMPREHENSIVE
    assert result.analysis == ANALYSIS_SAFE
    # only programs carry nested function results
    assert "nestedFunctions" not in result.to_dict()


def test_acyclic_next_chain_and_shared_successor_are_safe():
    accessor = make_accessor({
        "prog": {"type": "Program", "children": ["a", "b", "c"]},
        "a": {"type": "PenDown", "next": "c"},
        "b": {"type": "PenUp", "next": "c"},
        "c": {"type": "Clear"},
    })
    assert not LoopDetector(accessor).detect_loops("prog").has_loop


def test_connection_loop_reported_by_connection_strategy(connection_loop_program):
    result = LoopDetector(connection_loop_program).detect_loops("prog")

    assert result.has_loop
    assert result.elements == ["A", "B", "A"]
    assert result.detection_method == DetectionMethod.CONNECTION


def test_flow_connections_are_only_followed_when_flagged():
    description = {
        "prog": {"type": "Program", "children": ["a", "start"]},
        "start": {"type": "Flow", "pointers": {"dst": "a"}},
        "a": {"type": "PenDown", "name": "A", "children": ["back"]},
        "back": {"type": "Flow", "pointers": {"dst": "a"}},
    }
    assert not LoopDetector(make_accessor(description)).detect_loops("prog").has_loop

    description["start"]["isNextConnection"] = True
    description["back"]["isNextConnection"] = True
    result = LoopDetector(make_accessor(description)).detect_loops("prog")
    assert result.has_loop
    assert result.elements == ["A", "A"]
    assert result.detection_method == DetectionMethod.CONNECTION


def test_containment_loop_strategy_in_isolation():
    accessor = make_accessor({
        "prog": {"type": "Program", "children": ["outer"]},
        "outer": {"type": "Command", "name": "Outer", "children": ["inner"]},
        "inner": {"type": "Command", "name": "Inner", "children": ["outer"]},
    })
    detector = LoopDetector(accessor)

    contained = detector.check_strategy("prog", DetectionMethod.CONTAINMENT)
    assert contained.has_loop
    assert contained.elements == ["Outer", "Inner", "Outer"]
    assert contained.detection_method == DetectionMethod.CONTAINMENT

    assert not detector.check_strategy("prog", DetectionMethod.CONNECTION).has_loop

    # the next-pointer walk descends into contained commands too, so it sees it first
    full = detector.detect_loops("prog")
    assert full.has_loop
    assert full.elements == ["Outer", "Inner", "Outer"]
    assert full.detection_method == DetectionMethod.NEXT_POINTER


def test_check_strategy_rejects_summary_method(next_loop_program):
    with pytest.raises(ValueError):
        LoopDetector(next_loop_program).check_strategy("prog", DetectionMethod.COMPREHENSIVE)


def test_next_pointer_wins_over_independent_containment_loop():
    accessor = make_accessor({
        "prog": {"type": "Program", "children": ["n1", "n2", "k1"]},
        "n1": {"type": "PenDown", "name": "N1", "next": "n2"},
        "n2": {"type": "PenUp", "name": "N2", "next": "n1"},
        "k1": {"type": "Command", "name": "K1", "children": ["k2"]},
        "k2": {"type": "Command", "name": "K2", "children": ["k1"]},
    })
    result = LoopDetector(accessor).detect_loops("prog")

    assert result.detection_method == DetectionMethod.NEXT_POINTER
    assert result.elements == ["N1", "N2", "N1"]


def test_detection_is_deterministic(next_loop_program, connection_loop_program):
    for accessor in (next_loop_program, connection_loop_program):
        detector = LoopDetector(accessor)
        assert detector.detect_loops("prog").to_dict() == detector.detect_loops("prog").to_dict()
        assert LoopDetector(accessor).detect_loops("prog") == detector.detect_loops("prog")


def test_missing_node_is_safe():
    accessor = make_accessor({"prog": {"type": "Program"}})
    result = LoopDetector(accessor).detect_loops("nonexistent")

    assert result.to_dict() == {"hasLoop": False, "elements": [], "analysis": ANALYSIS_NOT_FOUND}


def test_non_root_node_is_not_applicable(next_loop_program):
    result = LoopDetector(next_loop_program).detect_loops("c1")

    assert not result.has_loop
    assert result.analysis == ANALYSIS_NOT_APPLICABLE
    assert result.node_type == "PenDown"


def test_program_without_functions_has_empty_nested_list():
    accessor = make_accessor({
        "prog": {"type": "Program", "children": ["a"]},
        "a": {"type": "PenDown"},
    })
    result = LoopDetector(accessor).detect_loops("prog")
    assert result.nested_functions == []
    assert result.to_dict()["nestedFunctions"] == []


def test_program_with_loop_still_carries_empty_nested_list(next_loop_program):
    result = LoopDetector(next_loop_program).detect_loops("prog")
    assert result.nested_functions == []


def test_nested_functions_are_analysed_individually():
    accessor = make_accessor({
        "prog": {"type": "Program", "name": "Main", "children": ["f1", "cmd", "f2", "f3"]},
        "cmd": {"type": "PenDown", "name": "Down"},
        "f1": {"type": "Function", "name": "Square", "children": ["s1"]},
        "s1": {"type": "Right", "name": "Turn"},
        "f2": {"type": "Function", "name": "Spin", "children": ["t1", "t2"]},
        "t1": {"type": "Left", "name": "T1", "next": "t2"},
        "t2": {"type": "Left", "name": "T2", "next": "t1"},
        "f3": {"type": "Function", "children": []},
    })
    result = LoopDetector(accessor).detect_loops("prog")

    assert not result.has_loop
    assert [r.function_id for r in result.nested_functions] == ["f1", "f2", "f3"]
    assert [r.function_name for r in result.nested_functions] == ["Square", "Spin", "f3"]
    assert [r.has_loop for r in result.nested_functions] == [False, True, False]
    assert result.nested_functions[1].elements == ["T1", "T2", "T1"]
    assert result.has_any_loop()

    payload = result.to_dict()
    assert payload["nestedFunctions"][1]["functionName"] == "Spin"
    assert payload["nestedFunctions"][1]["detectionMethod"] == "next-pointer-sequence"


def test_function_root_does_not_expand_nested_functions():
    accessor = make_accessor({
        "outer": {"type": "Function", "children": ["inner"]},
        "inner": {"type": "Function", "children": ["x"]},
        "x": {"type": "Right", "next": "x"},
    })
    result = LoopDetector(accessor).detect_loops("outer")
    assert not result.has_loop
    assert result.nested_functions is None


def test_nested_function_analysis_can_be_switched_off():
    accessor = make_accessor({
        "prog": {"type": "Program", "children": ["f"]},
        "f": {"type": "Function", "children": ["x"]},
        "x": {"type": "Right", "next": "x"},
    })
    settings = DetectorSettings(analyze_nested_functions=False)
    result = LoopDetector(accessor, settings=settings).detect_loops("prog")
    assert result.nested_functions == []


def test_dangling_next_pointer_is_safe():
    accessor = make_accessor({
        "prog": {"type": "Program", "children": ["a"]},
        "a": {"type": "PenDown", "name": "A", "next": "deleted"},
    })
    assert not LoopDetector(accessor).detect_loops("prog").has_loop


def test_loop_elements_fall_back_to_ids_without_names():
    accessor = make_accessor({
        "prog": {"type": "Program", "children": ["a", "b"]},
        "a": {"type": "PenDown", "next": "b"},
        "b": {"type": "PenUp", "name": "B", "next": "a"},
    })
    assert LoopDetector(accessor).detect_loops("prog").elements == ["a", "B", "a"]


class ExplodingAccessor:
    def __init__(self, inner, bad_id):
        self.inner = inner
        self.bad_id = bad_id

    def get_node(self, node_id):
        if node_id == self.bad_id:
            raise RuntimeError("backend unavailable")
        return self.inner.get_node(node_id)


def test_accessor_failure_becomes_safe_result_with_error(next_loop_program, caplog):
    detector = LoopDetector(ExplodingAccessor(next_loop_program, "c2"))
    with caplog.at_level(logging.ERROR, logger="core.loop_detector"):
        result = detector.detect_loops("prog")

    assert not result.has_loop
    assert result.elements == []
    assert result.error == "backend unavailable"
    assert result.analysis == ANALYSIS_ERROR
    assert "backend unavailable" in caplog.text


def test_depth_ceiling_becomes_error_result():
    description = {"prog": {"type": "Program", "children": ["c0"]}}
    for i in range(6):
        description[f"c{i}"] = {"type": "Goto", "next": f"c{i + 1}"}
    description["c6"] = {"type": "PenUp"}

    result = LoopDetector(make_accessor(description), settings=DetectorSettings(max_depth=3)).detect_loops("prog")
    assert not result.has_loop
    assert "max depth 3" in result.error

    assert not LoopDetector(make_accessor(description)).detect_loops("prog").has_any_loop()


def test_injected_log_sink_receives_loop_report(next_loop_program, sink):
    LoopDetector(next_loop_program, logger=sink).detect_loops("prog")

    warnings = sink.messages("warning")
    assert any("Loop path: C1 -> C2 -> C3 -> C1" in m for m in warnings)
    assert any("Next Pointer" in m for m in warnings)
    assert any("Analyzing: Main (Type: Program)" in m for m in sink.messages("info"))


def test_long_acyclic_next_chain_is_safe_within_default_limits():
    count = 2500
    description = {"prog": {"type": "Program", "name": "Long", "children": [f"c{i}" for i in range(count)]}}
    for i in range(count):
        description[f"c{i}"] = {"type": "Goto", "name": f"C{i}"}
        if i + 1 < count:
            description[f"c{i}"]["next"] = f"c{i + 1}"

    result = LoopDetector(make_accessor(description)).detect_loops("prog")

    assert not result.has_loop
    assert result.error is None
    assert result.analysis == ANALYSIS_SAFE
    assert result.detection_method == DetectionMethod.COMPREHENSIVE
