import os
from typing import Any, Dict, List, Tuple

import pytest

from model.accessor import NetworkxAccessor
from model.builder import build_nx_graph
from model.preprocess import normalize_raw_to_modeldef

FIXTURES_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), "fixtures")


class RecordingSink:
    """Logger stand-in that keeps every message by level."""

    def __init__(self) -> None:
        self.records: List[Tuple[str, str]] = []

    def info(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self.records.append(("info", msg))

    def warning(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self.records.append(("warning", msg))

    def error(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self.records.append(("error", msg))

    def messages(self, level: str) -> List[str]:
        return [m for lvl, m in self.records if lvl == level]


def make_accessor(description: Dict[str, Any]) -> NetworkxAccessor:
    return NetworkxAccessor(build_nx_graph(normalize_raw_to_modeldef(description)))


@pytest.fixture
def fixture_path():
    def _path(name: str) -> str:
        return os.path.join(FIXTURES_DIR, name)

    return _path


@pytest.fixture
def sink():
    return RecordingSink()


@pytest.fixture
def next_loop_program():
    # C1 --next--> C2 --next--> C3 --next--> C1
    return make_accessor({
        "prog": {"type": "Program", "name": "Main", "children": ["c1", "c2", "c3"]},
        "c1": {"type": "PenDown", "name": "C1", "next": "c2"},
        "c2": {"type": "Right", "name": "C2", "next": "c3"},
        "c3": {"type": "Goto", "name": "C3", "next": "c1"},
    })


@pytest.fixture
def connection_loop_program():
    # prog -> A via conn0; A -> B via conn_ab (target); B -> A via conn_ba (to)
    return make_accessor({
        "prog": {"type": "Program", "name": "Main", "children": ["a", "b", "conn0"]},
        "conn0": {"type": "Next", "pointers": {"dst": "a"}},
        "a": {"type": "PenDown", "name": "A", "children": ["conn_ab"]},
        "conn_ab": {"type": "Sequence", "pointers": {"target": "b"}},
        "b": {"type": "Right", "name": "B", "children": ["conn_ba"]},
        "conn_ba": {"type": "Next", "pointers": {"to": "a"}},
    })
