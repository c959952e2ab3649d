from __future__ import annotations

from enum import Enum
from typing import Any, FrozenSet, Tuple


class TypeTag(str, Enum):
    """Meta types of the turtle graphics metamodel"""
    # roots
    PROGRAM = "Program"
    FUNCTION = "Function"

    # turtle commands
    PEN_UP = "PenUp"
    PEN_DOWN = "PenDown"
    RIGHT = "Right"
    LEFT = "Left"
    GOTO = "Goto"
    CLEAR = "Clear"
    WIDTH = "Width"
    COLOR = "Color"
    COMMAND = "Command"

    # connections
    NEXT = "Next"
    SEQUENCE = "Sequence"
    FLOW = "Flow"

    UNKNOWN = "Unknown"

    @classmethod
    def from_string(cls, value: Any) -> 'TypeTag':
        """Convert a meta type name to TypeTag, unknown names fall back to UNKNOWN"""
        try:
            return cls(value)
        except ValueError:
            return cls.UNKNOWN


ROOT_TYPES: FrozenSet[TypeTag] = frozenset({TypeTag.PROGRAM, TypeTag.FUNCTION})

TURTLE_COMMAND_TYPES: FrozenSet[TypeTag] = frozenset({
    TypeTag.PEN_UP,
    TypeTag.PEN_DOWN,
    TypeTag.RIGHT,
    TypeTag.LEFT,
    TypeTag.GOTO,
    TypeTag.CLEAR,
    TypeTag.WIDTH,
    TypeTag.COLOR,
    TypeTag.COMMAND,
})

# Flow is a connection but does not order code generation
NEXT_CONNECTION_TYPES: FrozenSet[TypeTag] = frozenset({TypeTag.NEXT, TypeTag.SEQUENCE})
CONNECTION_TYPES: FrozenSet[TypeTag] = NEXT_CONNECTION_TYPES | {TypeTag.FLOW}

NEXT_POINTER = "next"
CONNECTION_TARGET_POINTERS: Tuple[str, ...] = ("dst", "target", "to")
NEXT_CONNECTION_FLAG = "isNextConnection"


def classify(node: Any) -> TypeTag:
    """Map a model node to its TypeTag via its meta type's ``name`` attribute."""
    if node is None:
        return TypeTag.UNKNOWN
    meta = node.get_meta_type()
    if meta is None:
        return TypeTag.UNKNOWN
    return TypeTag.from_string(meta.get_attribute("name"))


def is_root(node: Any) -> bool:
    return classify(node) in ROOT_TYPES


def is_turtle_command(node: Any) -> bool:
    return classify(node) in TURTLE_COMMAND_TYPES


def is_next_connection(node: Any) -> bool:
    if classify(node) in NEXT_CONNECTION_TYPES:
        return True
    return bool(node.get_attribute(NEXT_CONNECTION_FLAG))
