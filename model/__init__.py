"""
Model package: typed turtle graphics model graphs and their accessor
"""

from .meta import (
    TypeTag,
    ROOT_TYPES, TURTLE_COMMAND_TYPES, NEXT_CONNECTION_TYPES, CONNECTION_TYPES,
    NEXT_POINTER, CONNECTION_TARGET_POINTERS, NEXT_CONNECTION_FLAG,
    classify, is_root, is_turtle_command, is_next_connection,
)
from .schema import NodeDef, ModelDef, ValidationReport
from .preprocess import load_json, normalize_raw_to_modeldef
from .builder import build_nx_graph
from .accessor import GraphAccessor, ModelNodeLike, MetaNodeLike, PointerRef, ModelNode, MetaNode, NetworkxAccessor
from .validator import validate_model
from .graph_builder import ModelGraphBuilder

__all__ = [
    'TypeTag',
    'ROOT_TYPES', 'TURTLE_COMMAND_TYPES', 'NEXT_CONNECTION_TYPES', 'CONNECTION_TYPES',
    'NEXT_POINTER', 'CONNECTION_TARGET_POINTERS', 'NEXT_CONNECTION_FLAG',
    'classify', 'is_root', 'is_turtle_command', 'is_next_connection',
    'NodeDef', 'ModelDef', 'ValidationReport',
    'load_json', 'normalize_raw_to_modeldef',
    'build_nx_graph',
    'GraphAccessor', 'ModelNodeLike', 'MetaNodeLike', 'PointerRef', 'ModelNode', 'MetaNode', 'NetworkxAccessor',
    'validate_model',
    'ModelGraphBuilder',
]
