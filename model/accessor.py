"""
Graph Accessor contract consumed by the loop detector, and an in-memory
implementation over the networkx graph produced by ``model.builder``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Optional, Protocol

import networkx as nx

from .builder import CONTAINS, POINTER


@dataclass(frozen=True)
class PointerRef:
    to: Optional[str]


class MetaNodeLike(Protocol):
    def get_attribute(self, name: str) -> Any: ...


class ModelNodeLike(Protocol):
    def get_attribute(self, name: str) -> Any: ...

    def get_meta_type(self) -> Optional[MetaNodeLike]: ...

    def get_children_ids(self) -> List[str]: ...

    def get_pointer_names(self) -> List[str]: ...

    def get_pointer(self, name: str) -> Optional[PointerRef]: ...


class GraphAccessor(Protocol):
    def get_node(self, node_id: str) -> Optional[ModelNodeLike]: ...


class MetaNode:
    """Meta type of a model node; only carries its ``name``."""

    def __init__(self, name: str) -> None:
        self._name = name

    def get_attribute(self, name: str) -> Any:
        return self._name if name == "name" else None


class ModelNode:
    """Read-only view of one node in a networkx model graph."""

    def __init__(self, graph: nx.MultiDiGraph, node_id: str) -> None:
        self._graph = graph
        self._id = node_id

    @property
    def id(self) -> str:
        return self._id

    def get_attribute(self, name: str) -> Any:
        return self._graph.nodes[self._id].get(name)

    def get_meta_type(self) -> Optional[MetaNode]:
        type_name = self._graph.nodes[self._id].get("type")
        if not type_name:
            return None
        return MetaNode(type_name)

    def get_children_ids(self) -> List[str]:
        contained = [
            (data.get("order", 0), target)
            for _, target, data in self._graph.out_edges(self._id, data=True)
            if data.get("kind") == CONTAINS
        ]
        return [target for _, target in sorted(contained, key=lambda item: item[0])]

    def get_pointer_names(self) -> List[str]:
        names = [
            data["name"]
            for _, _, data in self._graph.out_edges(self._id, data=True)
            if data.get("kind") == POINTER
        ]
        names.extend(self._graph.nodes[self._id].get("dangling_pointers", {}))
        return names

    def get_pointer(self, name: str) -> Optional[PointerRef]:
        for _, target, data in self._graph.out_edges(self._id, data=True):
            if data.get("kind") == POINTER and data.get("name") == name:
                return PointerRef(to=target)
        dangling = self._graph.nodes[self._id].get("dangling_pointers", {})
        if name in dangling:
            return PointerRef(to=dangling[name])
        return None

    def __repr__(self) -> str:
        return f"ModelNode({self._id!r})"


class NetworkxAccessor:
    """GraphAccessor backed by a ``networkx.MultiDiGraph``."""

    def __init__(self, graph: nx.MultiDiGraph) -> None:
        self.graph = graph

    def get_node(self, node_id: str) -> Optional[ModelNode]:
        if node_id is None or node_id not in self.graph:
            return None
        return ModelNode(self.graph, node_id)

    def node_ids(self) -> List[str]:
        return list(self.graph.nodes())
