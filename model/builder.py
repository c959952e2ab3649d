from __future__ import annotations

from typing import Any, Dict, List

import networkx as nx

from .schema import ModelDef

CONTAINS = "contains"
POINTER = "pointer"


def build_nx_graph(model_def: ModelDef) -> nx.MultiDiGraph:
    g: nx.MultiDiGraph = nx.MultiDiGraph()

    # add nodes
    for node_id, node_def in model_def.nodes.items():
        attrs: Dict[str, Any] = {
            **node_def.attrs,
            "type": node_def.type,
            "name": node_def.name,
            "dangling_pointers": {},
            "dangling_children": [],
        }
        g.add_node(node_id, **attrs)

    # add containment and pointer edges, never creating phantom nodes
    for node_id, node_def in model_def.nodes.items():
        missing_children: List[str] = []
        for order, child_id in enumerate(node_def.children):
            if child_id not in g:
                missing_children.append(child_id)
                continue
            g.add_edge(node_id, child_id, key=f"{CONTAINS}:{order}", kind=CONTAINS, order=order)
        g.nodes[node_id]["dangling_children"] = missing_children

        for pointer_name, target_id in node_def.pointers.items():
            if target_id not in g:
                g.nodes[node_id]["dangling_pointers"][pointer_name] = target_id
                continue
            g.add_edge(node_id, target_id, key=pointer_name, kind=POINTER, name=pointer_name)

    return g
