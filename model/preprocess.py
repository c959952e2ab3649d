from __future__ import annotations

import json
from typing import Any, Dict, List

from .schema import ModelDef, NodeDef

_RESERVED_KEYS = ("id", "type", "name", "children", "pointers", "next")


def load_json(path: str) -> Dict[str, Any]:
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def normalize_raw_to_modeldef(raw: Dict[str, Any]) -> ModelDef:
    if not isinstance(raw, dict) or not raw:
        raise ValueError("Model description is empty or not a mapping of node ids.")

    nodes: Dict[str, NodeDef] = {}
    for node_id, node_cfg in raw.items():
        _add_node(nodes, str(node_id), node_cfg)
    return ModelDef(nodes=nodes)


def _add_node(nodes: Dict[str, NodeDef], node_id: str, node_cfg: Any) -> None:
    if not isinstance(node_cfg, dict):
        raise ValueError(f"Node '{node_id}' must be described by a mapping, got {type(node_cfg).__name__}")
    if node_id in nodes:
        raise ValueError(f"Duplicate node id: {node_id}")

    pointers = {str(k): str(v) for k, v in (node_cfg.get("pointers") or {}).items() if v}
    if node_cfg.get("next"):
        # shorthand wins over nothing, never over an explicit pointer
        pointers.setdefault("next", str(node_cfg["next"]))

    attrs = {k: v for k, v in node_cfg.items() if k not in _RESERVED_KEYS}

    node = NodeDef(
        id=node_id,
        type=str(node_cfg.get("type") or "Unknown"),
        name=node_cfg.get("name"),
        pointers=pointers,
        attrs=attrs,
    )
    nodes[node_id] = node

    children: List[str] = []
    for idx, child in enumerate(node_cfg.get("children") or []):
        if isinstance(child, dict):
            child_id = str(child.get("id") or f"{node_id}/{child.get('name') or idx}")
            _add_node(nodes, child_id, child)
            children.append(child_id)
        else:
            children.append(str(child))
    node.children = children
