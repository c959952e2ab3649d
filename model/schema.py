from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class NodeDef:
    id: str
    type: str = "Unknown"
    name: Optional[str] = None
    children: List[str] = field(default_factory=list)
    pointers: Dict[str, str] = field(default_factory=dict)
    attrs: Dict[str, Any] = field(default_factory=dict)


@dataclass
class ModelDef:
    nodes: Dict[str, NodeDef]


@dataclass
class ValidationReport:
    ok: bool
    warnings: List[str] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)
    root_nodes: List[str] = field(default_factory=list)
    orphan_nodes: List[str] = field(default_factory=list)
    dangling_pointers: List[str] = field(default_factory=list)
    unknown_type_nodes: List[str] = field(default_factory=list)
