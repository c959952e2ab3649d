from __future__ import annotations

import json
import logging
from typing import Any, Dict, List, Optional

import networkx as nx

from .accessor import NetworkxAccessor
from .builder import CONTAINS, POINTER, build_nx_graph
from .preprocess import load_json, normalize_raw_to_modeldef
from .schema import ValidationReport
from .validator import validate_model

logger = logging.getLogger(__name__)


class ModelGraphBuilder:
    def __init__(self) -> None:
        self.graph: nx.MultiDiGraph = nx.MultiDiGraph()
        self.nodes_info: Dict[str, Any] = {}
        self.report: Optional[ValidationReport] = None

    def load_from_json(self, json_path: str) -> bool:
        try:
            raw_config = load_json(json_path)
        except FileNotFoundError:
            logger.error(f"Model file not found: {json_path}")
            return False
        except json.JSONDecodeError as e:
            logger.error(f"Model JSON parse error: {e}")
            return False

        if not self.load_from_dict(raw_config):
            return False
        logger.info(f"Model description loaded: {json_path}")
        return True

    def load_from_dict(self, raw_config: Any) -> bool:
        if not isinstance(raw_config, dict) or not raw_config:
            logger.error("Model description is empty or not a mapping of node ids.")
            return False
        self.nodes_info = raw_config
        logger.debug(f"Top-level node entries: {len(self.nodes_info)}")
        return True

    def build_graph(self) -> bool:
        if not self.nodes_info:
            logger.error("No model description loaded.")
            return False

        self.graph.clear()
        self.report = None
        try:
            model_def = normalize_raw_to_modeldef(self.nodes_info)
        except ValueError as e:
            logger.error(f"Invalid model description: {e}")
            return False
        self.graph = build_nx_graph(model_def)

        logger.info(
            f"Model graph built: {self.graph.number_of_nodes()} nodes, "
            f"{self.graph.number_of_edges()} edges"
        )

        self.report = validate_model(self.graph)
        for w in self.report.warnings:
            logger.warning(w)
        for e in self.report.errors:
            logger.error(e)
        return self.report.ok

    @property
    def accessor(self) -> NetworkxAccessor:
        return NetworkxAccessor(self.graph)

    @property
    def root_ids(self) -> List[str]:
        if self.report is None:
            return []
        return list(self.report.root_nodes)

    def get_children(self, node_id: str) -> List[str]:
        node = self.accessor.get_node(node_id)
        if node is None:
            return []
        return node.get_children_ids()

    def get_pointers(self, node_id: str) -> Dict[str, str]:
        node = self.accessor.get_node(node_id)
        if node is None:
            return {}
        pointers: Dict[str, str] = {}
        for name in node.get_pointer_names():
            ref = node.get_pointer(name)
            if ref is not None and ref.to:
                pointers[name] = ref.to
        return pointers

    def export_graph_info(self) -> Dict[str, Any]:
        nodes_payload = []
        for node in self.graph.nodes():
            attrs = dict(self.graph.nodes[node])
            nodes_payload.append({"id": node, **attrs})

        edges_payload = []
        for u, v, attrs in self.graph.edges(data=True):
            edges_payload.append({"from": u, "to": v, **attrs})

        type_groups: Dict[str, List[str]] = {}
        for node_id, attrs in self.graph.nodes(data=True):
            type_groups.setdefault(attrs.get("type") or "Unknown", []).append(node_id)

        graph_stats = {
            "nodes": self.graph.number_of_nodes(),
            "edges": self.graph.number_of_edges(),
            "containment_edges": sum(1 for *_, k in self.graph.edges(data="kind") if k == CONTAINS),
            "pointer_edges": sum(1 for *_, k in self.graph.edges(data="kind") if k == POINTER),
            "roots": self.root_ids,
        }

        return {
            "nodes": nodes_payload,
            "edges": edges_payload,
            "graph_stats": graph_stats,
            "type_groups": type_groups,
        }
