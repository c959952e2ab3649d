import os
from typing import Dict, Optional
import logging

from model.accessor import NetworkxAccessor
from model.graph_builder import ModelGraphBuilder
from core.api.models import DetectionResult
from core.config import DetectorSettings
from core.loop_detector import LoopDetector

logger = logging.getLogger(__name__)


class ModelLoader:
    """Model loader using ModelGraphBuilder"""

    def __init__(self, settings: Optional[DetectorSettings] = None):
        self.graph_builder = ModelGraphBuilder()
        self.settings = settings or DetectorSettings()

    def load_from_file(self, file_path: str, enable_validation: bool = True) -> NetworkxAccessor:
        """Load a model description from JSON and return an accessor over it"""
        try:
            if not os.path.exists(file_path):
                raise FileNotFoundError(f"Model description file not found: {file_path}")

            if not self.graph_builder.load_from_json(file_path):
                raise ValueError(f"Failed to load model description: {file_path}")

            ok = self.graph_builder.build_graph()
            if self.graph_builder.report is None:
                raise ValueError(f"Invalid model description: {file_path}")
            if not ok and enable_validation:
                raise ValueError(f"Model validation failed: {file_path}")

            logger.info(f"Loaded {self.graph_builder.graph.number_of_nodes()} nodes from {file_path}")
            return self.graph_builder.accessor

        except Exception as e:
            logger.error(f"Failed to load model from {file_path}: {e}")
            raise

    def analyze(self, root_id: Optional[str] = None) -> Dict[str, DetectionResult]:
        """Run loop detection on one root, or on every top-level root"""
        detector = LoopDetector(self.graph_builder.accessor, settings=self.settings)
        root_ids = [root_id] if root_id else self.graph_builder.root_ids

        results: Dict[str, DetectionResult] = {}
        for rid in root_ids:
            results[rid] = detector.detect_loops(rid)
            if results[rid].has_any_loop():
                logger.warning(f"Loop found under root {rid}")
        return results


def load_model(file_path: str, enable_validation: bool = True) -> NetworkxAccessor:
    """Convenience function to load a model"""
    loader = ModelLoader()
    return loader.load_from_file(file_path, enable_validation)


def analyze_file(file_path: str, settings: Optional[DetectorSettings] = None) -> Dict[str, DetectionResult]:
    """Load a model description and analyse all of its roots"""
    loader = ModelLoader(settings=settings)
    loader.load_from_file(file_path, enable_validation=True)
    return loader.analyze()
