"""
Core package: loop detection over turtle graphics model graphs
"""

from .loop_detector import LoopDetector, LogSink
from .traversal import (
    TraversalLimitError, find_cycle,
    next_pointer_successors, containment_successors, connection_successors,
)
from .config import DetectorSettings, setup_logging
from .api import DetectionResult, DetectionMethod

__all__ = [
    'LoopDetector', 'LogSink',
    'TraversalLimitError', 'find_cycle',
    'next_pointer_successors', 'containment_successors', 'connection_successors',
    'DetectorSettings', 'setup_logging',
    'DetectionResult', 'DetectionMethod',
]
