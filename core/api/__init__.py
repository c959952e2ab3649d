from __future__ import annotations

from .models import (
    DetectionResult, DetectionMethod,
    ANALYSIS_NOT_FOUND, ANALYSIS_NOT_APPLICABLE, ANALYSIS_SAFE, ANALYSIS_LOOP, ANALYSIS_ERROR,
)
from .builders import not_found_result, not_applicable_result, loop_result, safe_result, error_result

__all__ = [
    'DetectionResult', 'DetectionMethod',
    'ANALYSIS_NOT_FOUND', 'ANALYSIS_NOT_APPLICABLE', 'ANALYSIS_SAFE', 'ANALYSIS_LOOP', 'ANALYSIS_ERROR',
    'not_found_result', 'not_applicable_result', 'loop_result', 'safe_result', 'error_result',
]
