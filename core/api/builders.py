from __future__ import annotations

from typing import List, Optional, Sequence

from .models import (
    ANALYSIS_ERROR,
    ANALYSIS_LOOP,
    ANALYSIS_NOT_APPLICABLE,
    ANALYSIS_NOT_FOUND,
    ANALYSIS_SAFE,
    LOOP_PATH_SEPARATOR,
    DetectionMethod,
    DetectionResult,
)


def not_found_result() -> DetectionResult:
    return DetectionResult(has_loop=False, elements=[], analysis=ANALYSIS_NOT_FOUND)


def not_applicable_result(node_type: str) -> DetectionResult:
    return DetectionResult(
        has_loop=False,
        elements=[],
        analysis=ANALYSIS_NOT_APPLICABLE,
        node_type=node_type,
    )


def loop_result(
    loop_ids: Sequence[str],
    element_names: Sequence[str],
    method: DetectionMethod,
) -> DetectionResult:
    names = list(element_names)
    return DetectionResult(
        has_loop=True,
        elements=names,
        detection_method=method,
        analysis=ANALYSIS_LOOP,
        loop_path=LOOP_PATH_SEPARATOR.join(names),
        loop_elements=list(loop_ids),
    )


def safe_result(nested: Optional[List[DetectionResult]] = None) -> DetectionResult:
    return DetectionResult(
        has_loop=False,
        elements=[],
        detection_method=DetectionMethod.COMPREHENSIVE,
        analysis=ANALYSIS_SAFE,
        nested_functions=nested,
    )


def error_result(message: str) -> DetectionResult:
    return DetectionResult(has_loop=False, elements=[], error=message, analysis=ANALYSIS_ERROR)
