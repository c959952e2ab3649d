from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

ANALYSIS_NOT_FOUND = "node not found"
ANALYSIS_NOT_APPLICABLE = "not applicable"
ANALYSIS_SAFE = "safe"
ANALYSIS_LOOP = "loop detected"
ANALYSIS_ERROR = "error — assuming safe"

LOOP_PATH_SEPARATOR = " -> "


class DetectionMethod(str, Enum):
    NEXT_POINTER = "next-pointer-sequence"
    CONTAINMENT = "containment-sequence"
    CONNECTION = "connection-sequence"
    COMPREHENSIVE = "comprehensive-analysis"


class DetectionResult(BaseModel):
    """Outcome of a loop analysis, serialised with camelCase field names"""
    model_config = ConfigDict(populate_by_name=True, use_enum_values=True)

    has_loop: bool = Field(default=False, alias="hasLoop")
    elements: List[str] = Field(default_factory=list)
    detection_method: Optional[DetectionMethod] = Field(default=None, alias="detectionMethod")
    analysis: Optional[str] = None
    loop_path: Optional[str] = Field(default=None, alias="loopPath")
    loop_elements: Optional[List[str]] = Field(default=None, alias="loopElements")
    nested_functions: Optional[List[DetectionResult]] = Field(default=None, alias="nestedFunctions")
    node_type: Optional[str] = Field(default=None, alias="nodeType")
    error: Optional[str] = None
    function_name: Optional[str] = Field(default=None, alias="functionName")
    function_id: Optional[str] = Field(default=None, alias="functionId")

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)

    def has_any_loop(self) -> bool:
        """True if this result or any nested function result reports a loop"""
        if self.has_loop:
            return True
        return any(nested.has_any_loop() for nested in self.nested_functions or [])


DetectionResult.model_rebuild()
