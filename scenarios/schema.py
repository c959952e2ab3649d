from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from core.api.models import DetectionResult


@dataclass
class ExpectedLoop:
    source: str
    target: str
    type: str = "next-pointer-loop"


@dataclass
class Scenario:
    name: str
    kind: str  # "Program" or "Function"
    category: str
    commands: List[Dict[str, Any]]
    id: str = ""
    expected_loops: List[ExpectedLoop] = field(default_factory=list)
    is_realistic: bool = True

    @property
    def expects_loop(self) -> bool:
        return len(self.expected_loops) > 0


@dataclass
class ScenarioOutcome:
    scenario: Scenario
    result: Optional[DetectionResult] = None
    passed: bool = False
    strict_passed: bool = False
    permissive: bool = False
    error: Optional[str] = None


@dataclass
class ScenarioReport:
    total_tests: int
    realistic_tests: int
    passed: int
    failed: int
    success_rate: int
    outcomes: List[ScenarioOutcome] = field(default_factory=list)

    @property
    def disagreements(self) -> List[ScenarioOutcome]:
        """Outcomes where oracle and detector differ, permissive grading or not"""
        return [o for o in self.outcomes if not o.strict_passed]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "totalTests": self.total_tests,
            "realisticTests": self.realistic_tests,
            "passed": self.passed,
            "failed": self.failed,
            "successRate": self.success_rate,
            "testResults": [
                {
                    "name": o.scenario.name,
                    "type": o.scenario.kind,
                    "category": o.scenario.category,
                    "id": o.scenario.id,
                    "expectedLoops": [vars(e) for e in o.scenario.expected_loops],
                    "passed": o.passed,
                    "strictPassed": o.strict_passed,
                    "actualResult": o.result.to_dict() if o.result is not None else None,
                    "error": o.error,
                }
                for o in self.outcomes
            ],
        }
