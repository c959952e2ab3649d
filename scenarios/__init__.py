"""
Scenario Builder: synthetic turtle models for exercising the loop detector
"""

from .schema import ExpectedLoop, Scenario, ScenarioOutcome, ScenarioReport
from .oracle import expected_loops, would_create_cycle, find_command_by_name
from .generator import ScenarioBuilder, PERMISSIVE_MARKERS, simulated_node_id

__all__ = [
    'ExpectedLoop', 'Scenario', 'ScenarioOutcome', 'ScenarioReport',
    'expected_loops', 'would_create_cycle', 'find_command_by_name',
    'ScenarioBuilder', 'PERMISSIVE_MARKERS', 'simulated_node_id',
]
