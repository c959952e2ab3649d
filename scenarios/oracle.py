"""
Independent ``next``-chain oracle for flat scenario command lists.

It knows nothing about model graphs or the detector: it only follows the
``next`` field by command name.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence

from .schema import ExpectedLoop


def find_command_by_name(commands: Sequence[Dict[str, Any]], name: str) -> Optional[Dict[str, Any]]:
    for command in commands:
        if command.get("name") == name:
            return command
    return None


def would_create_cycle(commands: Sequence[Dict[str, Any]], start_name: str, target_name: str) -> bool:
    """True if following ``next`` from ``target_name`` leads back to ``start_name``."""
    visited: List[str] = []
    current: Optional[str] = target_name
    while current and current not in visited:
        if current == start_name:
            return True
        visited.append(current)
        command = find_command_by_name(commands, current)
        current = command.get("next") if command else None
    return False


def expected_loops(commands: Sequence[Dict[str, Any]]) -> List[ExpectedLoop]:
    loops: List[ExpectedLoop] = []
    for command in commands:
        target = command.get("next")
        if target and would_create_cycle(commands, command["name"], target):
            loops.append(ExpectedLoop(source=command["name"], target=target))
    return loops
