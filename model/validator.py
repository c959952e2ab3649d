from __future__ import annotations

from typing import List

import networkx as nx

from .builder import CONTAINS
from .meta import (
    CONNECTION_TARGET_POINTERS,
    NEXT_CONNECTION_FLAG,
    NEXT_CONNECTION_TYPES,
    ROOT_TYPES,
    TURTLE_COMMAND_TYPES,
    TypeTag,
)
from .schema import ValidationReport


def validate_model(g: nx.MultiDiGraph) -> ValidationReport:
    warnings: List[str] = []
    errors: List[str] = []

    tags = {n: TypeTag.from_string(a.get("type")) for n, a in g.nodes(data=True)}

    contained = {v for _, v, kind in g.edges(data="kind") if kind == CONTAINS}

    # top-level roots only, nested functions are reached through their program
    roots = [n for n, tag in tags.items() if tag in ROOT_TYPES and n not in contained]
    if not any(tag in ROOT_TYPES for tag in tags.values()):
        errors.append("No Program or Function node in the model.")

    unknown = [n for n, tag in tags.items() if tag is TypeTag.UNKNOWN]
    if unknown:
        warnings.append(f"Nodes with unknown type: {sorted(unknown)}")

    orphans = [n for n, tag in tags.items() if tag in TURTLE_COMMAND_TYPES and n not in contained]
    if orphans:
        warnings.append(f"Commands outside any program or function: {sorted(orphans)}")

    dangling: List[str] = []
    for n, a in g.nodes(data=True):
        for pointer_name, target in a.get("dangling_pointers", {}).items():
            dangling.append(f"{n}.{pointer_name} -> {target}")
        for child in a.get("dangling_children", []):
            dangling.append(f"{n} contains {child}")
    if dangling:
        warnings.append(f"Unresolved references: {dangling}")

    for n, tag in tags.items():
        if tag not in NEXT_CONNECTION_TYPES and not g.nodes[n].get(NEXT_CONNECTION_FLAG):
            continue
        pointer_names = {
            name for _, _, name in g.out_edges(n, data="name")
            if name is not None
        } | set(g.nodes[n].get("dangling_pointers", {}))
        if not pointer_names.intersection(CONNECTION_TARGET_POINTERS):
            warnings.append(f"Connection '{n}' has no {'/'.join(CONNECTION_TARGET_POINTERS)} pointer")

    ok = len(errors) == 0
    return ValidationReport(
        ok=ok,
        warnings=warnings,
        errors=errors,
        root_nodes=roots,
        orphan_nodes=orphans,
        dangling_pointers=dangling,
        unknown_type_nodes=unknown,
    )
