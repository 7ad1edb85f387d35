"""Helpers for self-referencing (id, parent_id) tables.

Everything here works on rows that were already fetched, so a whole tree is
built from a single query instead of one query per level.
"""

from collections import defaultdict
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Optional


@dataclass
class TreeNode:
    """A row plus its nesting position."""

    node: Any
    depth: int
    children: List["TreeNode"] = field(default_factory=list)

    @property
    def id(self) -> int:
        return self.node.id


@dataclass
class IntegrityReport:
    """Problems found in one table's parent links."""

    orphans: List[int] = field(default_factory=list)
    cycles: List[List[int]] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.orphans and not self.cycles


def sibling_sort_key(label_attr: str = "name") -> Callable[[Any], tuple]:
    """(sort_order, label, id) ascending; id only settles exact duplicates."""

    def key(node: Any) -> tuple:
        return (node.sort_order or 0, getattr(node, label_attr) or "", node.id)

    return key


def build_forest(
    nodes: Iterable[Any],
    label_attr: str = "name",
    root_parent_id: Optional[int] = None,
) -> List[TreeNode]:
    """Nest a flat collection of rows.

    Roots are the rows whose ``parent_id`` equals ``root_parent_id`` (None by
    default). Rows that cannot be reached from a root, such as children of a
    filtered-out parent, are left out.
    """
    by_parent: Dict[Optional[int], List[Any]] = defaultdict(list)
    for node in nodes:
        by_parent[node.parent_id].append(node)

    key = sibling_sort_key(label_attr)
    for siblings in by_parent.values():
        siblings.sort(key=key)

    seen = set()

    def attach(node: Any, depth: int) -> TreeNode:
        seen.add(node.id)
        children = [
            attach(child, depth + 1)
            for child in by_parent.get(node.id, [])
            if child.id not in seen
        ]
        return TreeNode(node=node, depth=depth, children=children)

    return [attach(root, 0) for root in by_parent.get(root_parent_id, []) if root.id not in seen]


def find_cycles(parent_of: Dict[int, Optional[int]]) -> List[List[int]]:
    """Every parent-link cycle, each listed once in upward order."""
    done = set()
    cycles = []
    for start in parent_of:
        if start in done:
            continue
        path: List[int] = []
        position: Dict[int, int] = {}
        current = start
        while current is not None and current in parent_of and current not in done and current not in position:
            position[current] = len(path)
            path.append(current)
            current = parent_of[current]
        if current in position:
            cycles.append(path[position[current]:])
        done.update(path)
    return cycles


def find_integrity_violations(nodes: Iterable[Any]) -> IntegrityReport:
    """Orphaned parent references and cycles in a full table snapshot."""
    parent_of = {node.id: node.parent_id for node in nodes}
    orphans = sorted(
        node_id
        for node_id, parent_id in parent_of.items()
        if parent_id is not None and parent_id not in parent_of
    )
    return IntegrityReport(orphans=orphans, cycles=find_cycles(parent_of))
