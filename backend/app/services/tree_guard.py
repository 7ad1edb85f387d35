"""
Parent-link checks for tree tables

Run before any insert or update that sets parent_id so the table never
contains a self-reference, a cycle or a dangling parent.
"""

from enum import Enum
from typing import Any, List, Optional, Set

from app.core.exceptions import ValidationError
from app.repositories.hierarchy import HierarchyRepository


class ParentRejection(str, Enum):
    SELF_PARENT = "self-parent"
    DESCENDANT_AS_PARENT = "descendant-as-parent"
    PARENT_NOT_FOUND = "parent-not-found"
    TYPE_MISMATCH = "type-mismatch"


_MESSAGES = {
    ParentRejection.SELF_PARENT: "{label} cannot be its own parent",
    ParentRejection.DESCENDANT_AS_PARENT: "Cannot set a descendant {lower} as parent",
    ParentRejection.PARENT_NOT_FOUND: "Parent {lower} not found",
    ParentRejection.TYPE_MISMATCH: "Parent {lower} must have the same type",
}


class TreeGuard:
    """Acyclicity and referential checks over one repository.

    ``type_field`` names the column that tags rows sharing a table (Category
    post/product); when set, a parent must carry the child's tag.
    """

    def __init__(self, repo: HierarchyRepository, label: str = "Node", type_field: Optional[str] = None):
        self.repo = repo
        self.label = label
        self.type_field = type_field

    async def get_descendants(self, node_id: int) -> Set[int]:
        """All ids below ``node_id``, one query per tree level."""
        descendants: Set[int] = set()
        frontier = [node_id]
        while frontier:
            child_ids = await self.repo.find_child_ids(frontier)
            frontier = [cid for cid in child_ids if cid != node_id and cid not in descendants]
            descendants.update(frontier)
        return descendants

    async def check_parent_assignment(
        self,
        node_id: Optional[int],
        candidate_parent_id: Optional[int],
        expected_type: Optional[str] = None,
    ) -> Optional[ParentRejection]:
        """None when ``candidate_parent_id`` may become the parent of ``node_id``.

        ``node_id`` is None for a row that does not exist yet.
        """
        if candidate_parent_id is None:
            return None
        if node_id is not None:
            if candidate_parent_id == node_id:
                return ParentRejection.SELF_PARENT
            if candidate_parent_id in await self.get_descendants(node_id):
                return ParentRejection.DESCENDANT_AS_PARENT

        parent = await self.repo.find_by_id(candidate_parent_id)
        if parent is None:
            return ParentRejection.PARENT_NOT_FOUND
        if self.type_field and expected_type is not None and getattr(parent, self.type_field) != expected_type:
            return ParentRejection.TYPE_MISMATCH
        return None

    async def validate_parent_assignment(
        self,
        node_id: Optional[int],
        candidate_parent_id: Optional[int],
        expected_type: Optional[str] = None,
    ) -> None:
        rejection = await self.check_parent_assignment(node_id, candidate_parent_id, expected_type)
        if rejection is not None:
            raise ValidationError(self.describe(rejection), reason=rejection.value)

    def describe(self, rejection: ParentRejection) -> str:
        return _MESSAGES[rejection].format(label=self.label, lower=self.label.lower())

    async def get_path(self, node: Any) -> List[Any]:
        """Breadcrumb from the root down to ``node`` (inclusive)."""
        path = [node]
        seen = {node.id}
        current = node
        while current.parent_id is not None and current.parent_id not in seen:
            current = await self.repo.find_by_id(current.parent_id)
            if current is None:
                break
            seen.add(current.id)
            path.append(current)
        path.reverse()
        return path
