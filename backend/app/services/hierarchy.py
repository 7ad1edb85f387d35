"""
Generic service for self-referencing tree tables

One implementation serves every tree kind (categories, product categories,
menu items); a HierarchyKind describes the table, the label column, the slug
column and what happens to children on delete.
"""

import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.exceptions import ConflictError, NotFoundError, ValidationError
from app.repositories.hierarchy import HierarchyRepository
from app.services.tree_guard import TreeGuard
from app.utils.slug import generate_slug_from_title
from app.utils.tree import TreeNode, build_forest

logger = logging.getLogger(__name__)


class DeletionPolicy(str, Enum):
    REPARENT = "reparent"  # direct children move up to the deleted node's parent
    CASCADE = "cascade"  # the whole subtree goes with the node


def _no_options() -> Sequence[Any]:
    return ()


@dataclass(frozen=True)
class HierarchyKind:
    name: str
    label: str
    model: Any
    title_field: str = "name"
    slug_field: Optional[str] = "slug"
    deletion_policy: DeletionPolicy = DeletionPolicy.REPARENT
    type_field: Optional[str] = None
    default_type: Optional[str] = None
    search_fields: Tuple[str, ...] = ()
    stat_fields: Tuple[str, ...] = ()
    load_options: Callable[[], Sequence[Any]] = _no_options



class HierarchyService:
    """create / update / delete / tree / reorder for one kind, optionally scoped."""

    def __init__(self, db: AsyncSession, kind: HierarchyKind, scope: Optional[Dict[str, Any]] = None):
        self.db = db
        self.kind = kind
        self.repo = HierarchyRepository(db, kind.model, scope, kind.load_options())
        self.guard = TreeGuard(self.repo, kind.label, kind.type_field)

    # ========== reads ==========

    async def get(self, node_id: int) -> Any:
        node = await self.repo.find_by_id(node_id, with_relations=True)
        if node is None:
            raise NotFoundError(f"{self.kind.label} not found")
        return node

    async def get_by_slug(self, slug: str) -> Any:
        node = await self.repo.find_by_slug(slug, with_relations=True)
        if node is None:
            raise NotFoundError(f"{self.kind.label} not found")
        return node

    async def get_path(self, node_id: int) -> List[Any]:
        node = await self.get(node_id)
        return await self.guard.get_path(node)

    async def get_descendants(self, node_id: int) -> List[int]:
        await self.get(node_id)
        return sorted(await self.guard.get_descendants(node_id))

    async def paginate(
        self,
        page: int = 1,
        limit: int = 20,
        search: Optional[str] = None,
        parent_id: Optional[int] = None,
        **filters,
    ) -> Tuple[List[Any], int]:
        model = self.kind.model
        conditions = []
        if search and self.kind.search_fields:
            pattern = f"%{search}%"
            conditions.append(or_(*[getattr(model, f).ilike(pattern) for f in self.kind.search_fields]))
        if parent_id is not None:
            conditions.append(model.parent_id == parent_id)
        for column, value in filters.items():
            if value is not None:
                conditions.append(getattr(model, column) == value)

        order_by = [model.sort_order, getattr(model, self.kind.title_field), model.id]
        return await self.repo.paginate(conditions, order_by, (page - 1) * limit, limit)

    async def find_tree(self, **filters) -> List[TreeNode]:
        nodes = await self.repo.find_all(**filters)
        return build_forest(nodes, label_attr=self.kind.title_field)

    async def stats(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {"total": await self.repo.count()}
        for column in self.kind.stat_fields:
            result[f"by_{column}"] = [
                {"value": value, "count": count} for value, count in await self.repo.count_by(column)
            ]
        return result

    # ========== writes ==========

    async def create(self, data: Dict[str, Any]) -> Any:
        kind = self.kind
        data = dict(data)

        if kind.type_field:
            data[kind.type_field] = data.get(kind.type_field) or kind.default_type

        if kind.slug_field:
            slug = data.get(kind.slug_field)
            if not slug:
                data[kind.slug_field] = await self._generate_slug(data[kind.title_field])
            elif await self.repo.exists_by_slug(slug):
                raise ConflictError("Slug already exists")

        parent_id = data.get("parent_id")
        if parent_id is not None:
            expected_type = data.get(kind.type_field) if kind.type_field else None
            await self.guard.validate_parent_assignment(None, parent_id, expected_type)

        async with self._write():
            node = await self.repo.insert(data)
            node_id = node.id

        logger.info(f"Created {kind.name} {node_id} (parent={parent_id})")
        return await self.get(node_id)

    async def update(self, node_id: int, data: Dict[str, Any]) -> Any:
        kind = self.kind
        node = await self.get(node_id)
        data = dict(data)
        if kind.type_field:
            # the tag decides which tree a row belongs to; it is fixed at creation
            data.pop(kind.type_field, None)
        self._reject_nulls(data)

        if kind.slug_field:
            slug = data.get(kind.slug_field)
            title = data.get(kind.title_field)
            if not slug and title and title != getattr(node, kind.title_field):
                data[kind.slug_field] = await self._generate_slug(title, exclude_id=node.id)
            elif slug and slug != getattr(node, kind.slug_field):
                if await self.repo.exists_by_slug(slug, exclude_id=node.id):
                    raise ConflictError("Slug already exists")

        if "parent_id" in data:
            await self.guard.validate_parent_assignment(node.id, data["parent_id"], self._type_of(node))

        async with self._write():
            await self.repo.update_fields(node.id, data)

        logger.info(f"Updated {kind.name} {node.id}: {sorted(data)}")
        return await self.get(node.id)

    async def delete(self, node_id: int) -> List[int]:
        """Apply the kind's deletion policy atomically; returns the removed ids."""
        node = await self.get(node_id)
        node_id, parent_id = node.id, node.parent_id
        model = self.kind.model

        async with self._write():
            if self.kind.deletion_policy is DeletionPolicy.CASCADE:
                removed = [node_id, *sorted(await self.guard.get_descendants(node_id))]
                await self.repo.delete_many(removed)
            else:
                moved = await self.repo.update_many([model.parent_id == node_id], {"parent_id": parent_id})
                await self.repo.delete_by_id(node_id)
                removed = [node_id]
                if moved:
                    logger.info(f"Moved {moved} child {self.kind.name}(s) of {node_id} to parent {parent_id}")

        logger.info(f"Deleted {self.kind.name} {node_id} ({self.kind.deletion_policy.value}, {len(removed)} row(s))")
        return removed

    async def reorder(self, items: List[Dict[str, Any]]) -> int:
        """Apply sort_order (and parent_id when given) as one batch.

        Parent changes are validated against the state left by the items
        before them; any rejection rolls the whole batch back. Unknown ids are
        skipped. Returns the number of rows updated.
        """
        applied = 0
        async with self._write():
            for item in items:
                node = await self.repo.find_by_id(item["id"])
                if node is None:
                    logger.warning(f"Reorder skipped unknown {self.kind.name} {item['id']}")
                    continue
                fields = {"sort_order": item["sort_order"]}
                if "parent_id" in item:
                    await self.guard.validate_parent_assignment(node.id, item["parent_id"], self._type_of(node))
                    fields["parent_id"] = item["parent_id"]
                await self.repo.update_fields(node.id, fields)
                applied += 1

        logger.info(f"Reordered {applied}/{len(items)} {self.kind.name}(s)")
        return applied

    # ========== helpers ==========

    def _reject_nulls(self, data: Dict[str, Any]) -> None:
        columns = self.kind.model.__table__.columns
        for key, value in data.items():
            if value is None and key in columns and not columns[key].nullable:
                raise ValidationError(f"{key} cannot be null", reason="null-not-allowed")

    def _type_of(self, node: Any) -> Optional[str]:
        return getattr(node, self.kind.type_field) if self.kind.type_field else None

    async def _slug_exists(self, slug: str, exclude_id: Optional[int] = None) -> bool:
        return await self.repo.exists_by_slug(slug, exclude_id)

    async def _generate_slug(self, title: str, exclude_id: Optional[int] = None) -> str:
        return await generate_slug_from_title(
            title,
            self._slug_exists,
            exclude_id,
            max_attempts=settings.SLUG_MAX_ATTEMPTS,
            fallback=self.kind.name.replace("_", "-"),
        )

    @asynccontextmanager
    async def _write(self):
        try:
            async with self.repo.transaction():
                yield
        except IntegrityError as exc:
            # unique slug index caught a concurrent writer
            raise ConflictError(f"{self.kind.label} conflicts with an existing record") from exc
