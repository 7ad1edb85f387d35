"""Data access for self-referencing (id, parent_id) tables"""

from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, Iterable, List, Optional, Sequence

from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession


class HierarchyRepository:
    """CRUD over one tree table.

    ``scope`` pins every read and write to rows with the given column values,
    e.g. ``{"menu_id": 3}`` for the items of one menu. Slug checks ignore the
    scope because slugs are unique across the whole table.
    """

    def __init__(
        self,
        db: AsyncSession,
        model: Any,
        scope: Optional[Dict[str, Any]] = None,
        load_options: Sequence[Any] = (),
    ):
        self.db = db
        self.model = model
        self.scope = dict(scope or {})
        self.load_options = tuple(load_options)

    def _scoped(self, query):
        for column, value in self.scope.items():
            query = query.where(getattr(self.model, column) == value)
        return query

    def _filtered(self, query, filters: Dict[str, Any]):
        for column, value in filters.items():
            if value is not None:
                query = query.where(getattr(self.model, column) == value)
        return query

    # ========== reads ==========

    async def find_by_id(self, node_id: int, with_relations: bool = False) -> Optional[Any]:
        query = self._scoped(select(self.model).where(self.model.id == node_id))
        if with_relations and self.load_options:
            query = query.options(*self.load_options)
        # bulk UPDATEs bypass the identity map; always refresh from the row
        query = query.execution_options(populate_existing=True)
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def find_by_slug(self, slug: str, with_relations: bool = False) -> Optional[Any]:
        query = self._scoped(select(self.model).where(self.model.slug == slug))
        if with_relations and self.load_options:
            query = query.options(*self.load_options)
        query = query.execution_options(populate_existing=True)
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def find_child_ids(self, parent_ids: Iterable[int]) -> List[int]:
        """Ids of the direct children of any of ``parent_ids`` (one query)."""
        parent_ids = list(parent_ids)
        if not parent_ids:
            return []
        query = self._scoped(select(self.model.id).where(self.model.parent_id.in_(parent_ids)))
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def find_all(self, **filters) -> List[Any]:
        query = self._filtered(self._scoped(select(self.model)), filters)
        query = query.execution_options(populate_existing=True)
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def exists_by_slug(self, slug: str, exclude_id: Optional[int] = None) -> bool:
        query = select(func.count(self.model.id)).where(self.model.slug == slug)
        if exclude_id:
            query = query.where(self.model.id != exclude_id)
        return ((await self.db.execute(query)).scalar() or 0) > 0

    async def count(self, *conditions) -> int:
        query = self._scoped(select(func.count(self.model.id)))
        if conditions:
            query = query.where(*conditions)
        return (await self.db.execute(query)).scalar() or 0

    async def count_by(self, column: str) -> List[tuple]:
        """(value, count) pairs grouped by ``column``"""
        col = getattr(self.model, column)
        query = self._scoped(select(col, func.count(self.model.id))).group_by(col).order_by(col)
        result = await self.db.execute(query)
        return [(value, count) for value, count in result.all()]

    async def paginate(self, conditions: Sequence[Any], order_by: Sequence[Any], offset: int, limit: int):
        """(rows, total) for one page"""
        total = await self.count(*conditions)
        query = self._scoped(select(self.model))
        if conditions:
            query = query.where(*conditions)
        if self.load_options:
            query = query.options(*self.load_options)
        query = query.order_by(*order_by).offset(offset).limit(limit)
        result = await self.db.execute(query.execution_options(populate_existing=True))
        return list(result.scalars().unique().all()), total

    # ========== writes ==========

    async def insert(self, fields: Dict[str, Any]) -> Any:
        node = self.model(**{**fields, **self.scope})
        self.db.add(node)
        await self.db.flush()
        return node

    async def update_fields(self, node_id: int, fields: Dict[str, Any]) -> None:
        if not fields:
            return
        query = self._scoped(update(self.model).where(self.model.id == node_id))
        await self.db.execute(query.values(**fields).execution_options(synchronize_session=False))

    async def update_many(self, conditions: Sequence[Any], fields: Dict[str, Any]) -> int:
        query = self._scoped(update(self.model).where(*conditions))
        result = await self.db.execute(query.values(**fields).execution_options(synchronize_session=False))
        return result.rowcount

    async def delete_by_id(self, node_id: int) -> None:
        query = self._scoped(delete(self.model).where(self.model.id == node_id))
        await self.db.execute(query.execution_options(synchronize_session=False))

    async def delete_many(self, node_ids: Iterable[int]) -> int:
        node_ids = list(node_ids)
        if not node_ids:
            return 0
        query = self._scoped(delete(self.model).where(self.model.id.in_(node_ids)))
        result = await self.db.execute(query.execution_options(synchronize_session=False))
        return result.rowcount

    async def delete_all(self) -> int:
        """Every row inside the scope, whatever its nesting"""
        if not self.scope:
            raise RuntimeError("delete_all requires a scope")
        query = self._scoped(delete(self.model))
        result = await self.db.execute(query.execution_options(synchronize_session=False))
        return result.rowcount

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[AsyncSession]:
        """Commit on success, roll everything back on any error"""
        try:
            yield self.db
            await self.db.commit()
        except BaseException:
            await self.db.rollback()
            raise
