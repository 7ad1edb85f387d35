"""Category API"""

import math
from typing import Any, Optional, List
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.deps import get_db
from app.models.category import Category
from app.schemas.category import (
    CategoryBase, CategoryCreate, CategoryUpdate, CategoryResponse,
    CategoryListResponse, CategoryTreeNode, CategoryStats, CategoryType, CategoryStatus
)
from app.schemas.common import NodeBrief, ReorderRequest, ReorderResponse, DeleteResponse
from app.services.hierarchy import HierarchyService
from app.services.kinds import CATEGORY
from app.utils.tree import TreeNode, sibling_sort_key

router = APIRouter()


def get_service(db: AsyncSession = Depends(get_db)) -> HierarchyService:
    return HierarchyService(db, CATEGORY)


def _brief(cat: Category) -> NodeBrief:
    return NodeBrief(id=cat.id, name=cat.name, slug=cat.slug, sort_order=cat.sort_order or 0)


def _base_fields(cat: Category) -> dict:
    return {field: getattr(cat, field) for field in CategoryBase.model_fields}


def _build_response(cat: Category) -> CategoryResponse:
    """Build the response from a category loaded with parent and children"""
    children = sorted(cat.children or [], key=sibling_sort_key())
    return CategoryResponse(
        **_base_fields(cat),
        id=cat.id,
        slug=cat.slug,
        type=cat.type,
        parent=_brief(cat.parent) if cat.parent else None,
        children=[_brief(c) for c in children],
        children_count=len(children),
        created_at=cat.created_at,
        updated_at=cat.updated_at)


def _build_tree_node(node: TreeNode) -> CategoryTreeNode:
    cat = node.node
    return CategoryTreeNode(
        **_base_fields(cat),
        id=cat.id,
        slug=cat.slug,
        type=cat.type,
        depth=node.depth,
        children=[_build_tree_node(child) for child in node.children])


@router.get("/", response_model=CategoryListResponse)
async def list_categories(
    *,
    service: HierarchyService = Depends(get_service),
    page: int = Query(1, ge=1),
    limit: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    search: Optional[str] = Query(None, description="Matches name, slug or description"),
    status: Optional[CategoryStatus] = Query(None),
    parent_id: Optional[int] = Query(None, description="Only direct children of this category"),
    type: Optional[CategoryType] = Query("post")) -> Any:
    """List categories"""
    categories, total = await service.paginate(
        page=page, limit=limit, search=search, parent_id=parent_id, status=status, type=type)
    return CategoryListResponse(
        data=[_build_response(c) for c in categories],
        total=total,
        page=page,
        limit=limit,
        total_pages=math.ceil(total / limit) if total else 0
    )


@router.get("/tree", response_model=List[CategoryTreeNode])
async def get_category_tree(
    *,
    service: HierarchyService = Depends(get_service),
    type: CategoryType = Query("post"),
    status: Optional[CategoryStatus] = Query(None)) -> Any:
    """Nested category tree"""
    forest = await service.find_tree(type=type, status=status)
    return [_build_tree_node(root) for root in forest]


@router.get("/stats", response_model=CategoryStats)
async def get_category_stats(*, service: HierarchyService = Depends(get_service)) -> Any:
    """Category counts by type and status"""
    return await service.stats()


@router.put("/reorder", response_model=ReorderResponse)
async def reorder_categories(
    *,
    service: HierarchyService = Depends(get_service),
    reorder_in: ReorderRequest) -> Any:
    """Bulk update sort order (and parent)"""
    updated = await service.reorder([item.model_dump(exclude_unset=True) for item in reorder_in.items])
    return ReorderResponse(message="Categories reordered", updated=updated)


@router.get("/slug/{slug}", response_model=CategoryResponse)
async def get_category_by_slug(
    *,
    service: HierarchyService = Depends(get_service),
    slug: str) -> Any:
    """Category by slug"""
    return _build_response(await service.get_by_slug(slug))


@router.get("/{category_id}", response_model=CategoryResponse)
async def get_category(
    *,
    service: HierarchyService = Depends(get_service),
    category_id: int) -> Any:
    """Category details"""
    return _build_response(await service.get(category_id))


@router.get("/{category_id}/path", response_model=List[NodeBrief])
async def get_category_path(
    *,
    service: HierarchyService = Depends(get_service),
    category_id: int) -> Any:
    """Breadcrumb from the root down to the category"""
    return [_brief(c) for c in await service.get_path(category_id)]


@router.post("/", response_model=CategoryResponse, status_code=201)
async def create_category(
    *,
    service: HierarchyService = Depends(get_service),
    category_in: CategoryCreate) -> Any:
    """Create a category"""
    cat = await service.create(category_in.model_dump())
    return _build_response(cat)


@router.put("/{category_id}", response_model=CategoryResponse)
async def update_category(
    *,
    service: HierarchyService = Depends(get_service),
    category_id: int,
    category_in: CategoryUpdate) -> Any:
    """Update a category; only the fields sent are changed"""
    cat = await service.update(category_id, category_in.model_dump(exclude_unset=True))
    return _build_response(cat)


@router.delete("/{category_id}", response_model=DeleteResponse)
async def delete_category(
    *,
    service: HierarchyService = Depends(get_service),
    category_id: int) -> Any:
    """Delete a category; its children move up to its parent"""
    removed = await service.delete(category_id)
    return DeleteResponse(message="Category deleted", deleted_ids=removed)
