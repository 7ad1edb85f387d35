"""Product category API"""

import math
from typing import Any, Optional, List, Literal
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.deps import get_db
from app.models.product_category import ProductCategory
from app.schemas.product_category import (
    ProductCategoryBase, ProductCategoryCreate, ProductCategoryUpdate, ProductCategoryResponse,
    ProductCategoryListResponse, ProductCategoryTreeNode, ProductCategoryStats
)
from app.schemas.common import NodeBrief, ReorderRequest, ReorderResponse, DeleteResponse
from app.services.hierarchy import HierarchyService
from app.services.kinds import PRODUCT_CATEGORY
from app.utils.tree import TreeNode, sibling_sort_key

router = APIRouter()


def get_service(db: AsyncSession = Depends(get_db)) -> HierarchyService:
    return HierarchyService(db, PRODUCT_CATEGORY)


def _brief(cat: ProductCategory) -> NodeBrief:
    return NodeBrief(id=cat.id, name=cat.name, slug=cat.slug, sort_order=cat.sort_order or 0)


def _build_response(cat: ProductCategory) -> ProductCategoryResponse:
    children = sorted(cat.children or [], key=sibling_sort_key())
    return ProductCategoryResponse(
        **{field: getattr(cat, field) for field in ProductCategoryBase.model_fields},
        id=cat.id,
        slug=cat.slug,
        parent=_brief(cat.parent) if cat.parent else None,
        children=[_brief(c) for c in children],
        children_count=len(children),
        created_at=cat.created_at,
        updated_at=cat.updated_at)


def _build_tree_node(node: TreeNode) -> ProductCategoryTreeNode:
    cat = node.node
    return ProductCategoryTreeNode(
        **{field: getattr(cat, field) for field in ProductCategoryBase.model_fields},
        id=cat.id,
        slug=cat.slug,
        depth=node.depth,
        children=[_build_tree_node(child) for child in node.children])


@router.get("/", response_model=ProductCategoryListResponse)
async def list_product_categories(
    *,
    service: HierarchyService = Depends(get_service),
    page: int = Query(1, ge=1),
    limit: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    search: Optional[str] = Query(None),
    status: Optional[Literal["active", "inactive"]] = Query(None),
    parent_id: Optional[int] = Query(None)) -> Any:
    """List product categories"""
    categories, total = await service.paginate(
        page=page, limit=limit, search=search, parent_id=parent_id, status=status)
    return ProductCategoryListResponse(
        data=[_build_response(c) for c in categories],
        total=total,
        page=page,
        limit=limit,
        total_pages=math.ceil(total / limit) if total else 0
    )


@router.get("/tree", response_model=List[ProductCategoryTreeNode])
async def get_product_category_tree(
    *,
    service: HierarchyService = Depends(get_service),
    status: Optional[Literal["active", "inactive"]] = Query(None)) -> Any:
    """Nested product category tree"""
    return [_build_tree_node(root) for root in await service.find_tree(status=status)]


@router.get("/stats", response_model=ProductCategoryStats)
async def get_product_category_stats(*, service: HierarchyService = Depends(get_service)) -> Any:
    return await service.stats()


@router.put("/reorder", response_model=ReorderResponse)
async def reorder_product_categories(
    *,
    service: HierarchyService = Depends(get_service),
    reorder_in: ReorderRequest) -> Any:
    updated = await service.reorder([item.model_dump(exclude_unset=True) for item in reorder_in.items])
    return ReorderResponse(message="Product categories reordered", updated=updated)


@router.get("/slug/{slug}", response_model=ProductCategoryResponse)
async def get_product_category_by_slug(
    *,
    service: HierarchyService = Depends(get_service),
    slug: str) -> Any:
    return _build_response(await service.get_by_slug(slug))


@router.get("/{category_id}", response_model=ProductCategoryResponse)
async def get_product_category(
    *,
    service: HierarchyService = Depends(get_service),
    category_id: int) -> Any:
    return _build_response(await service.get(category_id))


@router.get("/{category_id}/path", response_model=List[NodeBrief])
async def get_product_category_path(
    *,
    service: HierarchyService = Depends(get_service),
    category_id: int) -> Any:
    return [_brief(c) for c in await service.get_path(category_id)]


@router.post("/", response_model=ProductCategoryResponse, status_code=201)
async def create_product_category(
    *,
    service: HierarchyService = Depends(get_service),
    category_in: ProductCategoryCreate) -> Any:
    """Create a product category"""
    return _build_response(await service.create(category_in.model_dump()))


@router.put("/{category_id}", response_model=ProductCategoryResponse)
async def update_product_category(
    *,
    service: HierarchyService = Depends(get_service),
    category_id: int,
    category_in: ProductCategoryUpdate) -> Any:
    """Update a product category"""
    cat = await service.update(category_id, category_in.model_dump(exclude_unset=True))
    return _build_response(cat)


@router.delete("/{category_id}", response_model=DeleteResponse)
async def delete_product_category(
    *,
    service: HierarchyService = Depends(get_service),
    category_id: int) -> Any:
    """Delete a product category; its children move up to its parent"""
    removed = await service.delete(category_id)
    return DeleteResponse(message="Product category deleted", deleted_ids=removed)
