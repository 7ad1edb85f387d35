"""Menu API"""

from typing import Any, List
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.deps import get_db
from app.models.menu import Menu, MenuItem
from app.schemas.common import ReorderRequest, ReorderResponse, DeleteResponse
from app.schemas.menu import (
    MenuItemBase, MenuCreate, MenuUpdate, MenuResponse, MenuWithItems, MenuLocation,
    MenuItemCreate, MenuItemUpdate, MenuItemResponse, MenuItemTreeNode
)
from app.services.menu_service import MenuService
from app.utils.tree import TreeNode

router = APIRouter()


def get_service(db: AsyncSession = Depends(get_db)) -> MenuService:
    return MenuService(db)


def _build_item_node(node: TreeNode) -> MenuItemTreeNode:
    item: MenuItem = node.node
    return MenuItemTreeNode(
        **{field: getattr(item, field) for field in MenuItemBase.model_fields},
        id=item.id,
        menu_id=item.menu_id,
        depth=node.depth,
        children=[_build_item_node(child) for child in node.children])


def _build_menu(menu: Menu, forest: List[TreeNode]) -> MenuWithItems:
    return MenuWithItems(
        id=menu.id,
        name=menu.name,
        location=menu.location,
        description=menu.description,
        created_at=menu.created_at,
        updated_at=menu.updated_at,
        items=[_build_item_node(root) for root in forest])


# ========== Menus ==========

@router.get("/", response_model=List[MenuResponse])
async def list_menus(*, service: MenuService = Depends(get_service)) -> Any:
    """List menus"""
    return await service.list_menus()


@router.get("/location/{location}", response_model=MenuWithItems)
async def get_menu_by_location(
    *,
    service: MenuService = Depends(get_service),
    location: MenuLocation) -> Any:
    """Menu shown at a site location, active items only"""
    menu, forest = await service.get_by_location(location)
    return _build_menu(menu, forest)


@router.get("/{menu_id}", response_model=MenuWithItems)
async def get_menu(
    *,
    service: MenuService = Depends(get_service),
    menu_id: int) -> Any:
    """Menu with its nested items"""
    menu, forest = await service.get_menu_tree(menu_id)
    return _build_menu(menu, forest)


@router.post("/", response_model=MenuResponse, status_code=201)
async def create_menu(
    *,
    service: MenuService = Depends(get_service),
    menu_in: MenuCreate) -> Any:
    """Create a menu"""
    return await service.create_menu(menu_in.model_dump())


@router.put("/{menu_id}", response_model=MenuResponse)
async def update_menu(
    *,
    service: MenuService = Depends(get_service),
    menu_id: int,
    menu_in: MenuUpdate) -> Any:
    """Update a menu"""
    return await service.update_menu(menu_id, menu_in.model_dump(exclude_unset=True))


@router.delete("/{menu_id}", response_model=DeleteResponse)
async def delete_menu(
    *,
    service: MenuService = Depends(get_service),
    menu_id: int) -> Any:
    """Delete a menu together with all of its items"""
    await service.delete_menu(menu_id)
    return DeleteResponse(message="Menu deleted", deleted_ids=[menu_id])


# ========== Menu items ==========

@router.get("/{menu_id}/items/tree", response_model=List[MenuItemTreeNode])
async def get_menu_item_tree(
    *,
    service: MenuService = Depends(get_service),
    menu_id: int,
    active_only: bool = Query(False)) -> Any:
    forest = await service.item_tree(menu_id, active_only=active_only)
    return [_build_item_node(root) for root in forest]


@router.put("/{menu_id}/items/reorder", response_model=ReorderResponse)
async def reorder_menu_items(
    *,
    service: MenuService = Depends(get_service),
    menu_id: int,
    reorder_in: ReorderRequest) -> Any:
    """Bulk update item order inside one menu"""
    updated = await service.reorder_items(menu_id, [item.model_dump(exclude_unset=True) for item in reorder_in.items])
    return ReorderResponse(message="Menu items reordered", updated=updated)


@router.post("/{menu_id}/items", response_model=MenuItemResponse, status_code=201)
async def add_menu_item(
    *,
    service: MenuService = Depends(get_service),
    menu_id: int,
    item_in: MenuItemCreate) -> Any:
    """Add an item to a menu"""
    return await service.add_item(menu_id, item_in.model_dump())


@router.put("/{menu_id}/items/{item_id}", response_model=MenuItemResponse)
async def update_menu_item(
    *,
    service: MenuService = Depends(get_service),
    menu_id: int,
    item_id: int,
    item_in: MenuItemUpdate) -> Any:
    """Update a menu item"""
    return await service.update_item(menu_id, item_id, item_in.model_dump(exclude_unset=True))


@router.delete("/{menu_id}/items/{item_id}", response_model=DeleteResponse)
async def delete_menu_item(
    *,
    service: MenuService = Depends(get_service),
    menu_id: int,
    item_id: int) -> Any:
    """Delete a menu item and everything nested under it"""
    removed = await service.delete_item(menu_id, item_id)
    return DeleteResponse(message="Menu item deleted", deleted_ids=removed)
