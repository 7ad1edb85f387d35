"""Menus and their nested items"""

import logging
from typing import Any, Dict, List, Tuple

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import NotFoundError, ValidationError
from app.models.menu import Menu
from app.services.hierarchy import HierarchyService
from app.services.kinds import MENU_ITEM
from app.utils.tree import TreeNode

logger = logging.getLogger(__name__)


class MenuService:
    def __init__(self, db: AsyncSession):
        self.db = db

    def items(self, menu_id: int) -> HierarchyService:
        """Tree service over the items of one menu"""
        return HierarchyService(self.db, MENU_ITEM, scope={"menu_id": menu_id})

    # ========== menus ==========

    async def list_menus(self) -> List[Menu]:
        result = await self.db.execute(select(Menu).order_by(Menu.name))
        return list(result.scalars().all())

    async def get_menu(self, menu_id: int) -> Menu:
        menu = await self.db.get(Menu, menu_id)
        if not menu:
            raise NotFoundError("Menu not found")
        return menu

    async def get_menu_tree(self, menu_id: int) -> Tuple[Menu, List[TreeNode]]:
        menu = await self.get_menu(menu_id)
        return menu, await self.items(menu.id).find_tree()

    async def get_by_location(self, location: str) -> Tuple[Menu, List[TreeNode]]:
        """Menu for a site location with its active items only"""
        result = await self.db.execute(select(Menu).where(Menu.location == location))
        menu = result.scalar_one_or_none()
        if not menu:
            raise NotFoundError(f"Menu not found for location: {location}")
        return menu, await self.items(menu.id).find_tree(is_active=True)

    async def create_menu(self, data: Dict[str, Any]) -> Menu:
        await self._ensure_location_free(data["location"])
        menu = Menu(**data)
        self.db.add(menu)
        await self.db.commit()
        await self.db.refresh(menu)
        logger.info(f"Created menu {menu.id} at {menu.location}")
        return menu

    async def update_menu(self, menu_id: int, data: Dict[str, Any]) -> Menu:
        menu = await self.get_menu(menu_id)
        if data.get("location") and data["location"] != menu.location:
            await self._ensure_location_free(data["location"])

        for field, value in data.items():
            if value is not None:
                setattr(menu, field, value)

        await self.db.commit()
        await self.db.refresh(menu)
        logger.info(f"Updated menu {menu.id}: {sorted(data)}")
        return menu

    async def delete_menu(self, menu_id: int) -> int:
        """Remove the menu and every item it owns in one transaction"""
        menu = await self.get_menu(menu_id)
        menu_id = menu.id
        items = self.items(menu_id).repo
        async with items.transaction():
            removed = await items.delete_all()
            await self.db.execute(
                delete(Menu).where(Menu.id == menu_id).execution_options(synchronize_session=False)
            )
        self.db.expunge(menu)
        logger.info(f"Deleted menu {menu_id} with {removed} item(s)")
        return removed

    async def _ensure_location_free(self, location: str) -> None:
        result = await self.db.execute(select(Menu.id).where(Menu.location == location))
        if result.first():
            raise ValidationError(f"A menu already exists for location: {location}", reason="location-taken")

    # ========== items ==========

    async def add_item(self, menu_id: int, data: Dict[str, Any]) -> Any:
        await self.get_menu(menu_id)
        return await self.items(menu_id).create(data)

    async def update_item(self, menu_id: int, item_id: int, data: Dict[str, Any]) -> Any:
        await self.get_menu(menu_id)
        return await self.items(menu_id).update(item_id, data)

    async def delete_item(self, menu_id: int, item_id: int) -> List[int]:
        await self.get_menu(menu_id)
        return await self.items(menu_id).delete(item_id)

    async def reorder_items(self, menu_id: int, items: List[Dict[str, Any]]) -> int:
        await self.get_menu(menu_id)
        return await self.items(menu_id).reorder(items)

    async def item_tree(self, menu_id: int, active_only: bool = False) -> List[TreeNode]:
        await self.get_menu(menu_id)
        return await self.items(menu_id).find_tree(is_active=True if active_only else None)
