"""Menu schemas"""

from typing import Optional, List, Literal
from datetime import datetime
from pydantic import BaseModel, Field

MenuLocation = Literal["header", "footer", "sidebar", "mobile"]


# ========== Menu items ==========

class MenuItemBase(BaseModel):
    title: str = Field(..., min_length=1, max_length=100)
    parent_id: Optional[int] = None
    url: Optional[str] = Field(None, max_length=255)
    link_type: Literal["internal", "custom"] = "custom"
    target: Literal["_self", "_blank"] = "_self"
    css_class: Optional[str] = Field(None, max_length=100)
    icon: Optional[str] = Field(None, max_length=50)
    sort_order: int = Field(0, ge=0)
    is_active: bool = True


class MenuItemCreate(MenuItemBase):
    pass


class MenuItemUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=100)
    parent_id: Optional[int] = None
    url: Optional[str] = Field(None, max_length=255)
    link_type: Optional[Literal["internal", "custom"]] = None
    target: Optional[Literal["_self", "_blank"]] = None
    css_class: Optional[str] = Field(None, max_length=100)
    icon: Optional[str] = Field(None, max_length=50)
    sort_order: Optional[int] = Field(None, ge=0)
    is_active: Optional[bool] = None


class MenuItemResponse(MenuItemBase):
    id: int
    menu_id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class MenuItemTreeNode(MenuItemBase):
    """Menu item with its nested children"""
    id: int
    menu_id: int
    depth: int = 0
    children: List["MenuItemTreeNode"] = []


# ========== Menus ==========

class MenuBase(BaseModel):
    name: str = Field(..., min_length=2, max_length=100)
    location: MenuLocation
    description: Optional[str] = None


class MenuCreate(MenuBase):
    pass


class MenuUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=2, max_length=100)
    location: Optional[MenuLocation] = None
    description: Optional[str] = None


class MenuResponse(MenuBase):
    id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class MenuWithItems(MenuResponse):
    items: List[MenuItemTreeNode] = []
