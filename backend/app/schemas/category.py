"""Category schemas"""

from typing import Optional, List, Literal
from datetime import datetime
from pydantic import BaseModel, Field

from app.schemas.common import NodeBrief, CountByValue
from app.utils.slug import SLUG_PATTERN

CategoryType = Literal["post", "product"]
CategoryStatus = Literal["active", "inactive"]


class CategoryBase(BaseModel):
    name: str = Field(..., min_length=2, max_length=100, description="Display name")
    parent_id: Optional[int] = Field(None, description="Parent category id")
    description: Optional[str] = None
    image_id: Optional[int] = None
    sort_order: int = Field(0, ge=0)
    status: CategoryStatus = "active"
    seo_title: Optional[str] = Field(None, max_length=70)
    seo_description: Optional[str] = Field(None, max_length=160)


class CategoryCreate(CategoryBase):
    slug: Optional[str] = Field(None, max_length=120, pattern=SLUG_PATTERN, description="Generated from the name when omitted")
    type: CategoryType = "post"


class CategoryUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=2, max_length=100)
    slug: Optional[str] = Field(None, max_length=120, pattern=SLUG_PATTERN)
    parent_id: Optional[int] = None
    description: Optional[str] = None
    image_id: Optional[int] = None
    sort_order: Optional[int] = Field(None, ge=0)
    status: Optional[CategoryStatus] = None
    seo_title: Optional[str] = Field(None, max_length=70)
    seo_description: Optional[str] = Field(None, max_length=160)


class CategoryResponse(CategoryBase):
    id: int
    slug: str
    type: CategoryType
    parent: Optional[NodeBrief] = None
    children: List[NodeBrief] = []
    children_count: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class CategoryTreeNode(CategoryBase):
    """Category tree node"""
    id: int
    slug: str
    type: CategoryType
    depth: int = 0
    children: List["CategoryTreeNode"] = []


class CategoryListResponse(BaseModel):
    data: List[CategoryResponse]
    total: int
    page: int
    limit: int
    total_pages: int


class CategoryStats(BaseModel):
    total: int
    by_type: List[CountByValue] = []
    by_status: List[CountByValue] = []
