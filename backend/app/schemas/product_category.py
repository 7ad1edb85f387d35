"""Product category schemas"""

from typing import Optional, List, Literal
from datetime import datetime
from pydantic import BaseModel, Field

from app.schemas.common import NodeBrief, CountByValue
from app.utils.slug import SLUG_PATTERN


class ProductCategoryBase(BaseModel):
    name: str = Field(..., min_length=2, max_length=100, description="Display name")
    parent_id: Optional[int] = Field(None, description="Parent category id")
    description: Optional[str] = None
    image_id: Optional[int] = None
    sort_order: int = Field(0, ge=0)
    status: Literal["active", "inactive"] = "active"
    seo_title: Optional[str] = Field(None, max_length=70)
    seo_description: Optional[str] = Field(None, max_length=160)


class ProductCategoryCreate(ProductCategoryBase):
    slug: Optional[str] = Field(None, max_length=120, pattern=SLUG_PATTERN)


class ProductCategoryUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=2, max_length=100)
    slug: Optional[str] = Field(None, max_length=120, pattern=SLUG_PATTERN)
    parent_id: Optional[int] = None
    description: Optional[str] = None
    image_id: Optional[int] = None
    sort_order: Optional[int] = Field(None, ge=0)
    status: Optional[Literal["active", "inactive"]] = None
    seo_title: Optional[str] = Field(None, max_length=70)
    seo_description: Optional[str] = Field(None, max_length=160)


class ProductCategoryResponse(ProductCategoryBase):
    id: int
    slug: str
    parent: Optional[NodeBrief] = None
    children: List[NodeBrief] = []
    children_count: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ProductCategoryTreeNode(ProductCategoryBase):
    id: int
    slug: str
    depth: int = 0
    children: List["ProductCategoryTreeNode"] = []


class ProductCategoryListResponse(BaseModel):
    data: List[ProductCategoryResponse]
    total: int
    page: int
    limit: int
    total_pages: int


class ProductCategoryStats(BaseModel):
    total: int
    by_status: List[CountByValue] = []
