"""Schemas shared by the tree resources"""

from typing import List, Optional
from pydantic import BaseModel, Field


class NodeBrief(BaseModel):
    """Parent / child / breadcrumb entry"""
    id: int
    name: str
    slug: Optional[str] = None
    sort_order: int = 0

    class Config:
        from_attributes = True


class ReorderItem(BaseModel):
    id: int
    sort_order: int = Field(..., ge=0)
    # leave out to keep the current parent; null moves the node to the root
    parent_id: Optional[int] = None


class ReorderRequest(BaseModel):
    items: List[ReorderItem] = Field(..., min_length=1)


class ReorderResponse(BaseModel):
    message: str
    updated: int


class DeleteResponse(BaseModel):
    message: str
    deleted_ids: List[int] = []


class CountByValue(BaseModel):
    value: Optional[str] = None
    count: int
