"""API v1 router aggregation"""
from fastapi import APIRouter

from app.api.api_v1.endpoints import categories, product_categories, menus

api_router = APIRouter()

api_router.include_router(categories.router, prefix="/categories", tags=["Categories"])
api_router.include_router(product_categories.router, prefix="/product-categories", tags=["Product categories"])
api_router.include_router(menus.router, prefix="/menus", tags=["Menus"])
