# models package

from app.models.category import Category
from app.models.product_category import ProductCategory
from app.models.menu import Menu, MenuItem

__all__ = [
    "Category",
    "ProductCategory",
    "Menu",
    "MenuItem",
]
