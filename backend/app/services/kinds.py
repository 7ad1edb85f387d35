"""The three tree kinds served by HierarchyService"""

from sqlalchemy.orm import selectinload

from app.models.category import Category
from app.models.menu import MenuItem
from app.models.product_category import ProductCategory
from app.services.hierarchy import DeletionPolicy, HierarchyKind


CATEGORY = HierarchyKind(
    name="category",
    label="Category",
    model=Category,
    deletion_policy=DeletionPolicy.REPARENT,
    type_field="type",
    default_type="post",
    search_fields=("name", "slug", "description"),
    stat_fields=("type", "status"),
    load_options=lambda: (selectinload(Category.parent), selectinload(Category.children)),
)

PRODUCT_CATEGORY = HierarchyKind(
    name="product_category",
    label="Product category",
    model=ProductCategory,
    deletion_policy=DeletionPolicy.REPARENT,
    search_fields=("name", "slug", "description"),
    stat_fields=("status",),
    load_options=lambda: (selectinload(ProductCategory.parent), selectinload(ProductCategory.children)),
)

# Items are always scoped to one menu (scope={"menu_id": ...})
MENU_ITEM = HierarchyKind(
    name="menu_item",
    label="Menu item",
    model=MenuItem,
    title_field="title",
    slug_field=None,
    deletion_policy=DeletionPolicy.CASCADE,
    search_fields=("title", "url"),
)
