"""Content category model - self-referencing tree"""

from sqlalchemy import Column, Integer, String, Text, ForeignKey, DateTime, func
from sqlalchemy.orm import relationship
from app.db.base import Base

CATEGORY_TYPES = ("post", "product")
CATEGORY_STATUSES = ("active", "inactive")


class Category(Base):
    """Content category

    Posts and legacy product categories share this table and are told apart by
    ``type``; a parent must always carry the same type as its children.
    - News
      - Technology
        - AI
      - Sport
    """
    __tablename__ = "categories"

    id = Column(Integer, primary_key=True, index=True)
    parent_id = Column(Integer, ForeignKey("categories.id", ondelete="SET NULL"), nullable=True, index=True, comment="Parent category")
    name = Column(String(100), nullable=False, comment="Display name")
    slug = Column(String(120), unique=True, nullable=False, comment="URL identifier")
    description = Column(Text, nullable=True)
    image_id = Column(Integer, nullable=True, comment="Media id of the cover image")
    type = Column(String(20), nullable=False, default="post", index=True, comment="post / product")
    sort_order = Column(Integer, nullable=False, default=0, index=True, comment="Order among siblings")
    status = Column(String(20), nullable=False, default="active", index=True, comment="active / inactive")
    seo_title = Column(String(70), nullable=True)
    seo_description = Column(String(160), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    # Relationships
    parent = relationship("Category", remote_side=[id], backref="children")

    def __repr__(self):
        return f"<Category {self.id} {self.slug}>"
