"""Navigation menu models"""

from sqlalchemy import Column, Integer, String, Text, ForeignKey, Boolean, DateTime, func
from sqlalchemy.orm import relationship
from app.db.base import Base

MENU_LOCATIONS = ("header", "footer", "sidebar", "mobile")


class Menu(Base):
    """Menu placed at one location of the site; owns its items"""
    __tablename__ = "menus"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)
    location = Column(String(50), nullable=False, unique=True, comment="header / footer / sidebar / mobile")
    description = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    # Relationships
    items = relationship("MenuItem", back_populates="menu", passive_deletes=True)

    def __repr__(self):
        return f"<Menu {self.id} {self.location}>"


class MenuItem(Base):
    """Menu entry; items nest through parent_id inside the same menu"""
    __tablename__ = "menu_items"

    id = Column(Integer, primary_key=True, index=True)
    menu_id = Column(Integer, ForeignKey("menus.id", ondelete="CASCADE"), nullable=False, index=True)
    parent_id = Column(Integer, ForeignKey("menu_items.id", ondelete="CASCADE"), nullable=True, index=True, comment="Parent item")
    title = Column(String(100), nullable=False)
    url = Column(String(255), nullable=True, comment="Custom URL for external links")
    link_type = Column(String(20), nullable=False, default="custom", comment="internal / custom")
    target = Column(String(10), nullable=False, default="_self", comment="_self / _blank")
    css_class = Column(String(100), nullable=True)
    icon = Column(String(50), nullable=True)
    sort_order = Column(Integer, nullable=False, default=0, index=True)
    is_active = Column(Boolean, nullable=False, default=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    # Relationships
    menu = relationship("Menu", back_populates="items")
    parent = relationship("MenuItem", remote_side=[id], backref="children")

    def __repr__(self):
        return f"<MenuItem {self.id} {self.title}>"
