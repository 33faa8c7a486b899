"""
Sidebar item SQLAlchemy model (folders and table references in the navigation tree)
"""
from sqlalchemy import Column, Integer, String, TIMESTAMP, ForeignKey, CheckConstraint
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from database import Base

ITEM_TYPES = ("folder", "table")


class SidebarItem(Base):
    __tablename__ = "sidebar_items"
    __table_args__ = (
        CheckConstraint("item_type IN ('folder', 'table')", name="ck_sidebar_items_item_type"),
    )

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    parent_id = Column(Integer, ForeignKey("sidebar_items.id", ondelete="CASCADE"), nullable=True, index=True)
    item_type = Column(String(20), nullable=False, index=True)  # folder, table
    icon = Column(String(50), nullable=True)
    sort_order = Column(Integer, nullable=False, default=0)
    created_at = Column(TIMESTAMP, server_default=func.now())
    updated_at = Column(TIMESTAMP, server_default=func.now(), onupdate=func.now())

    # Only set for item_type == "table"
    dynamic_table = relationship(
        "DynamicTable",
        back_populates="sidebar_item",
        uselist=False,
        passive_deletes=True,
    )
