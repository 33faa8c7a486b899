"""
Dynamic table metadata SQLAlchemy model (one per "table" sidebar item)
"""
from sqlalchemy import Column, Integer, String, Text, TIMESTAMP, ForeignKey
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from database import Base


class DynamicTable(Base):
    __tablename__ = "dynamic_tables"

    id = Column(Integer, primary_key=True, index=True)
    sidebar_item_id = Column(
        Integer,
        ForeignKey("sidebar_items.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
        index=True
    )
    table_name = Column(String(255), nullable=False, unique=True)  # Normalized identifier
    display_name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    created_at = Column(TIMESTAMP, server_default=func.now())
    updated_at = Column(TIMESTAMP, server_default=func.now(), onupdate=func.now())

    # Relationships
    sidebar_item = relationship("SidebarItem", back_populates="dynamic_table")
    columns = relationship("TableColumn", back_populates="table", passive_deletes=True)
    rows = relationship("TableRow", back_populates="table", passive_deletes=True)
