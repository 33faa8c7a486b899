"""
Column definition SQLAlchemy model for dynamic tables
"""
from sqlalchemy import Column, Integer, String, Text, TIMESTAMP, Boolean, ForeignKey, UniqueConstraint
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from database import Base

DATA_TYPES = ("text", "number", "decimal", "double", "boolean", "checkbox", "date")


class TableColumn(Base):
    __tablename__ = "table_columns"
    __table_args__ = (
        UniqueConstraint("table_id", "column_name", name="uq_table_columns_table_column"),
    )

    id = Column(Integer, primary_key=True, index=True)
    table_id = Column(Integer, ForeignKey("dynamic_tables.id", ondelete="CASCADE"), nullable=False, index=True)
    column_name = Column(String(255), nullable=False)  # Normalized identifier, key in row_data
    display_name = Column(String(255), nullable=False)
    data_type = Column(String(20), nullable=False)
    is_required = Column(Boolean, nullable=False, default=False)
    default_value = Column(Text, nullable=True)
    sort_order = Column(Integer, nullable=False, default=0)
    width = Column(Integer, nullable=False, default=150)
    created_at = Column(TIMESTAMP, server_default=func.now())
    updated_at = Column(TIMESTAMP, server_default=func.now(), onupdate=func.now())

    table = relationship("DynamicTable", back_populates="columns")
