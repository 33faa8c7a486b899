"""
Row data SQLAlchemy model (one JSON document per row, schema-on-read)
"""
from sqlalchemy import Column, Integer, TIMESTAMP, ForeignKey, JSON
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from database import Base


class TableRow(Base):
    __tablename__ = "table_data"

    id = Column(Integer, primary_key=True, index=True)
    table_id = Column(Integer, ForeignKey("dynamic_tables.id", ondelete="CASCADE"), nullable=False, index=True)
    # No link to table_columns: keys are matched against column_name when read
    row_data = Column(JSON().with_variant(JSONB(), "postgresql"), nullable=False, default=dict)
    created_at = Column(TIMESTAMP, server_default=func.now())
    updated_at = Column(TIMESTAMP, server_default=func.now(), onupdate=func.now())

    table = relationship("DynamicTable", back_populates="rows")
