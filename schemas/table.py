"""
Dynamic table Pydantic schemas
"""
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict


class DynamicTableBase(BaseModel):
    table_name: str
    display_name: str
    description: Optional[str] = None


class DynamicTableCreate(DynamicTableBase):
    """Schema for provisioning table metadata for an existing sidebar item"""
    sidebar_item_id: int


class DynamicTableResponse(DynamicTableBase):
    """Schema for dynamic table response"""
    id: int
    sidebar_item_id: int
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
