"""
Column definition Pydantic schemas
"""
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


class ColumnCreate(BaseModel):
    """Schema for adding a column; ``name`` is normalized into ``column_name``"""
    name: str = Field(..., description="Human entered column name, e.g. 'Full Name'")
    display_name: Optional[str] = None
    data_type: str = "text"  # text, number, decimal, double, boolean, checkbox, date
    is_required: bool = False
    default_value: Optional[str] = None
    sort_order: Optional[int] = None
    width: Optional[int] = None


class ColumnUpdate(BaseModel):
    """Schema for updating a column (all fields optional)"""
    column_name: Optional[str] = None
    display_name: Optional[str] = None
    data_type: Optional[str] = None
    is_required: Optional[bool] = None
    default_value: Optional[str] = None
    sort_order: Optional[int] = None
    width: Optional[int] = None


class ColumnResponse(BaseModel):
    """Schema for column response"""
    id: int
    table_id: int
    column_name: str
    display_name: str
    data_type: str
    is_required: bool
    default_value: Optional[str] = None
    sort_order: int
    width: int
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
