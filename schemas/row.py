"""
Row data Pydantic schemas
"""
from datetime import datetime
from typing import Any, Dict
from pydantic import BaseModel, Field


class RowWrite(BaseModel):
    """Body for creating or replacing a row

    ``data`` is stored as-is. On update it replaces the whole stored
    mapping, so callers must send every field they want to keep.
    """
    data: Dict[str, Any] = Field(default_factory=dict)


class RowResponse(BaseModel):
    """Row as read against the current column definitions"""
    id: int
    table_id: int
    row_data: Dict[str, Any]
    created_at: datetime
    updated_at: datetime
