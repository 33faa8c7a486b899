"""
Pydantic schemas for request/response validation
"""
from .sidebar import (
    SidebarItemBase,
    SidebarItemCreate,
    SidebarItemUpdate,
    SidebarItemResponse,
    SidebarTreeNode
)
from .table import (
    DynamicTableBase,
    DynamicTableCreate,
    DynamicTableResponse
)
from .column import (
    ColumnCreate,
    ColumnUpdate,
    ColumnResponse
)
from .row import (
    RowWrite,
    RowResponse
)
from .error import ErrorResponse, ERROR_RESPONSES

__all__ = [
    "SidebarItemBase",
    "SidebarItemCreate",
    "SidebarItemUpdate",
    "SidebarItemResponse",
    "SidebarTreeNode",
    "DynamicTableBase",
    "DynamicTableCreate",
    "DynamicTableResponse",
    "ColumnCreate",
    "ColumnUpdate",
    "ColumnResponse",
    "RowWrite",
    "RowResponse",
    "ErrorResponse",
    "ERROR_RESPONSES"
]
