"""
SQLAlchemy models
"""
from .sidebar_item import SidebarItem, ITEM_TYPES
from .dynamic_table import DynamicTable
from .table_column import TableColumn, DATA_TYPES
from .table_row import TableRow

__all__ = [
    "SidebarItem",
    "DynamicTable",
    "TableColumn",
    "TableRow",
    "ITEM_TYPES",
    "DATA_TYPES"
]
