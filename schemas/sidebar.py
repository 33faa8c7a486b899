"""
Sidebar item Pydantic schemas
"""
from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field


class SidebarItemBase(BaseModel):
    name: str
    parent_id: Optional[int] = None
    item_type: str = Field(..., description="folder or table")
    icon: Optional[str] = None


class SidebarItemCreate(SidebarItemBase):
    """Schema for creating a folder or table item"""
    pass


class SidebarItemUpdate(BaseModel):
    """Schema for updating a sidebar item (all fields optional)

    An explicit ``parent_id: null`` moves the item to the root.
    """
    name: Optional[str] = None
    icon: Optional[str] = None
    sort_order: Optional[int] = None
    parent_id: Optional[int] = None


class SidebarItemResponse(SidebarItemBase):
    """Schema for sidebar item response"""
    id: int
    sort_order: int
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class SidebarTreeNode(SidebarItemResponse):
    """Sidebar item with its nested children"""
    children: List["SidebarTreeNode"] = []


SidebarTreeNode.model_rebuild()
