"""
Sidebar tree API endpoints
"""
from typing import List
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from database import get_db
from schemas.error import ERROR_RESPONSES
from schemas.sidebar import (
    SidebarItemCreate,
    SidebarItemUpdate,
    SidebarItemResponse,
    SidebarTreeNode
)
from services.explorer_service import ExplorerService

router = APIRouter(prefix="/sidebar", tags=["sidebar"], responses=ERROR_RESPONSES)


@router.get("", response_model=List[SidebarItemResponse])
async def list_sidebar_items(db: Session = Depends(get_db)):
    """Get all sidebar items as a flat list (roots first, then sort_order, then name)"""
    return ExplorerService(db).list_sidebar_items()


@router.get("/tree", response_model=List[SidebarTreeNode])
async def get_sidebar_tree(db: Session = Depends(get_db)):
    """Get the sidebar as nested folders"""
    return ExplorerService(db).sidebar_tree()


@router.post("", response_model=SidebarItemResponse, status_code=status.HTTP_201_CREATED)
async def create_sidebar_item(
    item: SidebarItemCreate,
    db: Session = Depends(get_db)
):
    """
    Create a folder or a table item

    Table items get their dynamic table provisioned in the same call.
    """
    new_item = ExplorerService(db).create_sidebar_item(
        name=item.name,
        parent_id=item.parent_id,
        item_type=item.item_type,
        icon=item.icon
    )
    return new_item


@router.put("/{item_id}", response_model=SidebarItemResponse)
async def update_sidebar_item(
    item_id: int,
    item_update: SidebarItemUpdate,
    db: Session = Depends(get_db)
):
    """Rename, re-icon, reorder or move a sidebar item"""
    update_data = item_update.model_dump(exclude_unset=True)
    return ExplorerService(db).update_sidebar_item(item_id, update_data)


@router.delete("/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_sidebar_item(
    item_id: int,
    db: Session = Depends(get_db)
):
    """Delete an item; folders are deleted with everything below them"""
    ExplorerService(db).delete_sidebar_item(item_id)
    return None
