"""
Dynamic table API endpoints: metadata, columns and row data

``{sidebar_item_id}`` is the id of the table's sidebar item.
"""
from typing import List
from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from config import settings
from database import get_db
from schemas.table import DynamicTableCreate, DynamicTableResponse
from schemas.column import ColumnCreate, ColumnUpdate, ColumnResponse
from schemas.row import RowWrite, RowResponse
from schemas.error import ERROR_RESPONSES
from services.explorer_service import ExplorerService

router = APIRouter(prefix="/tables", tags=["tables"], responses=ERROR_RESPONSES)


@router.post("/create", response_model=DynamicTableResponse, status_code=status.HTTP_201_CREATED)
async def create_table(
    table: DynamicTableCreate,
    db: Session = Depends(get_db)
):
    """Provision a dynamic table for an existing table item"""
    return ExplorerService(db).create_table(
        sidebar_item_id=table.sidebar_item_id,
        table_name=table.table_name,
        display_name=table.display_name,
        description=table.description
    )


@router.get("/{sidebar_item_id}", response_model=DynamicTableResponse)
async def get_table(
    sidebar_item_id: int,
    db: Session = Depends(get_db)
):
    """Get the dynamic table behind a sidebar item"""
    return ExplorerService(db).get_table(sidebar_item_id)


# Columns

@router.get("/{sidebar_item_id}/columns", response_model=List[ColumnResponse])
async def list_columns(
    sidebar_item_id: int,
    db: Session = Depends(get_db)
):
    """Get the column definitions ordered by sort_order"""
    return ExplorerService(db).list_columns(sidebar_item_id)


@router.post("/{sidebar_item_id}/columns", response_model=ColumnResponse, status_code=status.HTTP_201_CREATED)
async def create_column(
    sidebar_item_id: int,
    column: ColumnCreate,
    db: Session = Depends(get_db)
):
    """Add a column; the entered name is normalized into column_name"""
    fields = column.model_dump(exclude={"name"})
    return ExplorerService(db).add_column(sidebar_item_id, name=column.name, **fields)


@router.put("/{sidebar_item_id}/columns/{column_id}", response_model=ColumnResponse)
async def update_column(
    sidebar_item_id: int,
    column_id: int,
    column_update: ColumnUpdate,
    db: Session = Depends(get_db)
):
    """Update only the supplied column fields"""
    update_data = column_update.model_dump(exclude_unset=True)
    return ExplorerService(db).update_column(sidebar_item_id, column_id, update_data)


@router.delete("/{sidebar_item_id}/columns/{column_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_column(
    sidebar_item_id: int,
    column_id: int,
    db: Session = Depends(get_db)
):
    """Delete a column definition; row payloads keep their values"""
    ExplorerService(db).delete_column(sidebar_item_id, column_id)
    return None


# Row data

@router.get("/{sidebar_item_id}/data", response_model=List[RowResponse])
async def list_rows(
    sidebar_item_id: int,
    response: Response,
    limit: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    offset: int = Query(0, ge=0),
    db: Session = Depends(get_db)
):
    """
    Get a page of rows ordered by id

    Missing values are filled from the column defaults. The total row
    count is returned in the X-Total-Count header.
    """
    rows, total = ExplorerService(db).list_rows(sidebar_item_id, limit=limit, offset=offset)
    response.headers["X-Total-Count"] = str(total)
    return rows


@router.post("/{sidebar_item_id}/data", response_model=RowResponse, status_code=status.HTTP_201_CREATED)
async def create_row(
    sidebar_item_id: int,
    row: RowWrite,
    db: Session = Depends(get_db)
):
    """Insert a row"""
    return ExplorerService(db).create_row(sidebar_item_id, row.data)


@router.put("/{sidebar_item_id}/data/{row_id}", response_model=RowResponse)
async def update_row(
    sidebar_item_id: int,
    row_id: int,
    row: RowWrite,
    db: Session = Depends(get_db)
):
    """
    Replace a row's data

    The stored payload becomes exactly ``data``; send unchanged fields too.
    """
    return ExplorerService(db).update_row(sidebar_item_id, row_id, row.data)


@router.delete("/{sidebar_item_id}/data/{row_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_row(
    sidebar_item_id: int,
    row_id: int,
    db: Session = Depends(get_db)
):
    """Delete a row"""
    ExplorerService(db).delete_row(sidebar_item_id, row_id)
    return None
