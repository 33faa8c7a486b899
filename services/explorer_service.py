"""
Explorer service - cross-entity operations behind the REST API

Routes address tables by the id of their sidebar item, which is the id
the sidebar hands to the grid.
"""
from datetime import date
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from models import DynamicTable, SidebarItem, TableColumn
from schemas.sidebar import SidebarItemResponse
from services.errors import DataExplorerError
from services.row_repository import RowRepository
from services.schema_repository import SchemaRepository
from services.sidebar_repository import SidebarRepository, build_tree
from utils.identifiers import normalize_identifier
from utils.log_context import log_context
from utils.logger import get_logger

logger = get_logger(__name__)


class ExplorerService:
    """Coordinates the sidebar, schema and row repositories"""

    def __init__(self, db: Session):
        self.db = db
        self.sidebar = SidebarRepository(db)
        self.schema = SchemaRepository(db)
        self.rows = RowRepository(db)

    # Sidebar

    def list_sidebar_items(self) -> List[SidebarItem]:
        return self.sidebar.list_items()

    def sidebar_tree(self) -> List[Dict[str, Any]]:
        flat = [
            SidebarItemResponse.model_validate(item).model_dump()
            for item in self.sidebar.list_items()
        ]
        return build_tree(flat)

    def create_sidebar_item(
        self,
        name: str,
        parent_id: Optional[int] = None,
        item_type: str = "folder",
        icon: Optional[str] = None
    ) -> SidebarItem:
        """
        Create a folder, or a table item together with its dynamic table

        If provisioning the dynamic table fails the new sidebar item is
        deleted again before the error is raised, so no table item is left
        without a table behind it.
        """
        item = self.sidebar.create(name=name, parent_id=parent_id, item_type=item_type, icon=icon)
        if item.item_type != "table":
            return item

        item_id = item.id
        display_name = item.name
        with log_context(sidebar_item_id=item_id):
            try:
                self.schema.create_dynamic_table(
                    sidebar_item_id=item_id,
                    table_name=normalize_identifier(display_name),
                    display_name=display_name,
                    description=f"Dynamic table: {display_name}"
                )
            except Exception as e:
                logger.warning("Table provisioning failed, removing sidebar item", error=str(e))
                self.db.rollback()
                self._discard_sidebar_item(item_id)
                raise

        self.db.refresh(item)
        return item

    def update_sidebar_item(self, item_id: int, updates: Dict[str, Any]) -> SidebarItem:
        """Update an item; renaming a table item also renames its table's display name"""
        item = self.sidebar.update(item_id, updates)

        if item.item_type == "table" and "name" in updates:
            table = self.schema.find_by_sidebar_item(item.id)
            if table and table.display_name != item.name:
                self.schema.update_table(table.id, {"display_name": item.name})

        return item

    def delete_sidebar_item(self, item_id: int) -> List[int]:
        """Delete an item; folders take their whole subtree with them"""
        with log_context(sidebar_item_id=item_id):
            return self.sidebar.delete(item_id)

    def _discard_sidebar_item(self, item_id: int) -> None:
        try:
            self.sidebar.delete(item_id)
        except (DataExplorerError, SQLAlchemyError) as cleanup_error:
            self.db.rollback()
            logger.error(
                "Failed to remove sidebar item after provisioning failure",
                sidebar_item_id=item_id,
                error=str(cleanup_error)
            )

    # Tables

    def get_table(self, sidebar_item_id: int) -> DynamicTable:
        return self.schema.get_by_sidebar_item(sidebar_item_id)

    def create_table(
        self,
        sidebar_item_id: int,
        table_name: str,
        display_name: str,
        description: Optional[str] = None
    ) -> DynamicTable:
        return self.schema.create_dynamic_table(
            sidebar_item_id=sidebar_item_id,
            table_name=table_name,
            display_name=display_name,
            description=description
        )

    # Columns

    def list_columns(self, sidebar_item_id: int) -> List[TableColumn]:
        table = self.get_table(sidebar_item_id)
        return self.schema.list_columns(table.id)

    def add_column(self, sidebar_item_id: int, name: str, **fields: Any) -> TableColumn:
        table = self.get_table(sidebar_item_id)
        return self.schema.create_column(table_id=table.id, column_name=name, **fields)

    def update_column(self, sidebar_item_id: int, column_id: int, updates: Dict[str, Any]) -> TableColumn:
        table = self.get_table(sidebar_item_id)
        return self.schema.update_column(column_id, updates, table_id=table.id)

    def delete_column(self, sidebar_item_id: int, column_id: int) -> None:
        table = self.get_table(sidebar_item_id)
        self.schema.delete_column(column_id, table_id=table.id)

    # Rows

    def list_rows(
        self,
        sidebar_item_id: int,
        limit: int,
        offset: int,
        today: Optional[date] = None
    ) -> Tuple[List[Dict[str, Any]], int]:
        """A page of resolved rows plus the table's total row count"""
        table = self.get_table(sidebar_item_id)
        columns = self.schema.list_columns(table.id)
        page = self.rows.list_rows(table.id, limit=limit, offset=offset)
        resolved = [self.rows.resolve(row, columns, today) for row in page]
        return resolved, self.rows.count(table.id)

    def create_row(self, sidebar_item_id: int, data: Dict[str, Any]) -> Dict[str, Any]:
        table = self.get_table(sidebar_item_id)
        row = self.rows.create(table.id, data)
        return self.rows.resolve(row, self.schema.list_columns(table.id))

    def update_row(self, sidebar_item_id: int, row_id: int, data: Dict[str, Any]) -> Dict[str, Any]:
        """Replace a row's payload (full replace, see RowRepository.update)"""
        table = self.get_table(sidebar_item_id)
        row = self.rows.update(row_id, data, table_id=table.id)
        return self.rows.resolve(row, self.schema.list_columns(table.id))

    def delete_row(self, sidebar_item_id: int, row_id: int) -> None:
        table = self.get_table(sidebar_item_id)
        self.rows.delete(row_id, table_id=table.id)
