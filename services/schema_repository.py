"""
Schema repository - dynamic table metadata and column definitions
"""
from typing import Any, Dict, List, Optional, Sequence

from sqlalchemy import func

from config import settings
from models import DynamicTable, SidebarItem, TableColumn, DATA_TYPES
from services.base_repository import BaseRepository
from services.errors import ConflictError, NotFoundError, ValidationError
from services.row_repository import RowRepository
from utils.identifiers import normalize_identifier
from utils.logger import get_logger

logger = get_logger(__name__)

COLUMN_FIELDS = (
    "column_name", "display_name", "data_type", "is_required",
    "default_value", "sort_order", "width"
)


def _validate_data_type(data_type: str) -> None:
    if data_type not in DATA_TYPES:
        raise ValidationError(
            f"Invalid data_type '{data_type}'",
            details={"allowed": list(DATA_TYPES)}
        )


class SchemaRepository(BaseRepository):
    """CRUD over dynamic tables and their column definitions"""

    # Tables

    def find(self, table_id: int) -> Optional[DynamicTable]:
        return self.db.query(DynamicTable).filter(DynamicTable.id == table_id).first()

    def get(self, table_id: int) -> DynamicTable:
        table = self.find(table_id)
        if not table:
            raise NotFoundError(f"Table with id {table_id} not found")
        return table

    def find_by_sidebar_item(self, sidebar_item_id: int) -> Optional[DynamicTable]:
        return (
            self.db.query(DynamicTable)
            .filter(DynamicTable.sidebar_item_id == sidebar_item_id)
            .first()
        )

    def get_by_sidebar_item(self, sidebar_item_id: int) -> DynamicTable:
        table = self.find_by_sidebar_item(sidebar_item_id)
        if not table:
            raise NotFoundError(f"Table for sidebar item {sidebar_item_id} not found")
        return table

    def create_dynamic_table(
        self,
        sidebar_item_id: int,
        table_name: str,
        display_name: str,
        description: Optional[str] = None
    ) -> DynamicTable:
        """
        Provision table metadata for a "table" sidebar item

        ``table_name`` is normalized and must be globally unique; the
        sidebar item may own at most one table.
        """
        missing = [
            field for field, value in (
                ("sidebar_item_id", sidebar_item_id),
                ("table_name", table_name),
                ("display_name", display_name),
            )
            if value is None or (isinstance(value, str) and not value.strip())
        ]
        if missing:
            raise ValidationError("Missing required fields", details={"missing": missing})

        normalized = normalize_identifier(table_name.strip())
        if not normalized:
            raise ValidationError(
                f"Table name '{table_name}' has no usable characters",
                details={"field": "table_name"}
            )

        item = self.db.query(SidebarItem).filter(SidebarItem.id == sidebar_item_id).first()
        if not item:
            raise NotFoundError(f"Sidebar item with id {sidebar_item_id} not found")
        if item.item_type != "table":
            raise ValidationError(f"Sidebar item {sidebar_item_id} is not a table item")

        if self.find_by_sidebar_item(sidebar_item_id):
            raise ConflictError(f"Sidebar item {sidebar_item_id} already has a table")
        if self.db.query(DynamicTable).filter(DynamicTable.table_name == normalized).first():
            raise ConflictError(f"Table '{normalized}' already exists")

        table = DynamicTable(
            sidebar_item_id=sidebar_item_id,
            table_name=normalized,
            display_name=display_name.strip(),
            description=description
        )
        self._save(table, conflict_message=f"Table '{normalized}' already exists")
        logger.info("Dynamic table created", table_id=table.id, table_name=normalized, sidebar_item_id=sidebar_item_id)
        return table

    def update_table(self, table_id: int, updates: Dict[str, Any]) -> DynamicTable:
        """Change display_name and/or description; table_name is fixed"""
        table = self.get(table_id)
        changes = {k: v for k, v in updates.items() if k in ("display_name", "description")}
        if "display_name" in changes:
            if not (changes["display_name"] or "").strip():
                raise ValidationError("Display name is required")
            changes["display_name"] = changes["display_name"].strip()

        for field, value in changes.items():
            setattr(table, field, value)
        self._commit()
        self.db.refresh(table)
        return table

    def delete_tables(self, table_ids: Sequence[int]) -> None:
        """
        Remove row data, columns and metadata of the given tables

        Does not commit; the caller owns the transaction.
        """
        if not table_ids:
            return
        RowRepository(self.db).delete_for_tables(table_ids)
        self.db.query(TableColumn).filter(TableColumn.table_id.in_(table_ids)).delete(synchronize_session=False)
        self.db.query(DynamicTable).filter(DynamicTable.id.in_(table_ids)).delete(synchronize_session=False)

    def delete_tables_for_sidebar_items(self, sidebar_item_ids: Sequence[int]) -> int:
        """Release the tables bound to any of the given sidebar items (no commit)"""
        table_ids = [
            table_id for (table_id,) in
            self.db.query(DynamicTable.id).filter(DynamicTable.sidebar_item_id.in_(sidebar_item_ids)).all()
        ]
        self.delete_tables(table_ids)
        return len(table_ids)

    # Columns

    def list_columns(self, table_id: int) -> List[TableColumn]:
        return (
            self.db.query(TableColumn)
            .filter(TableColumn.table_id == table_id)
            .order_by(TableColumn.sort_order, TableColumn.column_name)
            .all()
        )

    def get_column(self, column_id: int, table_id: Optional[int] = None) -> TableColumn:
        query = self.db.query(TableColumn).filter(TableColumn.id == column_id)
        if table_id is not None:
            query = query.filter(TableColumn.table_id == table_id)
        column = query.first()
        if not column:
            raise NotFoundError(f"Column with id {column_id} not found")
        return column

    def next_column_sort_order(self, table_id: int) -> int:
        current = (
            self.db.query(func.max(TableColumn.sort_order))
            .filter(TableColumn.table_id == table_id)
            .scalar()
        )
        return (current if current is not None else -1) + 1

    def create_column(
        self,
        table_id: int,
        column_name: str,
        display_name: Optional[str] = None,
        data_type: str = "text",
        is_required: bool = False,
        default_value: Optional[str] = None,
        sort_order: Optional[int] = None,
        width: Optional[int] = None
    ) -> TableColumn:
        """
        Add a column definition

        ``column_name`` may be the name as the user typed it; the stored
        identifier is its normalized form, unique within the table.
        """
        self.get(table_id)

        normalized = normalize_identifier((column_name or "").strip())
        if not normalized:
            raise ValidationError("Column name is required", details={"field": "column_name"})
        _validate_data_type(data_type)
        self._ensure_unique_column(table_id, normalized)

        column = TableColumn(
            table_id=table_id,
            column_name=normalized,
            display_name=(display_name or "").strip() or column_name.strip(),
            data_type=data_type,
            is_required=bool(is_required),
            default_value=default_value or None,
            sort_order=sort_order if sort_order is not None else self.next_column_sort_order(table_id),
            width=width or settings.DEFAULT_COLUMN_WIDTH
        )
        self._save(column, conflict_message=f"Column '{normalized}' already exists in this table")
        logger.info("Column created", column_id=column.id, table_id=table_id, column_name=normalized, data_type=data_type)
        return column

    def update_column(
        self,
        column_id: int,
        updates: Dict[str, Any],
        table_id: Optional[int] = None
    ) -> TableColumn:
        """
        Partial update: keys absent from ``updates`` keep their value

        A new ``column_name`` is normalized and checked for uniqueness.
        Existing row payloads are not rewritten.
        """
        column = self.get_column(column_id, table_id)
        changes = {key: value for key, value in updates.items() if key in COLUMN_FIELDS}

        if "column_name" in changes:
            normalized = normalize_identifier((changes["column_name"] or "").strip())
            if not normalized:
                raise ValidationError("Column name is required", details={"field": "column_name"})
            if normalized != column.column_name:
                self._ensure_unique_column(column.table_id, normalized, exclude_id=column.id)
            changes["column_name"] = normalized
        if "display_name" in changes and not (changes["display_name"] or "").strip():
            raise ValidationError("Display name is required", details={"field": "display_name"})
        if "data_type" in changes:
            _validate_data_type(changes["data_type"])
        for field in ("is_required", "sort_order", "width"):
            if field in changes and changes[field] is None:
                del changes[field]

        for field, value in changes.items():
            setattr(column, field, value)

        self._commit(conflict_message="Column name already exists in this table")
        self.db.refresh(column)
        logger.info("Column updated", column_id=column_id, table_id=column.table_id, fields=sorted(changes))
        return column

    def delete_column(self, column_id: int, table_id: Optional[int] = None) -> None:
        """Remove the definition only; row payloads keep the key"""
        column = self.get_column(column_id, table_id)
        owner_id = column.table_id
        self.db.delete(column)
        self._commit()
        logger.info("Column deleted", column_id=column_id, table_id=owner_id)

    def _ensure_unique_column(self, table_id: int, column_name: str, exclude_id: Optional[int] = None) -> None:
        query = self.db.query(TableColumn).filter(
            TableColumn.table_id == table_id,
            TableColumn.column_name == column_name
        )
        if exclude_id is not None:
            query = query.filter(TableColumn.id != exclude_id)
        if query.first():
            raise ConflictError(f"Column '{column_name}' already exists in this table")
