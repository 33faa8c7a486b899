"""
Row repository - row payloads stored as one JSON document per row

Payloads are schema-on-read: they are written exactly as given and only
reconciled with the current column definitions when read (see
``resolve_row_data``).
"""
import math
from datetime import date, datetime
from typing import Any, Dict, List, Optional, Sequence

from models import DynamicTable, TableColumn, TableRow
from services.base_repository import BaseRepository
from services.errors import NotFoundError, ValidationError
from utils.logger import get_logger

logger = get_logger(__name__)

NUMERIC_TYPES = ("number", "decimal", "double")
BOOLEAN_TYPES = ("boolean", "checkbox")

_TRUE_STRINGS = {"true", "1", "yes", "on"}
_FALSE_STRINGS = {"false", "0", "no", "off"}


def default_for_column(column: TableColumn, today: Optional[date] = None) -> Any:
    """
    Value used when a row has no entry for the column

    An explicit default_value always wins and is returned as stored.
    Otherwise: numeric types -> 0, boolean/checkbox -> False, date ->
    the current date (ISO), anything else -> "".
    """
    if column.default_value:
        return column.default_value

    if column.data_type in NUMERIC_TYPES:
        return 0
    if column.data_type in BOOLEAN_TYPES:
        return False
    if column.data_type == "date":
        return (today or date.today()).isoformat()
    return ""


def _to_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0
    text = str(value).strip().lower()
    if text in _TRUE_STRINGS:
        return True
    if text in _FALSE_STRINGS:
        return False
    raise ValueError(f"Not a boolean: {value!r}")


def _to_number(value: Any):
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, (int, float)):
        return value
    text = str(value).strip()
    try:
        return int(text)
    except ValueError:
        result = float(text)
    if not math.isfinite(result):
        raise ValueError(f"Not a finite number: {value!r}")
    return result


def _to_date(value: Any) -> str:
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    text = str(value).strip()
    # Accept full timestamps, keep the date part
    return date.fromisoformat(text[:10]).isoformat()


def coerce_value(data_type: str, value: Any) -> Any:
    """
    Coerce a stored value to the column's type

    Values that cannot be coerced are returned unchanged.
    """
    if value is None:
        return None
    try:
        if data_type == "number":
            return _to_number(value)
        if data_type in ("decimal", "double"):
            return float(_to_number(value))
        if data_type in BOOLEAN_TYPES:
            return _to_bool(value)
        if data_type == "date":
            return _to_date(value)
        if data_type == "text" and not isinstance(value, str):
            return str(value)
    except (TypeError, ValueError):
        return value
    return value


def resolve_row_data(
    row_data: Dict[str, Any],
    columns: Sequence[TableColumn],
    today: Optional[date] = None
) -> Dict[str, Any]:
    """
    Read view of a payload against the current columns

    Keys without a column definition are kept verbatim. Known columns are
    coerced to their type, and missing (or null) ones get the column
    default.
    """
    resolved = dict(row_data or {})
    for column in columns:
        value = resolved.get(column.column_name)
        if value is None:
            resolved[column.column_name] = default_for_column(column, today)
        else:
            resolved[column.column_name] = coerce_value(column.data_type, value)
    return resolved


class RowRepository(BaseRepository):
    """CRUD over row payloads of dynamic tables"""

    def list_rows(self, table_id: int, limit: int = 100, offset: int = 0) -> List[TableRow]:
        """One page of rows ordered by id"""
        return (
            self.db.query(TableRow)
            .filter(TableRow.table_id == table_id)
            .order_by(TableRow.id)
            .limit(limit)
            .offset(offset)
            .all()
        )

    def count(self, table_id: int) -> int:
        return self.db.query(TableRow).filter(TableRow.table_id == table_id).count()

    def get(self, row_id: int, table_id: Optional[int] = None) -> TableRow:
        query = self.db.query(TableRow).filter(TableRow.id == row_id)
        if table_id is not None:
            query = query.filter(TableRow.table_id == table_id)
        row = query.first()
        if not row:
            raise NotFoundError(f"Row with id {row_id} not found")
        return row

    def create(self, table_id: int, row_data: Dict[str, Any]) -> TableRow:
        """Insert a row; keys are not checked against the columns"""
        self._check_payload(row_data)
        if not self.db.query(DynamicTable.id).filter(DynamicTable.id == table_id).first():
            raise NotFoundError(f"Table with id {table_id} not found")

        row = TableRow(table_id=table_id, row_data=dict(row_data))
        self._save(row)
        logger.debug("Row created", row_id=row.id, table_id=table_id)
        return row

    def update(self, row_id: int, row_data: Dict[str, Any], table_id: Optional[int] = None) -> TableRow:
        """
        Replace the whole payload of a row

        This is not a merge: keys missing from ``row_data`` are dropped
        from the stored row. Concurrent updates are last-write-wins.
        """
        self._check_payload(row_data)
        row = self.get(row_id, table_id)
        row.row_data = dict(row_data)
        self._commit()
        self.db.refresh(row)
        logger.debug("Row updated", row_id=row_id, table_id=row.table_id)
        return row

    def delete(self, row_id: int, table_id: Optional[int] = None) -> None:
        row = self.get(row_id, table_id)
        self.db.delete(row)
        self._commit()
        logger.debug("Row deleted", row_id=row_id)

    def delete_for_tables(self, table_ids: Sequence[int]) -> int:
        """Bulk delete the rows of the given tables (no commit)"""
        return (
            self.db.query(TableRow)
            .filter(TableRow.table_id.in_(table_ids))
            .delete(synchronize_session=False)
        )

    def resolve(self, row: TableRow, columns: Sequence[TableColumn], today: Optional[date] = None) -> Dict[str, Any]:
        """Row as a response dict, payload resolved against ``columns``"""
        return {
            "id": row.id,
            "table_id": row.table_id,
            "row_data": resolve_row_data(row.row_data, columns, today),
            "created_at": row.created_at,
            "updated_at": row.updated_at,
        }

    @staticmethod
    def _check_payload(row_data: Any) -> None:
        if not isinstance(row_data, dict):
            raise ValidationError("Row data must be an object")
