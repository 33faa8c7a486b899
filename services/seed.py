"""
Sample data created on first start
"""
from sqlalchemy.orm import Session

from services.explorer_service import ExplorerService
from utils.logger import get_logger

logger = get_logger(__name__)

SAMPLE_COLUMNS = [
    {"name": "name", "display_name": "Customer Name", "data_type": "text", "is_required": True, "width": 200},
    {"name": "email", "display_name": "Email Address", "data_type": "text", "is_required": True, "width": 250},
    {"name": "phone", "display_name": "Phone Number", "data_type": "text", "width": 150},
    {"name": "active", "display_name": "Active", "data_type": "checkbox", "width": 100},
    {"name": "created_date", "display_name": "Created Date", "data_type": "date", "width": 150},
]

SAMPLE_ROWS = [
    {"name": "John Doe", "email": "john@example.com", "phone": "+1-555-0123", "active": True, "created_date": "2024-01-15"},
    {"name": "Jane Smith", "email": "jane@example.com", "phone": "+1-555-0124", "active": True, "created_date": "2024-01-16"},
    {"name": "Bob Johnson", "email": "bob@example.com", "phone": "+1-555-0125", "active": False, "created_date": "2024-01-17"},
]


def seed_sample_data(db: Session) -> bool:
    """
    Create the "Tables" folder with a "Sample Customers" table

    Only runs against an empty sidebar. Returns True when data was created.
    """
    service = ExplorerService(db)
    if service.sidebar.count() > 0:
        return False

    folder = service.create_sidebar_item(name="Tables", item_type="folder", icon="folder")
    item = service.create_sidebar_item(
        name="Sample Customers",
        parent_id=folder.id,
        item_type="table",
        icon="table"
    )
    table = service.get_table(item.id)
    service.schema.update_table(table.id, {"description": "A sample customer table to get you started"})

    for column in SAMPLE_COLUMNS:
        service.add_column(item.id, **column)
    for row in SAMPLE_ROWS:
        service.create_row(item.id, row)

    logger.info("Sample data seeded", sidebar_item_id=item.id, table_id=table.id, rows=len(SAMPLE_ROWS))
    return True
