"""Tests for cross-entity orchestration."""
from datetime import date

import pytest
from sqlalchemy.exc import OperationalError

from models import DynamicTable, SidebarItem, TableColumn, TableRow
from services.errors import ConflictError, NotFoundError, PersistenceError, ValidationError
from services.schema_repository import SchemaRepository
from services.sidebar_repository import SidebarRepository
from services.seed import seed_sample_data


class TestCreateTableItem:
    def test_table_item_gets_exactly_one_table(self, service, db_session):
        item = service.create_sidebar_item(name="Customer Orders", item_type="table", icon="table")

        tables = db_session.query(DynamicTable).filter(DynamicTable.sidebar_item_id == item.id).all()
        assert len(tables) == 1
        assert tables[0].table_name == "customer_orders"
        assert tables[0].display_name == "Customer Orders"
        assert tables[0].description == "Dynamic table: Customer Orders"

    def test_folder_gets_no_table(self, service, db_session):
        service.create_sidebar_item(name="Folder", item_type="folder")
        assert db_session.query(DynamicTable).count() == 0

    def test_duplicate_table_name_rolls_back_sidebar_item(self, service, db_session):
        folder = service.create_sidebar_item(name="Tables", item_type="folder")
        service.create_sidebar_item(name="Customers", item_type="table")

        with pytest.raises(ConflictError):
            service.create_sidebar_item(name="customers", parent_id=folder.id, item_type="table")

        names = [item.name for item in db_session.query(SidebarItem).all()]
        assert sorted(names) == ["Customers", "Tables"]
        assert db_session.query(DynamicTable).count() == 1

    def test_unusable_name_rolls_back_sidebar_item(self, service, db_session):
        with pytest.raises(ValidationError):
            service.create_sidebar_item(name="???", item_type="table")
        assert db_session.query(SidebarItem).count() == 0

    def test_store_failure_rolls_back_sidebar_item(self, service, db_session, monkeypatch):
        def fail(self, **kwargs):
            raise PersistenceError("Database operation failed", details="disk full")

        monkeypatch.setattr(SchemaRepository, "create_dynamic_table", fail)

        with pytest.raises(PersistenceError):
            service.create_sidebar_item(name="Ledger", item_type="table")
        assert db_session.query(SidebarItem).count() == 0

    def test_cleanup_failure_keeps_provisioning_error(self, service, monkeypatch):
        def fail_provisioning(self, **kwargs):
            raise PersistenceError("Database operation failed", details="disk full")

        def fail_cleanup(self, item_id):
            raise OperationalError("DELETE FROM sidebar_items", {}, Exception("database is locked"))

        monkeypatch.setattr(SchemaRepository, "create_dynamic_table", fail_provisioning)
        monkeypatch.setattr(SidebarRepository, "delete", fail_cleanup)

        with pytest.raises(PersistenceError) as excinfo:
            service.create_sidebar_item(name="Ledger", item_type="table")
        assert excinfo.value.details == "disk full"


class TestDeleteCascade:
    def test_folder_delete_releases_nested_tables(self, service, db_session):
        root = service.create_sidebar_item(name="Root", item_type="folder")
        sub = service.create_sidebar_item(name="Sub", parent_id=root.id, item_type="folder")
        top_table = service.create_sidebar_item(name="Top", parent_id=root.id, item_type="table")
        deep_table = service.create_sidebar_item(name="Deep", parent_id=sub.id, item_type="table")
        survivor = service.create_sidebar_item(name="Survivor", item_type="table")
        deep_table_id = deep_table.id
        survivor_id = survivor.id

        for item in (top_table, deep_table, survivor):
            service.add_column(item.id, name="Value", data_type="number")
            service.create_row(item.id, {"value": 1})

        deleted = service.delete_sidebar_item(root.id)

        assert len(deleted) == 4
        assert [item.id for item in db_session.query(SidebarItem).all()] == [survivor_id]
        assert db_session.query(DynamicTable).count() == 1
        assert db_session.query(TableColumn).count() == 1
        assert db_session.query(TableRow).count() == 1
        with pytest.raises(NotFoundError):
            service.get_table(deep_table_id)

    def test_table_item_delete(self, customers, service, db_session):
        item = customers["item"]
        service.add_column(item.id, name="Name")
        service.create_row(item.id, {"name": "Ada"})

        service.delete_sidebar_item(item.id)

        assert db_session.query(DynamicTable).count() == 0
        assert db_session.query(TableRow).count() == 0
        assert db_session.query(SidebarItem).count() == 1  # the folder

    def test_empty_folder_delete(self, service, db_session):
        folder = service.create_sidebar_item(name="Empty", item_type="folder")
        folder_id = folder.id
        assert service.delete_sidebar_item(folder_id) == [folder_id]
        assert db_session.query(SidebarItem).count() == 0


class TestRename:
    def test_renaming_table_item_updates_display_name_only(self, customers, service):
        item = service.update_sidebar_item(customers["item"].id, {"name": "Clients"})
        table = service.get_table(item.id)

        assert item.name == "Clients"
        assert table.display_name == "Clients"
        assert table.table_name == "customers"

    def test_renaming_folder(self, customers, service):
        folder = service.update_sidebar_item(customers["folder"].id, {"name": "Data"})
        assert folder.name == "Data"


class TestTree:
    def test_sidebar_tree(self, customers, service):
        service.create_sidebar_item(name="Archive", item_type="folder")

        forest = service.sidebar_tree()

        assert [node["name"] for node in forest] == ["Tables", "Archive"]
        assert [child["name"] for child in forest[0]["children"]] == ["Customers"]


class TestRowsThroughTables:
    def test_rows_are_resolved_against_current_columns(self, customers, service):
        item = customers["item"]
        service.add_column(item.id, name="Full Name", is_required=True)
        service.create_row(item.id, {"full_name": "Ada"})
        service.add_column(item.id, name="Age", data_type="number")
        service.add_column(item.id, name="Since", data_type="date")

        rows, total = service.list_rows(item.id, limit=10, offset=0, today=date(2024, 5, 4))

        assert total == 1
        assert rows[0]["row_data"] == {"full_name": "Ada", "age": 0, "since": "2024-05-04"}

    def test_deleted_column_key_survives(self, customers, service):
        item = customers["item"]
        column = service.add_column(item.id, name="Notes")
        service.create_row(item.id, {"notes": "old"})
        service.delete_column(item.id, column.id)
        service.create_row(item.id, {})

        rows, _ = service.list_rows(item.id, limit=10, offset=0)

        assert rows[0]["row_data"] == {"notes": "old"}
        assert rows[1]["row_data"] == {}

    def test_row_of_other_table_is_not_found(self, customers, service):
        other = service.create_sidebar_item(name="Other", item_type="table")
        row = service.create_row(other.id, {"a": 1})

        with pytest.raises(NotFoundError):
            service.update_row(customers["item"].id, row["id"], {"a": 2})
        with pytest.raises(NotFoundError):
            service.delete_row(customers["item"].id, row["id"])

    def test_folder_has_no_table(self, customers, service):
        with pytest.raises(NotFoundError):
            service.list_columns(customers["folder"].id)


class TestSeed:
    def test_seeds_empty_store_once(self, service, db_session):
        assert seed_sample_data(db_session) is True
        assert seed_sample_data(db_session) is False

        items = service.list_sidebar_items()
        assert [item.name for item in items] == ["Tables", "Sample Customers"]

        table = service.get_table(items[1].id)
        assert table.table_name == "sample_customers"
        assert table.description == "A sample customer table to get you started"

        columns = service.list_columns(items[1].id)
        assert [c.column_name for c in columns] == ["name", "email", "phone", "active", "created_date"]
        assert columns[3].data_type == "checkbox"

        rows, total = service.list_rows(items[1].id, limit=100, offset=0)
        assert total == 3
        assert rows[2]["row_data"]["active"] is False
