"""Pytest configuration and fixtures."""
import os

# Must be set before the application modules read their settings
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["ENABLE_FILE_LOGGING"] = "false"
os.environ["SEED_SAMPLE_DATA"] = "false"

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from database import Base, create_db_engine, get_db, init_db  # noqa: E402
from main import app  # noqa: E402
from services.explorer_service import ExplorerService  # noqa: E402


@pytest.fixture
def engine():
    """Fresh in-memory SQLite database with the schema created."""
    test_engine = create_db_engine("sqlite://", poolclass=StaticPool)
    init_db(bind=test_engine)
    yield test_engine
    Base.metadata.drop_all(bind=test_engine)
    test_engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db_session(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def service(db_session):
    return ExplorerService(db_session)


@pytest.fixture
def client(session_factory):
    """Test client whose requests use the in-memory database."""
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def customers(service):
    """A root "Tables" folder holding a "Customers" table item."""
    folder = service.create_sidebar_item(name="Tables", item_type="folder")
    item = service.create_sidebar_item(name="Customers", parent_id=folder.id, item_type="table")
    return {"folder": folder, "item": item, "table": service.get_table(item.id)}
