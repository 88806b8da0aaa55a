import os
import shutil
import tempfile
from pathlib import Path

# Set environment variables BEFORE any imports that might use settings
_test_db_dir = tempfile.mkdtemp()
_test_db_path = os.path.join(_test_db_dir, "test_mes_admin.db")
os.environ["DATABASE_URL"] = f"sqlite:///{_test_db_path}"
os.environ["SECRET_KEY"] = "test-secret-key-min-32-characters-long-for-testing"
os.environ["ALGORITHM"] = "HS256"
os.environ["ACCESS_TOKEN_EXPIRE_MINUTES"] = "30"
os.environ["LOG_LEVEL"] = "WARNING"

import pytest
from alembic import command
from alembic.config import Config
from fastapi.testclient import TestClient
from sqlalchemy import event

from mes_admin.api.deps import get_db
from mes_admin.core.security import create_access_token
from mes_admin.db.base import Database
from mes_admin.main import app

ALEMBIC_INI = Path(__file__).resolve().parent.parent / "alembic.ini"


@pytest.fixture(scope="function")
def database():
    """Create a fresh database for each test and run migrations."""
    temp_db_dir = tempfile.mkdtemp()
    test_db_url = f"sqlite:///{os.path.join(temp_db_dir, 'test.db')}"

    alembic_cfg = Config(str(ALEMBIC_INI))
    alembic_cfg.set_main_option("sqlalchemy.url", test_db_url)
    command.upgrade(alembic_cfg, "head")

    database = Database(test_db_url)

    # Enable WAL mode to reduce locking issues
    @event.listens_for(database.engine, "connect")
    def set_sqlite_pragma(dbapi_conn, connection_record):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.close()

    yield database

    database.dispose()
    shutil.rmtree(temp_db_dir, ignore_errors=True)


@pytest.fixture(scope="function")
def db(database):
    session = database.session()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(scope="function")
def client(db):
    """Create a test client with database dependency override."""

    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db

    yield TestClient(app)

    app.dependency_overrides.clear()


def auth_headers(token: str, tenant_id: str | None = None) -> dict:
    headers = {"Authorization": f"Bearer {token}"}
    if tenant_id is not None:
        headers["X-Tenant-ID"] = tenant_id
    return headers


@pytest.fixture(scope="function")
def admin_token() -> str:
    """Platform administrator, not bound to any tenant."""
    return create_access_token(data={"sub": "admin-1", "role": "admin"})


@pytest.fixture(scope="function")
def user_token() -> str:
    """Authenticated caller without the admin role or a tenant."""
    return create_access_token(data={"sub": "user-1"})


@pytest.fixture(scope="function")
def t1_token() -> str:
    return create_access_token(data={"sub": "operator-1", "tenant_id": "t1"})


@pytest.fixture(scope="function")
def t2_token() -> str:
    return create_access_token(data={"sub": "operator-2", "tenant_id": "t2"})


@pytest.fixture(scope="function")
def admin_headers(admin_token: str) -> dict:
    return auth_headers(admin_token)


@pytest.fixture(scope="function")
def t1_headers(t1_token: str) -> dict:
    return auth_headers(t1_token)


@pytest.fixture(scope="function")
def t2_headers(t2_token: str) -> dict:
    return auth_headers(t2_token)
