import os
import tempfile
from pathlib import Path
from uuid import uuid4

import pytest

TEST_DB_FILE = Path(tempfile.gettempdir()) / f"test_task_assignees_{uuid4().hex}.db"
os.environ["DATABASE_URL"] = f"sqlite:///{TEST_DB_FILE.as_posix()}"
os.environ.setdefault("DB_BOOTSTRAP_MODE", "off")

from fastapi.testclient import TestClient  # noqa: E402

from task_assignees.database.base import Base  # noqa: E402
from task_assignees.database.session import SessionLocal, engine  # noqa: E402
from task_assignees.main import create_app  # noqa: E402
from task_assignees.services.assignee_store import AssigneeStore  # noqa: E402


@pytest.fixture(autouse=True)
def reset_database():
    engine.dispose()
    if TEST_DB_FILE.exists():
        TEST_DB_FILE.unlink()
    Base.metadata.create_all(bind=engine)
    try:
        yield
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()
        if TEST_DB_FILE.exists():
            TEST_DB_FILE.unlink()


@pytest.fixture
def store():
    return AssigneeStore(SessionLocal)


@pytest.fixture
def client(store):
    with TestClient(create_app(store=store)) as test_client:
        yield test_client
