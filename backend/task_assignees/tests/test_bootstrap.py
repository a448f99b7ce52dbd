import threading
from uuid import uuid4

from sqlalchemy import inspect

from task_assignees.database.base import Base
from task_assignees.database.session import engine
from task_assignees import main
from task_assignees.main import run_db_bootstrap, trigger_db_bootstrap


def test_bootstrap_creates_assignee_table(store):
    Base.metadata.drop_all(bind=engine)
    assert "task_assignees" not in inspect(engine).get_table_names()

    run_db_bootstrap()

    assert "task_assignees" in inspect(engine).get_table_names()
    task_id = uuid4()
    store.upsert(task_id, "alice")
    assert store.get(task_id).assignee == "alice"


def test_bootstrap_is_repeatable():
    run_db_bootstrap()
    run_db_bootstrap()
    assert "task_assignees" in inspect(engine).get_table_names()


def test_trigger_bootstrap_off_skips_run(monkeypatch):
    calls = []
    monkeypatch.setattr(main, "_bootstrap_started", False)
    monkeypatch.setattr(main, "run_db_bootstrap", lambda: calls.append("run"))

    trigger_db_bootstrap(mode="off")

    assert calls == []


def test_trigger_bootstrap_runs_once_in_sync_mode(monkeypatch):
    calls = []
    monkeypatch.setattr(main, "_bootstrap_started", False)
    monkeypatch.setattr(main, "run_db_bootstrap", lambda: calls.append("run"))

    trigger_db_bootstrap(mode="sync")
    trigger_db_bootstrap(mode="sync")

    assert calls == ["run"]


def test_trigger_bootstrap_background_runs_in_thread(monkeypatch):
    finished = threading.Event()
    thread_names = []

    def fake_bootstrap():
        thread_names.append(threading.current_thread().name)
        finished.set()

    monkeypatch.setattr(main, "_bootstrap_started", False)
    monkeypatch.setattr(main, "run_db_bootstrap", fake_bootstrap)

    trigger_db_bootstrap(mode="background")

    assert finished.wait(timeout=5)
    assert thread_names == ["db-bootstrap"]
