import logging
from datetime import datetime, timezone
from typing import Callable, Optional
from uuid import UUID

from sqlalchemy import case, delete, insert, literal, select, update
from sqlalchemy.dialects.mysql import insert as mysql_insert
from sqlalchemy.dialects.postgresql import insert as postgresql_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from task_assignees.models.task_assignee import TaskAssignee
from task_assignees.schemas.task_assignee import TaskAssigneeRecord

logger = logging.getLogger("uvicorn.error")

ON_CONFLICT_INSERTS = {
    "sqlite": sqlite_insert,
    "postgresql": postgresql_insert,
}
ON_DUPLICATE_KEY_DIALECTS = {"mysql", "mariadb"}


class AssigneeStorageError(Exception):
    """The assignee table could not be read or written."""


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class AssigneeStore:
    """
    Current assignee per task, one row per task_id.

    Every operation runs in its own session and transaction. Absence of a
    row means the task is unassigned; storage failures are raised as
    AssigneeStorageError and never retried here.
    """

    def __init__(self, session_factory: sessionmaker, clock: Callable[[], datetime] = utc_now):
        self.session_factory = session_factory
        self.clock = clock

    def get(self, task_id: UUID) -> Optional[TaskAssigneeRecord]:
        try:
            with self.session_factory() as db:
                row = db.execute(
                    select(TaskAssignee).where(TaskAssignee.task_id == task_id)
                ).scalar_one_or_none()
                if row is None:
                    return None
                return TaskAssigneeRecord.model_validate(row)
        except SQLAlchemyError as exc:
            logger.exception("Falha ao consultar responsável da tarefa %s", task_id)
            raise AssigneeStorageError(f"Falha ao consultar responsável da tarefa {task_id}") from exc

    def upsert(self, task_id: UUID, assignee: str) -> TaskAssigneeRecord:
        """
        Inserts or replaces the assignee of a task in a single statement.

        created_at is only written by the insert branch, so it survives
        later upserts; updated_at takes the later of the stored value and
        the clock, so it never moves back and never precedes created_at.
        """
        try:
            with self.session_factory() as db:
                with db.begin():
                    self._write_assignee(db, task_id, assignee, self.clock())
                    row = db.execute(
                        select(TaskAssignee).where(TaskAssignee.task_id == task_id)
                    ).scalar_one()
                    record = TaskAssigneeRecord.model_validate(row)
        except SQLAlchemyError as exc:
            logger.exception("Falha ao definir responsável da tarefa %s", task_id)
            raise AssigneeStorageError(f"Falha ao definir responsável da tarefa {task_id}") from exc
        return record

    def delete(self, task_id: UUID) -> None:
        try:
            with self.session_factory() as db:
                with db.begin():
                    db.execute(delete(TaskAssignee).where(TaskAssignee.task_id == task_id))
        except SQLAlchemyError as exc:
            logger.exception("Falha ao remover responsável da tarefa %s", task_id)
            raise AssigneeStorageError(f"Falha ao remover responsável da tarefa {task_id}") from exc

    def _write_assignee(self, db: Session, task_id: UUID, assignee: str, now: datetime) -> None:
        stmt = build_upsert_statement(db.get_bind().dialect.name, task_id, assignee, now)
        if stmt is not None:
            db.execute(stmt)
            return

        # Sem upsert nativo: insert em savepoint, update se a chave já existir
        try:
            with db.begin_nested():
                db.execute(insert(TaskAssignee).values(**assignee_values(task_id, assignee, now)))
        except IntegrityError:
            db.execute(
                update(TaskAssignee)
                .where(TaskAssignee.task_id == task_id)
                .values(
                    assignee=assignee,
                    updated_at=latest_updated_at(literal(now, type_=TaskAssignee.updated_at.type)),
                )
            )


def assignee_values(task_id: UUID, assignee: str, now: datetime) -> dict:
    return {
        "task_id": task_id,
        "assignee": assignee,
        "created_at": now,
        "updated_at": now,
    }


def latest_updated_at(candidate):
    # updated_at nunca retrocede, mesmo quando um writer com relógio anterior grava por último
    return case(
        (TaskAssignee.updated_at > candidate, TaskAssignee.updated_at),
        else_=candidate,
    )


def build_upsert_statement(dialect: str, task_id: UUID, assignee: str, now: datetime):
    """Native insert-or-update for the dialect, or None when it has none."""
    values = assignee_values(task_id, assignee, now)

    if dialect in ON_CONFLICT_INSERTS:
        stmt = ON_CONFLICT_INSERTS[dialect](TaskAssignee).values(**values)
        return stmt.on_conflict_do_update(
            index_elements=["task_id"],
            set_={
                "assignee": stmt.excluded.assignee,
                "updated_at": latest_updated_at(stmt.excluded.updated_at),
            },
        )

    if dialect in ON_DUPLICATE_KEY_DIALECTS:
        stmt = mysql_insert(TaskAssignee).values(**values)
        return stmt.on_duplicate_key_update(
            assignee=stmt.inserted.assignee,
            updated_at=latest_updated_at(stmt.inserted.updated_at),
        )

    return None
