"""
Relational task store for the task list procedures.
"""

from __future__ import annotations

import contextlib
import logging
from collections.abc import Iterable, Iterator
from pathlib import Path
from typing import Any, Optional

from sqlalchemy import create_engine, delete, func, select
from sqlalchemy.engine import make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from .errors import NotFound, StoreUnavailable
from .models import Base, TaskRow
from .schemas import TaskDict

logger = logging.getLogger(__name__)

# Columns an update may overwrite; ``id`` is immutable.
UPDATABLE_FIELDS = ("title", "description", "checked")


class TaskStore:
    """
    SQLAlchemy-backed store owning the authoritative task list.

    Every public method runs in its own session and transaction, so a single
    insert, update or (bulk) delete is atomic and nothing is shared between
    calls. Driver failures surface as ``StoreUnavailable``; a missing id as
    ``NotFound``.
    """

    def __init__(self, url: str = "sqlite:///tasks.sqlite3", *, echo: bool = False) -> None:
        self._url = make_url(url)
        if self._url.get_backend_name() == "sqlite" and self._url.database not in (None, "", ":memory:"):
            Path(self._url.database).parent.mkdir(parents=True, exist_ok=True)

        connect_args: dict[str, Any] = {}
        if self._url.get_backend_name() == "sqlite":
            # request handlers run in a threadpool
            connect_args["check_same_thread"] = False

        self._engine = create_engine(self._url, echo=echo, connect_args=connect_args)
        self._sessions = sessionmaker(self._engine, expire_on_commit=False)
        self._ensure_schema()
        logger.info("TaskStore ready url=%s total=%s", self._url.render_as_string(hide_password=True), self.count())

    def close(self) -> None:
        self._engine.dispose()

    # ---- low-level helpers ----

    def _ensure_schema(self) -> None:
        try:
            Base.metadata.create_all(self._engine)
        except SQLAlchemyError as exc:
            logger.exception("Failed to create task_list schema.")
            raise StoreUnavailable(f"Task store unavailable: {exc.__class__.__name__}") from exc

    @contextlib.contextmanager
    def _session(self) -> Iterator[Session]:
        try:
            with self._sessions.begin() as session:
                yield session
        except SQLAlchemyError as exc:
            logger.exception("Task store operation failed.")
            raise StoreUnavailable(f"Task store unavailable: {exc.__class__.__name__}") from exc

    @staticmethod
    def _row_to_task(row: TaskRow) -> TaskDict:
        return {
            "id": int(row.id),
            "title": row.title,
            "description": row.description,
            "checked": bool(row.checked),
        }

    @staticmethod
    def _get_row(session: Session, task_id: int) -> TaskRow:
        row = session.get(TaskRow, task_id)
        if row is None:
            raise NotFound(f"Task with id {task_id} not found")
        return row

    # ---- public API ----

    def count(self) -> int:
        with self._session() as session:
            return int(session.scalar(select(func.count()).select_from(TaskRow)) or 0)

    def find_all(self) -> list[TaskDict]:
        """Every task, in insertion (ascending id) order."""
        with self._session() as session:
            rows = session.scalars(select(TaskRow).order_by(TaskRow.id)).all()
            return [self._row_to_task(r) for r in rows]

    def insert(self, *, title: str, description: Optional[str] = None) -> TaskDict:
        with self._session() as session:
            row = TaskRow(title=title, description=description, checked=False)
            session.add(row)
            session.flush()
            task = self._row_to_task(row)
        logger.debug("Task inserted id=%s", task["id"])
        return task

    def update(self, task_id: int, changes: dict[str, Any]) -> TaskDict:
        """Overwrite the given fields of one task and return the stored result."""
        unknown = set(changes) - set(UPDATABLE_FIELDS)
        if unknown:
            raise ValueError(f"Cannot update fields: {', '.join(sorted(unknown))}")

        with self._session() as session:
            row = self._get_row(session, task_id)
            for field, value in changes.items():
                setattr(row, field, value)
            session.flush()
            task = self._row_to_task(row)
        logger.debug("Task updated id=%s fields=%s", task_id, sorted(changes))
        return task

    def delete(self, task_id: int) -> TaskDict:
        with self._session() as session:
            row = self._get_row(session, task_id)
            task = self._row_to_task(row)
            session.delete(row)
        logger.debug("Task deleted id=%s", task_id)
        return task

    def delete_many(self, ids: Iterable[int], *, checked: Optional[bool] = None) -> int:
        """
        Delete every task whose id is in ``ids``.

        With ``checked`` set, only rows currently holding that value are
        removed; the rest of the set is left untouched. Runs as one statement,
        so the whole set goes or nothing does.
        """
        id_list = list(ids)
        stmt = delete(TaskRow).where(TaskRow.id.in_(id_list))
        if checked is not None:
            stmt = stmt.where(TaskRow.checked == checked)

        with self._session() as session:
            result = session.execute(stmt.execution_options(synchronize_session=False))
            count = int(result.rowcount or 0)
        logger.debug("Tasks deleted count=%s requested=%s checked=%s", count, len(id_list), checked)
        return count
