"""
Caller-side access to the task list procedures.

``TaskListClient`` keeps a ``TaskListSnapshot`` of the list. The snapshot is
never patched: every confirmed mutation is followed by a fresh ``findAll``
that replaces it wholesale, and a failed call leaves it as it was.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from typing import Any, Iterator, Optional

import httpx

from .errors import ProcedureError, error_from_envelope
from .schemas import DeleteCountDict, TaskDict

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TaskListSnapshot:
    tasks: tuple[TaskDict, ...] = ()

    def __len__(self) -> int:
        return len(self.tasks)

    def __iter__(self) -> Iterator[TaskDict]:
        return iter(self.tasks)

    @property
    def ids(self) -> list[int]:
        return [t["id"] for t in self.tasks]

    @property
    def checked_ids(self) -> list[int]:
        return [t["id"] for t in self.tasks if t["checked"]]

    def get(self, task_id: int) -> Optional[TaskDict]:
        for t in self.tasks:
            if t["id"] == task_id:
                return t
        return None


class TaskListClient:
    def __init__(self, http: httpx.Client, *, path: str = "/call") -> None:
        self._http = http
        self._path = path
        self._snapshot = TaskListSnapshot()

    @classmethod
    def connect(cls, base_url: str, *, timeout: float = 10.0) -> "TaskListClient":
        return cls(httpx.Client(base_url=base_url, timeout=timeout))

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> "TaskListClient":
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()

    @property
    def snapshot(self) -> TaskListSnapshot:
        return self._snapshot

    # ---- raw procedures ----

    def call(self, op: str, args: Optional[dict] = None) -> Any:
        """Invoke one procedure; raise the typed error carried by an error envelope."""
        envelope: dict[str, Any] = {"op": op, "ctx": {"requestId": str(uuid.uuid4())}}
        if args is not None:
            envelope["args"] = args

        response = self._http.post(self._path, json=envelope)
        try:
            body = response.json()
        except ValueError as exc:
            raise ProcedureError(
                "INVALID_RESPONSE", f"Non-JSON response with HTTP {response.status_code}", response.status_code
            ) from exc

        if not isinstance(body, dict):
            raise ProcedureError("INVALID_RESPONSE", "Response body is not an object", response.status_code)
        if body.get("state") == "error":
            raise error_from_envelope(body.get("error") or {}, response.status_code)
        return body.get("result")

    def find_all(self) -> list[TaskDict]:
        return self.call("findAll")

    def insert_one(self, title: str, description: Optional[str] = None) -> TaskDict:
        args: dict[str, Any] = {"title": title}
        if description is not None:
            args["description"] = description
        return self.call("insertOne", args)

    def update_one(self, task_id: int, title: str, checked: bool, description: Optional[str] = None) -> TaskDict:
        args: dict[str, Any] = {"id": task_id, "title": title, "checked": checked}
        if description is not None:
            args["description"] = description
        return self.call("updateOne", args)

    def delete_one(self, task_id: int) -> TaskDict:
        return self.call("deleteOne", {"id": task_id})

    def delete_all(self, ids: list[int]) -> DeleteCountDict:
        return self.call("deleteAll", {"ids": ids})

    def delete_checked(self, ids: list[int]) -> DeleteCountDict:
        return self.call("deleteChecked", {"ids": ids})

    # ---- snapshot-backed actions ----

    def refresh(self) -> TaskListSnapshot:
        self._snapshot = TaskListSnapshot(tuple(self.find_all()))
        return self._snapshot

    def add(self, title: str, description: str = "") -> Optional[TaskDict]:
        if title == "":
            return None
        task = self.insert_one(title, description)
        self.refresh()
        return task

    def edit(self, task_id: int, title: str, description: str = "") -> Optional[TaskDict]:
        """Resubmit a task from the edit form; this clears its checked state."""
        if title == "":
            return None
        task = self.update_one(task_id, title, False, description)
        self.refresh()
        return task

    def toggle(self, task: TaskDict) -> TaskDict:
        updated = self.update_one(task["id"], task["title"], not task["checked"], task.get("description") or "")
        self.refresh()
        return updated

    def remove(self, task_id: int) -> TaskDict:
        task = self.delete_one(task_id)
        self.refresh()
        return task

    def clear_all(self) -> int:
        ids = self._snapshot.ids
        if not ids:
            return 0
        count = self.delete_all(ids)["count"]
        self.refresh()
        return count

    def clear_checked(self) -> int:
        ids = self._snapshot.checked_ids
        if not ids:
            return 0
        count = self.delete_checked(ids)["count"]
        logger.debug("Cleared %s checked task(s) of %s requested", count, len(ids))
        self.refresh()
        return count
