"""
All operation handlers for the task list procedures.
"""

from __future__ import annotations

from typing import Any, Optional

from .errors import InvalidInput
from .schemas import DeleteCountDict, TaskDict
from .store import TaskStore


# ---------------------------------------------------------------------------
# Validation helpers
# ---------------------------------------------------------------------------

def _validate_args(args: Any, allowed: tuple[str, ...]) -> dict:
    if args is None:
        return {}
    if not isinstance(args, dict):
        raise InvalidInput(f"args: Expected object, received {type(args).__name__}")
    unknown = [k for k in args if k not in allowed]
    if unknown:
        raise InvalidInput(f"Unrecognized key(s) in object: {', '.join(repr(k) for k in unknown)}")
    return args


# SQLite INTEGER (and BIGINT elsewhere) is a signed 64-bit value.
INT_MIN = -(2**63)
INT_MAX = 2**63 - 1

_MISSING = object()


def _get(args: dict, field: str, required: bool) -> Any:
    # A present null is a type error, not an omitted field.
    if field not in args:
        if required:
            raise InvalidInput(f"{field}: Required")
        return _MISSING
    return args[field]


def _type_name(val: Any) -> str:
    if val is None:
        return "null"
    if isinstance(val, bool):
        return "boolean"
    return type(val).__name__


def _check_int(field: str, val: Any) -> int:
    if isinstance(val, bool) or not isinstance(val, int):
        raise InvalidInput(f"{field}: Expected number, received {_type_name(val)}")
    if val < INT_MIN:
        raise InvalidInput(f"{field}: Number must be greater than or equal to {INT_MIN}")
    if val > INT_MAX:
        raise InvalidInput(f"{field}: Number must be less than or equal to {INT_MAX}")
    return val


def _validate_string(args: dict, field: str, required: bool = False) -> Optional[str]:
    val = _get(args, field, required)
    if val is _MISSING:
        return None
    if not isinstance(val, str):
        raise InvalidInput(f"{field}: Expected string, received {_type_name(val)}")
    return val


def _validate_int(args: dict, field: str, required: bool = False) -> Optional[int]:
    val = _get(args, field, required)
    if val is _MISSING:
        return None
    return _check_int(field, val)


def _validate_bool(args: dict, field: str, required: bool = False) -> Optional[bool]:
    val = _get(args, field, required)
    if val is _MISSING:
        return None
    if not isinstance(val, bool):
        raise InvalidInput(f"{field}: Expected boolean, received {_type_name(val)}")
    return val


def _validate_int_array(args: dict, field: str, required: bool = False) -> Optional[list[int]]:
    val = _get(args, field, required)
    if val is _MISSING:
        return None
    if not isinstance(val, list):
        raise InvalidInput(f"{field}: Expected array, received {_type_name(val)}")
    return [_check_int(f"{field}.{i}", item) for i, item in enumerate(val)]


# ---------------------------------------------------------------------------
# Operation handlers
# ---------------------------------------------------------------------------

def find_all(args: Any, store: TaskStore) -> list[TaskDict]:
    _validate_args(args, ())
    return store.find_all()


def insert_one(args: Any, store: TaskStore) -> TaskDict:
    args = _validate_args(args, ("title", "description"))
    # Empty titles pass: only the type is checked here.
    title = _validate_string(args, "title", required=True)
    description = _validate_string(args, "description")
    return store.insert(title=title, description=description)


def update_one(args: Any, store: TaskStore) -> TaskDict:
    args = _validate_args(args, ("id", "title", "description", "checked"))
    task_id = _validate_int(args, "id", required=True)
    title = _validate_string(args, "title", required=True)
    description = _validate_string(args, "description")
    checked = _validate_bool(args, "checked", required=True)

    changes: dict[str, Any] = {"title": title, "checked": checked}
    if description is not None:
        changes["description"] = description
    return store.update(task_id, changes)


def delete_one(args: Any, store: TaskStore) -> TaskDict:
    args = _validate_args(args, ("id",))
    task_id = _validate_int(args, "id", required=True)
    return store.delete(task_id)


def delete_all(args: Any, store: TaskStore) -> DeleteCountDict:
    args = _validate_args(args, ("ids",))
    ids = _validate_int_array(args, "ids", required=True)
    return {"count": store.delete_many(ids)}


def delete_checked(args: Any, store: TaskStore) -> DeleteCountDict:
    args = _validate_args(args, ("ids",))
    ids = _validate_int_array(args, "ids", required=True)
    return {"count": store.delete_many(ids, checked=True)}


# ---------------------------------------------------------------------------
# Operations registry (handler dispatch table)
# ---------------------------------------------------------------------------

OPERATIONS: dict[str, dict[str, Any]] = {
    "findAll": {
        "handler": find_all,
        "side_effecting": False,
    },
    "insertOne": {
        "handler": insert_one,
        "side_effecting": True,
    },
    "updateOne": {
        "handler": update_one,
        "side_effecting": True,
    },
    "deleteOne": {
        "handler": delete_one,
        "side_effecting": True,
    },
    "deleteAll": {
        "handler": delete_all,
        "side_effecting": True,
    },
    "deleteChecked": {
        "handler": delete_checked,
        "side_effecting": True,
    },
}
