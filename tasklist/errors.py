"""
Typed failures surfaced by the task list procedures.
"""

from __future__ import annotations


class TaskListError(Exception):
    status_code = 500
    code = "INTERNAL_ERROR"

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class InvalidInput(TaskListError):
    """Payload failed shape validation; nothing reached the store."""

    status_code = 400
    code = "INVALID_INPUT"


class NotFound(TaskListError):
    status_code = 404
    code = "NOT_FOUND"


class StoreUnavailable(TaskListError):
    status_code = 503
    code = "STORE_UNAVAILABLE"


ERRORS_BY_CODE: dict[str, type[TaskListError]] = {
    InvalidInput.code: InvalidInput,
    NotFound.code: NotFound,
    StoreUnavailable.code: StoreUnavailable,
}


class ProcedureError(TaskListError):
    """Any other error envelope returned by the service (bad request, unknown op, internal)."""

    def __init__(self, code: str, message: str, status_code: int = 500):
        self.code = code
        self.status_code = status_code
        super().__init__(message)


def error_from_envelope(error: dict, status_code: int) -> TaskListError:
    code = str(error.get("code") or "INTERNAL_ERROR")
    message = str(error.get("message") or "Unknown error")
    cls = ERRORS_BY_CODE.get(code)
    if cls is None:
        return ProcedureError(code, message, status_code)
    return cls(message)
