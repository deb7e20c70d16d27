"""
Envelope dispatch for the task list procedures.
"""

from __future__ import annotations

import logging
import uuid
from typing import Any

from .errors import TaskListError
from .operations import OPERATIONS
from .store import TaskStore

logger = logging.getLogger(__name__)


def error_response(status: int, base: dict, code: str, message: str) -> dict:
    return {
        "status": status,
        "body": {
            **base,
            "state": "error",
            "error": {"code": code, "message": message},
        },
    }


def request_id_of(envelope: Any) -> str:
    """The caller's ctx.requestId when it sent one, else a fresh id."""
    ctx = envelope.get("ctx") if isinstance(envelope, dict) else None
    if isinstance(ctx, dict) and ctx.get("requestId"):
        return str(ctx["requestId"])
    return str(uuid.uuid4())


def handle_call(envelope: Any, store: TaskStore) -> dict:
    """
    Process a /call request envelope and return {"status": int, "body": dict}.

    Exactly one operation runs per envelope. Failures come back as error
    envelopes; nothing is retried here.
    """
    if not isinstance(envelope, dict):
        return error_response(
            400, {"requestId": str(uuid.uuid4())}, "INVALID_REQUEST", "Request body must be a JSON object"
        )

    request_id = request_id_of(envelope)
    base: dict[str, Any] = {"requestId": request_id}

    # Validate op is present and a string
    op = envelope.get("op")
    if not op or not isinstance(op, str):
        return error_response(400, base, "INVALID_REQUEST", "Missing or invalid 'op' field")

    # Look up operation
    operation = OPERATIONS.get(op)
    if operation is None:
        return error_response(400, base, "UNKNOWN_OP", f"Unknown operation: {op}")

    args = envelope.get("args")

    try:
        result = operation["handler"](args, store)
    except TaskListError as err:
        logger.info("op=%s requestId=%s failed code=%s: %s", op, request_id, err.code, err.message)
        return error_response(err.status_code, base, err.code, err.message)
    except Exception as err:
        logger.exception("op=%s requestId=%s raised unexpectedly", op, request_id)
        return error_response(500, base, "INTERNAL_ERROR", str(err) if str(err) else "Unknown error")

    if operation.get("side_effecting"):
        logger.info("op=%s requestId=%s complete", op, request_id)
    else:
        logger.debug("op=%s requestId=%s complete", op, request_id)

    return {
        "status": 200,
        "body": {**base, "state": "complete", "result": result},
    }
