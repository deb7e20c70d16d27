"""
FastAPI application for the task list procedures.
"""

from __future__ import annotations

import json
import logging
import uuid
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse

from .config import get_settings
from .router import handle_call, request_id_of
from .store import TaskStore

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Store (installed once at startup)
# ---------------------------------------------------------------------------
_store: Optional[TaskStore] = None


def set_store(store: Optional[TaskStore]) -> None:
    global _store
    _store = store


def get_store() -> Optional[TaskStore]:
    return _store


# ---------------------------------------------------------------------------
# Startup / shutdown
# ---------------------------------------------------------------------------

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    owned: Optional[TaskStore] = None
    if _store is None:
        settings = get_settings()
        owned = TaskStore(settings.database_url, echo=settings.sql_echo)
        set_store(owned)
    try:
        yield
    finally:
        if owned is not None:
            owned.close()
            set_store(None)


app = FastAPI(lifespan=lifespan)


def _error(
    status_code: int,
    code: str,
    message: str,
    headers: Optional[dict] = None,
    request_id: Optional[str] = None,
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "requestId": request_id or str(uuid.uuid4()),
            "state": "error",
            "error": {"code": code, "message": message},
        },
        headers=headers,
    )


# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------

@app.get("/call")
async def get_call_not_allowed() -> JSONResponse:
    return _error(405, "METHOD_NOT_ALLOWED", "Use POST /call to invoke operations", headers={"Allow": "POST"})


@app.post("/call")
async def call_endpoint(request: Request) -> JSONResponse:
    try:
        body = await request.body()
        envelope = json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError):
        return _error(400, "INVALID_REQUEST", "Invalid JSON in request body")

    store = get_store()
    if store is None:
        logger.error("POST /call received before the task store was configured")
        return _error(503, "STORE_UNAVAILABLE", "Task store is not configured", request_id=request_id_of(envelope))

    result = await run_in_threadpool(handle_call, envelope, store)
    return JSONResponse(status_code=result["status"], content=result["body"])
