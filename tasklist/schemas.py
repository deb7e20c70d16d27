"""
Data shapes for the task list procedures.
Uses plain dicts — no Pydantic models for route-level validation.
"""

from __future__ import annotations

from typing import Optional, TypedDict


class TaskDict(TypedDict):
    id: int
    title: str
    description: Optional[str]
    checked: bool


class DeleteCountDict(TypedDict):
    count: int
