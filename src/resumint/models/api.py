"""Persistence API response envelope."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class ApiEnvelope(BaseModel):
    success: bool
    data: dict[str, Any] = Field(default_factory=dict)
    message: str | None = None
