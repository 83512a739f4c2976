"""Usage logging data models."""

from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import BaseModel, Field


class UsageLog(BaseModel):
    """Single AI call made on behalf of a user."""

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    user_id: str = "anonymous"
    draft_id: str | None = None
    timestamp: datetime = Field(default_factory=datetime.now)
    operation: str  # "summary_generation" | "cover_letter_generation"
    model: str
    input_tokens: int = 0
    output_tokens: int = 0
    estimated_cost_usd: float = 0.0
    elapsed_seconds: float = 0.0
    success: bool = True
    error_message: str | None = None

    @property
    def total_tokens(self) -> int:
        return self.input_tokens + self.output_tokens
