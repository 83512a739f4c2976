"""Pydantic models for AI Text Service output."""

from __future__ import annotations

from resumint.models.draft import WireModel


class TokenUsage(WireModel):
    input_tokens: int
    output_tokens: int
    total_tokens: int
    estimated_cost: float  # USD


class GeneratedText(WireModel):
    text: str
    model: str
    usage: TokenUsage
