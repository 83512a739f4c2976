"""Authenticated user as returned by the auth endpoints."""

from __future__ import annotations

from pydantic import Field

from resumint.models.draft import WireModel


class User(WireModel):
    id: str = Field(alias="_id")
    email: str
    first_name: str = ""
    last_name: str = ""
    full_name: str = ""
    profile_picture: str | None = None
    is_email_verified: bool = False
    role: str = "user"

    @property
    def display_name(self) -> str:
        return self.full_name or f"{self.first_name} {self.last_name}".strip() or self.email
