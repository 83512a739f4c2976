"""CRUD wrapper around one draft collection of the Persistence API."""

from __future__ import annotations

import logging
from typing import Any, TypeVar

import pydantic
from pydantic import BaseModel
from pydantic.alias_generators import to_camel

from resumint.clients.api_client import ApiClient
from resumint.errors import ValidationError
from resumint.models.draft import Draft, DraftKind
from resumint.models.publication import Publication, PublicationStatus, PublishResult

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


def _validate(model: type[ModelT], document: Any) -> ModelT:
    try:
        return model.model_validate(document)
    except pydantic.ValidationError as exc:
        logger.warning("Unreadable %s from the API: %s", model.__name__, exc)
        raise ValidationError(f"Malformed {model.__name__} in API response: {exc}") from exc


class DraftsClient:
    """Persistence API for resumes, cover letters or mock interviews."""

    def __init__(self, api: ApiClient, kind: DraftKind = DraftKind.RESUME):
        self.api = api
        self.kind = kind

    def _path(self, draft_id: str | None = None, action: str | None = None) -> str:
        path = self.kind.collection
        if draft_id is not None:
            path = f"{path}/{draft_id}"
        if action is not None:
            path = f"{path}/{action}"
        return path

    def _parse(self, data: dict[str, Any]) -> Draft:
        return _validate(self.kind.model, data.get(self.kind.envelope_key, data))

    async def list(self) -> list[Draft]:
        data = await self.api.request("GET", self._path())
        return [_validate(self.kind.model, d) for d in data.get(self.kind.list_key, [])]

    async def get(self, draft_id: str) -> Draft:
        return self._parse(await self.api.request("GET", self._path(draft_id)))

    async def create(self, title: str, **fields: Any) -> Draft:
        """Create a draft. Extra fields are given in snake_case."""
        body = {"title": title, **{to_camel(k): v for k, v in fields.items()}}
        draft = self._parse(await self.api.request("POST", self._path(), json=body))
        logger.info("Created %s %s", self.kind.value, draft.id)
        return draft

    async def update(self, draft: Draft) -> None:
        """Replace the remote document with the full local draft.

        The echoed document is not parsed; the local draft stays authoritative.
        """
        if draft.id is None:
            raise ValueError("Cannot update a draft without an id")
        await self.api.request("PUT", self._path(draft.id), json=draft.to_wire())

    async def duplicate(self, draft_id: str) -> Draft:
        return self._parse(await self.api.request("POST", self._path(draft_id, "duplicate")))

    async def delete(self, draft_id: str) -> None:
        await self.api.request("DELETE", self._path(draft_id))
        logger.info("Deleted %s %s", self.kind.value, draft_id)

    # --- Resume-only endpoints ---

    def _require_resume(self, operation: str) -> None:
        if self.kind is not DraftKind.RESUME:
            raise ValueError(f"{operation} is only available for resumes")

    async def save_draft(self, draft: Draft) -> Draft:
        """Save without server-side validation, keeping incomplete entries."""
        self._require_resume("save_draft")
        if draft.id is None:
            raise ValueError("Cannot save a draft without an id")
        data = await self.api.request("PATCH", self._path(draft.id, "draft"), json=draft.to_wire())
        return self._parse(data)

    async def check_subdomain(self, draft_id: str, subdomain: str) -> bool:
        """True if no other resume is published under ``subdomain``."""
        self._require_resume("check_subdomain")
        data = await self.api.request("GET", self._path(draft_id, f"check-subdomain/{subdomain}"))
        return bool(data.get("available"))

    async def publication_status(self, draft_id: str) -> PublicationStatus:
        self._require_resume("publication_status")
        data = await self.api.request("GET", self._path(draft_id, "publication-status"))
        return _validate(PublicationStatus, data)

    async def publish(
        self,
        draft_id: str,
        subdomain: str,
        *,
        password: str | None = None,
        seo_metadata: dict[str, Any] | None = None,
    ) -> PublishResult:
        """Publish a resume as a portfolio at ``<subdomain>.<domain>``.

        A taken subdomain is rejected by the API (ValidationError).
        """
        self._require_resume("publish")
        body: dict[str, Any] = {
            "subdomain": subdomain,
            "isPasswordProtected": password is not None,
            "password": password,
            "seoMetadata": {to_camel(k): v for k, v in (seo_metadata or {}).items()},
        }
        data = await self.api.request("POST", self._path(draft_id, "publish"), json=body)
        result = _validate(PublishResult, data)
        logger.info("Published resume %s at %s", draft_id, result.url)
        return result

    async def update_publication(self, draft_id: str, **settings: Any) -> Publication:
        """Change subdomain, password or SEO metadata of a published resume."""
        self._require_resume("update_publication")
        body = {to_camel(k): v for k, v in settings.items()}
        data = await self.api.request(
            "PUT", self._path(draft_id, "publication-settings"), json=body
        )
        return _validate(Publication, data.get("publication", {}))

    async def unpublish(self, draft_id: str) -> None:
        self._require_resume("unpublish")
        await self.api.request("DELETE", self._path(draft_id, "unpublish"))
        logger.info("Unpublished resume %s", draft_id)
