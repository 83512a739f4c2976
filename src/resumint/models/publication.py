"""Portfolio publication state of a resume."""

from __future__ import annotations

from datetime import datetime

from pydantic import Field

from resumint.models.draft import WireModel


class SeoMetadata(WireModel):
    title: str = ""
    description: str = ""
    keywords: list[str] = Field(default_factory=list)
    og_image: str | None = None


class Publication(WireModel):
    is_published: bool = False
    subdomain: str | None = None
    is_password_protected: bool = False
    published_at: datetime | None = None
    seo_metadata: SeoMetadata = Field(default_factory=SeoMetadata)


class PublicationStatus(WireModel):
    publication: Publication | None = None
    suggested_subdomain: str = ""


class PublishResult(WireModel):
    publication: Publication
    url: str = ""  # "<subdomain>.<domain>"
