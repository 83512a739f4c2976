"""Data models for Resumint drafts and collaborators."""

from resumint.models.api import ApiEnvelope
from resumint.models.draft import (
    CoverLetterDraft,
    Draft,
    DraftKind,
    InterviewDraft,
    PersonalInfo,
    ResumeDraft,
)
from resumint.models.generation import GeneratedText, TokenUsage
from resumint.models.publication import Publication, PublicationStatus, PublishResult
from resumint.models.sections import Section, SectionKind, SectionUpdate, build_update
from resumint.models.user import User

__all__ = [
    "ApiEnvelope",
    "CoverLetterDraft",
    "Draft",
    "DraftKind",
    "GeneratedText",
    "InterviewDraft",
    "PersonalInfo",
    "Publication",
    "PublicationStatus",
    "PublishResult",
    "ResumeDraft",
    "Section",
    "SectionKind",
    "SectionUpdate",
    "TokenUsage",
    "User",
    "build_update",
]
