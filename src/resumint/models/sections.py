"""Typed section updates.

Every draft kind declares its patchable sections. A patch is validated
against the section's own schema when the ``SectionUpdate`` is built, so
applying one to a draft cannot fail.

- object sections merge the fields present in the patch (last write wins)
- list and scalar sections are replaced by the patch value
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

import pydantic
from pydantic import BaseModel, TypeAdapter

from resumint.errors import ValidationError
from resumint.models.draft import (
    AchievementItem,
    CertificationItem,
    CoverLetterAnalysis,
    CoverLetterDraft,
    Draft,
    EducationItem,
    InterviewDraft,
    OptionalSections,
    PersonalInfo,
    ProjectItem,
    ResumeDraft,
    SessionData,
    SkillItem,
    WorkHistoryItem,
)


class SectionKind(str, Enum):
    OBJECT = "object"
    LIST = "list"
    SCALAR = "scalar"


@dataclass(frozen=True)
class Section:
    """A named, independently patchable part of a draft."""

    name: str  # wire name, e.g. "personalInfo"
    attr: str  # model attribute, e.g. "personal_info"
    kind: SectionKind
    schema: Any  # BaseModel subclass for OBJECT, a type otherwise

    def validate(self, patch: Any) -> Any:
        """Return the validated patch value, raising ValidationError if malformed."""
        try:
            if self.kind is SectionKind.OBJECT:
                return self._validate_object(patch)
            return TypeAdapter(self.schema).validate_python(patch)
        except pydantic.ValidationError as exc:
            raise ValidationError(f"Invalid patch for section {self.name!r}: {exc}") from exc

    def _validate_object(self, patch: Any) -> BaseModel:
        if isinstance(patch, self.schema):
            return patch
        if not isinstance(patch, dict):
            raise ValidationError(
                f"Section {self.name!r} expects a mapping, got {type(patch).__name__}"
            )
        known: set[str] = set()
        for attr, info in self.schema.model_fields.items():
            known.add(attr)
            if info.alias:
                known.add(info.alias)
        unknown = sorted(set(patch) - known)
        if unknown:
            raise ValidationError(
                f"Unknown field(s) for section {self.name!r}: {', '.join(unknown)}"
            )
        return self.schema.model_validate(patch)


@dataclass(frozen=True)
class SectionUpdate:
    """A validated patch tagged with the section it targets."""

    section: Section
    value: Any

    def apply(self, draft: Draft) -> Draft:
        """Return a copy of ``draft`` with this update merged in."""
        if self.section.kind is SectionKind.OBJECT:
            current = getattr(draft, self.section.attr)
            changes = {name: getattr(self.value, name) for name in self.value.model_fields_set}
            new_value = current.model_copy(update=changes)
        else:
            new_value = self.value
        return draft.model_copy(update={self.section.attr: new_value})


def _sections(*items: Section) -> dict[str, Section]:
    return {s.name: s for s in items}


SECTIONS: dict[type[Draft], dict[str, Section]] = {
    ResumeDraft: _sections(
        Section("personalInfo", "personal_info", SectionKind.OBJECT, PersonalInfo),
        Section("workHistory", "work_history", SectionKind.LIST, list[WorkHistoryItem]),
        Section("education", "education", SectionKind.LIST, list[EducationItem]),
        Section("certifications", "certifications", SectionKind.LIST, list[CertificationItem]),
        Section("skills", "skills", SectionKind.LIST, list[SkillItem]),
        Section("projects", "projects", SectionKind.LIST, list[ProjectItem]),
        Section("otherAchievements", "other_achievements", SectionKind.LIST, list[AchievementItem]),
        Section("summary", "summary", SectionKind.SCALAR, str),
        Section("optionalSections", "optional_sections", SectionKind.OBJECT, OptionalSections),
        Section("title", "title", SectionKind.SCALAR, str),
    ),
    CoverLetterDraft: _sections(
        Section("title", "title", SectionKind.SCALAR, str),
        Section("jobDescription", "job_description", SectionKind.SCALAR, str),
        Section("generatedContent", "generated_content", SectionKind.SCALAR, str),
        Section("analysis", "analysis", SectionKind.OBJECT, CoverLetterAnalysis),
    ),
    InterviewDraft: _sections(
        Section("title", "title", SectionKind.SCALAR, str),
        Section("jobDescription", "job_description", SectionKind.SCALAR, str),
        Section("questions", "questions", SectionKind.LIST, list[str]),
        Section("sessionData", "session_data", SectionKind.OBJECT, SessionData),
    ),
}


def get_section(draft_cls: type[Draft], name: str) -> Section:
    """Look up a section by wire name or attribute name."""
    sections = SECTIONS.get(draft_cls, {})
    if name in sections:
        return sections[name]
    for section in sections.values():
        if section.attr == name:
            return section
    raise ValidationError(f"{draft_cls.__name__} has no section {name!r}")


def build_update(draft_cls: type[Draft], name: str, patch: Any) -> SectionUpdate:
    """Validate ``patch`` for the named section and tag it."""
    section = get_section(draft_cls, name)
    return SectionUpdate(section=section, value=section.validate(patch))
