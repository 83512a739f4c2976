"""Resume builder wizard: step order, per-step validation and navigation."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable

from resumint.drafts.manager import DraftManager
from resumint.errors import ValidationError
from resumint.models.draft import ResumeDraft

logger = logging.getLogger(__name__)


def _require_personal_info(draft: ResumeDraft) -> list[str]:
    info = draft.personal_info
    missing = []
    if not info.first_name.strip():
        missing.append("First name is required.")
    if not info.last_name.strip():
        missing.append("Last name is required.")
    if not info.email.strip():
        missing.append("Email is required.")
    return missing


def _require_work_history(draft: ResumeDraft) -> list[str]:
    if any(w.job_title.strip() or w.company_name.strip() for w in draft.work_history):
        return []
    return ["At least one work experience entry is required."]


def _require_education(draft: ResumeDraft) -> list[str]:
    if any(e.institution.strip() for e in draft.education):
        return []
    return ["At least one education entry is required."]


@dataclass(frozen=True)
class Step:
    id: str
    label: str
    validate: Callable[[ResumeDraft], list[str]] | None = None


RESUME_STEPS: tuple[Step, ...] = (
    Step("file-upload", "PDF Upload"),
    Step("personal-info", "Personal Information", _require_personal_info),
    Step("work-history", "Work History", _require_work_history),
    Step("education", "Education", _require_education),
    Step("skills", "Skills"),
    Step("projects", "Projects"),
    Step("summary", "Summary"),
    Step("additional-sections", "Additional Sections"),
    Step("review", "Review"),
    Step("publish", "Publish"),
)


class ResumeWizard:
    """Moves through the resume steps, saving on every navigation."""

    def __init__(
        self,
        manager: DraftManager,
        steps: tuple[Step, ...] = RESUME_STEPS,
        current: str | None = None,
    ):
        self.manager = manager
        self.steps = steps
        self._index = self._index_of(current) if current else 0

    def _index_of(self, step_id: str) -> int:
        for i, step in enumerate(self.steps):
            if step.id == step_id:
                return i
        raise ValueError(f"Unknown step: {step_id!r}")

    @property
    def current(self) -> Step:
        return self.steps[self._index]

    def path(self, step: Step | None = None) -> str:
        step = step or self.current
        return f"/resume-builder/{self.manager.draft_id}/steps/{step.id}"

    def validate_current(self) -> None:
        """Raise ValidationError if the current step's required fields are missing."""
        draft = self.manager.draft
        if self.current.validate is None or not isinstance(draft, ResumeDraft):
            return
        problems = self.current.validate(draft)
        if problems:
            raise ValidationError(" ".join(problems))

    async def next(self) -> Step:
        """Validate, save and advance. Validation failures block; save failures don't."""
        self.validate_current()
        return await self._go(min(self._index + 1, len(self.steps) - 1))

    async def back(self) -> Step:
        return await self._go(max(self._index - 1, 0))

    async def go_to(self, step_id: str) -> Step:
        """Jump to any step from the sidebar. Skips validation."""
        return await self._go(self._index_of(step_id))

    async def _go(self, index: int) -> Step:
        if index == self._index:
            return self.current
        saved = await self.manager.flush()
        if not saved:
            logger.info("Navigating with unsaved changes: %s", self.manager.status_text)
        self._index = index
        return self.current
