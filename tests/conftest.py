"""Shared test fixtures."""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest

from resumint.clients.drafts_client import DraftsClient
from resumint.clients.llm_client import LLMClient, LLMResponse
from resumint.drafts.manager import DraftManager
from resumint.models.draft import DraftKind, ResumeDraft


@pytest.fixture
def resume_payload() -> dict:
    """A resume as the Persistence API returns it."""
    return {
        "_id": "r1",
        "userId": "u1",
        "title": "SWE Resume",
        "personalInfo": {
            "firstName": "",
            "lastName": "Doe",
            "email": "jo@example.com",
            "phone": "",
            "location": {"city": "Berlin", "state": "", "country": "DE"},
            "linkedin": "",
            "website": "",
            "github": "",
            "profilePhoto": "",
        },
        "workHistory": [
            {
                "_id": "w1",
                "jobTitle": "Backend Engineer",
                "companyName": "Acme",
                "startDate": "2021-03",
                "endDate": None,
                "isCurrentJob": True,
                "responsibilities": ["APIs", "Databases", "On-call", "Mentoring"],
                "achievements": [{"description": "Cut latency 40%", "impact": "p99"}],
                "technologies": ["Python"],
                "location": "Remote",
            }
        ],
        "education": [],
        "certifications": [],
        "skills": [{"_id": "s1", "skillName": "Python", "category": "Technical"}],
        "projects": [],
        "otherAchievements": [],
        "summary": "",
        "optionalSections": {
            "languages": [],
            "volunteerWork": [],
            "publications": [],
            "hobbies": ["chess"],
        },
        "isDraft": True,
        "lastSaved": "2025-01-02T10:00:00Z",
        "templateId": "default",
        "creationMethod": "scratch",
        "completionPercentage": 40,
    }


@pytest.fixture
def resume_draft(resume_payload) -> ResumeDraft:
    return ResumeDraft.model_validate(resume_payload)


@pytest.fixture
def drafts_client(resume_draft) -> DraftsClient:
    """Mock Persistence API for resumes."""
    client = AsyncMock(spec=DraftsClient)
    client.kind = DraftKind.RESUME
    client.get = AsyncMock(return_value=resume_draft)
    client.create = AsyncMock(
        side_effect=lambda title, **fields: ResumeDraft(id="new1", title=title)
    )
    client.update = AsyncMock(return_value=None)
    client.duplicate = AsyncMock(
        return_value=resume_draft.model_copy(update={"id": "r2", "title": "SWE Resume (Copy)"})
    )
    client.delete = AsyncMock(return_value=None)
    return client


@pytest.fixture
def manager(drafts_client) -> DraftManager:
    """Manager with autosave off; autosave tests build their own."""
    return DraftManager(drafts_client, autosave=False)


@pytest.fixture
def mock_llm_client() -> LLMClient:
    """Create a mock LLM client."""
    client = AsyncMock(spec=LLMClient)
    client.generate = AsyncMock(
        return_value=LLMResponse(
            text=(
                "Backend engineer with 5 years of experience building Python APIs. "
                "Cut p99 latency by 40% at Acme."
            ),
            model="claude-3-7-sonnet-20250219",
            input_tokens=100,
            output_tokens=50,
        )
    )
    return client
