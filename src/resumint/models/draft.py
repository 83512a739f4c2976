"""Pydantic models for drafts as stored by the Persistence API.

Field names are snake_case in Python and camelCase on the wire.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class WireModel(BaseModel):
    # Unknown keys are kept so a full-document PUT never drops server fields.
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")


# --- Resume sections ---


class Location(WireModel):
    city: str = ""
    state: str = ""
    country: str = ""


class PersonalInfo(WireModel):
    first_name: str = ""
    last_name: str = ""
    email: str = ""
    phone: str = ""
    location: Location | str = Field(default_factory=Location)
    linkedin: str = ""
    website: str = ""
    github: str = ""
    profile_photo: str = ""


class Achievement(WireModel):
    description: str = ""
    impact: str = ""


class WorkHistoryItem(WireModel):
    id: str | None = Field(default=None, alias="_id")
    job_title: str = ""
    company_name: str = ""
    company_logo: str | None = None
    company_domain: str | None = None
    start_date: str | None = None
    end_date: str | None = None
    is_current_job: bool = False
    responsibilities: list[str] = Field(default_factory=list)
    achievements: list[Achievement] = Field(default_factory=list)
    technologies: list[str] = Field(default_factory=list)
    location: str = ""


class EducationItem(WireModel):
    id: str | None = Field(default=None, alias="_id")
    degree: str = ""
    degree_level: str = ""
    institution: str = ""
    field_of_study: str = ""
    location: str = ""
    graduation_date: str | None = None
    gpa: str | float | None = None  # the API stores a number, older drafts a string
    honors: list[str] | str = Field(default_factory=list)
    relevant_coursework: list[str] = Field(default_factory=list)


class CertificationItem(WireModel):
    id: str | None = Field(default=None, alias="_id")
    name: str = ""
    issuer: str = ""
    date_earned: str | None = None
    expiration_date: str | None = None
    credential_id: str = ""
    verification_url: str = ""


class SkillItem(WireModel):
    id: str | None = Field(default=None, alias="_id")
    skill_name: str
    category: str = "Technical"  # usually Technical, Soft, Language or Other


class ProjectItem(WireModel):
    id: str | None = Field(default=None, alias="_id")
    name: str = ""
    role: str = ""
    start_date: str | None = None
    end_date: str | None = None
    description: str = ""
    technologies: list[str] = Field(default_factory=list)
    outcome: str = ""
    url: str = ""
    github: str = ""


class AchievementItem(WireModel):
    id: str | None = Field(default=None, alias="_id")
    title: str = ""
    issuer: str = ""
    date: str | None = None
    description: str = ""


class LanguageEntry(WireModel):
    language: str
    proficiency: Literal["Basic", "Conversational", "Fluent", "Native"] = "Conversational"


class VolunteerEntry(WireModel):
    organization: str = ""
    role: str = ""
    start_date: str | None = None
    end_date: str | None = None
    description: str = ""


class PublicationEntry(WireModel):
    title: str = ""
    publisher: str = ""
    date: str | None = None
    url: str = ""


class OptionalSections(WireModel):
    languages: list[LanguageEntry] = Field(default_factory=list)
    volunteer_work: list[VolunteerEntry] = Field(default_factory=list)
    publications: list[PublicationEntry] = Field(default_factory=list)
    hobbies: list[str] = Field(default_factory=list)


# --- Cover letter / interview sections ---


class CoverLetterAnalysis(WireModel):
    skills_match: float = Field(default=0, ge=0, le=10)
    experience_relevance: float = Field(default=0, ge=0, le=10)
    education_fit: float = Field(default=0, ge=0, le=10)
    overall_strengths: list[str] = Field(default_factory=list)
    areas_for_improvement: list[str] = Field(default_factory=list)
    recommendations: list[str] = Field(default_factory=list)


class QuestionAsked(WireModel):
    question: str = ""
    answer: str = ""
    timestamp: str | None = None


class SessionData(WireModel):
    start_time: str | None = None
    end_time: str | None = None
    duration: int = 0  # seconds
    transcript: str = ""
    audio_recording_url: str | None = None
    current_question_index: int = 0
    questions_asked: list[QuestionAsked] = Field(default_factory=list)


# --- Documents ---


class Draft(WireModel):
    """Fields shared by every editable document."""

    id: str | None = Field(default=None, alias="_id")
    user_id: str | None = None
    title: str = ""
    is_draft: bool = True
    last_saved: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def to_wire(self) -> dict[str, Any]:
        """Full JSON document as sent to the Persistence API."""
        return self.model_dump(by_alias=True, mode="json")


class ResumeDraft(Draft):
    title: str = "My Resume"
    personal_info: PersonalInfo = Field(default_factory=PersonalInfo)
    work_history: list[WorkHistoryItem] = Field(default_factory=list)
    education: list[EducationItem] = Field(default_factory=list)
    certifications: list[CertificationItem] = Field(default_factory=list)
    skills: list[SkillItem] = Field(default_factory=list)
    projects: list[ProjectItem] = Field(default_factory=list)
    other_achievements: list[AchievementItem] = Field(default_factory=list)
    summary: str = ""
    optional_sections: OptionalSections = Field(default_factory=OptionalSections)
    template_id: str = "default"
    creation_method: Literal["scratch", "pdf_upload"] = "scratch"


class CoverLetterDraft(Draft):
    resume_id: Any = None  # id string, or {_id, title} when populated
    job_description: str = ""
    generated_content: str = ""
    fit_score: float = Field(default=0, ge=0, le=10)
    analysis: CoverLetterAnalysis = Field(default_factory=CoverLetterAnalysis)
    is_draft: bool = False


class InterviewDraft(Draft):
    resume_id: Any = None
    job_description: str = ""
    questions: list[str] = Field(default_factory=list)
    status: Literal["setup", "ready", "in_progress", "completed", "cancelled"] = "setup"
    session_data: SessionData = Field(default_factory=SessionData)


class DraftKind(str, Enum):
    RESUME = "resume"
    COVER_LETTER = "cover_letter"
    MOCK_INTERVIEW = "mock_interview"

    @property
    def collection(self) -> str:
        return _KIND_META[self][0]

    @property
    def envelope_key(self) -> str:
        """Key wrapping a single document inside the response ``data``."""
        return _KIND_META[self][1]

    @property
    def list_key(self) -> str:
        return _KIND_META[self][2]

    @property
    def model(self) -> type[Draft]:
        return _KIND_META[self][3]


_KIND_META: dict[DraftKind, tuple[str, str, str, type[Draft]]] = {
    DraftKind.RESUME: ("/resumes", "resume", "resumes", ResumeDraft),
    DraftKind.COVER_LETTER: ("/cover-letters", "coverLetter", "coverLetters", CoverLetterDraft),
    DraftKind.MOCK_INTERVIEW: (
        "/mock-interviews", "mockInterview", "mockInterviews", InterviewDraft,
    ),
}
