"""Tests for draft and user models."""

from __future__ import annotations

from datetime import datetime

import pytest
from pydantic import ValidationError

from resumint.models import (
    CoverLetterDraft,
    DraftKind,
    InterviewDraft,
    ResumeDraft,
    User,
)


class TestResumeDraft:
    def test_parses_wire_format(self, resume_draft):
        assert resume_draft.id == "r1"
        assert resume_draft.user_id == "u1"
        assert resume_draft.personal_info.email == "jo@example.com"
        assert resume_draft.personal_info.location.city == "Berlin"
        assert resume_draft.work_history[0].id == "w1"
        assert resume_draft.work_history[0].achievements[0].description == "Cut latency 40%"
        assert resume_draft.optional_sections.hobbies == ["chess"]
        assert isinstance(resume_draft.last_saved, datetime)

    def test_defaults(self):
        draft = ResumeDraft()
        assert draft.id is None
        assert draft.title == "My Resume"
        assert draft.is_draft is True
        assert draft.work_history == []
        assert draft.creation_method == "scratch"

    def test_location_may_be_plain_string(self):
        draft = ResumeDraft.model_validate({"personalInfo": {"location": "Berlin, DE"}})
        assert draft.personal_info.location == "Berlin, DE"

    def test_to_wire_uses_camel_case_and_keeps_extras(self, resume_draft):
        wire = resume_draft.to_wire()
        assert wire["_id"] == "r1"
        assert "personalInfo" in wire
        assert "personal_info" not in wire
        assert wire["workHistory"][0]["_id"] == "w1"
        assert wire["optionalSections"]["volunteerWork"] == []
        assert wire["completionPercentage"] == 40
        assert isinstance(wire["lastSaved"], str)

    def test_populate_by_name(self):
        draft = ResumeDraft(id="r9", summary="Hi")
        assert draft.to_wire()["_id"] == "r9"

    def test_skill_category_is_free_text(self):
        draft = ResumeDraft.model_validate(
            {"skills": [{"skillName": "Docker", "category": "Tools"}]}
        )
        assert draft.skills[0].category == "Tools"

    def test_skill_requires_name(self):
        with pytest.raises(ValidationError):
            ResumeDraft.model_validate({"skills": [{"category": "Technical"}]})

    def test_education_accepts_api_types(self):
        draft = ResumeDraft.model_validate(
            {"education": [{"degree": "BSc", "gpa": 3.8, "honors": "cum laude"}]}
        )
        assert draft.education[0].gpa == 3.8
        assert draft.education[0].honors == "cum laude"
        assert draft.to_wire()["education"][0]["gpa"] == 3.8

    def test_nested_unknown_fields_survive(self):
        draft = ResumeDraft.model_validate({
            "personalInfo": {"linkedIn": "in/jo"},
            "workHistory": [
                {"achievements": [{"description": "Cut latency", "metric": "40%"}]}
            ],
        })
        wire = draft.to_wire()
        assert wire["personalInfo"]["linkedIn"] == "in/jo"
        assert wire["workHistory"][0]["achievements"][0]["metric"] == "40%"


class TestOtherDrafts:
    def test_cover_letter_defaults(self):
        letter = CoverLetterDraft()
        assert letter.is_draft is False
        assert letter.analysis.skills_match == 0

    def test_cover_letter_score_bounds(self):
        with pytest.raises(ValidationError):
            CoverLetterDraft.model_validate({"analysis": {"skillsMatch": 11}})

    def test_interview_status(self):
        interview = InterviewDraft.model_validate(
            {"_id": "m1", "questions": ["Tell me about yourself"], "status": "ready"}
        )
        assert interview.status == "ready"
        assert interview.session_data.current_question_index == 0


class TestDraftKind:
    @pytest.mark.parametrize(
        "kind, collection, envelope_key, model",
        [
            (DraftKind.RESUME, "/resumes", "resume", ResumeDraft),
            (DraftKind.COVER_LETTER, "/cover-letters", "coverLetter", CoverLetterDraft),
            (DraftKind.MOCK_INTERVIEW, "/mock-interviews", "mockInterview", InterviewDraft),
        ],
    )
    def test_metadata(self, kind, collection, envelope_key, model):
        assert kind.collection == collection
        assert kind.envelope_key == envelope_key
        assert kind.model is model

    def test_from_value(self):
        assert DraftKind("cover_letter") is DraftKind.COVER_LETTER


class TestUser:
    def test_display_name(self):
        user = User.model_validate({"_id": "u1", "email": "jo@example.com", "firstName": "Jo"})
        assert user.display_name == "Jo"

    def test_display_name_falls_back_to_email(self):
        user = User.model_validate({"_id": "u1", "email": "jo@example.com"})
        assert user.display_name == "jo@example.com"
