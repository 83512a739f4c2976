"""AI Text Service: professional summaries and cover letters via Claude."""

from __future__ import annotations

import logging
import time

from resumint.clients.llm_client import DEFAULT_MODEL, LLMClient, LLMResponse
from resumint.errors import RemoteServiceError, ValidationError
from resumint.logging.cost_calculator import calculate_cost
from resumint.logging.models import UsageLog
from resumint.logging.usage_store import UsageStore
from resumint.models.draft import ResumeDraft
from resumint.models.generation import GeneratedText, TokenUsage

logger = logging.getLogger(__name__)

SUMMARY_MIN_CHARS = 50
SUMMARY_MAX_CHARS = 450

SUMMARY_SYSTEM_PROMPT = """You are an expert resume writer. Generate a professional summary that is EXACTLY 2-3 sentences and MUST be under 400 characters total.

STRICT REQUIREMENTS:
- Maximum 400 characters (including spaces and punctuation)
- Exactly 2-3 sentences
- Start with job title and years of experience
- Include 1 key achievement with a metric
- Use action verbs and relevant keywords

Return ONLY the summary text, nothing else."""

COVER_LETTER_SYSTEM_PROMPT = """You are an expert career coach writing tailored cover letters.
Write a concise, specific cover letter (3-4 short paragraphs) addressed to the hiring team.
Only use facts from the candidate context; never invent employers, titles or metrics.
Return ONLY the cover letter text, nothing else."""


def build_resume_context(draft: ResumeDraft | None) -> str:
    """Summarize the parts of a resume that help the model personalize output."""
    if draft is None:
        return ""
    parts: list[str] = []
    info = draft.personal_info
    if info.first_name and info.last_name:
        parts.append(f"Name: {info.first_name} {info.last_name}")

    if draft.work_history:
        recent = draft.work_history[0]
        parts.append(f"Current/Recent Role: {recent.job_title} at {recent.company_name}")
        if recent.responsibilities:
            parts.append(f"Key Responsibilities: {', '.join(recent.responsibilities[:3])}")
        if recent.achievements:
            achievements = ", ".join(a.description for a in recent.achievements[:2])
            parts.append(f"Key Achievements: {achievements}")

    if draft.skills:
        parts.append(f"Skills: {', '.join(s.skill_name for s in draft.skills[:8])}")

    if draft.education:
        edu = draft.education[0]
        degree = edu.degree_level or edu.degree
        parts.append(f"Education: {degree} in {edu.field_of_study} from {edu.institution}")

    if not parts:
        return ""
    return "\n\nExisting resume context:\n" + "\n".join(parts)


class AITextService:
    """Generates draft text and records token usage for each call."""

    def __init__(
        self,
        llm: LLMClient,
        *,
        model: str = DEFAULT_MODEL,
        summary_max_tokens: int = 120,
        cover_letter_max_tokens: int = 1024,
        usage_store: UsageStore | None = None,
        user_id: str = "anonymous",
    ):
        self.llm = llm
        self.model = model
        self.summary_max_tokens = summary_max_tokens
        self.cover_letter_max_tokens = cover_letter_max_tokens
        self.usage_store = usage_store
        self.user_id = user_id

    async def generate_summary(
        self, keywords: str, draft: ResumeDraft | None = None
    ) -> GeneratedText:
        """Write a 2-3 sentence professional summary from keywords."""
        if not keywords or not keywords.strip():
            raise ValidationError("Keywords are required")

        prompt = (
            f'Generate a professional resume summary based on these keywords: "{keywords.strip()}"'
            f"{build_resume_context(draft)}\n\n"
            "Create a compelling 2-3 sentence professional summary that incorporates these "
            "keywords naturally and showcases the candidate's value proposition."
        )
        response = await self._generate(
            "summary_generation", prompt, SUMMARY_SYSTEM_PROMPT, self.summary_max_tokens, draft
        )
        text = response.text.strip()
        if len(text) < SUMMARY_MIN_CHARS:
            raise RemoteServiceError("Generated summary is too short or empty")
        if len(text) > SUMMARY_MAX_CHARS:
            raise RemoteServiceError("Generated summary is too long")
        return self._result(text, response)

    async def generate_cover_letter(
        self, job_description: str, draft: ResumeDraft | None = None
    ) -> GeneratedText:
        """Write a cover letter for a job description."""
        if not job_description or not job_description.strip():
            raise ValidationError("Job description is required")

        prompt = (
            f"Job description:\n{job_description.strip()}"
            f"{build_resume_context(draft)}\n\n"
            "Write the cover letter for this candidate."
        )
        response = await self._generate(
            "cover_letter_generation",
            prompt,
            COVER_LETTER_SYSTEM_PROMPT,
            self.cover_letter_max_tokens,
            draft,
        )
        text = response.text.strip()
        if not text:
            raise RemoteServiceError("Generated cover letter is empty")
        return self._result(text, response)

    async def _generate(
        self,
        operation: str,
        prompt: str,
        system: str,
        max_tokens: int,
        draft: ResumeDraft | None,
    ) -> LLMResponse:
        start = time.monotonic()
        draft_id = draft.id if draft is not None else None
        try:
            response = await self.llm.generate(
                prompt=prompt, system=system, model=self.model, max_tokens=max_tokens
            )
        except RemoteServiceError as exc:
            self._record(UsageLog(
                user_id=self.user_id,
                draft_id=draft_id,
                operation=operation,
                model=self.model,
                elapsed_seconds=time.monotonic() - start,
                success=False,
                error_message=str(exc),
            ))
            raise
        self._record(UsageLog(
            user_id=self.user_id,
            draft_id=draft_id,
            operation=operation,
            model=response.model,
            input_tokens=response.input_tokens,
            output_tokens=response.output_tokens,
            estimated_cost_usd=self._cost(response),
            elapsed_seconds=time.monotonic() - start,
        ))
        logger.info(
            "%s: %d input, %d output tokens",
            operation, response.input_tokens, response.output_tokens,
        )
        return response

    def _record(self, log: UsageLog) -> None:
        if self.usage_store is not None:
            self.usage_store.save_log(log)

    @staticmethod
    def _cost(response: LLMResponse) -> float:
        return calculate_cost([(response.model, response.input_tokens, response.output_tokens)])

    def _result(self, text: str, response: LLMResponse) -> GeneratedText:
        return GeneratedText(
            text=text,
            model=response.model,
            usage=TokenUsage(
                input_tokens=response.input_tokens,
                output_tokens=response.output_tokens,
                total_tokens=response.input_tokens + response.output_tokens,
                estimated_cost=self._cost(response),
            ),
        )
