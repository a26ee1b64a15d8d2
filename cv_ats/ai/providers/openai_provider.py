from __future__ import annotations

import json
import logging
import re
import time
from typing import Any, Optional

from openai import OpenAI, OpenAIError

from cv_ats.ai.types import (
    CompletenessInsight,
    InsightProviderError,
    InsightRequest,
    KeywordInsight,
)

logger = logging.getLogger(__name__)

MAX_DOCUMENT_CHARS = 30000
MAX_JOB_DESCRIPTION_CHARS = 2000

_SENTENCE_END = re.compile(r"(?<=[.!?])\s+")

KEYWORD_SYSTEM_PROMPT = (
    "You are a recruiter screening CVs for an applicant tracking system. "
    "Compare the CV with the target job and judge how well its keywords, skills and "
    "experience match. Reply with a JSON object only: "
    '{"score": <int 0-100>, "issues": [<string>], "recommendations": [<string>]}. '
    "Cite concrete missing keywords in the issues. Answer in the language of the CV."
)

COMPLETENESS_SYSTEM_PROMPT = (
    "You are a recruiter who reviews CVs for completeness, spelling and grammar. "
    "Check for contact details, a specific professional summary, experience, education "
    "and skills. Treat stock phrases such as 'hard worker' as a weak summary. "
    "Reply with a JSON object only: "
    '{"score": <int 0-100>, "spelling_score": <int 0-100>, "grammar_score": <int 0-100>, '
    '"missing_elements": [<string>], "issues": [<string>], "recommendations": [<string>]}. '
    "Answer in the language of the CV."
)


def truncate_document(text: str, limit: int = MAX_DOCUMENT_CHARS) -> str:
    """Cut *text* to at most *limit* chars, ending on a sentence boundary where one exists."""
    if len(text) <= limit:
        return text
    kept: list[str] = []
    used = 0
    for sentence in _SENTENCE_END.split(text):
        extra = len(sentence) + (1 if kept else 0)
        if used + extra > limit - 3:
            break
        kept.append(sentence)
        used += extra
    if not kept:
        return text[: limit - 3] + "..."
    return " ".join(kept) + "..."


def _user_prompt(request: InsightRequest) -> str:
    job_title = request.job_title.strip() or "not specified"
    job_description = request.job_description.strip()[:MAX_JOB_DESCRIPTION_CHARS] or "not specified"
    return (
        f"Target job title: {job_title}\n"
        f"Job description: {job_description}\n\n"
        f"CV:\n{truncate_document(request.document_text)}"
    )


class OpenAIInsightProvider:
    def __init__(
        self,
        model: str,
        api_key: str,
        base_url: Optional[str] = None,
        timeout_s: float = 15.0,
        max_retries: int = 1,
        temperature: float = 0.2,
    ):
        if not api_key:
            raise RuntimeError("OPENAI_API_KEY is missing")
        self._model = model
        self._temperature = temperature
        self._client = OpenAI(
            api_key=api_key,
            base_url=base_url or None,
            timeout=timeout_s,
            max_retries=max_retries,
        )

    def _json_completion(self, *, system_prompt: str, user_prompt: str, kind: str) -> dict[str, Any]:
        started = time.perf_counter()
        try:
            response = self._client.chat.completions.create(
                model=self._model,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_prompt},
                ],
                temperature=self._temperature,
                response_format={"type": "json_object"},
                max_tokens=900,
            )
        except OpenAIError as exc:
            raise InsightProviderError(f"{kind} request failed: {exc}", code="llm_request_failed") from exc

        content = response.choices[0].message.content if response.choices else ""
        latency_ms = int((time.perf_counter() - started) * 1000)
        if not content:
            raise InsightProviderError(f"{kind} response was empty", code="empty_response")
        try:
            parsed = json.loads(content)
        except json.JSONDecodeError as exc:
            raise InsightProviderError(f"{kind} response is not JSON", code="invalid_json") from exc
        if not isinstance(parsed, dict):
            raise InsightProviderError(f"{kind} response is not a JSON object", code="invalid_json")

        logger.info("ai_insight_received kind=%s model=%s latency_ms=%s", kind, self._model, latency_ms)
        return parsed

    def keyword_insight(self, request: InsightRequest) -> KeywordInsight:
        payload = self._json_completion(
            system_prompt=KEYWORD_SYSTEM_PROMPT,
            user_prompt=_user_prompt(request),
            kind="keywords",
        )
        return KeywordInsight.model_validate(payload)

    def completeness_insight(self, request: InsightRequest) -> CompletenessInsight:
        payload = self._json_completion(
            system_prompt=COMPLETENESS_SYSTEM_PROMPT,
            user_prompt=_user_prompt(request),
            kind="completeness",
        )
        return CompletenessInsight.model_validate(payload)
