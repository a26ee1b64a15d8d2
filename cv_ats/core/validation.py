from __future__ import annotations

import re

from cv_ats.schemas.api import AnalyzeRequest

_INJECTION_PATTERNS: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"<script\b[^<]*(?:(?!</script>)<[^<]*)*</script>", re.IGNORECASE), "script tag"),
    (re.compile(r"<iframe\b", re.IGNORECASE), "iframe tag"),
    (re.compile(r"<object\b", re.IGNORECASE), "object tag"),
    (re.compile(r"<embed\b", re.IGNORECASE), "embed tag"),
    (re.compile(r"javascript:", re.IGNORECASE), "javascript protocol"),
    (re.compile(r"vbscript:", re.IGNORECASE), "vbscript protocol"),
    (re.compile(r"\bon(?:load|error|click|mouseover|focus|blur)\s*=", re.IGNORECASE), "inline event handler"),
)
_JOB_TITLE_FORBIDDEN = re.compile(r"[<>{}\[\]()'\"\\]")


class InputValidationError(ValueError):
    def __init__(self, message: str, *, field: str):
        super().__init__(message)
        self.field = field


def find_injection_pattern(text: str) -> str | None:
    for pattern, name in _INJECTION_PATTERNS:
        if pattern.search(text or ""):
            return name
    return None


def validate_analyze_request(payload: AnalyzeRequest) -> None:
    """Reject markup injection that length limits on the schema do not cover."""
    for field in ("resume_text", "job_title", "job_description"):
        matched = find_injection_pattern(getattr(payload, field))
        if matched:
            raise InputValidationError(
                f"{field} contains potentially malicious content ({matched})",
                field=field,
            )

    if _JOB_TITLE_FORBIDDEN.search(payload.job_title):
        raise InputValidationError("job_title contains invalid characters", field="job_title")
