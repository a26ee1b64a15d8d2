from __future__ import annotations

from pydantic import BaseModel, Field

MAX_RESUME_CHARS = 10000
MAX_JOB_TITLE_CHARS = 100
MAX_JOB_DESCRIPTION_CHARS = 2000


class AnalyzeRequest(BaseModel):
    resume_text: str = Field(default="", max_length=MAX_RESUME_CHARS)
    job_title: str = Field(default="", max_length=MAX_JOB_TITLE_CHARS)
    job_description: str = Field(default="", max_length=MAX_JOB_DESCRIPTION_CHARS)
    include_composite: bool = True
