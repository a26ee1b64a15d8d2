from __future__ import annotations

import re
from dataclasses import dataclass, field

from cv_ats.schemas.analysis import DocumentMetadata, SectionKind, SegmentedDocument

_LINE_SPLIT = re.compile(r"\r\n|\r|\n")
_HEADER_DECORATION = re.compile(r"^[\s#*=•·>\-–—|]+|[\s*=|]+$")

_EMAIL_RE = re.compile(r"\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b")
_PHONE_PATTERNS = (
    # 555-123-4567, (555) 123 4567, +1 555.123.4567
    re.compile(r"(?:\+?\d{1,3}[-.\s]?)?\(?\d{3}\)?[-.\s]?\d{3}[-.\s]?\d{4}\b"),
    # 0812-3456-7890, +62 812 3456 789
    re.compile(r"(?:\+62|62|0)\s?8\d{1,2}[-.\s]?\d{3,4}[-.\s]?\d{3,5}\b"),
    # +44 20 7946 0958, +49 30 123456
    re.compile(r"\+\d{1,3}(?:[-.\s]?\d{2,5}){2,4}\b"),
)
_LINKEDIN_RE = re.compile(r"linkedin\.com/in/", re.IGNORECASE)


def _header_rule(*alternatives: str) -> re.Pattern[str]:
    alts = "|".join(alternatives)
    return re.compile(rf"^(?:{alts})(?:\s*:\s*(?P<rest>.*))?$", re.IGNORECASE)


# Order matters: the first matching rule wins.
SECTION_RULES: tuple[tuple[re.Pattern[str], SectionKind], ...] = (
    (
        _header_rule(
            r"contact(?:\s+(?:info(?:rmation)?|details))?",
            r"personal\s+(?:info(?:rmation)?|details|data)",
            r"(?:informasi\s+)?kontak",
            r"data\s+(?:diri|pribadi)",
        ),
        "contact",
    ),
    (
        _header_rule(
            r"(?:professional\s+|career\s+|executive\s+)?(?:summary|profile|objective)",
            r"about(?:\s+me)?",
            r"ringkasan(?:\s+profesional)?",
            r"profil(?:\s+(?:singkat|profesional|diri))?",
            r"tentang\s+saya",
            r"tujuan\s+karir",
        ),
        "summary",
    ),
    (
        _header_rule(
            r"(?:work\s+|professional\s+|relevant\s+)?experiences?",
            r"work\s+history",
            r"employment(?:\s+history)?",
            r"career\s+history",
            r"pengalaman(?:\s+(?:kerja|profesional|organisasi))?",
            r"riwayat\s+pekerjaan",
        ),
        "experience",
    ),
    (
        _header_rule(
            r"education(?:al\s+background)?",
            r"academic(?:\s+background)?",
            r"qualifications",
            r"(?:riwayat\s+)?pendidikan",
        ),
        "education",
    ),
    (
        _header_rule(
            r"(?:technical\s+|core\s+|key\s+|professional\s+)?skills",
            r"(?:core\s+)?competenc(?:ies|e)",
            r"abilities",
            r"keahlian",
            r"keterampilan",
            r"kemampuan",
        ),
        "skills",
    ),
)


def split_lines(text: str) -> list[str]:
    """Non-empty, trimmed lines for any line-ending convention."""
    return [line.strip() for line in _LINE_SPLIT.split(text or "") if line.strip()]


def match_header(line: str) -> tuple[SectionKind, str] | None:
    """Return the section kind a header line opens and any inline content after a colon."""
    candidate = _HEADER_DECORATION.sub("", line)
    if not candidate:
        return None
    for pattern, kind in SECTION_RULES:
        matched = pattern.match(candidate)
        if matched:
            return kind, (matched.group("rest") or "").strip()
    return None


@dataclass
class _ScanState:
    current: SectionKind | None = None
    buffer: list[str] = field(default_factory=list)
    sections: dict[SectionKind, str] = field(default_factory=dict)

    def flush(self) -> None:
        if self.current is not None and self.buffer:
            joined = " ".join(self.buffer)
            existing = self.sections.get(self.current)
            # a repeated header extends the earlier section
            self.sections[self.current] = f"{existing} {joined}" if existing else joined
        self.buffer = []

    def switch(self, kind: SectionKind) -> None:
        self.flush()
        self.current = kind


def detect_contact_signals(text: str) -> tuple[bool, bool, bool]:
    has_email = bool(_EMAIL_RE.search(text))
    has_phone = any(pattern.search(text) for pattern in _PHONE_PATTERNS)
    has_linkedin = bool(_LINKEDIN_RE.search(text))
    return has_email, has_phone, has_linkedin


def segment(raw_text: str) -> SegmentedDocument:
    raw_text = raw_text or ""
    state = _ScanState()

    for line in split_lines(raw_text):
        header = match_header(line)
        if header is not None:
            kind, inline = header
            state.switch(kind)
            if inline:
                state.buffer.append(inline)
            continue
        if state.current is not None:
            state.buffer.append(line)
    state.flush()

    sections = {kind: value for kind, value in state.sections.items() if value}
    has_email, has_phone, has_linkedin = detect_contact_signals(raw_text)
    metadata = DocumentMetadata(
        word_count=len(raw_text.split()),
        has_email=has_email,
        has_phone=has_phone,
        has_linkedin=has_linkedin,
        section_count=len(sections),
    )
    return SegmentedDocument(raw_text=raw_text, sections=sections, metadata=metadata)
