"""Validation and normalization of parsed candidate records."""

from __future__ import annotations

from candidate_ingest.models.candidate import (
    CandidateAnalysis,
    ExperienceLevel,
    ParsedRecord,
    StructuredCandidate,
)

SCORE_MIN = 0
SCORE_MAX = 100
DEFAULT_NAME = "Unknown"
DEFAULT_POSITION = "Not specified"
DEFAULT_RECOMMENDATION = "No analysis available"


def clamp(value: int, low: int = SCORE_MIN, high: int = SCORE_MAX) -> int:
    return max(low, min(high, value))


def _blank(value: str | None) -> bool:
    return value is None or not value.strip()


def validate_record(record: ParsedRecord) -> list[str]:
    """Return advisory warnings for a parsed record. Never raises."""
    warnings: list[str] = []
    if _blank(record.name):
        warnings.append("Name is required")
    if _blank(record.email):
        warnings.append("Email is required")
    if _blank(record.position):
        warnings.append("Position is required")
    if record.score is None or not SCORE_MIN <= record.score <= SCORE_MAX:
        warnings.append("Score must be between 0 and 100")
    if not record.skills:
        warnings.append("At least one skill is required")
    return warnings


def normalize_analysis(analysis: CandidateAnalysis | None) -> CandidateAnalysis:
    if analysis is None:
        return CandidateAnalysis(recommendation=DEFAULT_RECOMMENDATION)
    return CandidateAnalysis(
        skills_match=clamp(analysis.skills_match),
        experience_level=ExperienceLevel.coerce(analysis.experience_level),
        strengths=list(analysis.strengths),
        weaknesses=list(analysis.weaknesses),
        recommendation=analysis.recommendation.strip() or DEFAULT_RECOMMENDATION,
        key_highlights=list(analysis.key_highlights),
    )


def normalize_record(record: ParsedRecord, file_name: str) -> StructuredCandidate:
    """Substitute defaults and clamp bounds so every field is populated."""
    return StructuredCandidate(
        name=DEFAULT_NAME if _blank(record.name) else record.name.strip(),
        email="" if _blank(record.email) else record.email.strip(),
        phone=None if _blank(record.phone) else record.phone.strip(),
        position=DEFAULT_POSITION if _blank(record.position) else record.position.strip(),
        experience=max(0, record.experience or 0),
        score=clamp(record.score or 0),
        summary=(
            f"Candidate from {file_name}" if _blank(record.summary) else record.summary.strip()
        ),
        skills=list(record.skills or []),
        education=list(record.education or []),
        work_experience=list(record.work_experience or []),
        analysis=normalize_analysis(record.analysis),
    )


def normalize_with_warnings(
    record: ParsedRecord, file_name: str
) -> tuple[StructuredCandidate, list[str]]:
    """Normalize a record and collect its advisory validation warnings."""
    return normalize_record(record, file_name), validate_record(record)
