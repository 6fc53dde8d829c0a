"""Pydantic models for parsed and normalized candidate records."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel


class ExperienceLevel(str, Enum):
    JUNIOR = "Junior"
    MID_LEVEL = "Mid-level"
    SENIOR = "Senior"
    EXPERT = "Expert"

    @classmethod
    def coerce(cls, value: object) -> ExperienceLevel:
        """Return the matching level, or Mid-level for anything unrecognized."""
        if isinstance(value, cls):
            return value
        for level in cls:
            if value == level.value:
                return level
        return cls.MID_LEVEL


class Education(BaseModel):
    degree: str = ""
    institution: str = ""
    year: int
    field: str | None = None


class WorkExperience(BaseModel):
    company: str = ""
    position: str = ""
    start_date: str = ""
    end_date: str = ""  # "Present" for current roles
    duration: str = ""  # e.g. "2 years 3 months"
    description: str = ""


class CandidateAnalysis(BaseModel):
    skills_match: int = 0  # 0-100
    experience_level: ExperienceLevel = ExperienceLevel.MID_LEVEL
    strengths: list[str] = []
    weaknesses: list[str] = []
    recommendation: str = ""
    key_highlights: list[str] = []


class ParsedRecord(BaseModel):
    """Raw parser output. Any field may be missing or out of range."""

    name: str | None = None
    email: str | None = None
    phone: str | None = None
    position: str | None = None
    experience: int | None = None
    score: int | None = None
    summary: str | None = None
    skills: list[str] | None = None
    education: list[Education] | None = None
    work_experience: list[WorkExperience] | None = None
    analysis: CandidateAnalysis | None = None


class StructuredCandidate(BaseModel):
    """Normalized candidate: every field populated, numbers within bounds."""

    name: str
    email: str
    phone: str | None
    position: str
    experience: int
    score: int
    summary: str
    skills: list[str]
    education: list[Education]
    work_experience: list[WorkExperience]
    analysis: CandidateAnalysis

    model_config = {"frozen": True}
