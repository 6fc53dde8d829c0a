"""Data models for the candidate ingestion pipeline."""

from candidate_ingest.models.batch import (
    BatchItemOutcome,
    BatchReport,
    DocumentInput,
    ErrorKind,
    GroupReport,
)
from candidate_ingest.models.candidate import (
    CandidateAnalysis,
    Education,
    ExperienceLevel,
    ParsedRecord,
    StructuredCandidate,
    WorkExperience,
)

__all__ = [
    "BatchItemOutcome",
    "BatchReport",
    "CandidateAnalysis",
    "DocumentInput",
    "Education",
    "ErrorKind",
    "ExperienceLevel",
    "GroupReport",
    "ParsedRecord",
    "StructuredCandidate",
    "WorkExperience",
]
