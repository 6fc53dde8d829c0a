"""Shared test fixtures."""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest

from candidate_ingest.clients.llm_client import LLMClient
from candidate_ingest.models.batch import DocumentInput

SAMPLE_RESPONSE = """Sure! Here is the extracted data:

===CANDIDATE_DATA_START===
NAME: Jane Doe
EMAIL: jane.doe@example.com
PHONE: +1 555 0100
POSITION: Senior Backend Engineer
EXPERIENCE_YEARS: 7
SCORE: 86
SUMMARY: Backend engineer focused on distributed systems. Led payment platform migrations.

SKILLS_START:
Go
Rust
PostgreSQL
SKILLS_END:

EDUCATION_START:
DEGREE: BSc Computer Science | INSTITUTION: University of Toronto | YEAR: 2016 | FIELD: Computer Science
EDUCATION_END:

WORK_START:
COMPANY: Acme Payments | POSITION: Senior Engineer | START: 2020-03 | END: Present | DURATION: 4 years | DESC: Owned the ledger service
COMPANY: Initech | POSITION: Engineer | START: 2016-07 | END: 2020-02 | DURATION: 3 years 7 months | DESC: Built internal APIs
WORK_END:

ANALYSIS_START:
SKILLS_MATCH: 78
EXPERIENCE_LEVEL: Senior
STRENGTHS: Distributed systems | Mentoring
WEAKNESSES: Limited frontend work
RECOMMENDATION: Strong hire for platform roles
HIGHLIGHTS: Led ledger rewrite | Cut p99 latency by 40%
ANALYSIS_END:
===CANDIDATE_DATA_END===

Let me know if you need anything else."""


def make_pdf(file_name: str = "cv.pdf", body: bytes = b"1.4 fake body") -> DocumentInput:
    return DocumentInput(content=b"%PDF-" + body, file_name=file_name)


@pytest.fixture
def sample_response() -> str:
    return SAMPLE_RESPONSE


@pytest.fixture
def sample_pdf() -> DocumentInput:
    return make_pdf("jane_doe.pdf")


@pytest.fixture
def mock_llm_client() -> LLMClient:
    """Create a mock LLM client answering with the sample response."""
    client = AsyncMock(spec=LLMClient)
    client.call = AsyncMock(return_value=SAMPLE_RESPONSE)
    return client
