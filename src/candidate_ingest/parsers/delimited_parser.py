"""Parser for the delimited candidate format returned by the model.

The model is asked for a line-oriented format instead of JSON:

    ===CANDIDATE_DATA_START===
    NAME: Jane Doe
    SCORE: 82
    SKILLS_START:
    Python
    SKILLS_END:
    EDUCATION_START:
    DEGREE: BSc | INSTITUTION: MIT | YEAR: 2018 | FIELD: Physics
    EDUCATION_END:
    ===CANDIDATE_DATA_END===

Only text between the two sentinels is read. Scalar ``KEY: value`` lines live
at the top level; named sections are opened by ``<NAME>_START:`` and closed by
the next ``*_END:`` line. Everything except missing sentinels degrades to
defaults instead of failing.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from datetime import date
from typing import Callable, Union

from candidate_ingest.models.candidate import (
    CandidateAnalysis,
    Education,
    ExperienceLevel,
    ParsedRecord,
    WorkExperience,
)

logger = logging.getLogger(__name__)

START_SENTINEL = "===CANDIDATE_DATA_START==="
END_SENTINEL = "===CANDIDATE_DATA_END==="

SECTION_START_SUFFIX = "_START:"
SECTION_END_SUFFIX = "_END:"

# At most 18 digits; int() rejects very long digit strings.
_LEADING_INT = re.compile(r"^\s*([+-]?\d{1,18})")


@dataclass(frozen=True)
class MissingDelimiters:
    """Parse failure: the response has no usable sentinel pair."""

    missing: tuple[str, ...]

    @property
    def message(self) -> str:
        return f"Delimiters not found in response: {', '.join(self.missing)}"


@dataclass
class RawSection:
    name: str
    lines: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class NoSection:
    pass


@dataclass(frozen=True)
class InSection:
    section: RawSection


ParserState = Union[NoSection, InSection]


def parse_int(
    value: str,
    default: int,
    minimum: int | None = None,
    maximum: int | None = None,
) -> int:
    """Parse the leading integer of ``value``, clamping into the given range.

    ``"85%"`` gives 85 and ``"3.5 years"`` gives 3. Text without leading digits
    falls back to ``default``.
    """
    match = _LEADING_INT.match(value or "")
    parsed = int(match.group(1)) if match else default
    if minimum is not None and parsed < minimum:
        return minimum
    if maximum is not None and parsed > maximum:
        return maximum
    return parsed


def parse_pipe_list(value: str) -> list[str]:
    return [item.strip() for item in value.split("|") if item.strip()]


def extract_payload(text: str) -> str | MissingDelimiters:
    """Return the text strictly between the sentinels."""
    start = text.find(START_SENTINEL)
    if start == -1:
        missing = [START_SENTINEL]
        if END_SENTINEL not in text:
            missing.append(END_SENTINEL)
        return MissingDelimiters(tuple(missing))

    body_start = start + len(START_SENTINEL)
    end = text.find(END_SENTINEL, body_start)
    if end == -1:
        return MissingDelimiters((END_SENTINEL,))
    return text[body_start:end]


def parse_candidate_response(text: str) -> ParsedRecord | MissingDelimiters:
    """Parse one raw model response into a ``ParsedRecord``."""
    payload = extract_payload(text or "")
    if isinstance(payload, MissingDelimiters):
        logger.debug("Response rejected: %s", payload.message)
        return payload

    lines = [line.strip() for line in payload.splitlines()]
    record = ParsedRecord()
    state: ParserState = NoSection()
    for line in lines:
        if line:
            state = _step(state, line, record)

    if isinstance(state, InSection):
        logger.debug("Section %s never closed; discarded", state.section.name)
    return record


def _step(state: ParserState, line: str, record: ParsedRecord) -> ParserState:
    """Advance the section state machine by one non-empty line."""
    if line.endswith(SECTION_START_SUFFIX):
        name = line[: -len(SECTION_START_SUFFIX)].strip().upper()
        if isinstance(state, InSection):
            logger.debug(
                "Section %s reopened as %s before closing", state.section.name, name
            )
        return InSection(RawSection(name))

    if line.endswith(SECTION_END_SUFFIX):
        # Any end marker closes the open section, whatever name it carries.
        if isinstance(state, InSection):
            _apply_section(record, state.section)
        return NoSection()

    if isinstance(state, InSection):
        state.section.lines.append(line)
    elif ":" in line:
        _apply_scalar(record, line)
    return state


def _split_key_value(line: str) -> tuple[str, str]:
    key, _, value = line.partition(":")
    return key.strip().upper(), value.strip()


def _apply_scalar(record: ParsedRecord, line: str) -> None:
    key, value = _split_key_value(line)
    if key == "NAME":
        record.name = value
    elif key == "EMAIL":
        record.email = "" if value == "NONE" else value
    elif key == "PHONE":
        record.phone = None if value == "NONE" else value
    elif key == "POSITION":
        record.position = value
    elif key == "EXPERIENCE_YEARS":
        record.experience = parse_int(value, 0)
    elif key == "SCORE":
        record.score = parse_int(value, 0, 0, 100)
    elif key == "SUMMARY":
        record.summary = value


def _apply_section(record: ParsedRecord, section: RawSection) -> None:
    handler = SECTION_HANDLERS.get(section.name)
    if handler is None:
        logger.debug("Ignoring unknown section %s", section.name)
        return
    handler(record, section.lines)


def _parse_skills(record: ParsedRecord, lines: list[str]) -> None:
    record.skills = [line for line in lines if line]


def _pipe_fields(line: str, prefixes: tuple[str, ...]) -> dict[str, str]:
    """Map each known ``PREFIX:`` in a pipe-delimited line to its value."""
    fields: dict[str, str] = {}
    for part in line.split("|"):
        part = part.strip()
        for prefix in prefixes:
            if part.startswith(prefix + ":"):
                fields[prefix] = part[len(prefix) + 1 :].strip()
                break
    return fields


def _parse_education(record: ParsedRecord, lines: list[str]) -> None:
    current_year = date.today().year
    entries: list[Education] = []
    for line in lines:
        parts = _pipe_fields(line, ("DEGREE", "INSTITUTION", "YEAR", "FIELD"))
        degree = parts.get("DEGREE", "")
        institution = parts.get("INSTITUTION", "")
        if not degree and not institution:
            logger.debug("Dropping education line without degree or institution: %r", line)
            continue
        field_of_study = parts.get("FIELD") or None
        entries.append(
            Education(
                degree=degree,
                institution=institution,
                year=parse_int(parts.get("YEAR", ""), current_year) or current_year,
                field=None if field_of_study == "NONE" else field_of_study,
            )
        )
    record.education = entries


def _parse_work(record: ParsedRecord, lines: list[str]) -> None:
    entries: list[WorkExperience] = []
    for line in lines:
        parts = _pipe_fields(
            line, ("COMPANY", "POSITION", "START", "END", "DURATION", "DESC")
        )
        company = parts.get("COMPANY", "")
        position = parts.get("POSITION", "")
        if not company and not position:
            logger.debug("Dropping work line without company or position: %r", line)
            continue
        entries.append(
            WorkExperience(
                company=company,
                position=position,
                start_date=parts.get("START", ""),
                end_date=parts.get("END", ""),
                duration=parts.get("DURATION", ""),
                description=parts.get("DESC", ""),
            )
        )
    record.work_experience = entries


def _parse_analysis(record: ParsedRecord, lines: list[str]) -> None:
    analysis = CandidateAnalysis()
    for line in lines:
        if ":" not in line:
            continue
        key, value = _split_key_value(line)
        if key == "SKILLS_MATCH":
            analysis.skills_match = parse_int(value, 0, 0, 100)
        elif key == "EXPERIENCE_LEVEL":
            analysis.experience_level = ExperienceLevel.coerce(value)
        elif key == "STRENGTHS":
            analysis.strengths = parse_pipe_list(value)
        elif key == "WEAKNESSES":
            analysis.weaknesses = parse_pipe_list(value)
        elif key == "RECOMMENDATION":
            analysis.recommendation = value
        elif key == "HIGHLIGHTS":
            analysis.key_highlights = parse_pipe_list(value)
    record.analysis = analysis


SECTION_HANDLERS: dict[str, Callable[[ParsedRecord, list[str]], None]] = {
    "SKILLS": _parse_skills,
    "EDUCATION": _parse_education,
    "WORK": _parse_work,
    "ANALYSIS": _parse_analysis,
}
