"""Classification of per-item failures into user-presentable error kinds."""

from __future__ import annotations

import asyncio
from typing import Callable

from candidate_ingest.models.batch import ErrorKind


class UnparseableResponseError(Exception):
    """The model answered, but without the candidate data sentinels."""


Predicate = Callable[[BaseException], bool]


def message_contains(*needles: str) -> Predicate:
    """Match when the exception text contains any needle (case-insensitive)."""
    lowered = tuple(n.lower() for n in needles)

    def _predicate(exc: BaseException) -> bool:
        text = str(exc).lower()
        return any(n in text for n in lowered)

    return _predicate


def any_of(*predicates: Predicate) -> Predicate:
    return lambda exc: any(p(exc) for p in predicates)


def is_instance(*types: type[BaseException]) -> Predicate:
    return lambda exc: isinstance(exc, types)


# Evaluated top to bottom; the first match wins.
ERROR_RULES: list[tuple[Predicate, ErrorKind]] = [
    (
        message_contains("API_KEY", "api key", "x-api-key", "authentication_error"),
        ErrorKind.INVALID_CREDENTIALS,
    ),
    (message_contains("quota", "QUOTA_EXCEEDED", "credit balance"), ErrorKind.QUOTA_EXCEEDED),
    (
        message_contains("rate limit", "RATE_LIMIT_EXCEEDED", "rate_limit_error"),
        ErrorKind.RATE_LIMITED,
    ),
    (message_contains("SAFETY"), ErrorKind.CONTENT_BLOCKED),
    (message_contains("INVALID_ARGUMENT", "invalid_request_error"), ErrorKind.INVALID_INPUT),
    (
        any_of(
            is_instance(ConnectionError),
            message_contains("network", "fetch", "connection error"),
        ),
        ErrorKind.NETWORK_ERROR,
    ),
    (
        any_of(
            is_instance(TimeoutError, asyncio.TimeoutError),
            message_contains("timeout", "timed out"),
        ),
        ErrorKind.TIMEOUT,
    ),
    (message_contains("PERMISSION_DENIED", "permission_error"), ErrorKind.PERMISSION_DENIED),
    (is_instance(UnparseableResponseError), ErrorKind.UNPARSEABLE_RESPONSE),
]

ERROR_MESSAGES: dict[ErrorKind, str] = {
    ErrorKind.INVALID_CREDENTIALS: "Invalid AI API key configuration",
    ErrorKind.QUOTA_EXCEEDED: "AI API quota exceeded. Please try again later",
    ErrorKind.RATE_LIMITED: "Rate limit exceeded. Please try again in a moment",
    ErrorKind.CONTENT_BLOCKED: "Content blocked by safety filters. Please check the CV content",
    ErrorKind.INVALID_INPUT: "Invalid file format or corrupted document",
    ErrorKind.NETWORK_ERROR: "Network error. Please check your connection",
    ErrorKind.TIMEOUT: "Request timeout. The file may be too large or complex",
    ErrorKind.PERMISSION_DENIED: "Permission denied. Please check API configuration",
    ErrorKind.UNPARSEABLE_RESPONSE: "Failed to parse candidate data from AI response",
    ErrorKind.CANCELLED: "Batch cancelled before this file was processed",
}


def classify_kind(exc: BaseException) -> ErrorKind:
    for predicate, kind in ERROR_RULES:
        if predicate(exc):
            return kind
    return ErrorKind.UNKNOWN


def message_for(kind: ErrorKind, exc: BaseException | None = None) -> str:
    if kind is ErrorKind.UNKNOWN:
        if exc is None:
            return "Unknown AI processing error"
        return f"AI processing error: {str(exc) or type(exc).__name__}"
    return ERROR_MESSAGES[kind]


def classify_error(exc: BaseException) -> tuple[ErrorKind, str]:
    """Map any failure to an error kind and its user-facing message."""
    kind = classify_kind(exc)
    return kind, message_for(kind, exc)
