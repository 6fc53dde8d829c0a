"""Models for per-item outcomes and batch-level reporting."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from pydantic import BaseModel

from candidate_ingest.models.candidate import StructuredCandidate

MEDIA_TYPES: dict[str, str] = {
    ".pdf": "application/pdf",
    ".docx": "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    ".txt": "text/plain",
    ".md": "text/markdown",
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
}


class ErrorKind(str, Enum):
    INVALID_CREDENTIALS = "invalid_credentials"
    QUOTA_EXCEEDED = "quota_exceeded"
    RATE_LIMITED = "rate_limited"
    CONTENT_BLOCKED = "content_blocked"
    INVALID_INPUT = "invalid_input"
    NETWORK_ERROR = "network_error"
    TIMEOUT = "timeout"
    PERMISSION_DENIED = "permission_denied"
    UNPARSEABLE_RESPONSE = "unparseable_response"
    UNKNOWN = "unknown"
    CANCELLED = "cancelled"  # group skipped after the batch was aborted


@dataclass(frozen=True)
class DocumentInput:
    """One document to ingest: raw bytes plus its original file name."""

    content: bytes
    file_name: str

    @property
    def extension(self) -> str:
        return Path(self.file_name).suffix.lower()

    @property
    def media_type(self) -> str:
        return MEDIA_TYPES.get(self.extension, "application/octet-stream")


class BatchItemOutcome(BaseModel):
    input_index: int
    file_name: str
    success: bool
    candidate: StructuredCandidate | None = None
    error_kind: ErrorKind | None = None
    error_message: str | None = None
    warnings: list[str] = []

    model_config = {"frozen": True}


@dataclass
class GroupReport:
    """Progress snapshot emitted after each group resolves."""

    group_number: int
    total_groups: int
    succeeded: int
    failed: int
    results: list[tuple[str, bool]] = field(default_factory=list)


@dataclass
class BatchReport:
    """Ordered outcomes for a whole batch, one per input."""

    outcomes: list[BatchItemOutcome]
    elapsed_seconds: float = 0.0

    @property
    def total(self) -> int:
        return len(self.outcomes)

    @property
    def succeeded(self) -> int:
        return sum(1 for o in self.outcomes if o.success)

    @property
    def failed(self) -> int:
        return self.total - self.succeeded

    @property
    def skipped(self) -> int:
        return sum(1 for o in self.outcomes if o.error_kind is ErrorKind.CANCELLED)

    @property
    def candidates(self) -> list[StructuredCandidate]:
        return [o.candidate for o in self.outcomes if o.candidate is not None]

    @property
    def summary_message(self) -> str:
        if self.total and self.succeeded == self.total:
            return f"All {self.total} files processed successfully!"
        if self.succeeded > 0:
            return (
                f"{self.succeeded} of {self.total} files processed successfully. "
                f"{self.failed} failed."
            )
        return (
            f"All {self.total} files failed to process. "
            "Please check the files and try again."
        )

    def to_dict(self) -> dict:
        return {
            "summary": {
                "total": self.total,
                "successful": self.succeeded,
                "failed": self.failed,
                "skipped": self.skipped,
                "message": self.summary_message,
                "elapsed_seconds": round(self.elapsed_seconds, 3),
            },
            "results": [o.model_dump(mode="json") for o in self.outcomes],
        }
