"""Single-item processor: one document through model call, parse and normalize."""

from __future__ import annotations

import logging
import time

from candidate_ingest.clients.base import ModelCaller
from candidate_ingest.models.batch import BatchItemOutcome, DocumentInput, ErrorKind
from candidate_ingest.parsers.delimited_parser import (
    MissingDelimiters,
    parse_candidate_response,
)
from candidate_ingest.parsers.document_loader import (
    DEFAULT_ALLOWED_EXTENSIONS,
    DEFAULT_MAX_FILE_SIZE_MB,
    to_prompt_part,
    validate_document,
)
from candidate_ingest.parsers.normalizer import normalize_with_warnings
from candidate_ingest.pipeline.errors import UnparseableResponseError, classify_error
from candidate_ingest.pipeline.prompts import EXTRACTION_PROMPT

logger = logging.getLogger(__name__)


class CandidateProcessor:
    """Turns one CV document into a classified ``BatchItemOutcome``.

    Never raises for per-item failures and never retries; the caller decides
    whether to resubmit.
    """

    def __init__(
        self,
        model: ModelCaller,
        *,
        prompt: str = EXTRACTION_PROMPT,
        max_file_size_mb: int = DEFAULT_MAX_FILE_SIZE_MB,
        allowed_extensions: tuple[str, ...] = DEFAULT_ALLOWED_EXTENSIONS,
    ):
        self.model = model
        self.prompt = prompt
        self.max_file_size_mb = max_file_size_mb
        self.allowed_extensions = allowed_extensions

    async def process(self, document: DocumentInput, input_index: int = 0) -> BatchItemOutcome:
        """Process one document and return its terminal outcome."""
        file_name = document.file_name
        start = time.monotonic()
        logger.info("Processing %s (%d bytes)", file_name, len(document.content))

        rejection = validate_document(
            document,
            max_file_size_mb=self.max_file_size_mb,
            allowed_extensions=self.allowed_extensions,
        )
        if rejection is None:
            try:
                document_part = to_prompt_part(document)
            except Exception as exc:
                rejection = f"Could not read document: {exc}"
        if rejection is not None:
            logger.warning("Rejected %s before model call: %s", file_name, rejection)
            return BatchItemOutcome(
                input_index=input_index,
                file_name=file_name,
                success=False,
                error_kind=ErrorKind.INVALID_INPUT,
                error_message=rejection,
            )

        try:
            text = await self.model.call([document_part, self.prompt])
            parsed = parse_candidate_response(text)
            if isinstance(parsed, MissingDelimiters):
                logger.debug("Unparseable response for %s: %r", file_name, text[:500])
                raise UnparseableResponseError(parsed.message)
        except Exception as exc:
            kind, message = classify_error(exc)
            logger.error(
                "Processing failed for %s after %.2fs: %s",
                file_name,
                time.monotonic() - start,
                kind.value,
                exc_info=True,
            )
            return BatchItemOutcome(
                input_index=input_index,
                file_name=file_name,
                success=False,
                error_kind=kind,
                error_message=message,
            )

        candidate, warnings = normalize_with_warnings(parsed, file_name)
        if warnings:
            logger.warning("Parsed data for %s incomplete: %s", file_name, "; ".join(warnings))

        logger.info(
            "Processed %s in %.2fs: name=%s, score=%d",
            file_name,
            time.monotonic() - start,
            candidate.name,
            candidate.score,
        )
        return BatchItemOutcome(
            input_index=input_index,
            file_name=file_name,
            success=True,
            candidate=candidate,
            warnings=warnings,
        )
