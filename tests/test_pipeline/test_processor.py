"""Tests for the single-item processor."""

import pytest

from candidate_ingest.clients.base import DocumentPart
from candidate_ingest.models.batch import DocumentInput, ErrorKind
from candidate_ingest.pipeline.processor import CandidateProcessor
from candidate_ingest.pipeline.prompts import EXTRACTION_PROMPT


class TestCandidateProcessor:
    async def test_success_outcome(self, mock_llm_client, sample_pdf):
        processor = CandidateProcessor(mock_llm_client)
        outcome = await processor.process(sample_pdf, input_index=3)

        assert outcome.success is True
        assert outcome.input_index == 3
        assert outcome.file_name == "jane_doe.pdf"
        assert outcome.error_kind is None
        assert outcome.candidate.name == "Jane Doe"
        assert outcome.candidate.score == 86
        assert outcome.warnings == []

    async def test_sends_pdf_part_then_prompt(self, mock_llm_client, sample_pdf):
        processor = CandidateProcessor(mock_llm_client)
        await processor.process(sample_pdf)

        parts = mock_llm_client.call.await_args.args[0]
        assert parts[0] == DocumentPart(data=sample_pdf.content, media_type="application/pdf")
        assert parts[1] == EXTRACTION_PROMPT

    async def test_text_documents_sent_as_text(self, mock_llm_client):
        processor = CandidateProcessor(mock_llm_client)
        doc = DocumentInput(content=b"Jane Doe\nGo developer", file_name="jane.txt")
        await processor.process(doc)

        parts = mock_llm_client.call.await_args.args[0]
        assert isinstance(parts[0], str)
        assert "Go developer" in parts[0]

    async def test_image_sent_as_image_part(self, mock_llm_client):
        processor = CandidateProcessor(
            mock_llm_client, allowed_extensions=(".pdf", ".png")
        )
        content = b"\x89PNG\r\n\x1a\n\x00\xff"
        outcome = await processor.process(DocumentInput(content=content, file_name="scan.png"))

        assert outcome.success is True
        parts = mock_llm_client.call.await_args.args[0]
        assert parts[0] == DocumentPart(data=content, media_type="image/png")

    async def test_unparseable_response(self, mock_llm_client, sample_pdf):
        mock_llm_client.call.return_value = "Sorry, I cannot help with that."
        outcome = await CandidateProcessor(mock_llm_client).process(sample_pdf)

        assert outcome.success is False
        assert outcome.candidate is None
        assert outcome.error_kind is ErrorKind.UNPARSEABLE_RESPONSE
        assert outcome.error_message == "Failed to parse candidate data from AI response"

    @pytest.mark.parametrize(
        "error, kind",
        [
            (RuntimeError("Error code: 429 - rate_limit_error"), ErrorKind.RATE_LIMITED),
            (RuntimeError("invalid x-api-key"), ErrorKind.INVALID_CREDENTIALS),
            (TimeoutError(), ErrorKind.TIMEOUT),
            (ValueError("weird"), ErrorKind.UNKNOWN),
        ],
    )
    async def test_model_failures_classified(self, mock_llm_client, sample_pdf, error, kind):
        mock_llm_client.call.side_effect = error
        outcome = await CandidateProcessor(mock_llm_client).process(sample_pdf)

        assert outcome.success is False
        assert outcome.error_kind is kind
        assert outcome.error_message

    async def test_incomplete_record_succeeds_with_warnings(self, mock_llm_client, sample_pdf):
        mock_llm_client.call.return_value = (
            "===CANDIDATE_DATA_START===\nNAME: Jane\n===CANDIDATE_DATA_END==="
        )
        outcome = await CandidateProcessor(mock_llm_client).process(sample_pdf)

        assert outcome.success is True
        assert outcome.candidate.position == "Not specified"
        assert outcome.candidate.summary == "Candidate from jane_doe.pdf"
        assert "Email is required" in outcome.warnings


class TestDocumentRejection:
    @pytest.mark.parametrize(
        "document, reason",
        [
            (DocumentInput(content=b"", file_name="empty.pdf"), "empty"),
            (DocumentInput(content=b"<html>", file_name="fake.pdf"), "not a valid PDF"),
            (DocumentInput(content=b"data", file_name="cv.xlsx"), "Unsupported file type"),
        ],
    )
    async def test_invalid_documents_skip_model_call(self, mock_llm_client, document, reason):
        outcome = await CandidateProcessor(mock_llm_client).process(document)

        assert outcome.success is False
        assert outcome.error_kind is ErrorKind.INVALID_INPUT
        assert reason in outcome.error_message
        mock_llm_client.call.assert_not_awaited()

    async def test_oversize_document_rejected(self, mock_llm_client):
        processor = CandidateProcessor(mock_llm_client, max_file_size_mb=1)
        doc = DocumentInput(content=b"%PDF-" + b"0" * (1024 * 1024), file_name="big.pdf")
        outcome = await processor.process(doc)

        assert outcome.error_kind is ErrorKind.INVALID_INPUT
        assert "1MB" in outcome.error_message
        mock_llm_client.call.assert_not_awaited()

    async def test_corrupt_docx_rejected(self, mock_llm_client):
        doc = DocumentInput(content=b"not a zip archive", file_name="cv.docx")
        outcome = await CandidateProcessor(mock_llm_client).process(doc)

        assert outcome.error_kind is ErrorKind.INVALID_INPUT
        assert outcome.error_message.startswith("Could not read document")
        mock_llm_client.call.assert_not_awaited()


async def test_accepts_any_model_caller(sample_pdf, sample_response):
    class FakeModel:
        def __init__(self):
            self.calls = 0

        async def call(self, prompt_parts):
            self.calls += 1
            return sample_response

    model = FakeModel()
    outcome = await CandidateProcessor(model).process(sample_pdf)
    assert outcome.success is True
    assert model.calls == 1
