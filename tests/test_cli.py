"""Tests for the typer CLI."""

import json
from unittest.mock import AsyncMock, MagicMock, patch

from typer.testing import CliRunner

from candidate_ingest.cli import app

runner = CliRunner()


class TestParseCommand:
    def test_prints_normalized_candidate(self, tmp_path, sample_response):
        response = tmp_path / "response.txt"
        response.write_text(sample_response, encoding="utf-8")

        result = runner.invoke(app, ["parse", str(response), "--file-name", "jane.pdf"])

        assert result.exit_code == 0
        assert "Jane Doe" in result.output
        assert "warning" not in result.output

    def test_reports_validation_warnings(self, tmp_path):
        response = tmp_path / "response.txt"
        response.write_text(
            "===CANDIDATE_DATA_START===\nNAME: Jane\n===CANDIDATE_DATA_END===", encoding="utf-8"
        )

        result = runner.invoke(app, ["parse", str(response)])

        assert result.exit_code == 0
        assert "Candidate from document" in result.output
        assert "Email is required" in result.output

    def test_missing_delimiters_exit_code(self, tmp_path):
        response = tmp_path / "response.txt"
        response.write_text("I could not read this CV.", encoding="utf-8")

        result = runner.invoke(app, ["parse", str(response)])

        assert result.exit_code == 1
        assert "Delimiters not found" in result.output

    def test_missing_file(self, tmp_path):
        result = runner.invoke(app, ["parse", str(tmp_path / "nope.txt")])
        assert result.exit_code == 1


class TestIngestCommand:
    def test_missing_input_file(self, tmp_path):
        result = runner.invoke(app, ["ingest", str(tmp_path / "missing.pdf")])
        assert result.exit_code == 1
        assert "File not found" in result.output

    def test_writes_json_report(self, tmp_path, sample_response):
        good = tmp_path / "jane.pdf"
        good.write_bytes(b"%PDF-1.4 body")
        bad = tmp_path / "notes.xlsx"
        bad.write_bytes(b"cells")
        output = tmp_path / "out" / "report.json"

        client = MagicMock()
        client.call = AsyncMock(return_value=sample_response)
        client.get_token_summary.return_value = {"input": 10, "output": 5, "calls": []}

        with patch("candidate_ingest.cli.LLMClient", return_value=client):
            result = runner.invoke(
                app,
                ["ingest", str(good), str(bad), "--delay", "0", "--output", str(output)],
            )

        assert result.exit_code == 0
        data = json.loads(output.read_text(encoding="utf-8"))
        assert data["summary"]["successful"] == 1
        assert data["summary"]["failed"] == 1
        assert [r["file_name"] for r in data["results"]] == ["jane.pdf", "notes.xlsx"]
        assert data["results"][1]["error_kind"] == "invalid_input"
        client.call.assert_awaited_once()

    def test_all_failed_exit_code(self, tmp_path):
        bad = tmp_path / "cv.pdf"
        bad.write_bytes(b"<html>not a pdf</html>")

        client = MagicMock()
        client.call = AsyncMock()
        client.get_token_summary.return_value = {"input": 0, "output": 0, "calls": []}

        with patch("candidate_ingest.cli.LLMClient", return_value=client):
            result = runner.invoke(app, ["ingest", str(bad), "--delay", "0"])

        assert result.exit_code == 1
        client.call.assert_not_awaited()
