"""Loading and pre-validation of CV documents before they reach the model."""

from __future__ import annotations

import re
from io import BytesIO
from pathlib import Path

from candidate_ingest.clients.base import DocumentPart, PromptPart
from candidate_ingest.models.batch import DocumentInput

DEFAULT_ALLOWED_EXTENSIONS = (".pdf", ".docx", ".txt", ".md")
DEFAULT_MAX_FILE_SIZE_MB = 20
PDF_MAGIC = b"%PDF-"

# Shared emoji pattern for Google Docs / LLM output cleanup
EMOJI_PATTERN = (
    r"[\U0001f4e7\U0001f4de\U0001f4cd\U0001f4bc\U0001f4c5\U0001f393"
    r"\U0001f3e2\U0001f4dd\U0001f4c4\U0001f517\U0001f310\U0001f4f1"
    r"\u260e\u2709\u2706\u2702]\s*"
)


def load_document(file_path: str | Path) -> DocumentInput:
    """Read a file from disk into a ``DocumentInput``."""
    path = Path(file_path)
    return DocumentInput(content=path.read_bytes(), file_name=path.name)


def validate_document(
    document: DocumentInput,
    *,
    max_file_size_mb: int = DEFAULT_MAX_FILE_SIZE_MB,
    allowed_extensions: tuple[str, ...] = DEFAULT_ALLOWED_EXTENSIONS,
) -> str | None:
    """Return a rejection reason, or None when the document can be sent."""
    if document.extension not in allowed_extensions:
        allowed = ", ".join(allowed_extensions)
        return f"Unsupported file type '{document.extension or document.file_name}' (allowed: {allowed})"
    if not document.content:
        return "File is empty"
    if len(document.content) > max_file_size_mb * 1024 * 1024:
        return f"File size must be less than {max_file_size_mb}MB for AI processing"
    if document.extension == ".pdf" and not document.content.startswith(PDF_MAGIC):
        return "File is not a valid PDF"
    return None


def to_prompt_part(document: DocumentInput) -> PromptPart:
    """PDFs and images go to the model as binary parts; other formats as cleaned text."""
    if document.extension == ".pdf" or document.media_type.startswith("image/"):
        return DocumentPart(data=document.content, media_type=document.media_type)
    if document.extension in (".docx", ".doc"):
        text = _parse_docx(document.content)
    else:
        text = document.content.decode("utf-8", errors="replace")
    return f"--- {document.file_name} ---\n{clean_markdown(text)}"


def clean_markdown(text: str) -> str:
    """Clean Google Docs markdown export artifacts.

    Handles: unicode artifacts, emoji icons, excessive whitespace,
    inconsistent bullet styles, and trailing whitespace.
    """
    # 1. Remove unicode artifacts (BOM, zero-width spaces, soft hyphens)
    text = text.lstrip("\ufeff")
    text = re.sub(r"[\u200b\u200c\u200d\u00ad\u2060\ufeff]", "", text)

    # 2. Remove emoji icons commonly used in Google Docs resumes
    text = re.sub(EMOJI_PATTERN, "", text)

    # 3. Normalize bullet points (●, •, ◦, ◆, ■, ▪, ★, ○ → -)
    text = re.sub(r"^(\s*)[●•◦◆■▪★○]\s*", r"\1- ", text, flags=re.MULTILINE)

    # 4. Collapse runs of spaces/tabs and strip trailing whitespace
    lines = [re.sub(r"[ \t]{2,}", " ", line).rstrip() for line in text.splitlines()]
    text = "\n".join(lines)

    # 5. Remove excessive blank lines (3+ → 2)
    text = re.sub(r"\n{3,}", "\n\n", text)

    return text.strip()


def _parse_docx(content: bytes) -> str:
    from docx import Document

    doc = Document(BytesIO(content))
    return "\n".join(p.text for p in doc.paragraphs if p.text.strip())
