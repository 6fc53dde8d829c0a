"""Application configuration loaded from config.yaml."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import yaml


def _check_range(name: str, value: float, low: float, high: float | None = None) -> None:
    if value < low or (high is not None and value > high):
        bound = f"between {low} and {high}" if high is not None else f">= {low}"
        raise ValueError(f"{name} must be {bound}, got {value}")


@dataclass(frozen=True)
class LLMConfig:
    model: str = "claude-haiku-4-5-20251001"
    max_retries: int = 3
    timeout: int = 120
    max_tokens: int = 4096
    temperature: float = 0.0

    def __post_init__(self) -> None:
        _check_range("max_retries", self.max_retries, 1, 10)
        _check_range("timeout", self.timeout, 1)
        _check_range("max_tokens", self.max_tokens, 1)
        _check_range("temperature", self.temperature, 0.0, 1.0)


@dataclass(frozen=True)
class BatchConfig:
    width: int = 8
    pacing_delay: float = 1.0  # seconds between groups
    deadline: float | None = None  # seconds; None = no batch deadline

    def __post_init__(self) -> None:
        _check_range("width", self.width, 1, 64)
        _check_range("pacing_delay", self.pacing_delay, 0.0)
        if self.deadline is not None and self.deadline <= 0:
            raise ValueError(f"deadline must be > 0, got {self.deadline}")


@dataclass(frozen=True)
class IngestConfig:
    max_file_size_mb: int = 20
    allowed_extensions: tuple[str, ...] = (".pdf", ".docx", ".txt", ".md")

    def __post_init__(self) -> None:
        _check_range("max_file_size_mb", self.max_file_size_mb, 1, 100)
        # YAML gives lists; keep the frozen dataclass hashable
        normalized = tuple(
            ext.lower() if ext.startswith(".") else f".{ext.lower()}"
            for ext in self.allowed_extensions
        )
        if not normalized:
            raise ValueError("allowed_extensions must not be empty")
        object.__setattr__(self, "allowed_extensions", normalized)


@dataclass(frozen=True)
class AppConfig:
    llm: LLMConfig = field(default_factory=LLMConfig)
    batch: BatchConfig = field(default_factory=BatchConfig)
    ingest: IngestConfig = field(default_factory=IngestConfig)


def load_config(path: str | Path | None = None) -> AppConfig:
    """Load config from YAML file, falling back to defaults."""
    if path is None:
        # Look for config.yaml relative to the project root
        candidates = [
            Path.cwd() / "config.yaml",
            Path(__file__).resolve().parent.parent.parent / "config.yaml",
        ]
        for c in candidates:
            if c.exists():
                path = c
                break

    raw: dict = {}
    if path is not None:
        p = Path(path)
        if p.exists():
            raw = yaml.safe_load(p.read_text()) or {}

    return AppConfig(
        llm=LLMConfig(**raw.get("llm", {})),
        batch=BatchConfig(**raw.get("batch", {})),
        ingest=IngestConfig(**raw.get("ingest", {})),
    )
