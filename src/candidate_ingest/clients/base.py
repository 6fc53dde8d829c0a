"""Model invocation capability consumed by the pipeline."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, Sequence, Union, runtime_checkable


@dataclass(frozen=True)
class DocumentPart:
    """Binary prompt part (PDF or image) sent to the model as-is."""

    data: bytes
    media_type: str


PromptPart = Union[str, DocumentPart]


@runtime_checkable
class ModelCaller(Protocol):
    async def call(self, prompt_parts: Sequence[PromptPart]) -> str:
        """Send the prompt parts to the model and return its text response."""
        ...
