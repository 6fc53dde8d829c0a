"""Batch scheduler: bounded-width groups with pacing between them.

Flow:
    inputs ─ partition into groups of <= width
      ├─ group 1: gather(process(item) ...)  → outcomes in their input slots
      ├─ pacing delay
      ├─ group 2: ...
      └─ BatchReport (input order, one outcome per input)
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Callable, Sequence

from candidate_ingest.models.batch import (
    BatchItemOutcome,
    BatchReport,
    DocumentInput,
    ErrorKind,
    GroupReport,
)
from candidate_ingest.pipeline.errors import classify_error, message_for
from candidate_ingest.pipeline.processor import CandidateProcessor

logger = logging.getLogger(__name__)

DEFAULT_WIDTH = 8
DEFAULT_PACING_DELAY = 1.0


def partition(count: int, width: int) -> list[range]:
    """Split ``range(count)`` into contiguous groups of at most ``width``."""
    return [range(i, min(i + width, count)) for i in range(0, count, width)]


class BatchScheduler:
    """Runs documents through a ``CandidateProcessor`` group by group."""

    def __init__(
        self,
        processor: CandidateProcessor,
        *,
        width: int = DEFAULT_WIDTH,
        pacing_delay: float = DEFAULT_PACING_DELAY,
    ):
        if width < 1:
            raise ValueError(f"width must be >= 1, got {width}")
        if pacing_delay < 0:
            raise ValueError(f"pacing_delay must be >= 0, got {pacing_delay}")
        self.processor = processor
        self.width = width
        self.pacing_delay = pacing_delay

    async def run(
        self,
        documents: Sequence[DocumentInput],
        *,
        cancel_event: asyncio.Event | None = None,
        deadline: float | None = None,
        on_group: Callable[[GroupReport], None] | None = None,
    ) -> BatchReport:
        """Process every document and return outcomes in input order.

        Args:
            documents: Inputs to process.
            cancel_event: When set, groups that have not started are skipped.
            deadline: Seconds after which no further group is started.
            on_group: Optional callback receiving a ``GroupReport`` per group.
        """
        start = time.monotonic()
        groups = partition(len(documents), self.width)
        outcomes: list[BatchItemOutcome | None] = [None] * len(documents)

        logger.info(
            "Starting batch: %d files in %d groups (width=%d)",
            len(documents), len(groups), self.width,
        )

        for number, group in enumerate(groups, start=1):
            if self._should_stop(cancel_event, start, deadline):
                logger.warning(
                    "Batch stopped before group %d/%d; skipping %d files",
                    number, len(groups), len(documents) - group.start,
                )
                break

            await self._run_group(documents, group, outcomes)
            report = self._group_report(number, len(groups), [outcomes[i] for i in group])
            logger.info(
                "Group %d/%d completed: %d succeeded, %d failed %s",
                number, report.total_groups, report.succeeded, report.failed, report.results,
            )
            if on_group:
                on_group(report)

            if number < len(groups):
                await self._pace(cancel_event)

        for index, outcome in enumerate(outcomes):
            if outcome is None:
                outcomes[index] = BatchItemOutcome(
                    input_index=index,
                    file_name=documents[index].file_name,
                    success=False,
                    error_kind=ErrorKind.CANCELLED,
                    error_message=message_for(ErrorKind.CANCELLED),
                )

        result = BatchReport(outcomes=outcomes, elapsed_seconds=time.monotonic() - start)
        logger.info(
            "Batch completed: %d files, %d succeeded, %d failed (%d skipped) in %.1fs",
            result.total, result.succeeded, result.failed, result.skipped, result.elapsed_seconds,
        )
        return result

    async def _run_group(
        self,
        documents: Sequence[DocumentInput],
        group: range,
        outcomes: list[BatchItemOutcome | None],
    ) -> None:
        async def _run_item(index: int) -> None:
            document = documents[index]
            try:
                outcomes[index] = await self.processor.process(document, input_index=index)
            except Exception as exc:
                kind, message = classify_error(exc)
                logger.error("Unhandled failure for %s", document.file_name, exc_info=True)
                outcomes[index] = BatchItemOutcome(
                    input_index=index,
                    file_name=document.file_name,
                    success=False,
                    error_kind=kind,
                    error_message=message,
                )

        await asyncio.gather(*(_run_item(i) for i in group))

    async def _pace(self, cancel_event: asyncio.Event | None) -> None:
        if self.pacing_delay <= 0:
            return
        logger.debug("Waiting %.2fs between groups", self.pacing_delay)
        if cancel_event is None:
            await asyncio.sleep(self.pacing_delay)
            return
        try:
            await asyncio.wait_for(cancel_event.wait(), timeout=self.pacing_delay)
        except asyncio.TimeoutError:
            pass  # full delay elapsed, not cancelled

    @staticmethod
    def _should_stop(
        cancel_event: asyncio.Event | None, start: float, deadline: float | None
    ) -> bool:
        if cancel_event is not None and cancel_event.is_set():
            return True
        return deadline is not None and time.monotonic() - start >= deadline

    @staticmethod
    def _group_report(
        number: int, total_groups: int, outcomes: list[BatchItemOutcome]
    ) -> GroupReport:
        succeeded = sum(1 for o in outcomes if o.success)
        return GroupReport(
            group_number=number,
            total_groups=total_groups,
            succeeded=succeeded,
            failed=len(outcomes) - succeeded,
            results=[(o.file_name, o.success) for o in outcomes],
        )
