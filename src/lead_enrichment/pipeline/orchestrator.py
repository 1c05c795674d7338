"""
Batch orchestration for lead enrichment.

Drives aggregate -> score -> classify -> LeadResult across a row set:
1. Split rows into fixed-size batches
2. Within a batch, admit at most max_concurrent row tasks at once
   (a sliding window: a new row starts as soon as any in-flight row finishes)
3. Record each row's LeadResult, or a RowError if the row raised
4. Report progress after every batch
5. Check for cancellation before starting the next batch

Run lifecycle: idle -> running -> completed | cancelled.

Each call to run() owns a fresh RunState. Callers are expected to drive one
run at a time per orchestrator; nothing enforces that here.
"""

from __future__ import annotations

import asyncio
import inspect
import threading
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Awaitable, Callable, Sequence
from uuid import uuid4

from ..clients.openai_client import OpenAIClient
from ..errors import RowError, RowProcessingError
from ..logging import PipelineTimer, get_logger, logging_context
from ..models.contact import ContactBundle
from ..models.lead import LeadResult, Row
from ..models.run_config import RunConfig
from .aggregator import aggregate, classification_text
from .classifier import LeadClassifier
from .scoring import score

logger = get_logger(__name__)

ProgressCallback = Callable[['ProgressEvent'], Awaitable[None] | None]
CompletionCallback = Callable[[list[LeadResult]], Awaitable[None] | None]


class RunStatus(str, Enum):
    """Lifecycle state of a run."""

    IDLE = 'idle'
    RUNNING = 'running'
    COMPLETED = 'completed'
    CANCELLED = 'cancelled'


class CancellationToken:
    """
    Cooperative cancellation flag.

    Safe to set from another thread (e.g. a signal handler or UI thread).
    The orchestrator only reads it at batch boundaries.
    """

    def __init__(self):
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()


@dataclass(frozen=True)
class ProgressEvent:
    """Snapshot handed to the progress callback after each batch."""

    processed: int
    total: int
    results: list[LeadResult]
    errors: list[RowError]
    # Row still in flight when the snapshot was taken; None once a batch has drained
    current_url: str | None

    @property
    def fraction(self) -> float:
        return self.processed / self.total if self.total else 1.0


@dataclass
class RunState:
    """
    Mutable state of one run.

    results, errors and the in-flight url list are written by concurrent row
    tasks; every write goes through the lock.
    """

    run_id: str
    total_rows: int
    status: RunStatus = RunStatus.IDLE
    processed: int = 0
    results: list[LeadResult] = field(default_factory=list)
    errors: list[RowError] = field(default_factory=list)
    in_flight_urls: list[str] = field(default_factory=list)
    peak_in_flight: int = 0
    started_at: datetime | None = None
    completed_at: datetime | None = None
    _lock: asyncio.Lock = field(default_factory=asyncio.Lock, repr=False)

    @property
    def in_flight(self) -> int:
        return len(self.in_flight_urls)

    @property
    def current_url(self) -> str | None:
        """Most recently started row that is still in flight, or None."""
        return self.in_flight_urls[-1] if self.in_flight_urls else None

    async def row_started(self, url: str) -> None:
        async with self._lock:
            self.in_flight_urls.append(url)
            self.peak_in_flight = max(self.peak_in_flight, self.in_flight)

    async def row_finished(self, url: str) -> None:
        async with self._lock:
            self.in_flight_urls.remove(url)

    async def add_result(self, result: LeadResult) -> None:
        async with self._lock:
            self.results.append(result)

    async def add_error(self, error: RowError) -> None:
        async with self._lock:
            self.errors.append(error)

    async def snapshot(self) -> ProgressEvent:
        async with self._lock:
            return ProgressEvent(
                processed=self.processed,
                total=self.total_rows,
                results=list(self.results),
                errors=list(self.errors),
                current_url=self.current_url,
            )


@dataclass
class RunResult:
    """Outcome of a run, completed or cancelled."""

    run_id: str
    status: RunStatus
    total_rows: int
    processed_rows: int
    results: list[LeadResult] = field(default_factory=list)
    errors: list[RowError] = field(default_factory=list)
    peak_in_flight: int = 0
    started_at: datetime | None = None
    completed_at: datetime | None = None

    @property
    def completed(self) -> bool:
        return self.status == RunStatus.COMPLETED

    @property
    def cancelled(self) -> bool:
        return self.status == RunStatus.CANCELLED

    @property
    def success_count(self) -> int:
        return len(self.results)

    @property
    def failure_count(self) -> int:
        return len(self.errors)

    @property
    def processing_time_ms(self) -> int | None:
        if self.started_at is None or self.completed_at is None:
            return None
        return int((self.completed_at - self.started_at).total_seconds() * 1000)

    def ordered_results(self) -> list[LeadResult]:
        """Results in input row order (completion order is not guaranteed)."""
        return sorted(self.results, key=lambda r: r.row_index)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            'run_id': self.run_id,
            'status': self.status.value,
            'total_rows': self.total_rows,
            'processed_rows': self.processed_rows,
            'success_count': self.success_count,
            'failure_count': self.failure_count,
            'peak_in_flight': self.peak_in_flight,
            'processing_time_ms': self.processing_time_ms,
            'errors': [e.to_dict() for e in self.errors],
        }


async def _maybe_await(value: Any) -> None:
    if inspect.isawaitable(value):
        await value


class BatchOrchestrator:
    """
    Runs the per-row enrichment pipeline over many rows with bounded concurrency.

    Usage:
        orchestrator = BatchOrchestrator(LeadClassifier(openai_client), batch_size=10, max_concurrent=3)
        run = await orchestrator.run(rows, cancel_token)
        if run.completed:
            ...
    """

    def __init__(
        self,
        classifier: LeadClassifier,
        batch_size: int = 10,
        max_concurrent: int = 3,
        on_progress: ProgressCallback | None = None,
        on_complete: CompletionCallback | None = None,
        aggregator: Callable[[Row], ContactBundle] = aggregate,
        scorer: Callable[[ContactBundle], int] = score,
    ):
        """
        Initialize the orchestrator.

        Args:
            classifier: Lead classifier (remote with fallback, or fallback-only)
            batch_size: Rows per batch (>= 1)
            max_concurrent: Maximum row tasks in flight at once (>= 1)
            on_progress: Called after every batch with a ProgressEvent
            on_complete: Called once with the final results, only if the run completes
            aggregator: Row -> ContactBundle step
            scorer: ContactBundle -> confidence score step
        """
        self.classifier = classifier
        self.batch_size = batch_size
        self.max_concurrent = max_concurrent
        self.on_progress = on_progress
        self.on_complete = on_complete
        self.aggregator = aggregator
        self.scorer = scorer

    @classmethod
    def from_config(
        cls,
        run_config: RunConfig,
        openai_client: OpenAIClient | None = None,
        **kwargs: Any,
    ) -> BatchOrchestrator:
        """
        Build an orchestrator from a RunConfig.

        An OpenAI client is created from the config when one is not passed in
        and an API key is configured. Without either, classification uses the
        fallback rules only.
        """
        if openai_client is None and run_config.has_api_key:
            openai_client = OpenAIClient(
                api_key=run_config.openai.api_key.get_secret_value(),
                chat_model=run_config.openai.model,
                temperature=run_config.openai.temperature,
                timeout_seconds=run_config.openai.timeout_seconds,
                retry_attempts=run_config.processing.retry_attempts,
            )

        classifier = LeadClassifier(
            openai_client,
            model=run_config.openai.model,
            temperature=run_config.openai.temperature,
        )

        return cls(
            classifier,
            batch_size=run_config.processing.batch_size,
            max_concurrent=run_config.processing.max_concurrent,
            **kwargs,
        )

    async def run(
        self,
        rows: Sequence[Row],
        cancel_token: CancellationToken | None = None,
    ) -> RunResult:
        """
        Enrich every row.

        Rows already launched when cancellation is requested finish normally;
        no further batch starts. A cancelled run does not call on_complete:
        the last progress event carries its partial data.

        Args:
            rows: Input rows, each with a non-empty 'url'
            cancel_token: Optional cancellation flag checked between batches

        Returns:
            RunResult with status, results (unordered) and row errors
        """
        cancel_token = cancel_token or CancellationToken()
        state = RunState(run_id=uuid4().hex[:12], total_rows=len(rows))
        semaphore = asyncio.Semaphore(self.max_concurrent)

        with logging_context(run_id=state.run_id):
            state.status = RunStatus.RUNNING
            state.started_at = datetime.now()
            logger.info(
                'run.started',
                total_rows=state.total_rows,
                batch_size=self.batch_size,
                max_concurrent=self.max_concurrent,
                remote_classification=self.classifier.remote_enabled,
            )

            for start in range(0, len(rows), self.batch_size):
                if cancel_token.cancelled:
                    break

                batch = list(enumerate(rows[start : start + self.batch_size], start=start))
                await self._process_batch(state, batch, semaphore)

                state.processed = min(start + self.batch_size, state.total_rows)
                logger.info(
                    'run.batch_complete',
                    processed=state.processed,
                    total_rows=state.total_rows,
                    results=len(state.results),
                    errors=len(state.errors),
                )
                await self._notify_progress(state)

            state.completed_at = datetime.now()
            state.status = (
                RunStatus.CANCELLED if cancel_token.cancelled else RunStatus.COMPLETED
            )

            result = RunResult(
                run_id=state.run_id,
                status=state.status,
                total_rows=state.total_rows,
                processed_rows=state.processed,
                results=list(state.results),
                errors=list(state.errors),
                peak_in_flight=state.peak_in_flight,
                started_at=state.started_at,
                completed_at=state.completed_at,
            )

            if result.cancelled:
                logger.info('run.cancelled', **result.to_dict())
                return result

            logger.info('run.complete', **result.to_dict())
            if self.on_complete is not None:
                await self._invoke_callback('on_complete', self.on_complete, list(result.results))

            return result

    async def _process_batch(
        self,
        state: RunState,
        batch: list[tuple[int, Row]],
        semaphore: asyncio.Semaphore,
    ) -> None:
        """Launch every row in the batch through the admission window, then drain."""
        tasks = []
        for index, row in batch:
            await semaphore.acquire()
            tasks.append(asyncio.create_task(self._admitted(state, index, row, semaphore)))
        await asyncio.gather(*tasks)

    async def _admitted(
        self,
        state: RunState,
        index: int,
        row: Row,
        semaphore: asyncio.Semaphore,
    ) -> None:
        try:
            await self._process_row(state, index, row)
        finally:
            semaphore.release()

    async def _process_row(self, state: RunState, index: int, row: Row) -> None:
        """
        Enrich one row. Any exception becomes a RowError; the row yields no result.
        """
        url = row.get('url') or ''
        await state.row_started(url)
        timer = PipelineTimer()

        try:
            with logging_context(row_url=url):
                if not url.strip():
                    raise RowProcessingError('Row is missing a url', context={'row_index': index})

                with timer.stage('aggregate'):
                    bundle = self.aggregator(row)
                with timer.stage('score'):
                    confidence_score = self.scorer(bundle)

                text = classification_text(row, bundle)
                with timer.stage('classify'):
                    classification = await self.classifier.classify(url, text, bundle)

                result = LeadResult.from_parts(
                    url=url,
                    row_index=index,
                    bundle=bundle,
                    text=text,
                    classification=classification,
                    confidence_score=confidence_score,
                )
                await state.add_result(result)

                logger.debug(
                    'row.complete',
                    row_index=index,
                    confidence_score=confidence_score,
                    classification=classification.type.value,
                    quality=classification.quality,
                    **timer.summary(),
                )
        except Exception as e:
            await state.add_error(RowError.from_exception(url, index, e))
            logger.warning(
                'row.failed',
                url=url,
                row_index=index,
                error=str(e),
                error_type=type(e).__name__,
            )
        finally:
            await state.row_finished(url)

    async def _notify_progress(self, state: RunState) -> None:
        if self.on_progress is None:
            return
        event = await state.snapshot()
        await self._invoke_callback('on_progress', self.on_progress, event)

    async def _invoke_callback(self, name: str, callback: Callable[..., Any], payload: Any) -> None:
        """Callback failures are logged and do not stop the run."""
        try:
            await _maybe_await(callback(payload))
        except Exception as e:
            logger.error(
                'run.callback_failed',
                callback=name,
                error=str(e),
                error_type=type(e).__name__,
            )
