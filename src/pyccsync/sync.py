"""Synchronization loop: plan, fetch, merge, persist, replan.

The driver owns the in-memory dataset for the whole run.  Iterations are
strictly sequential because every plan depends on the dataset produced by
the previous merge.
"""

from __future__ import annotations

import enum
import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from datetime import datetime
from typing import Protocol

from pyccsync._constants import HOUR_SECONDS
from pyccsync.config import SyncConfig
from pyccsync.dataset import Dataset, merge
from pyccsync.exceptions import BatchFetchError, BatchPersistError
from pyccsync.models.observation import Observation
from pyccsync.planner import FetchPlan, TargetRange, format_timestamp, next_fetch_plan

_logger = logging.getLogger(__name__)


class Fetcher(Protocol):
    """Delivers *unit_count* units of history ending at *to_date*.

    Implementations must raise instead of returning partial or invalid
    data; observations may come back in any order.
    """

    async def fetch(self, to_date: int, unit_count: int) -> Sequence[Observation]:
        ...


class DatasetRepository(Protocol):
    """Persisted dataset storage.

    ``load`` never raises (unusable state reads as empty); ``save`` raises on
    failure.
    """

    def load(self) -> Sequence[Observation]:
        ...

    def save(self, dataset: Sequence[Observation]) -> None:
        ...


class SyncState(enum.StrEnum):
    RUNNING = "running"
    DONE = "done"


@dataclass(frozen=True)
class BatchReport:
    """Outcome of one persisted batch."""

    plan: FetchPlan
    fetched: int
    added: int
    dataset_size: int


@dataclass(frozen=True)
class SyncResult:
    """Outcome of a completed run."""

    target: TargetRange
    dataset: Dataset
    iterations: int
    added: int
    state: SyncState


class SyncDriver:
    """Runs batches until the planner reports the target range covered.

    Parameters
    ----------
    config : SyncConfig
        Run configuration; only ``start_date`` and ``max_units_in_batch``
        are consulted here.
    fetcher : Fetcher
        Remote history source.
    repository : DatasetRepository
        Persisted dataset storage.
    target : TargetRange or None
        Explicit range to cover.  Defaults to ``config.start_date`` until
        *now* truncated to the hour, fixed at construction.
    clock : callable or None
        Returns the current aware datetime; used only to derive the default
        target.
    on_batch : callable or None
        Invoked with a :class:`BatchReport` after every persisted batch.
    """

    def __init__(
        self,
        config: SyncConfig,
        fetcher: Fetcher,
        repository: DatasetRepository,
        *,
        target: TargetRange | None = None,
        clock: Callable[[], datetime] | None = None,
        on_batch: Callable[[BatchReport], None] | None = None,
        unit_seconds: int = HOUR_SECONDS,
    ) -> None:
        self._config = config
        self._fetcher = fetcher
        self._repository = repository
        self._unit_seconds = unit_seconds
        if target is None:
            now = clock() if clock is not None else None
            target = TargetRange.from_start_date(config.start_date, now, unit_seconds=unit_seconds)
        self._target = target
        self._on_batch = on_batch
        self._state = SyncState.RUNNING
        self._dataset: Dataset = []

    @property
    def target(self) -> TargetRange:
        return self._target

    @property
    def state(self) -> SyncState:
        return self._state

    @property
    def dataset(self) -> Dataset:
        return self._dataset

    def plan(self) -> FetchPlan:
        """Compute the next window for the current dataset."""
        return next_fetch_plan(
            self._target,
            self._dataset,
            unit_seconds=self._unit_seconds,
            max_units_in_batch=self._config.max_units_in_batch,
        )

    async def run(self) -> SyncResult:
        """Synchronize until the target range is covered.

        Raises
        ------
        BatchFetchError
            If the fetcher fails; nothing more is persisted.
        BatchPersistError
            If the merged dataset cannot be saved.  Previously saved state
            is left as it was.
        """
        self._state = SyncState.RUNNING
        # Normalize whatever was persisted so ordering and uniqueness hold
        # before the first plan.
        self._dataset = merge([], self._repository.load())
        _logger.info(
            "Syncing %s from %s to %s, %d observations on record",
            self._config.pair,
            format_timestamp(self._target.start),
            format_timestamp(self._target.end),
            len(self._dataset),
        )

        iterations = 0
        added_total = 0
        plan = self.plan()
        while not plan.done:
            report = await self._run_batch(plan)
            iterations += 1
            added_total += report.added
            if self._on_batch is not None:
                self._on_batch(report)
            next_plan = self.plan()
            if report.added == 0 and next_plan == plan:
                # Same window again would loop forever.
                raise BatchFetchError(
                    f"Batch to_date={format_timestamp(plan.to_date)} units={plan.unit_count} "
                    "returned no new observations",
                    to_date=plan.to_date,
                    unit_count=plan.unit_count,
                )
            plan = next_plan

        self._state = SyncState.DONE
        _logger.info(
            "%s synchronized after %d batches, %d observations added (%d total)",
            self._config.pair,
            iterations,
            added_total,
            len(self._dataset),
        )
        return SyncResult(
            target=self._target,
            dataset=self._dataset,
            iterations=iterations,
            added=added_total,
            state=self._state,
        )

    async def _run_batch(self, plan: FetchPlan) -> BatchReport:
        batch = f"to_date={format_timestamp(plan.to_date)} units={plan.unit_count}"
        try:
            fetched = await self._fetcher.fetch(plan.to_date, plan.unit_count)
        except Exception as exc:
            raise BatchFetchError(
                f"Fetching batch {batch} failed: {exc}",
                to_date=plan.to_date,
                unit_count=plan.unit_count,
            ) from exc

        before = len(self._dataset)
        merged = merge(self._dataset, fetched)

        try:
            self._repository.save(merged)
        except Exception as exc:
            raise BatchPersistError(
                f"Saving batch {batch} failed: {exc}",
                to_date=plan.to_date,
                unit_count=plan.unit_count,
            ) from exc

        self._dataset = merged
        report = BatchReport(
            plan=plan,
            fetched=len(fetched),
            added=len(merged) - before,
            dataset_size=len(merged),
        )
        _logger.debug("Batch %s: fetched=%d added=%d", batch, report.fetched, report.added)
        return report
