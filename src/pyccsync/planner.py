"""Planning of the next history window to request.

The remote source only serves windows of the form "N units ending at T",
so every plan is expressed as ``(to_date, unit_count)``.  Each call looks at
which edge of the local coverage is incomplete:

* the newest edge already reaches ``target.end``: grow the tail backwards
  from the oldest known point toward ``target.start``;
* otherwise: grow the head forward from the newest known point toward
  ``target.end``.

Plans are pure functions of the dataset and the target range and are
recomputed after every merge.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import UTC, datetime

from pyccsync._constants import DATE_DISPLAY_FORMAT, HOUR_SECONDS, MAX_UNITS_IN_BATCH
from pyccsync.dataset import coverage
from pyccsync.models.observation import Observation

_logger = logging.getLogger(__name__)


def format_timestamp(ts: int) -> str:
    """Render epoch seconds for log and console output (UTC)."""
    return datetime.fromtimestamp(ts, tz=UTC).strftime(DATE_DISPLAY_FORMAT)


def truncate_to_unit(ts: int, unit_seconds: int = HOUR_SECONDS) -> int:
    """Round *ts* down to the start of its unit."""
    return ts - ts % unit_seconds


@dataclass(frozen=True)
class TargetRange:
    """Span ``[start, end]`` (epoch seconds) the dataset should cover."""

    start: int
    end: int

    @classmethod
    def from_start_date(
        cls,
        start: datetime,
        now: datetime | None = None,
        *,
        unit_seconds: int = HOUR_SECONDS,
    ) -> TargetRange:
        """Build the range from *start* until *now* truncated to the unit."""
        if now is None:
            now = datetime.now(UTC)
        return cls(
            start=int(start.timestamp()),
            end=truncate_to_unit(int(now.timestamp()), unit_seconds),
        )


@dataclass(frozen=True)
class FetchPlan:
    """Next window to request: *unit_count* units ending at *to_date*.

    A ``unit_count`` of zero means the target range is covered.
    """

    to_date: int
    unit_count: int

    @property
    def done(self) -> bool:
        return self.unit_count == 0


def units_between(a: int, b: int, *, unit_seconds: int = HOUR_SECONDS, max_units: int = MAX_UNITS_IN_BATCH) -> int:
    """Whole units from *a* to *b*, clamped to ``[0, max_units]``."""
    return min(max_units, max(0, (b - a) // unit_seconds))


def next_fetch_plan(
    target: TargetRange,
    dataset: Sequence[Observation],
    *,
    unit_seconds: int = HOUR_SECONDS,
    max_units_in_batch: int = MAX_UNITS_IN_BATCH,
) -> FetchPlan:
    """Compute the next window to request for *dataset*.

    Parameters
    ----------
    target : TargetRange
        Span the dataset should eventually cover.
    dataset : sequence of Observation
        Current newest-first dataset.
    unit_seconds : int
        Length of one unit of the series.
    max_units_in_batch : int
        Upper bound of units a single request may ask for.

    Returns
    -------
    FetchPlan
        The window to request; ``plan.done`` when nothing is missing.
    """
    # An empty dataset reports target.end on both edges, so the very first
    # plan always extends backwards from "now".
    data_start, data_end = coverage(dataset, target.end)

    if data_end == target.end:
        to_date = data_start
        unit_count = units_between(
            target.start,
            data_start,
            unit_seconds=unit_seconds,
            max_units=max_units_in_batch,
        )
    else:
        unit_count = units_between(
            data_end,
            target.end,
            unit_seconds=unit_seconds,
            max_units=max_units_in_batch,
        )
        to_date = data_end + unit_count * unit_seconds

    _logger.info("Next window: to_date=%s units=%d", format_timestamp(to_date), unit_count)
    return FetchPlan(to_date=to_date, unit_count=unit_count)
