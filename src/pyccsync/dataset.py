"""Ordered, duplicate-free collection of observations.

A dataset is a plain ``list[Observation]`` kept newest first.  It is only
ever changed through :func:`merge`, which is the single place where
ordering and uniqueness are enforced.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from pyccsync.models.observation import Observation

Dataset = list[Observation]


def coverage(dataset: Sequence[Observation], fallback: int) -> tuple[int, int]:
    """Return ``(oldest, newest)`` timestamps of a newest-first dataset.

    An empty dataset reports *fallback* for both edges.
    """
    if not dataset:
        return fallback, fallback
    return dataset[-1].timestamp, dataset[0].timestamp


def merge(existing: Iterable[Observation], incoming: Iterable[Observation]) -> Dataset:
    """Combine two batches into a newest-first dataset without duplicates.

    When both sides hold the same timestamp the copy seen first wins, so
    already stored observations are kept over re-fetched ones.
    """
    by_timestamp: dict[int, Observation] = {}
    for source in (existing, incoming):
        for observation in source:
            by_timestamp.setdefault(observation.timestamp, observation)
    return sorted(by_timestamp.values(), key=lambda o: o.timestamp, reverse=True)


def missing_timestamps(
    dataset: Iterable[Observation],
    start: int,
    end: int,
    unit_seconds: int,
) -> list[int]:
    """List unit-aligned timestamps in ``[start, end]`` absent from *dataset*.

    Only edge gaps are ever planned for; this reports interior holes the
    remote source left behind.
    """
    if end < start:
        return []
    present = {o.timestamp for o in dataset}
    first = start + (-start % unit_seconds)
    return [ts for ts in range(first, end + 1, unit_seconds) if ts not in present]
