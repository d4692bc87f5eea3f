"""pyccsync - Incremental sync of hourly pair prices into a local JSON cache."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("pyccsync")
except PackageNotFoundError:
    __version__ = "0+local"
from pyccsync.client import CcClient, MockFetcher
from pyccsync.config import SyncConfig
from pyccsync.dataset import coverage, merge, missing_timestamps
from pyccsync.exceptions import (
    BatchFetchError,
    BatchPersistError,
    CcApiError,
    CcConfigError,
    CcError,
    CcPersistenceError,
    CcTransportError,
    SyncAbortedError,
)
from pyccsync.models import HistoryResponse, Observation
from pyccsync.planner import FetchPlan, TargetRange, next_fetch_plan, units_between
from pyccsync.storage import JsonFileRepository
from pyccsync.sync import BatchReport, SyncDriver, SyncResult, SyncState

__all__ = [
    "__version__",
    "BatchFetchError",
    "BatchPersistError",
    "BatchReport",
    "CcApiError",
    "CcClient",
    "CcConfigError",
    "CcError",
    "CcPersistenceError",
    "CcTransportError",
    "FetchPlan",
    "HistoryResponse",
    "JsonFileRepository",
    "MockFetcher",
    "Observation",
    "SyncAbortedError",
    "SyncConfig",
    "SyncDriver",
    "SyncResult",
    "SyncState",
    "TargetRange",
    "coverage",
    "merge",
    "missing_timestamps",
    "next_fetch_plan",
    "units_between",
]
