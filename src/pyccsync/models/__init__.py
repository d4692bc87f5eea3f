"""Data models for pyccsync."""

from pyccsync.models.history import HistoryResponse
from pyccsync.models.observation import Observation

__all__ = [
    "HistoryResponse",
    "Observation",
]
