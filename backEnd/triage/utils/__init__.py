"""Utility modules for the triage layer."""

from .parallel import CallScheduler, Deadline, is_rate_limit_error, parallel_map

__all__ = [
    "CallScheduler",
    "Deadline",
    "is_rate_limit_error",
    "parallel_map",
]
