"""Marketplace registry — jobs, providers, and an admin role, in memory."""

from marketplace.config import RegistryConfig
from marketplace.models.market import Job, JobStatus, Provider
from marketplace.models.result import (
    ErrorCode,
    Failure,
    MarketplaceError,
    Result,
    Success,
)
from marketplace.persistence.event_log import EventKind, EventLog, EventRecord
from marketplace.registry import MarketplaceRegistry

__all__ = [
    "ErrorCode",
    "EventKind",
    "EventLog",
    "EventRecord",
    "Failure",
    "Job",
    "JobStatus",
    "MarketplaceError",
    "MarketplaceRegistry",
    "Provider",
    "RegistryConfig",
    "Result",
    "Success",
]
