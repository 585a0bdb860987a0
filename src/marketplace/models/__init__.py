"""Core data models for the marketplace registry."""

from marketplace.models.market import Job, JobStatus, Provider
from marketplace.models.result import (
    ErrorCode,
    Failure,
    MarketplaceError,
    Result,
    Success,
)

__all__ = [
    "Job",
    "JobStatus",
    "Provider",
    "ErrorCode",
    "Failure",
    "MarketplaceError",
    "Result",
    "Success",
]
