"""Marketplace models — jobs and providers.

Clients post jobs, registered providers accept them, and the posting
client confirms completion.

Job lifecycle: CREATED → ACCEPTED → COMPLETED
There is no cancellation or rejection path.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Optional


class JobStatus(str, enum.Enum):
    """Lifecycle state of a job."""
    CREATED = "created"
    ACCEPTED = "accepted"
    COMPLETED = "completed"


@dataclass
class Job:
    """A unit of work posted by a client.

    The job_id is the job's position in the registry and is never reused.
    Metadata is opaque to the registry.
    """
    job_id: int
    client: str
    metadata: str
    status: JobStatus = JobStatus.CREATED
    provider: Optional[str] = None


@dataclass
class Provider:
    """An entity eligible to accept jobs while available."""
    address: str
    available: bool = True
