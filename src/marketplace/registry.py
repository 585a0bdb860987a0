"""Marketplace registry — the job/provider state machine and admin role.

This is the primary interface for programmatic access to the
marketplace. It holds:
- Jobs (append-only, the job_id is the position in the list)
- Providers (keyed by address)
- The admin identity

Callers are identified by plain strings passed to each operation;
identity is compared by equality only.

All mutating operations return a Result (Success or Failure with an
ErrorCode). Each operation checks its preconditions in a fixed order,
returns on the first violation, and never leaves a partial mutation.
Successful changes are appended to the event log when one is wired.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime
from typing import Any, Callable, Optional

from marketplace.config import RegistryConfig
from marketplace.market.job_state_machine import JobStateMachine
from marketplace.models.market import Job, JobStatus, Provider
from marketplace.models.result import ErrorCode, Failure, Result, Success
from marketplace.persistence.event_log import EventKind, EventLog, EventRecord

logger = logging.getLogger(__name__)


class MarketplaceRegistry:
    """In-memory marketplace of jobs and providers.

    Usage:
        registry = MarketplaceRegistry()

        registry.register_provider("provider-1")
        job_id = registry.create_job("client-1", "render my video").unwrap()
        registry.accept_job("provider-1", job_id)
        registry.complete_job("client-1", job_id)

    Audit trail (optional):
        log = EventLog()
        registry = MarketplaceRegistry(event_log=log)
        # Every successful mutation appends one EventRecord to log.
    """

    def __init__(
        self,
        config: Optional[RegistryConfig] = None,
        event_log: Optional[EventLog] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        config = config or RegistryConfig()
        self._jobs: list[Job] = []
        self._providers: dict[str, Provider] = {}
        self._admin = config.initial_admin
        self._job_counter = 0

        self._event_log = event_log
        self._clock = clock
        # Continue numbering after any events already in a shared log
        self._event_counter = event_log.count if event_log is not None else 0

    # ------------------------------------------------------------------
    # Providers
    # ------------------------------------------------------------------

    def register_provider(self, sender: str) -> Result[bool]:
        """Register sender as an available provider."""
        if sender in self._providers:
            return self._reject(
                ErrorCode.ALREADY_REGISTERED,
                f"Provider already registered: {sender}",
            )

        self._record_event(
            EventKind.PROVIDER_REGISTERED, sender, {"address": sender},
        )
        self._providers[sender] = Provider(address=sender, available=True)
        logger.info("Provider registered: %s", sender)
        return Success(True)

    def toggle_availability(self, sender: str) -> Result[bool]:
        """Flip the availability flag of sender's provider record."""
        provider = self._providers.get(sender)
        if provider is None:
            return self._reject(
                ErrorCode.NOT_REGISTERED,
                f"Provider not registered: {sender}",
            )

        available = not provider.available
        self._record_event(
            EventKind.PROVIDER_AVAILABILITY_TOGGLED,
            sender,
            {"address": sender, "available": available},
        )
        provider.available = available
        logger.info("Provider %s availability set to %s", sender, available)
        return Success(True)

    def get_provider(self, address: str) -> Optional[Provider]:
        """Return a snapshot of the provider record, or None."""
        provider = self._providers.get(address)
        return replace(provider) if provider is not None else None

    def providers(self, available: Optional[bool] = None) -> list[Provider]:
        """List provider snapshots in registration order."""
        return [
            replace(p) for p in self._providers.values()
            if available is None or p.available == available
        ]

    # ------------------------------------------------------------------
    # Jobs
    # ------------------------------------------------------------------

    def create_job(self, sender: str, metadata: str) -> Result[int]:
        """Post a new job. Always succeeds and returns the new job_id."""
        job_id = self._job_counter
        self._record_event(
            EventKind.JOB_CREATED,
            sender,
            {"job_id": job_id, "client": sender, "metadata": metadata},
        )
        self._jobs.append(Job(job_id=job_id, client=sender, metadata=metadata))
        self._job_counter += 1
        logger.info("Job %d created by %s", job_id, sender)
        return Success(job_id)

    def accept_job(self, sender: str, job_id: int) -> Result[bool]:
        """Accept a CREATED job as sender.

        Provider eligibility is checked before the job itself, so an
        unregistered caller sees PROVIDER_UNAVAILABLE even for a
        missing job.
        """
        provider = self._providers.get(sender)
        if provider is None or not provider.available:
            return self._reject(
                ErrorCode.PROVIDER_UNAVAILABLE,
                f"Provider not registered or unavailable: {sender}",
            )

        job = self._lookup_job(job_id)
        if job is None:
            return self._reject(
                ErrorCode.INVALID_JOB_STATE_ACCEPT,
                f"Job not found: {job_id}",
            )
        # Snapshot for rollback
        prior_status = job.status
        errors = JobStateMachine.apply_transition(job, JobStatus.ACCEPTED)
        if errors:
            return self._reject(ErrorCode.INVALID_JOB_STATE_ACCEPT, errors[0])

        self._record_or_restore(
            job, prior_status,
            EventKind.JOB_ACCEPTED,
            sender,
            {"job_id": job.job_id, "provider": sender},
        )
        job.provider = sender
        logger.info("Job %d accepted by %s", job.job_id, sender)
        return Success(True)

    def complete_job(self, sender: str, job_id: int) -> Result[bool]:
        """Mark an ACCEPTED job as COMPLETED. Only the job's client may."""
        job = self._lookup_job(job_id)
        if job is None:
            return self._reject(
                ErrorCode.INVALID_JOB_STATE_COMPLETE,
                f"Job not found: {job_id}",
            )
        # Snapshot for rollback
        prior_status = job.status
        errors = JobStateMachine.apply_transition(job, JobStatus.COMPLETED)
        if errors:
            return self._reject(ErrorCode.INVALID_JOB_STATE_COMPLETE, errors[0])

        if sender != job.client:
            job.status = prior_status
            return self._reject(
                ErrorCode.UNAUTHORIZED_CLIENT,
                f"Only the client of job {job.job_id} may complete it",
            )

        self._record_or_restore(
            job, prior_status,
            EventKind.JOB_COMPLETED,
            sender,
            {"job_id": job.job_id, "provider": job.provider},
        )
        logger.info("Job %d completed by %s", job.job_id, sender)
        return Success(True)

    def get_job(self, job_id: int) -> Optional[Job]:
        """Return a snapshot of the job, or None if job_id is out of range."""
        job = self._lookup_job(job_id)
        return replace(job) if job is not None else None

    def jobs(
        self,
        status: Optional[JobStatus] = None,
        client: Optional[str] = None,
        provider: Optional[str] = None,
    ) -> list[Job]:
        """List job snapshots in id order with optional filters."""
        results: list[Job] = []
        for job in self._jobs:
            if status is not None and job.status != status:
                continue
            if client is not None and job.client != client:
                continue
            if provider is not None and job.provider != provider:
                continue
            results.append(replace(job))
        return results

    @property
    def job_count(self) -> int:
        return self._job_counter

    # ------------------------------------------------------------------
    # Admin
    # ------------------------------------------------------------------

    def get_admin(self) -> str:
        return self._admin

    def set_admin(self, sender: str, new_admin: str) -> Result[bool]:
        """Hand the admin role to new_admin. Only the current admin may."""
        if sender != self._admin:
            return self._reject(
                ErrorCode.UNAUTHORIZED_ADMIN,
                f"Caller is not the admin: {sender}",
            )

        self._record_event(
            EventKind.ADMIN_CHANGED,
            sender,
            {"previous_admin": self._admin, "new_admin": new_admin},
        )
        self._admin = new_admin
        logger.info("Admin changed from %s to %s", sender, new_admin)
        return Success(True)

    # ------------------------------------------------------------------
    # Status
    # ------------------------------------------------------------------

    def status(self) -> dict[str, Any]:
        """Return a summary of registry state."""
        by_status = {s.value: 0 for s in JobStatus}
        for job in self._jobs:
            by_status[job.status.value] += 1
        return {
            "admin": self._admin,
            "jobs": {
                "total": len(self._jobs),
                "by_status": by_status,
            },
            "providers": {
                "total": len(self._providers),
                "available": sum(1 for p in self._providers.values() if p.available),
            },
            "events": self._event_log.count if self._event_log is not None else 0,
        }

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _lookup_job(self, job_id: int) -> Optional[Job]:
        # bool is an int subclass but never a valid id
        if isinstance(job_id, bool) or not isinstance(job_id, int):
            return None
        if 0 <= job_id < len(self._jobs):
            return self._jobs[job_id]
        return None

    def _reject(self, code: ErrorCode, message: str) -> Failure:
        logger.debug("Rejected (%d %s): %s", int(code), code.name, message)
        return Failure(code=code, message=message)

    def _next_event_id(self) -> str:
        """Generate a monotonically increasing unique event ID."""
        self._event_counter += 1
        return f"EVT-{self._event_counter:08d}"

    def _record_event(
        self, kind: EventKind, actor_id: str, payload: dict[str, Any],
    ) -> None:
        """Append an audit event before the state change it describes.

        Raises ValueError on a duplicate event ID.
        """
        if self._event_log is None:
            return
        event = EventRecord.create(
            event_id=self._next_event_id(),
            event_kind=kind,
            actor_id=actor_id,
            payload=payload,
            timestamp_utc=self._clock() if self._clock is not None else None,
        )
        self._event_log.append(event)

    def _record_or_restore(
        self,
        job: Job,
        prior_status: JobStatus,
        kind: EventKind,
        actor_id: str,
        payload: dict[str, Any],
    ) -> None:
        """Record a job event after its transition was applied.

        If recording fails the job's prior status is restored before
        the error propagates.
        """
        try:
            self._record_event(kind, actor_id, payload)
        except ValueError:
            job.status = prior_status
            raise
