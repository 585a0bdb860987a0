"""Job state machine — enforces forward-only lifecycle transitions.

Job lifecycle:
    CREATED → ACCEPTED → COMPLETED

State semantics:
- CREATED: posted by a client, waiting for a provider.
- ACCEPTED: an available provider has taken the job.
- COMPLETED: terminal — the client confirmed the work.

No state is skipped and no transition reverses. Invalid transitions
return errors and leave the job untouched.
"""

from __future__ import annotations

from marketplace.models.market import Job, JobStatus


# Valid transitions: {from_status: {allowed_to_statuses}}
_TRANSITIONS: dict[JobStatus, set[JobStatus]] = {
    JobStatus.CREATED: {JobStatus.ACCEPTED},
    JobStatus.ACCEPTED: {JobStatus.COMPLETED},
    # Terminal
    JobStatus.COMPLETED: set(),
}


class JobStateMachine:
    """Validates and applies job status transitions.

    Pure computation: authorisation checks and audit recording are
    handled by the registry.
    """

    @staticmethod
    def validate_transition(job: Job, target: JobStatus) -> list[str]:
        """Check if a transition is valid. Returns errors (empty = OK)."""
        current = job.status
        allowed = _TRANSITIONS.get(current, set())

        if target not in allowed:
            allowed_str = ", ".join(s.value for s in sorted(allowed, key=lambda x: x.value))
            return [
                f"Invalid job transition: {current.value} → {target.value}. "
                f"Allowed from {current.value}: [{allowed_str}]"
            ]
        return []

    @staticmethod
    def apply_transition(job: Job, target: JobStatus) -> list[str]:
        """Validate and apply a status transition.

        Returns errors if the transition is invalid. On success,
        mutates job.status and returns an empty list.
        """
        errors = JobStateMachine.validate_transition(job, target)
        if errors:
            return errors
        job.status = target
        return []

    @staticmethod
    def is_terminal(status: JobStatus) -> bool:
        return not _TRANSITIONS.get(status)

    @staticmethod
    def valid_transitions(status: JobStatus) -> set[JobStatus]:
        """Return the set of valid target statuses from the given status."""
        return set(_TRANSITIONS.get(status, set()))
