"""Append-only event log — the audit trail of registry state changes.

Every successful mutation of the marketplace registry produces an event
record. Events are immutable once written and each carries a SHA-256
hash of its canonical JSON form, so the sequence can be verified by a
third party. Rejected operations produce no event.

The log lives in memory only.
"""

from __future__ import annotations

import enum
import hashlib
import json
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Optional


class EventKind(str, enum.Enum):
    """Classification of registry events."""
    PROVIDER_REGISTERED = "provider_registered"
    PROVIDER_AVAILABILITY_TOGGLED = "provider_availability_toggled"
    JOB_CREATED = "job_created"
    JOB_ACCEPTED = "job_accepted"
    JOB_COMPLETED = "job_completed"
    ADMIN_CHANGED = "admin_changed"


def _canonical_hash(
    event_id: str,
    event_kind: str,
    timestamp_utc: str,
    actor_id: str,
    payload: dict[str, Any],
) -> str:
    canonical = json.dumps(
        {
            "event_id": event_id,
            "event_kind": event_kind,
            "timestamp_utc": timestamp_utc,
            "actor_id": actor_id,
            "payload": payload,
        },
        sort_keys=True,
        ensure_ascii=False,
    ).encode("utf-8", "surrogatepass")
    return f"sha256:{hashlib.sha256(canonical).hexdigest()}"


@dataclass(frozen=True)
class EventRecord:
    """A single immutable event in the registry log.

    The event_hash is computed at creation time from the other fields.
    """
    event_id: str
    event_kind: EventKind
    timestamp_utc: str
    actor_id: str
    payload: dict[str, Any]
    event_hash: str  # SHA-256 of canonical JSON

    @staticmethod
    def create(
        event_id: str,
        event_kind: EventKind,
        actor_id: str,
        payload: dict[str, Any],
        timestamp_utc: Optional[datetime] = None,
    ) -> EventRecord:
        """Create a new event record with computed hash."""
        ts = timestamp_utc or datetime.now(timezone.utc)
        # Naive datetimes are taken as local time
        ts = ts.astimezone(timezone.utc)
        ts_str = ts.strftime("%Y-%m-%dT%H:%M:%SZ")
        return EventRecord(
            event_id=event_id,
            event_kind=event_kind,
            timestamp_utc=ts_str,
            actor_id=actor_id,
            payload=payload,
            event_hash=_canonical_hash(
                event_id, event_kind.value, ts_str, actor_id, payload,
            ),
        )

    def verify(self) -> bool:
        """Recompute the canonical hash and compare with the stored one."""
        expected = _canonical_hash(
            self.event_id,
            self.event_kind.value,
            self.timestamp_utc,
            self.actor_id,
            self.payload,
        )
        return expected == self.event_hash


class EventLog:
    """Append-only in-memory event log.

    Events can only be appended, never modified or deleted.
    """

    def __init__(self) -> None:
        self._events: list[EventRecord] = []
        self._event_ids: set[str] = set()

    def append(self, event: EventRecord) -> None:
        """Append an event to the log.

        Raises ValueError if event_id is a duplicate (replay protection).
        """
        if event.event_id in self._event_ids:
            raise ValueError(f"Duplicate event ID: {event.event_id}")

        self._events.append(event)
        self._event_ids.add(event.event_id)

    def events(self, kind: Optional[EventKind] = None) -> list[EventRecord]:
        """Return events, optionally filtered by kind."""
        if kind is None:
            return list(self._events)
        return [e for e in self._events if e.event_kind == kind]

    def events_for_actor(self, actor_id: str) -> list[EventRecord]:
        return [e for e in self._events if e.actor_id == actor_id]

    @property
    def count(self) -> int:
        return len(self._events)

    @property
    def last_event(self) -> Optional[EventRecord]:
        return self._events[-1] if self._events else None
