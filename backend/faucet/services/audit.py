"""Append-only audit log of state-changing operations."""

import logging
import time
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Callable, List, Mapping, Optional, Tuple

from faucet.models import AuditKind

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AuditRecord:
    """Immutable record of one committed operation."""

    sequence: int
    kind: AuditKind
    actor: str
    payload: Mapping[str, Any]
    timestamp: int

    def to_dict(self) -> dict:
        return {
            "sequence": self.sequence,
            "kind": self.kind,
            "actor": self.actor,
            "payload": dict(self.payload),
            "timestamp": self.timestamp,
        }


class AuditLog:
    """
    Order-preserving sequence of audit records.

    Records are only ever appended. Readers get tuples, so nothing handed out
    can be used to change the log.
    """

    def __init__(self, clock: Optional[Callable[[], int]] = None):
        self._clock = clock or (lambda: int(time.time()))
        self._records: List[AuditRecord] = []

    def __len__(self) -> int:
        return len(self._records)

    def append(
        self,
        kind: AuditKind,
        actor: str,
        payload: Mapping[str, Any],
        timestamp: Optional[int] = None,
    ) -> AuditRecord:
        """Append a record and return it."""
        record = AuditRecord(
            sequence=len(self._records) + 1,
            kind=kind,
            actor=actor,
            payload=MappingProxyType(dict(payload)),
            timestamp=self._clock() if timestamp is None else timestamp,
        )
        self._records.append(record)
        logger.info("%s by %s: %s", kind.value, actor, dict(payload))
        return record

    def records(
        self, since: int = 0, kind: Optional[AuditKind] = None
    ) -> Tuple[AuditRecord, ...]:
        """Records with a sequence greater than `since`, optionally of one kind."""
        selected = self._records[max(since, 0):]
        if kind is not None:
            selected = [r for r in selected if r.kind == kind]
        return tuple(selected)

    @property
    def last_sequence(self) -> int:
        return len(self._records)
