"""Per-account record of the last successful grant."""

from typing import Dict, Iterator, Optional


class ClaimLedger:
    """
    Maps account -> timestamp of its last grant.

    Entries are created on an account's first claim and only move forward
    afterwards. The single exception is `revert`, which undoes a write whose
    claim failed before it could complete. Each write bumps a per-account
    revision so a revert can tell whether anything was committed on top of it.
    """

    def __init__(self):
        self._last_grant: Dict[str, int] = {}
        self._revisions: Dict[str, int] = {}

    def __contains__(self, account: str) -> bool:
        return account in self._last_grant

    def __len__(self) -> int:
        return len(self._last_grant)

    def __iter__(self) -> Iterator[str]:
        return iter(self._last_grant)

    def has_claimed(self, account: str) -> bool:
        return account in self._last_grant

    def get(self, account: str) -> Optional[int]:
        """Timestamp of the last grant, or None if the account never claimed."""
        return self._last_grant.get(account)

    def last_grant(self, account: str) -> int:
        """Timestamp of the last grant; 0 means never claimed."""
        return self._last_grant.get(account, 0)

    def record(self, account: str, timestamp: int) -> int:
        """Store a grant timestamp and return the new revision for the account."""
        previous = self._last_grant.get(account)
        if previous is not None and timestamp < previous:
            raise ValueError(
                f"grant timestamp for {account} would move backwards "
                f"({previous} -> {timestamp})"
            )
        self._last_grant[account] = timestamp
        revision = self._revisions.get(account, 0) + 1
        self._revisions[account] = revision
        return revision

    def revert(self, account: str, previous: Optional[int], revision: int) -> bool:
        """
        Restore the value an account held before the write that produced
        `revision`. Does nothing (and returns False) if a later write exists.
        """
        if self._revisions.get(account) != revision:
            return False
        if previous is None:
            del self._last_grant[account]
        else:
            self._last_grant[account] = previous
        self._revisions[account] = revision + 1
        return True
