"""Distribution parameters: grant amount and cooldown."""

from dataclasses import dataclass, replace

from faucet.errors import InvalidArgument
from faucet.models import AuditKind
from faucet.services.access import AccessController
from faucet.services.audit import AuditLog


def is_integer(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def validate_grant_amount(amount) -> int:
    if not is_integer(amount) or amount <= 0:
        raise InvalidArgument(
            "grant amount must be a positive integer", details={"amount": amount}
        )
    return amount


def validate_cooldown(seconds) -> int:
    if not is_integer(seconds) or seconds < 0:
        raise InvalidArgument(
            "cooldown must be a non-negative integer", details={"seconds": seconds}
        )
    return seconds


@dataclass(frozen=True)
class FaucetParameters:
    """Snapshot of the distribution parameters."""

    grant_amount: int
    cooldown_seconds: int  # 0 disables rate limiting

    @property
    def rate_limited(self) -> bool:
        return self.cooldown_seconds > 0


class ParameterStore:
    """
    Current distribution parameters, changed only by the administrator.

    Each setter checks authorization, then validates, then swaps in a new
    snapshot, so a rejected call leaves the old snapshot in place.
    """

    def __init__(
        self,
        grant_amount: int,
        cooldown_seconds: int,
        access: AccessController,
        audit_log: AuditLog,
    ):
        self._current = FaucetParameters(
            grant_amount=validate_grant_amount(grant_amount),
            cooldown_seconds=validate_cooldown(cooldown_seconds),
        )
        self._access = access
        self._audit = audit_log

    @property
    def current(self) -> FaucetParameters:
        return self._current

    @property
    def grant_amount(self) -> int:
        return self._current.grant_amount

    @property
    def cooldown_seconds(self) -> int:
        return self._current.cooldown_seconds

    def set_grant_amount(self, caller: str, amount: int) -> None:
        self._access.require_administrator(caller)
        validate_grant_amount(amount)

        old_amount = self._current.grant_amount
        self._current = replace(self._current, grant_amount=amount)
        self._audit.append(
            AuditKind.GRANT_AMOUNT_CHANGED,
            self._access.administrator,
            {"old_amount": old_amount, "new_amount": amount},
        )

    def set_cooldown(self, caller: str, seconds: int) -> None:
        self._access.require_administrator(caller)
        validate_cooldown(seconds)

        old_cooldown = self._current.cooldown_seconds
        self._current = replace(self._current, cooldown_seconds=seconds)
        self._audit.append(
            AuditKind.COOLDOWN_CHANGED,
            self._access.administrator,
            {"old_cooldown": old_cooldown, "new_cooldown": seconds},
        )
