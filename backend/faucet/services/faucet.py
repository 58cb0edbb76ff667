"""Faucet service: claim processing and the administrative surface."""

import logging
import threading
import time
from dataclasses import dataclass
from typing import Callable, Optional, Tuple

from faucet.accounts import is_null_account, normalize_account
from faucet.errors import (
    CooldownNotElapsed,
    FaucetError,
    InsufficientReserve,
    InvalidArgument,
    TransferFailure,
)
from faucet.models import AccountState, AuditKind
from faucet.services.access import AccessController
from faucet.services.audit import AuditLog, AuditRecord
from faucet.services.ledger import ClaimLedger
from faucet.services.parameters import FaucetParameters, ParameterStore, is_integer
from faucet.services.reserve import ReserveGateway

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ClaimReceipt:
    """Outcome of a successful claim."""

    account: str
    amount: int
    claimed_at: int
    next_claim_at: int


class FaucetService:
    """
    Grants `grant_amount` units from the reserve to requesting accounts.

    Every public operation runs under one re-entrant lock, so operations never
    interleave across threads while a reserve that calls back into the service
    on the same thread can still get in. Operations that touch the reserve
    follow one order: validate with reads only, commit local state, then call
    the reserve. A call that comes back in during the transfer therefore sees
    the grant already recorded.

    If the reserve transfer of a claim fails, the ledger write is reverted so
    the account keeps its eligibility, and TransferFailure is raised.
    """

    def __init__(
        self,
        reserve: ReserveGateway,
        reserve_account: str,
        grant_amount: int,
        cooldown_seconds: int,
        administrator: str,
        clock: Optional[Callable[[], int]] = None,
        audit_log: Optional[AuditLog] = None,
    ):
        if not isinstance(reserve, ReserveGateway):
            raise InvalidArgument("reserve must provide balance_of() and transfer()")
        if is_null_account(reserve_account):
            raise InvalidArgument("reserve account must not be the null account")

        self._clock = clock or (lambda: int(time.time()))
        self._lock = threading.RLock()
        self._reserve = reserve
        self.reserve_account = normalize_account(reserve_account)

        self.audit_log = audit_log if audit_log is not None else AuditLog(self._clock)
        self.access_controller = AccessController(administrator, self.audit_log)
        self.parameter_store = ParameterStore(
            grant_amount, cooldown_seconds, self.access_controller, self.audit_log
        )
        self.claim_ledger = ClaimLedger()

    def _now(self) -> int:
        return int(self._clock())

    # Read-only views

    @property
    def administrator(self) -> str:
        return self.access_controller.administrator

    @property
    def parameters(self) -> FaucetParameters:
        return self.parameter_store.current

    def reserve_balance(self) -> int:
        with self._lock:
            return self._reserve.balance_of(self.reserve_account)

    def last_grant(self, account: str) -> int:
        with self._lock:
            return self.claim_ledger.last_grant(normalize_account(account))

    def next_claim_at(self, account: str) -> Optional[int]:
        """When the cooldown for `account` ends, or None if it is not cooling down."""
        with self._lock:
            return self._cooldown_ends(normalize_account(account), self._now())

    def account_state(self, account: str) -> AccountState:
        with self._lock:
            account = normalize_account(account)
            if not self.claim_ledger.has_claimed(account):
                return AccountState.UNCLAIMED
            if self._cooldown_ends(account, self._now()) is not None:
                return AccountState.COOLED
            return AccountState.ELIGIBLE

    def audit_records(
        self, since: int = 0, kind: Optional[AuditKind] = None
    ) -> Tuple[AuditRecord, ...]:
        with self._lock:
            return self.audit_log.records(since=since, kind=kind)

    # Eligibility

    def _cooldown_ends(self, account: str, now: int) -> Optional[int]:
        last = self.claim_ledger.get(account)
        cooldown = self.parameter_store.cooldown_seconds
        if last is None or cooldown == 0:
            return None
        ends = last + cooldown
        return ends if now < ends else None

    def _evaluate(self, account: str, now: int) -> Optional[FaucetError]:
        """The error a claim by `account` at `now` would fail with, if any."""
        if is_null_account(account):
            return InvalidArgument("requester must not be the null account")

        cooldown_ends = self._cooldown_ends(account, now)
        if cooldown_ends is not None:
            return CooldownNotElapsed(
                "cooldown has not elapsed",
                details={
                    "account": account,
                    "last_grant": self.claim_ledger.last_grant(account),
                    "next_claim_at": cooldown_ends,
                },
            )

        grant_amount = self.parameter_store.grant_amount
        balance = self._reserve.balance_of(self.reserve_account)
        if balance < grant_amount:
            return InsufficientReserve(
                "reserve cannot cover a grant",
                details={"balance": balance, "required": grant_amount},
            )
        return None

    def eligibility(self, account: str) -> Optional[FaucetError]:
        """The error `claim(account)` would raise right now, or None."""
        with self._lock:
            return self._evaluate(normalize_account(account), self._now())

    def can_claim(self, account: str) -> bool:
        return self.eligibility(account) is None

    # Claims

    def claim(self, requester: str) -> ClaimReceipt:
        with self._lock:
            account = normalize_account(requester)
            now = self._now()

            error = self._evaluate(account, now)
            if error is not None:
                logger.info("Claim by %r rejected: %s", account, error.code)
                raise error

            amount = self.parameter_store.grant_amount
            previous = self.claim_ledger.get(account)
            claimed_at = now if previous is None else max(now, previous)
            revision = self.claim_ledger.record(account, claimed_at)

            try:
                transferred = self._reserve.transfer(account, amount)
            except Exception as exc:
                self.claim_ledger.revert(account, previous, revision)
                logger.warning("Reserve transfer to %s raised: %s", account, exc)
                raise TransferFailure(
                    "reserve transfer raised an error",
                    details={"account": account, "amount": amount, "error": str(exc)},
                ) from exc
            if not transferred:
                self.claim_ledger.revert(account, previous, revision)
                logger.warning("Reserve transfer of %d to %s failed", amount, account)
                raise TransferFailure(
                    "reserve transfer failed",
                    details={"account": account, "amount": amount},
                )

            self.audit_log.append(
                AuditKind.CLAIMED,
                account,
                {"account": account, "amount": amount, "timestamp": claimed_at},
                timestamp=claimed_at,
            )
            return ClaimReceipt(
                account=account,
                amount=amount,
                claimed_at=claimed_at,
                next_claim_at=claimed_at + self.parameter_store.cooldown_seconds,
            )

    # Administration

    def set_grant_amount(self, caller: str, amount: int) -> None:
        with self._lock:
            self.parameter_store.set_grant_amount(caller, amount)

    def set_cooldown(self, caller: str, seconds: int) -> None:
        with self._lock:
            self.parameter_store.set_cooldown(caller, seconds)

    def transfer_administrator(self, caller: str, new_admin: str) -> None:
        with self._lock:
            self.access_controller.transfer_administrator(caller, new_admin)

    def withdraw(self, caller: str, to: str, amount: int) -> None:
        with self._lock:
            self.access_controller.require_administrator(caller)
            if is_null_account(to):
                raise InvalidArgument("withdrawal recipient must not be the null account")
            if not is_integer(amount) or amount <= 0:
                raise InvalidArgument(
                    "withdrawal amount must be a positive integer",
                    details={"amount": amount},
                )

            actor = normalize_account(caller)
            to = normalize_account(to)
            try:
                transferred = self._reserve.transfer(to, amount)
            except Exception as exc:
                logger.warning("Reserve withdrawal to %s raised: %s", to, exc)
                raise TransferFailure(
                    "reserve transfer raised an error",
                    details={"to": to, "amount": amount, "error": str(exc)},
                ) from exc
            if not transferred:
                raise TransferFailure(
                    "reserve transfer failed", details={"to": to, "amount": amount}
                )

            self.audit_log.append(AuditKind.WITHDRAWN, actor, {"to": to, "amount": amount})
