"""Reserve gateway: the external ledger the faucet pays grants from."""

import logging
from typing import Callable, Dict, Optional, Protocol, runtime_checkable

logger = logging.getLogger(__name__)


@runtime_checkable
class ReserveGateway(Protocol):
    """
    Capability the faucet needs from an asset ledger.

    `transfer` moves `amount` units from the faucet's reserve to `to` and
    reports the outcome. It should return False rather than raise for an
    ordinary shortfall. It may call back into the faucet before returning.
    """

    def balance_of(self, holder: str) -> int:
        ...

    def transfer(self, to: str, amount: int) -> bool:
        ...


class InMemoryReserve:
    """Process-local balance table owned by a single reserve holder."""

    def __init__(
        self,
        holder: str,
        initial_balance: int = 0,
        on_transfer: Optional[Callable[[str, int], None]] = None,
    ):
        if initial_balance < 0:
            raise ValueError("initial balance must be non-negative")
        self.holder = holder
        self.balances: Dict[str, int] = {holder: initial_balance}
        self.on_transfer = on_transfer

    def balance_of(self, holder: str) -> int:
        return self.balances.get(holder, 0)

    def fund(self, amount: int) -> int:
        """Top up the reserve from outside and return the new balance."""
        if amount <= 0:
            raise ValueError("funding amount must be positive")
        self.balances[self.holder] += amount
        logger.info("Reserve %s funded with %d", self.holder, amount)
        return self.balances[self.holder]

    def transfer(self, to: str, amount: int) -> bool:
        if amount <= 0 or self.balances[self.holder] < amount:
            logger.warning(
                "Reserve transfer of %d to %s refused (balance %d)",
                amount, to, self.balances[self.holder],
            )
            return False

        self.balances[self.holder] -= amount
        self.balances[to] = self.balances.get(to, 0) + amount
        if self.on_transfer is not None:
            # Runs before control returns to the caller, like a token hook.
            # A raising hook undoes the transfer.
            try:
                self.on_transfer(to, amount)
            except Exception:
                self.balances[to] -= amount
                self.balances[self.holder] += amount
                raise
        return True
