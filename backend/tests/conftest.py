import pytest
from fastapi.testclient import TestClient

from faucet.config import Settings
from faucet.main import create_app
from faucet.services.faucet import FaucetService
from faucet.services.reserve import InMemoryReserve

ADMIN = "admin"
RESERVE = "faucet-reserve"


class ManualClock:
    """Clock that only moves when told to."""

    def __init__(self, now: int = 0):
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, seconds: int) -> None:
        self.now += seconds


class ScriptedReserve(InMemoryReserve):
    """In-memory reserve whose transfers can be told to fail or raise."""

    def __init__(self, holder: str, initial_balance: int = 0):
        super().__init__(holder, initial_balance)
        self.fail = False
        self.error = None
        self.transfers = []

    def transfer(self, to: str, amount: int) -> bool:
        self.transfers.append((to, amount))
        if self.error is not None:
            raise self.error
        if self.fail:
            return False
        return super().transfer(to, amount)


@pytest.fixture
def clock():
    return ManualClock()


@pytest.fixture
def reserve():
    return ScriptedReserve(RESERVE, 100)


@pytest.fixture
def faucet(reserve, clock):
    """grant 5, one-day cooldown, reserve of 100."""
    return FaucetService(
        reserve=reserve,
        reserve_account=RESERVE,
        grant_amount=5,
        cooldown_seconds=86400,
        administrator=ADMIN,
        clock=clock,
    )


@pytest.fixture
def settings():
    return Settings(
        admin_account=ADMIN,
        reserve_account=RESERVE,
        initial_reserve=100,
        grant_amount=5,
        cooldown_seconds=86400,
        rate_limit_enabled=False,
        api_key=None,
    )


@pytest.fixture
def client(settings, faucet):
    return TestClient(create_app(settings, faucet))
