"""Rate limiter configuration."""

from typing import Dict

from fastapi import Request
from slowapi import Limiter
from slowapi.util import get_remote_address

from faucet.config import Settings

# Current limits; set from settings by configure_limiter()
_limits: Dict[str, str] = {}


def get_account_or_address(request: Request) -> str:
    """Key claims by the requesting account, falling back to the client address."""
    account = request.headers.get("x-account", "").strip()
    return account or get_remote_address(request)


def default_rate_limit() -> str:
    return _limits["default"]


def claim_rate_limit() -> str:
    return _limits["claim"]


# default_limits: Default limit for endpoints without specific decoration
# Disabled until an application configures it.
limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[default_rate_limit],
    enabled=False,
)


def configure_limiter(settings: Settings) -> Limiter:
    """
    Apply the throttling settings of an application to the shared limiter.

    The limiter is process-wide, so the last configured application wins.
    Stored hit counters are cleared.
    """
    _limits["default"] = settings.default_rate_limit
    _limits["claim"] = settings.claim_rate_limit
    limiter.enabled = settings.rate_limit_enabled
    limiter.reset()
    return limiter
