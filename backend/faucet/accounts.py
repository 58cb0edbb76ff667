"""Account identifier helpers."""

from typing import Optional

ZERO_ACCOUNT = "0x" + "0" * 40


def normalize_account(account: Optional[str]) -> str:
    """Strip surrounding whitespace; None becomes the empty string."""
    if account is None:
        return ""
    return str(account).strip()


def is_null_account(account: Optional[str]) -> bool:
    """Check whether an account is the null identifier."""
    value = normalize_account(account)
    return value == "" or value.lower() == ZERO_ACCOUNT
