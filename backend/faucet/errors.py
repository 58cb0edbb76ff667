"""
Faucet error taxonomy.

Every error aborts the operation that raised it. Each subclass knows how to
present itself over HTTP so routes never have to map status codes by hand.
"""

from typing import Any, Dict, Optional

from fastapi import HTTPException, status


class FaucetError(Exception):
    """Base exception for all faucet errors."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "message": self.message,
            "code": self.code,
            "details": self.details,
        }

    def to_http_exception(self) -> HTTPException:
        return HTTPException(status_code=self.status_code, detail=self.to_dict())


class NotAuthorized(FaucetError):
    """Caller is not the administrator."""

    status_code = status.HTTP_403_FORBIDDEN


class InvalidArgument(FaucetError):
    """Zero amount, null identity or otherwise malformed input."""

    status_code = status.HTTP_400_BAD_REQUEST


class CooldownNotElapsed(FaucetError):
    """The account claimed too recently."""

    status_code = status.HTTP_429_TOO_MANY_REQUESTS


class InsufficientReserve(FaucetError):
    """The reserve holds less than one grant."""

    status_code = status.HTTP_409_CONFLICT


class TransferFailure(FaucetError):
    """The reserve reported or caused a failed transfer."""

    status_code = status.HTTP_502_BAD_GATEWAY
