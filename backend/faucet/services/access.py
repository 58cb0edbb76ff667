"""Administrator identity and authorization."""

import logging

from faucet.accounts import is_null_account, normalize_account
from faucet.errors import InvalidArgument, NotAuthorized
from faucet.models import AuditKind
from faucet.services.audit import AuditLog

logger = logging.getLogger(__name__)


class AccessController:
    """Holds the current administrator and gates privileged operations."""

    def __init__(self, administrator: str, audit_log: AuditLog):
        if is_null_account(administrator):
            raise InvalidArgument("administrator must not be the null account")
        self._administrator = normalize_account(administrator)
        self._audit = audit_log

    @property
    def administrator(self) -> str:
        return self._administrator

    def is_administrator(self, caller: str) -> bool:
        return not is_null_account(caller) and normalize_account(caller) == self._administrator

    def require_administrator(self, caller: str) -> None:
        """Raise NotAuthorized unless `caller` is the administrator."""
        if not self.is_administrator(caller):
            logger.warning("Rejected privileged call from %r", caller)
            raise NotAuthorized(
                "caller is not the administrator",
                details={"caller": normalize_account(caller)},
            )

    def transfer_administrator(self, caller: str, new_admin: str) -> None:
        self.require_administrator(caller)
        if is_null_account(new_admin):
            raise InvalidArgument("new administrator must not be the null account")

        old_admin = self._administrator
        self._administrator = normalize_account(new_admin)
        self._audit.append(
            AuditKind.ADMINISTRATOR_CHANGED,
            old_admin,
            {"old_admin": old_admin, "new_admin": self._administrator},
        )
