"""Pydantic models for request/response schemas."""

from pydantic import BaseModel
from typing import Any, Dict, Optional, List
from enum import Enum


class AuditKind(str, Enum):
    """Kinds of audit records."""
    CLAIMED = "Claimed"
    GRANT_AMOUNT_CHANGED = "GrantAmountChanged"
    COOLDOWN_CHANGED = "CooldownChanged"
    ADMINISTRATOR_CHANGED = "AdministratorChanged"
    WITHDRAWN = "Withdrawn"


class AccountState(str, Enum):
    """Claim state of an account."""
    UNCLAIMED = "unclaimed"
    COOLED = "cooled"
    ELIGIBLE = "eligible"


class ClaimResponse(BaseModel):
    """Response model for a successful claim."""
    account: str
    amount: int
    claimed_at: int  # epoch seconds
    next_claim_at: int  # epoch seconds


class AccountStatusResponse(BaseModel):
    """Claim eligibility of a single account."""
    account: str
    can_claim: bool
    state: AccountState
    last_grant: int = 0  # 0 means never claimed
    next_claim_at: Optional[int] = None
    reason: Optional[str] = None  # error code claim would raise


class ReserveResponse(BaseModel):
    """Current reserve balance."""
    reserve_account: str
    balance: int


class ParametersResponse(BaseModel):
    """Current distribution parameters."""
    grant_amount: int
    cooldown_seconds: int
    administrator: str


class SetGrantAmountRequest(BaseModel):
    """Request model for changing the grant amount."""
    amount: int


class SetCooldownRequest(BaseModel):
    """Request model for changing the cooldown."""
    seconds: int


class TransferAdministratorRequest(BaseModel):
    """Request model for handing over the administrator role."""
    new_admin: str


class WithdrawRequest(BaseModel):
    """Request model for withdrawing from the reserve."""
    to: str
    amount: int


class WithdrawResponse(BaseModel):
    """Response model for a withdrawal."""
    to: str
    amount: int
    balance: int  # reserve balance after the withdrawal


class AuditRecordResponse(BaseModel):
    """A single audit record."""
    sequence: int
    kind: AuditKind
    actor: str
    payload: Dict[str, Any]
    timestamp: int


class AuditLogResponse(BaseModel):
    """Audit records after a cursor."""
    records: List[AuditRecordResponse] = []
    last_sequence: int = 0


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    version: str = "1.0.0"
