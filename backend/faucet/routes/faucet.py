"""Public faucet routes."""

from typing import Optional

from fastapi import APIRouter, Depends, Header, Query, Request

from faucet.dependencies import get_faucet, verify_api_key
from faucet.limiter import claim_rate_limit, get_account_or_address, limiter
from faucet.models import (
    AccountStatusResponse,
    AuditKind,
    AuditLogResponse,
    AuditRecordResponse,
    ClaimResponse,
    ParametersResponse,
    ReserveResponse,
)
from faucet.services.faucet import FaucetService


router = APIRouter(prefix="/api", tags=["faucet"], dependencies=[Depends(verify_api_key)])


@router.post("/claim", response_model=ClaimResponse)
@limiter.limit(claim_rate_limit, key_func=get_account_or_address)
async def claim(
    request: Request,
    x_account: str = Header(...),
    faucet: FaucetService = Depends(get_faucet),
):
    """Claim one grant for the calling account."""
    receipt = faucet.claim(x_account)
    return ClaimResponse(
        account=receipt.account,
        amount=receipt.amount,
        claimed_at=receipt.claimed_at,
        next_claim_at=receipt.next_claim_at,
    )


@router.get("/accounts/{account}", response_model=AccountStatusResponse)
async def get_account_status(account: str, faucet: FaucetService = Depends(get_faucet)):
    """Report whether an account can claim right now."""
    error = faucet.eligibility(account)
    return AccountStatusResponse(
        account=account,
        can_claim=error is None,
        state=faucet.account_state(account),
        last_grant=faucet.last_grant(account),
        next_claim_at=faucet.next_claim_at(account),
        reason=error.code if error else None,
    )


@router.get("/reserve", response_model=ReserveResponse)
async def get_reserve(faucet: FaucetService = Depends(get_faucet)):
    """Get the reserve balance."""
    return ReserveResponse(
        reserve_account=faucet.reserve_account,
        balance=faucet.reserve_balance(),
    )


@router.get("/parameters", response_model=ParametersResponse)
async def get_parameters(faucet: FaucetService = Depends(get_faucet)):
    """Get the current distribution parameters."""
    params = faucet.parameters
    return ParametersResponse(
        grant_amount=params.grant_amount,
        cooldown_seconds=params.cooldown_seconds,
        administrator=faucet.administrator,
    )


@router.get("/audit", response_model=AuditLogResponse)
async def get_audit_log(
    since: int = Query(0, ge=0),
    kind: Optional[AuditKind] = None,
    faucet: FaucetService = Depends(get_faucet),
):
    """List audit records after the `since` cursor."""
    records = faucet.audit_records(since=since, kind=kind)
    return AuditLogResponse(
        records=[AuditRecordResponse(**record.to_dict()) for record in records],
        last_sequence=faucet.audit_log.last_sequence,
    )
