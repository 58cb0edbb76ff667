"""Administrator routes. The caller is identified by the X-Account header."""

from fastapi import APIRouter, Depends, Header

from faucet.accounts import normalize_account
from faucet.dependencies import get_faucet, verify_api_key
from faucet.models import (
    ParametersResponse,
    SetCooldownRequest,
    SetGrantAmountRequest,
    TransferAdministratorRequest,
    WithdrawRequest,
    WithdrawResponse,
)
from faucet.services.faucet import FaucetService

router = APIRouter(
    prefix="/api/admin", tags=["admin"], dependencies=[Depends(verify_api_key)]
)


def _parameters(faucet: FaucetService) -> ParametersResponse:
    params = faucet.parameters
    return ParametersResponse(
        grant_amount=params.grant_amount,
        cooldown_seconds=params.cooldown_seconds,
        administrator=faucet.administrator,
    )


@router.put("/grant-amount", response_model=ParametersResponse)
async def set_grant_amount(
    body: SetGrantAmountRequest,
    x_account: str = Header(...),
    faucet: FaucetService = Depends(get_faucet),
):
    faucet.set_grant_amount(x_account, body.amount)
    return _parameters(faucet)


@router.put("/cooldown", response_model=ParametersResponse)
async def set_cooldown(
    body: SetCooldownRequest,
    x_account: str = Header(...),
    faucet: FaucetService = Depends(get_faucet),
):
    faucet.set_cooldown(x_account, body.seconds)
    return _parameters(faucet)


@router.put("/administrator", response_model=ParametersResponse)
async def transfer_administrator(
    body: TransferAdministratorRequest,
    x_account: str = Header(...),
    faucet: FaucetService = Depends(get_faucet),
):
    """Hand the administrator role to another account."""
    faucet.transfer_administrator(x_account, body.new_admin)
    return _parameters(faucet)


@router.post("/withdraw", response_model=WithdrawResponse)
async def withdraw(
    body: WithdrawRequest,
    x_account: str = Header(...),
    faucet: FaucetService = Depends(get_faucet),
):
    """Move unused reserve to another account."""
    faucet.withdraw(x_account, body.to, body.amount)
    return WithdrawResponse(
        to=normalize_account(body.to), amount=body.amount, balance=faucet.reserve_balance()
    )
