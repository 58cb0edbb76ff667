"""Request dependencies shared by the routers."""

from typing import Optional

from fastapi import Header, HTTPException, Request

from faucet.services.faucet import FaucetService


def get_faucet(request: Request) -> FaucetService:
    """The faucet instance owned by the running application."""
    return request.app.state.faucet


async def verify_api_key(request: Request, x_api_key: Optional[str] = Header(None)):
    """Verify the API key from request headers when one is configured."""
    expected = request.app.state.settings.api_key
    if expected and x_api_key != expected:
        raise HTTPException(status_code=403, detail="Invalid API Key")
    return x_api_key
