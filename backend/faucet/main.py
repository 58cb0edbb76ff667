"""FastAPI main application."""

import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware

from faucet.config import Settings, get_settings
from faucet.errors import FaucetError
from faucet.limiter import configure_limiter
from faucet.logging_config import setup_logging
from faucet.models import HealthResponse
from faucet.routes.admin import router as admin_router
from faucet.routes.faucet import router as faucet_router
from faucet.services.faucet import FaucetService
from faucet.services.reserve import InMemoryReserve

logger = logging.getLogger(__name__)


def build_faucet(settings: Settings) -> FaucetService:
    """Build a faucet backed by an in-memory reserve from settings."""
    reserve = InMemoryReserve(settings.reserve_account, settings.initial_reserve)
    return FaucetService(
        reserve=reserve,
        reserve_account=settings.reserve_account,
        grant_amount=settings.grant_amount,
        cooldown_seconds=settings.cooldown_seconds,
        administrator=settings.admin_account,
    )


async def faucet_error_handler(request: Request, exc: FaucetError):
    http_exc = exc.to_http_exception()
    return JSONResponse(status_code=http_exc.status_code, content={"detail": http_exc.detail})


def create_app(
    settings: Optional[Settings] = None,
    faucet: Optional[FaucetService] = None,
) -> FastAPI:
    """Create the API around one faucet instance."""
    settings = settings or get_settings()
    setup_logging(settings.log_level)

    app = FastAPI(
        title="Faucet API",
        description="Rate-limited grants from a shared token reserve",
        version="1.0.0"
    )
    app.state.settings = settings
    app.state.faucet = faucet or build_faucet(settings)

    # Set up Limiter
    app.state.limiter = configure_limiter(settings)
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
    app.add_exception_handler(FaucetError, faucet_error_handler)
    app.add_middleware(SlowAPIMiddleware)

    # Security Headers Middleware
    @app.middleware("http")
    async def add_security_headers(request: Request, call_next):
        response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains"
        return response

    # CORS middleware
    origins = settings.allowed_origins.split(",") if settings.allowed_origins != "*" else ["*"]

    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "OPTIONS"],
        allow_headers=["*"],
    )

    # Include routers
    app.include_router(faucet_router)
    app.include_router(admin_router)

    @app.get("/health", response_model=HealthResponse)
    async def health_check():
        """Health check endpoint for container orchestration."""
        return HealthResponse(status="healthy", version="1.0.0")

    logger.info(
        "Faucet ready: admin=%s reserve=%s grant=%d cooldown=%ds",
        app.state.faucet.administrator,
        app.state.faucet.reserve_account,
        app.state.faucet.parameters.grant_amount,
        app.state.faucet.parameters.cooldown_seconds,
    )
    return app


if __name__ == "__main__":
    import uvicorn
    settings = get_settings()
    uvicorn.run(
        create_app(settings),
        host=settings.host,
        port=settings.port,
        reload=False
    )
