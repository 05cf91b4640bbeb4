"""
Coin Ledger — FastAPI Application.

This is the entry point for the application.
All routers and error handlers are registered here.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from coin_ledger.config import get_settings
from coin_ledger.errors import LedgerError
from coin_ledger.api.health import router as health_router
from coin_ledger.api.accounts import router as accounts_router
from coin_ledger.api.ledger import router as ledger_router
from coin_ledger.api.rewards import router as rewards_router

settings = get_settings()

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    debug=settings.DEBUG,
    description="Coin balances and audit trail for the study/quiz platform",
)


@app.exception_handler(LedgerError)
async def ledger_error_handler(_: Request, exc: LedgerError) -> JSONResponse:
    """Convert ledger exceptions into structured error responses."""
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(
    _: Request,
    exc: RequestValidationError,
) -> JSONResponse:
    """
    Normalize validation failures into the ledger error shape.

    A malformed amount (e.g. 2.5 or "ten") is an InvalidAmount,
    everything else is a generic InvalidRequest.
    """
    errors = exc.errors()
    message = errors[0].get("msg", "Invalid request") if errors else "Invalid request"
    amount_fields = {"amount", "cost", "correct_answers", "initial_balance"}
    if any(amount_fields.intersection(map(str, e.get("loc", ()))) for e in errors):
        return JSONResponse(
            status_code=400,
            content={"kind": "InvalidAmount", "message": message},
        )
    return JSONResponse(
        status_code=422,
        content={"kind": "InvalidRequest", "message": message},
    )


# Register routers
app.include_router(health_router)
app.include_router(accounts_router)
app.include_router(ledger_router)
app.include_router(rewards_router)
