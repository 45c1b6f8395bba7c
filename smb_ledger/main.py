"""
SMB Ledger - FastAPI Application.

This is the entry point for the application.
All routers and the ledger error handler are registered here.
"""

import structlog
import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from smb_ledger.config import get_settings
from smb_ledger.errors import LedgerError
from smb_ledger.logging_config import configure_logging
from smb_ledger.api.health import router as health_router
from smb_ledger.api.companies import router as companies_router
from smb_ledger.api.accounts import router as accounts_router
from smb_ledger.api.journals import router as journals_router
from smb_ledger.api.reports import router as reports_router
from smb_ledger.api.documents import router as documents_router
from smb_ledger.api.banking import router as banking_router
from smb_ledger.api.reconciliation import router as reconciliation_router
from smb_ledger.api.recurring import router as recurring_router

settings = get_settings()
configure_logging()

logger = structlog.get_logger(__name__)

app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Double-entry ledger core for small-business accounting",
)


@app.exception_handler(LedgerError)
async def ledger_error_handler(request: Request, exc: LedgerError):
    """Render every ledger error as a structured failure body."""
    if exc.status_code >= 500:
        logger.error(
            "request_failed",
            path=request.url.path,
            error_type=type(exc).__name__,
            error=str(exc),
        )
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "success": False,
            "error": str(exc),
            "error_type": type(exc).__name__,
        },
    )


# Register routers
app.include_router(health_router)
app.include_router(companies_router)
app.include_router(accounts_router)
app.include_router(journals_router)
app.include_router(reports_router)
app.include_router(documents_router)
app.include_router(banking_router)
app.include_router(reconciliation_router)
app.include_router(recurring_router)


def run() -> None:
    """Serve the app with uvicorn on the configured host and port."""
    uvicorn.run(
        "smb_ledger.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
        log_level=settings.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    run()
