"""
Account Core API Application Factory
"""

from typing import Optional
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
import uvicorn

from .users import router as users_router
from .accounts import router as accounts_router
from .transactions import router as transactions_router
from ..config import get_config
from ..errors import AccountError, ErrorCode
from ..logging_config import setup_logging


# HTTP status per business failure kind
ERROR_STATUS = {
    ErrorCode.USER_NOT_FOUND: 404,
    ErrorCode.ACCOUNT_NOT_FOUND: 404,
    ErrorCode.TRANSACTION_NOT_FOUND: 404,
    ErrorCode.INVALID_ARGUMENT: 400,
    ErrorCode.INVALID_REQUEST: 400,
    ErrorCode.USER_ACCOUNT_UN_MATCH: 409,
    ErrorCode.BALANCE_NOT_EMPTY: 409,
    ErrorCode.ACCOUNT_ALREADY_UNREGISTERED: 409,
    ErrorCode.MAX_ACCOUNT_PER_USER_10: 409,
    ErrorCode.AMOUNT_EXCEED_BALANCE: 409,
    ErrorCode.CANCEL_MUST_FULLY: 409,
    ErrorCode.TRANSACTION_ALREADY_CANCELLED: 409,
    ErrorCode.TRANSACTION_ACCOUNT_UN_MATCH: 409,
    ErrorCode.TOO_OLD_ORDER_TO_CANCEL: 409,
    ErrorCode.ACCOUNT_TRANSACTION_LOCK: 409,
    ErrorCode.INTERNAL_SERVER_ERROR: 500,
}


async def account_error_handler(request: Request, exc: AccountError) -> JSONResponse:
    return JSONResponse(
        status_code=ERROR_STATUS.get(exc.error_code, 400),
        content={
            "error_code": exc.error_code.name,
            "error_message": exc.error_message
        }
    )


def create_app() -> FastAPI:
    """Create and configure the FastAPI application"""
    app = FastAPI(
        title="Account API",
        description="Account lifecycle and balance transactions",
        version="1.0.0",
        docs_url="/docs",
        redoc_url="/redoc"
    )

    app.add_exception_handler(AccountError, account_error_handler)

    app.include_router(users_router, prefix="/users", tags=["Users"])
    app.include_router(accounts_router, prefix="/account", tags=["Accounts"])
    app.include_router(transactions_router, prefix="/transaction", tags=["Transactions"])

    @app.get("/health")
    async def health_check():
        """Health check endpoint"""
        return {
            "status": "healthy",
            "service": "account_api",
            "version": "1.0.0"
        }

    return app


def run_server(host: Optional[str] = None, port: Optional[int] = None, debug: bool = False):
    """Run the FastAPI server"""
    config = get_config()
    setup_logging(config.log_level, log_format=config.log_format, log_file=config.log_file)
    uvicorn.run(
        "account_core.api:create_app",
        factory=True,
        host=host or config.api_host,
        port=port or config.api_port,
        reload=debug,
        log_level=config.log_level.lower()
    )
