"""
Bank Ledger API Application Factory
"""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
import uvicorn

from .accounts import router as accounts_router
from .transactions import router as transactions_router
from .bulk import router as bulk_router
from .reports import router as reports_router
from ..config import get_config
from ..logging_config import setup_logging
from ..system import BankSystem, open_bank_system


def create_app(system: Optional[BankSystem] = None) -> FastAPI:
    """
    Create and configure the FastAPI application
    
    Args:
        system: Bank system to serve. If omitted, one is opened from the
            configured snapshot directory at startup.
    
    A system opened at startup is closed (and the ledger saved) at shutdown.
    A system passed in stays open: whoever opened it owns its close.
    """
    
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        opened_here = app.state.bank_system is None
        if opened_here:
            app.state.bank_system = BankSystem()
        try:
            yield
        finally:
            if opened_here:
                app.state.bank_system.close()
    
    app = FastAPI(
        title="Bank Ledger API",
        description="Account ledger with rotating snapshot persistence",
        version="1.0.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan
    )
    app.state.bank_system = system
    
    # Include routers
    app.include_router(accounts_router, prefix="/accounts", tags=["Accounts"])
    app.include_router(transactions_router, prefix="/transactions", tags=["Transactions"])
    app.include_router(bulk_router, prefix="/bulk", tags=["Bulk Operations"])
    app.include_router(reports_router, prefix="/reports", tags=["Reports"])
    
    # Health check endpoint
    @app.get("/health")
    async def health_check():
        """Health check endpoint"""
        return {
            "status": "healthy",
            "service": "bank_ledger_api",
            "version": "1.0.0"
        }

    # Root endpoint
    @app.get("/")
    async def get_api_info():
        """Get API information"""
        return {
            "name": "Bank Ledger API",
            "version": "1.0.0",
            "endpoints": {
                "docs": "/docs",
                "health": "/health",
                "accounts": "/accounts",
                "transactions": "/transactions",
                "bulk": "/bulk",
                "reports": "/reports",
            }
        }
    
    return app


def run_server(host: Optional[str] = None, port: Optional[int] = None):
    """
    Run the FastAPI server with settings from configuration

    The bank system is opened before the server starts and closed after it
    stops, so a failed shutdown save raises OSError out of this call.
    """
    config = get_config()
    setup_logging(config.log_level, fmt=config.log_format)
    with open_bank_system() as system:
        uvicorn.run(
            create_app(system),
            host=host or config.api_host,
            port=port or config.api_port,
            log_level=config.log_level.lower()
        )
