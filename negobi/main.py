"""
Negobi Operations API
Business rules of the inventory and field-visit dashboard over HTTP
"""
import logging

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from negobi.api.v1.api_router import api_router
from negobi.core.config import settings
from negobi.core.exceptions import (
    AuthenticationError,
    BusinessLogicError,
    IntegrationError,
    NegobiException,
    NotFoundError,
    ValidationError,
)
from negobi.core.logging import setup_logging

logger = logging.getLogger(__name__)

# Create FastAPI application
app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="""
    ## Negobi Operations API

    Derived business rules on top of the Negobi REST backend.

    ### Modules:
    - **Stock by warehouse**: stock level analysis, replenishment, transfers with rollback
    - **Product lots**: expiry alerts, quantity adjustments, consolidation
    - **Product serials**: availability, status changes, warehouse moves
    - **Visits**: validation, schedule conflicts, route ordering, statistics
    - **Exchange rates**: latest rate, conversion, history
    - **Services**: price validation and analysis
    """,
    docs_url=settings.DOCS_URL,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Health check endpoint
@app.get("/health", tags=["System"])
async def health_check():
    """Liveness probe; the remote backend is not contacted"""
    return {
        "status": "healthy",
        "version": settings.APP_VERSION,
        "backend": settings.API_BASE_URL,
        "debug": settings.DEBUG,
    }


# System information endpoint
@app.get("/info", tags=["System"])
async def system_info():
    return {
        "application": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "api_version": "v1",
        "docs_url": settings.DOCS_URL,
        "modules": {
            "stock": "Stock level analysis, low/out-of-stock lists, transfers, ERP sync",
            "lots": "Expired and expiring lots, alerts, adjustments, consolidation",
            "serials": "Availability, validation, status changes, warehouse moves",
            "visits": "Validation, conflicts, route ordering, distances, statistics",
            "exchange_rates": "Latest rate, conversion, history",
            "services": "Price validation, price analysis, statistics",
        },
    }


@app.on_event("startup")
async def startup_event():
    setup_logging()
    logger.info(f"Starting {settings.APP_NAME} v{settings.APP_VERSION} against {settings.API_BASE_URL}")


@app.on_event("shutdown")
async def shutdown_event():
    logger.info("Shutting down application")


# Exception handlers
def _error(status_code: int, exc: Exception, error_type: str, **extra) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": str(exc), "type": error_type, **extra},
    )


@app.exception_handler(ValidationError)
async def validation_exception_handler(request: Request, exc: ValidationError):
    return _error(status.HTTP_422_UNPROCESSABLE_ENTITY, exc, "validation_error", errors=exc.errors)


@app.exception_handler(BusinessLogicError)
async def business_exception_handler(request: Request, exc: BusinessLogicError):
    extra = {}
    if hasattr(exc, "compensated"):
        extra["compensated"] = exc.compensated
    return _error(status.HTTP_409_CONFLICT, exc, "business_rule", **extra)


@app.exception_handler(NotFoundError)
async def not_found_exception_handler(request: Request, exc: NotFoundError):
    return _error(status.HTTP_404_NOT_FOUND, exc, "not_found")


@app.exception_handler(AuthenticationError)
async def authentication_exception_handler(request: Request, exc: AuthenticationError):
    return _error(status.HTTP_401_UNAUTHORIZED, exc, "authentication_error")


@app.exception_handler(IntegrationError)
async def integration_exception_handler(request: Request, exc: IntegrationError):
    logger.error(f"Backend integration error on {request.url.path}: {exc}")
    return _error(status.HTTP_502_BAD_GATEWAY, exc, "backend_error")


@app.exception_handler(NegobiException)
async def negobi_exception_handler(request: Request, exc: NegobiException):
    logger.error(f"Unhandled application error on {request.url.path}: {exc}", exc_info=True)
    return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, exc, "server_error")


# Include API routers
app.include_router(api_router, prefix=settings.API_V1_STR)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "negobi.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG,
        log_level=settings.LOG_LEVEL.lower()
    )
