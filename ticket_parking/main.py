"""
FastAPI application entry point.
Includes security middleware, error mapping for ticket errors, and all routers.
"""

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware
from ticket_parking.routers import tickets, health
from ticket_parking.database import create_tables
from ticket_parking.config import settings
from ticket_parking.services.errors import ErrorCode, TicketError
from ticket_parking.utils.logger import get_logger
import time

logger = get_logger(__name__)

app = FastAPI(
    title="Ticket Parking API",
    description="Parking tickets: open on entry, bill every started hour, close on exit.",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

# ── CORS (allow the front end on the same LAN to call the API) ──────────────
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ── API Key Middleware ───────────────────────────────────────────────────────
class APIKeyMiddleware(BaseHTTPMiddleware):
    """
    Optional API key check on ticket endpoints.
    Health check and docs stay open. Set API_KEY in .env; leave empty to disable.
    """
    open_paths = {"/api/v1/health", "/docs", "/redoc", "/openapi.json"}

    async def dispatch(self, request: Request, call_next):
        if request.url.path in self.open_paths or not settings.API_KEY:
            return await call_next(request)

        api_key = request.headers.get("X-API-Key") or request.query_params.get("api_key")
        if api_key != settings.API_KEY:
            return JSONResponse(
                status_code=status.HTTP_401_UNAUTHORIZED,
                content={"detail": "Invalid or missing API key"},
            )
        return await call_next(request)


if settings.API_KEY:
    app.add_middleware(APIKeyMiddleware)


# ── Request Timing Middleware ────────────────────────────────────────────────
@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.time()
    response = await call_next(request)
    duration = round((time.time() - start) * 1000, 2)
    logger.debug(f"{request.method} {request.url.path} → {response.status_code} ({duration}ms)")
    return response


# ── Ticket Error Mapping ─────────────────────────────────────────────────────
ERROR_STATUS = {
    ErrorCode.INVALID_TICKET: 422,
    ErrorCode.TICKET_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.STORAGE_FAILURE: status.HTTP_503_SERVICE_UNAVAILABLE,
}


@app.exception_handler(TicketError)
async def ticket_error_handler(request: Request, exc: TicketError):
    return JSONResponse(
        status_code=ERROR_STATUS[exc.code],
        content={"detail": exc.message, "code": exc.code.value},
    )


# ── Global Exception Handler ─────────────────────────────────────────────────
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled exception on {request.url.path}: {exc}", exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )


# ── Routers ──────────────────────────────────────────────────────────────────
app.include_router(tickets.router, prefix="/api/v1", tags=["🎫 Tickets"])
app.include_router(health.router,  prefix="/api/v1", tags=["💚 Health"])


# ── Startup ───────────────────────────────────────────────────────────────────
@app.on_event("startup")
async def startup():
    logger.info("🚀 Ticket Parking backend starting up...")
    create_tables()
    logger.info("✅ Key-value store ready")
    logger.info(f"💰 Default rate: {settings.DEFAULT_PRICE_PER_HOUR} {settings.CURRENCY}/h")
    logger.info(f"🌐 Listening on http://{settings.BACKEND_IP}:{settings.BACKEND_PORT}")


@app.on_event("shutdown")
async def shutdown():
    logger.info("🛑 Ticket Parking backend shutting down...")
