"""FastAPI application entry point."""

import logging
import os

import structlog
import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from lingua_progress.api.routes import router
from lingua_progress.config import get_settings

# Configure structlog based on environment
is_production = os.getenv("ENV", "development").lower() == "production"

if is_production:
    # Production: JSON format for machine parsing
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(logging.INFO),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )
else:
    # Development: console format for human readability
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(logging.DEBUG),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

settings = get_settings()

app = FastAPI(title="Lingua Progress", version="0.1.0")
_allowed_origins_env = os.getenv(
    "ALLOWED_ORIGINS", "http://localhost:3000,http://127.0.0.1:3000"
)
allowed_origins = [o.strip() for o in _allowed_origins_env.split(",")]
app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.include_router(router)


@app.middleware("http")
async def auth_middleware(request: Request, call_next):
    """Optional APP_SECRET check for calls coming through the gateway."""
    if not settings.app_secret or request.url.path == "/api/health":
        return await call_next(request)
    if request.headers.get("X-App-Secret", "") != settings.app_secret:
        return JSONResponse({"error": "Unauthorized"}, status_code=401)
    return await call_next(request)


def main() -> None:
    """Run the application."""
    uvicorn.run(
        "lingua_progress.main:app",
        host=settings.host,
        port=settings.port,
        reload=False,
        log_level="info",
    )


if __name__ == "__main__":
    main()
