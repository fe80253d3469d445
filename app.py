"""FastAPI application entry point for the Random Deck relay."""
import logging
import os
import time
import uvicorn
from datetime import datetime

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from randomdeck.constants import API_VERSION
from config import settings
from randomdeck.models import RelayError
from randomdeck.routes import players, relay, system

# Configure logging FIRST (before creating FastAPI app)
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    handlers=[
        logging.StreamHandler(),  # Ensure logs go to stdout for Render
    ]
)

# Set uvicorn logging level too
uvicorn_logger = logging.getLogger("uvicorn")
uvicorn_logger.setLevel(getattr(logging, settings.log_level.upper(), logging.INFO))

app = FastAPI(
    title="Random Deck Relay",
    description="Archidekt folder relay and random Commander deck picker.",
    version=API_VERSION,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_methods=["GET"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log all HTTP requests with timing and response status."""
    start_time = time.time()
    response = await call_next(request)
    process_time = (time.time() - start_time) * 1000

    logger = logging.getLogger("randomdeck.access")
    client_host = request.client.host if request.client else "-"
    logger.info(
        f"{client_host} {request.method} {request.url.path} "
        f"-> {response.status_code} ({process_time:.1f}ms)"
    )

    return response

app.include_router(system.router)
app.include_router(relay.router)
app.include_router(players.router)


def _timestamp() -> str:
    return datetime.utcnow().isoformat()


@app.exception_handler(RelayError)
async def relay_error_handler(request: Request, exc: RelayError):
    """Return relay and selector failures with their kind preserved."""
    content = exc.to_dict()
    content["timestamp"] = _timestamp()
    return JSONResponse(status_code=exc.status_code, content=content)


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    """Return consistent HTTP error responses."""
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error": str(exc.detail),
            "kind": f"HTTP_{exc.status_code}",
            "details": {},
            "timestamp": _timestamp(),
        },
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """Catch-all exception handler to avoid leaking stack traces."""
    logging.getLogger("randomdeck.errors").exception(f"Unhandled error on {request.url.path}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": "Internal server error",
            "kind": "INTERNAL_ERROR",
            "details": {},
            "timestamp": _timestamp(),
        },
    )


if __name__ == "__main__":
    uvicorn.run(
        "app:app",
        host="0.0.0.0",
        port=int(os.environ.get("PORT", settings.port)),
        reload=False,
        log_level=settings.log_level.lower(),
    )
