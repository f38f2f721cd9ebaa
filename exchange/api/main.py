"""FastAPI application exposing the exchange read surface.

The API is read-only: state transitions happen through the Python API of
the registry and its pools.
"""

import os

import structlog
import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from exchange import __version__
from exchange.api.endpoints import router
from exchange.errors import UnknownPool

logger = structlog.get_logger()

# Configuration from environment variables with sensible defaults
HOST = os.environ.get("EXCHANGE_HOST", "0.0.0.0")
PORT = int(os.environ.get("EXCHANGE_PORT", "8000"))
DEBUG = os.environ.get("EXCHANGE_DEBUG", "false").lower() in ("true", "1", "yes")

app = FastAPI(
    title="Token Exchange",
    description="Read surface of a two-asset constant-product exchange",
    version=__version__,
)


@app.exception_handler(UnknownPool)
async def unknown_pool_handler(_request: Request, exc: UnknownPool) -> JSONResponse:
    """Map lookups of unregistered pools to 404."""
    logger.debug("unknown_pool", reason=str(exc))
    return JSONResponse(status_code=404, content={"detail": exc.reason, "message": str(exc)})


app.include_router(router)


@app.get("/health")
async def health() -> dict[str, object]:
    """Health check endpoint."""
    return {"status": "ok", "version": __version__}


def run() -> None:
    """Run the API server.

    Configuration via environment variables:
    - EXCHANGE_HOST: Host to bind to (default: 0.0.0.0)
    - EXCHANGE_PORT: Port to bind to (default: 8000)
    - EXCHANGE_DEBUG: Enable debug/reload mode (default: false)
    """
    uvicorn.run(
        "exchange.api.main:app",
        host=HOST,
        port=PORT,
        reload=DEBUG,
    )


if __name__ == "__main__":
    run()
