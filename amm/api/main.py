"""FastAPI application for the pool engine.

Note: the service holds all state in memory and serializes nothing to disk.
Rate limiting and authentication belong to the infrastructure layer.
"""

import os

import structlog
import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from amm.api.endpoints import router
from amm.errors import AMMError, Expired, NoLiquidity, SlippageExceeded
from amm.models.responses import ErrorResponse
from amm.safe_int import SafeIntError

logger = structlog.get_logger()

# Configuration from environment variables with sensible defaults
HOST = os.environ.get("AMM_HOST", "0.0.0.0")
PORT = int(os.environ.get("AMM_PORT", "8000"))
DEBUG = os.environ.get("AMM_DEBUG", "false").lower() in ("true", "1", "yes")

# Maximum request body size (64 KB; requests are small JSON documents)
MAX_REQUEST_SIZE = 64 * 1024

# Engine errors that deserve a more specific status than 400
ERROR_STATUS: dict[type[AMMError], int] = {
    NoLiquidity: 404,
    SlippageExceeded: 409,
    Expired: 410,
}

app = FastAPI(
    title="AMM Pool Engine",
    description="Constant-product pools with proportional liquidity shares",
    version="0.1.0",
)


@app.middleware("http")
async def limit_request_size(request: Request, call_next):  # type: ignore[no-untyped-def]
    """Answer 413 before reading a body declared larger than MAX_REQUEST_SIZE.

    A Content-Length that is not a plain ASCII decimal is answered with 400.
    """
    content_length = request.headers.get("content-length")
    if content_length is not None and not (content_length.isascii() and content_length.isdigit()):
        return JSONResponse(status_code=400, content={"detail": "Invalid Content-Length"})
    if content_length and int(content_length) > MAX_REQUEST_SIZE:
        return JSONResponse(status_code=413, content={"detail": "Request too large"})
    return await call_next(request)


@app.exception_handler(AMMError)
async def handle_amm_error(request: Request, exc: AMMError) -> JSONResponse:
    """Convert engine errors into JSON error responses."""
    status_code = ERROR_STATUS.get(type(exc), 400)
    logger.info("request_rejected", path=request.url.path, error=exc.code, detail=str(exc))
    return JSONResponse(status_code=status_code, content={"error": exc.code, "detail": str(exc)})


@app.exception_handler(SafeIntError)
async def handle_arithmetic_error(request: Request, exc: SafeIntError) -> JSONResponse:
    """Amounts outside the uint256 range are client errors."""
    logger.warning("arithmetic_rejected", path=request.url.path, detail=str(exc))
    return JSONResponse(status_code=400, content={"error": "overflow", "detail": str(exc)})


app.include_router(
    router,
    responses={
        status: {"model": ErrorResponse}
        for status in (400, *ERROR_STATUS.values())
    },
)


@app.get("/health")
async def health() -> dict[str, str]:
    """Liveness check; the engine has no external dependencies to check."""
    return {"status": "ok"}


def run() -> None:
    """Run the API server.

    Configuration via environment variables:
    - AMM_HOST: Host to bind to (default: 0.0.0.0)
    - AMM_PORT: Port to bind to (default: 8000)
    - AMM_DEBUG: Enable debug/reload mode (default: false)
    - AMM_SWAP_FEE_BPS, AMM_PRICE_SCALE: see EngineConfig.from_env()
    """
    uvicorn.run(
        "amm.api.main:app",
        host=HOST,
        port=PORT,
        reload=DEBUG,
    )


if __name__ == "__main__":
    run()
