"""
FastAPI application main module.
Wires logging, middleware, error handling and the v1 report API.
"""
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
import time
import uuid
from contextlib import asynccontextmanager
from adreport.api.v1 import api_router
from adreport.config import CORS_ORIGINS, LOG_FILE, LOG_LEVEL
from adreport.database import Base, engine
from adreport.utils import bind_request_id, get_logger, reset_request_id, setup_logging
from adreport.utils.errors import ReportIngestionError, UnsupportedFormatError

# Setup logging before creating the app
setup_logging(
    log_level=LOG_LEVEL,
    log_file=LOG_FILE,
    enable_console=True
)

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.
    Handles startup and shutdown events.
    """
    logger.info("Application startup initiated")
    try:
        logger.info("Creating database tables")
        Base.metadata.create_all(bind=engine)
        logger.info("Application startup completed successfully")
        yield
    except Exception as e:  # pragma: no cover
        logger.error("Application startup failed", error=str(e), exc_info=True)
        raise
    finally:
        logger.info("Application shutdown completed")

app = FastAPI(
    title="Ad Report Analytics",
    description="""
    Seller advertising report ingestion and metrics service.

    ## Features
    * **Report upload** - CSV / XLSX / XLS search-term and placement exports, English or Chinese headers
    * **Campaign & placement summaries** - totals with CTR, ACOS, ROAS, CVR and CPC derived after grouping
    * **Search-term quadrants** - fixed 10% CTR / CVR thresholds
    * **Keyword to campaign mapping** - search terms spread across several campaigns

    ## Authentication
    Use Bearer token authentication with your API key:
    ```
    Authorization: Bearer <api key>
    ```
    """,
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/api/v1/openapi.json",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_middleware(GZipMiddleware, minimum_size=1000)

# Request ID and request/response logging middleware
@app.middleware("http")
async def add_request_context_and_logging(request: Request, call_next):
    """
    Add request ID, timing, and request/response logging.
    """
    request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
    request.state.request_id = request_id
    request.state.start_time = time.time()
    token = bind_request_id(request_id)

    logger.info(
        "Request started",
        method=request.method,
        url=str(request.url),
        user_agent=request.headers.get("User-Agent"),
        remote_addr=request.client.host if request.client else "unknown",
    )

    try:
        response = await call_next(request)
    finally:
        reset_request_id(token)

    process_time = time.time() - request.state.start_time
    response.headers["X-Request-ID"] = request_id
    response.headers["X-Process-Time"] = str(round(process_time * 1000, 2))
    response.headers["X-Content-Type-Options"] = "nosniff"

    logger.info(
        "Request completed",
        method=request.method,
        url=str(request.url),
        status_code=response.status_code,
        process_time_ms=round(process_time * 1000, 2),
        request_id=request_id
    )
    return response

# Custom exception handlers
@app.exception_handler(ReportIngestionError)
async def ingestion_exception_handler(request: Request, exc: ReportIngestionError):
    """Typed upload failures -> user-facing message + stable reason code."""
    request_id = getattr(request.state, "request_id", "unknown")
    status_code = 415 if isinstance(exc, UnsupportedFormatError) else 400
    logger.warning(
        "Report ingestion failed",
        reason=exc.reason,
        detail=exc.detail,
        request_id=request_id,
        url=str(request.url)
    )
    return JSONResponse(
        status_code=status_code,
        content={
            "success": False,
            "message": exc.user_message,
            "reason": exc.reason,
            "request_id": request_id
        }
    )

@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Handle Pydantic validation errors."""
    request_id = getattr(request.state, "request_id", "unknown")
    logger.warning(
        "Request validation failed",
        errors=exc.errors(),
        request_id=request_id,
        url=str(request.url),
        method=request.method
    )
    return JSONResponse(
        status_code=422,
        content={
            "success": False,
            "message": "Request validation failed",
            "details": exc.errors(),
            "request_id": request_id
        }
    )

@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Handle HTTP exceptions."""
    request_id = getattr(request.state, "request_id", "unknown")
    logger.warning(
        "HTTP exception",
        status_code=exc.status_code,
        detail=exc.detail,
        request_id=request_id,
        url=str(request.url),
        method=request.method
    )
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "success": False,
            "message": exc.detail,
            "request_id": request_id
        },
        headers=getattr(exc, "headers", None)
    )

@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Handle unexpected exceptions."""
    request_id = getattr(request.state, "request_id", "unknown")
    logger.error(
        "Unhandled exception",
        error=str(exc),
        error_type=type(exc).__name__,
        request_id=request_id,
        url=str(request.url),
        method=request.method,
        exc_info=True
    )
    return JSONResponse(
        status_code=500,
        content={
            "success": False,
            "message": "Internal server error",
            "request_id": request_id
        }
    )

@app.get("/health", tags=["health"], summary="Basic health check")
async def health_check():
    """Basic health check endpoint for load balancers."""
    return {
        "status": "healthy",
        "service": "ad-report-analytics",
        "version": "1.0.0",
        "timestamp": time.time(),
    }

app.include_router(api_router, prefix="/api/v1")

# Development server configuration
if __name__ == "__main__":
    import uvicorn
    logger.info("Starting development server")
    uvicorn.run(
        "adreport.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        reload_dirs=["adreport"],
        log_level="info",
        access_log=True
    )
