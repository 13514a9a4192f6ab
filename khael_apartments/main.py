# khael_apartments/main.py

import traceback

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from khael_apartments.config import ALLOWED_ORIGINS, IS_PRODUCTION, SEED_SAMPLE_DATA
from khael_apartments.errors import ApiError
from khael_apartments.logging_config import setup_logging
from khael_apartments.middleware import RequestIDMiddleware
from khael_apartments.routes.apartments import router as apartments_router
from khael_apartments.routes.auth import router as auth_router
from khael_apartments.routes.health import router as health_router
from khael_apartments.routes.media import router as media_router
from khael_apartments.routes.metrics import router as metrics_router

# Initialize structured logging
setup_logging()
logger = structlog.get_logger(__name__)

app = FastAPI(
    title="Khael Apartments API",
    description="Apartment listings, their media and the admin login behind them",
    version="1.0.0",
)

app.add_middleware(RequestIDMiddleware)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS if "*" not in ALLOWED_ORIGINS else ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(ApiError)
async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.to_content())


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    details = [
        {
            "field": ".".join(str(part) for part in error.get("loc", ()) if part != "body"),
            "message": error.get("msg", ""),
        }
        for error in exc.errors()
    ]
    message = "; ".join(
        f"{detail['field']}: {detail['message']}" if detail["field"] else detail["message"]
        for detail in details
    )
    logger.info("request_validation_failed", errors=len(details))
    return JSONResponse(
        status_code=400,
        content={
            "error": "Validation failed",
            "message": message or "Invalid request",
            "details": details,
        },
    )


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code == 404:
        content = {
            "error": "Route not found",
            "message": f"Cannot {request.method} {request.url.path}",
        }
    else:
        content = {"error": str(exc.detail), "message": str(exc.detail)}
    return JSONResponse(status_code=exc.status_code, content=content, headers=exc.headers)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("unhandled_exception", path=request.url.path, error=str(exc))
    content = {"error": "Internal server error", "message": str(exc) or "Something went wrong"}
    if not IS_PRODUCTION:
        content["stack"] = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    # RequestIDMiddleware never sees this response, so echo its id here
    request_id = getattr(request.state, "request_id", None)
    headers = {"X-Request-ID": request_id} if request_id else None
    return JSONResponse(status_code=500, content=content, headers=headers)


# Register routers
app.include_router(health_router, prefix="/api", tags=["Health"])
app.include_router(metrics_router, tags=["Metrics"])
app.include_router(auth_router, prefix="/api", tags=["Auth"])
app.include_router(apartments_router, prefix="/api", tags=["Apartments"])
app.include_router(media_router, prefix="/api", tags=["Media"])


@app.on_event("startup")
def startup_event() -> None:
    """Initialize application on startup."""
    from khael_apartments.db.bootstrap import initialize_database
    from khael_apartments.db.engine import engine

    logger.info("application_starting")

    # Tables, default admin and (optionally) the sample listing
    initialize_database(engine, seed_sample_data=SEED_SAMPLE_DATA)

    logger.info("application_initialized", seed_sample_data=SEED_SAMPLE_DATA)
