"""
Logstash Formatter — Preview Service Entry Point
FastAPI + Pydantic | renders events exactly as the formatter would
"""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from logstash_formatter.api.routes import router
from logstash_formatter.core.errors import ErrorCode, FormatterError
from logstash_formatter.core.logging import get_logger

logger = get_logger(__name__)

app = FastAPI(
    title="Logstash Formatter",
    description="Renders structured log events as Logstash JSON lines.",
    version="1.0.0",
    docs_url="/docs",
    redoc_url=None,
)

app.include_router(router)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Reshape Pydantic's validation errors to match our error contract."""
    errors = exc.errors()
    detail = "; ".join(
        f"{'.'.join(str(loc) for loc in e['loc'])}: {e['msg']}"
        for e in errors
    )
    error = FormatterError(ErrorCode.INVALID_EVENT, detail)
    return JSONResponse(status_code=error.status_code, content=error.to_response())


@app.exception_handler(FormatterError)
async def formatter_exception_handler(request: Request, exc: FormatterError):
    logger.error(
        "formatter_error",
        extra={"mdc": {"error_code": exc.code.value, "internal": exc.internal, "path": request.url.path}},
    )
    return JSONResponse(status_code=exc.status_code, content=exc.to_response())


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error("unhandled_exception", extra={"mdc": {"error": str(exc), "path": request.url.path}})
    return JSONResponse(
        status_code=500,
        content={"error": ErrorCode.INTERNAL_ERROR.value, "detail": "An unexpected error occurred."},
    )


@app.get("/health")
async def health():
    return {"status": "ok", "service": "logstash-formatter"}
