"""
Hack-or-Snooze - social bookmarking API
Main FastAPI application
"""
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from hackorsnooze.core.config import DEBUG, LOG_TO_FILE
from hackorsnooze.core.errors import ApiError, InvalidRequestBody
from hackorsnooze.core.logger import configure_app_logging, get_logger
from hackorsnooze.core.middleware import RequestLoggingMiddleware, SecurityHeadersMiddleware
from hackorsnooze.core.rate_limit import limiter
from hackorsnooze.api.router import router as api_router

# Configure application logging
configure_app_logging(log_to_file=LOG_TO_FILE)

logger = get_logger(__name__)

app = FastAPI(title="Hack-or-Snooze", debug=DEBUG)

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(RequestLoggingMiddleware)

app.include_router(api_router)


@app.exception_handler(ApiError)
async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} - {exc.title}: {exc.detail}")
    return JSONResponse(exc.to_dict(), status_code=exc.status_code, headers=exc.headers)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Render schema failures in the same error shape as every other failure"""
    return await api_error_handler(request, InvalidRequestBody(exc.errors()))


logger.info("Hack-or-Snooze application initialized")
