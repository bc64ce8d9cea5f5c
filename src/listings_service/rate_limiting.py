import logging
import uuid

from fastapi import FastAPI, Request
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi.util import get_remote_address
from starlette.responses import JSONResponse

from listings_service.config import settings
from listings_service.schemas.common import error_body

logger = logging.getLogger(__name__)

IS_TEST_MODE = settings.is_testing()

LOGIN_LIMIT = settings.RATE_LIMIT_LOGIN
DEFAULT_LIMIT = settings.RATE_LIMIT_DEFAULT


def get_limiter_key(request: Request) -> str:
    if IS_TEST_MODE:
        # Each request gets its own bucket, which effectively disables limiting
        return str(uuid.uuid4())
    return get_remote_address(request)


limiter = Limiter(
    key_func=get_limiter_key,
    default_limits=[DEFAULT_LIMIT],
    strategy="fixed-window",
)


async def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """Custom handler for rate limit exceeded exceptions"""
    logger.warning(
        f"Rate limit exceeded: {request.client.host if request.client else '-'} - {request.url.path}"
    )
    return JSONResponse(
        status_code=429,
        content=error_body("Too many requests", retry_after=getattr(exc, "retry_after", None)),
    )


def setup_rate_limiting(app: FastAPI) -> None:
    """Configure rate limiting for the FastAPI application"""
    app.state.limiter = limiter

    if IS_TEST_MODE:
        logger.info("Rate limiting is disabled in test mode")
    else:
        logger.info(
            f"Rate limiting is enabled with the following limits: "
            f"Login={LOGIN_LIMIT}, Default={DEFAULT_LIMIT}"
        )

    app.add_middleware(SlowAPIMiddleware)
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
