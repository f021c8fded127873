"""
Error handling for API endpoints.

A decorator that maps domain exceptions to `{"error": message}` responses
with the right status code and logs each failure with its context.
"""

import functools
import logging
from typing import Any, Callable, TypeVar

from fastapi import HTTPException, status
from fastapi.responses import JSONResponse

from askmynotes.core.exceptions import (
    AskMyNotesException,
    DocumentVanishedError,
    NotFoundError,
    SubjectLimitReachedError,
    UpstreamQuotaExhaustedError,
    UpstreamRateLimitedError,
    ValidationError,
)
from askmynotes.models.common import ErrorResponse

logger = logging.getLogger(__name__)

# Type for the decorated function
F = TypeVar("F", bound=Callable[..., Any])


def error_response(status_code: int, message: str) -> JSONResponse:
    """Uniform error body."""
    return JSONResponse(status_code=status_code, content=ErrorResponse(error=message).model_dump())


def handle_notes_errors(func: F) -> F:
    """
    Decorator turning exceptions raised by an endpoint into error responses.

    - NotFoundError, DocumentVanishedError -> 404
    - SubjectLimitReachedError, ValidationError -> 400
    - UpstreamRateLimitedError -> 429
    - UpstreamQuotaExhaustedError -> 402
    - anything else -> 500 with the exception's message

    HTTPException passes through untouched.
    """

    @functools.wraps(func)
    async def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return await func(*args, **kwargs)

        except HTTPException:
            raise

        except (NotFoundError, DocumentVanishedError) as e:
            logger.warning("Resource not found", extra={"error": e.message, "details": e.details})
            return error_response(status.HTTP_404_NOT_FOUND, e.message)

        except (SubjectLimitReachedError, ValidationError) as e:
            logger.warning("Invalid request", extra={"error": e.message, "details": e.details})
            return error_response(status.HTTP_400_BAD_REQUEST, e.message)

        except UpstreamRateLimitedError as e:
            logger.warning("Upstream rate limited", extra={"details": e.details})
            return error_response(status.HTTP_429_TOO_MANY_REQUESTS, e.message)

        except UpstreamQuotaExhaustedError as e:
            logger.warning("Upstream quota exhausted", extra={"details": e.details})
            return error_response(status.HTTP_402_PAYMENT_REQUIRED, e.message)

        except AskMyNotesException as e:
            logger.error(
                "Request failed",
                extra={"error": e.message, "error_type": type(e).__name__, "details": e.details},
            )
            return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, e.message)

        except Exception as e:
            logger.exception(
                "Unexpected failure",
                extra={"error": str(e), "error_type": type(e).__name__},
            )
            return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, str(e) or type(e).__name__)

    return wrapper  # type: ignore
