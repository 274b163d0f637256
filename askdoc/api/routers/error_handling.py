"""
API error handling utilities.

Provides a decorator that maps domain exceptions raised by services onto
HTTPExceptions with consistent status codes and logging.
"""

import functools
import logging
from typing import Any, Callable, TypeVar

from fastapi import HTTPException, status
from pydantic import ValidationError

from askdoc.core.exceptions import (
    InvalidRequestError,
    NotFoundError,
    UnauthorizedError,
    UpstreamError,
)

logger = logging.getLogger(__name__)

# Type for the decorated function
F = TypeVar("F", bound=Callable[..., Any])


def handle_api_errors(func: F) -> F:
    """
    Decorator to transform domain errors into HTTPExceptions.

    This centralizes:
    - Logging of errors with context (resource_id)
    - Mapping specific exceptions to HTTP status codes
    - Ensuring uniform error response formats
    """

    @functools.wraps(func)
    async def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return await func(*args, **kwargs)

        except HTTPException:
            raise

        except NotFoundError as e:
            logger.warning("Resource not found", extra={"resource_id": e.resource_id, "error": e.message})
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)

        except InvalidRequestError as e:
            logger.warning("Invalid request", extra={"resource_id": e.resource_id, "error": e.message})
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)

        except UnauthorizedError as e:
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=e.message)

        except ValidationError as e:
            logger.warning("Pydantic validation error", extra={"error": str(e)})
            raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e))

        except UpstreamError as e:
            logger.error("Orchestrator failure", extra={"resource_id": e.resource_id, "error": e.message})
            raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=e.message)

        except Exception as e:
            logger.exception("Unexpected failure in API operation", extra={"error": str(e)})
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=f"internal error: {e}",
            )

    return wrapper  # type: ignore
