# wikiportraits/adapters/api/dependencies.py
from typing import Annotated, Optional

import structlog
from fastapi import Depends, HTTPException, status

from wikiportraits.adapters.api.auth import get_current_user, get_current_user_optional
from wikiportraits.adapters.api.rate_limit import rate_limit
from wikiportraits.core.domain.exceptions import (
    DomainError,
    EntityNotFoundError,
    InvalidRequestError,
    MediaWikiAPIError,
    NotAuthenticatedError,
    UnknownWorkflowError,
    UploadWarningError,
)
from wikiportraits.core.domain.models import WikimediaCredentials
from wikiportraits.shared.config import settings

logger = structlog.get_logger()

# -----------------------------------------------------------------------------
# Session
# -----------------------------------------------------------------------------
CurrentUser = Annotated[WikimediaCredentials, Depends(get_current_user)]
OptionalUser = Annotated[Optional[WikimediaCredentials], Depends(get_current_user_optional)]

# -----------------------------------------------------------------------------
# Rate limits
# -----------------------------------------------------------------------------


def write_limit(route_name: str):
    return Depends(rate_limit(route_name, settings.RATE_LIMIT_WRITE))


def read_limit(route_name: str):
    return Depends(rate_limit(route_name, settings.RATE_LIMIT_READ))


# -----------------------------------------------------------------------------
# Domain error -> HTTP
# -----------------------------------------------------------------------------


def domain_http_error(e: DomainError, event: str) -> HTTPException:
    """
    Maps a domain error to the HTTP error a router raises.

    * NotAuthenticatedError -> 401
    * InvalidRequestError / UnknownWorkflowError -> 400
    * UploadWarningError -> 400 with the warnings
    * EntityNotFoundError -> 404
    * anything else (remote API failures) -> 500 with the remote message
    """
    if isinstance(e, NotAuthenticatedError):
        return HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=e.message)

    if isinstance(e, (InvalidRequestError, UnknownWorkflowError)):
        logger.warning(f"{event}_bad_request", error=e.message)
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)

    if isinstance(e, UploadWarningError):
        return HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"success": False, "warnings": e.warnings, "error": e.message},
        )

    if isinstance(e, EntityNotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)

    if isinstance(e, MediaWikiAPIError):
        logger.error(f"{event}_remote_error", code=e.code, error=e.info)
    else:
        logger.error(f"{event}_domain_error", error=e.message)
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=e.message)


def unexpected_http_error(e: Exception, event: str, message: str) -> HTTPException:
    logger.critical(f"unexpected_{event}_crash", error=str(e), exc_info=True)
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=message)
