# wikiportraits/adapters/api/routers/auth.py
import structlog
from authlib.common.errors import AuthlibBaseError
from dependency_injector.wiring import Provide, inject
from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import RedirectResponse

from wikiportraits.adapters.api.auth import create_session_token, get_wikimedia_oauth
from wikiportraits.adapters.api.dependencies import CurrentUser, OptionalUser, domain_http_error, unexpected_http_error
from wikiportraits.core.domain.exceptions import DomainError
from wikiportraits.core.domain.models import WikimediaCredentials
from wikiportraits.core.ports.commons_gateway import ICommonsGateway
from wikiportraits.shared.config import settings
from wikiportraits.shared.container import Container

logger = structlog.get_logger()

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.get("/login")
async def login(request: Request):
    """Starts the OAuth 1.0a handshake and redirects to Special:OAuth/authorize."""
    if not settings.oauth_enabled:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Wikimedia OAuth is not configured",
        )

    wikimedia = get_wikimedia_oauth()
    # Special:OAuth/authorize wants the consumer key next to the request token
    return await wikimedia.authorize_redirect(
        request, settings.OAUTH_CALLBACK_URL, oauth_consumer_key=settings.WIKIMEDIA_CLIENT_ID
    )


@router.get("/callback")
@inject
async def callback(
    request: Request,
    commons: ICommonsGateway = Depends(Provide[Container.commons_gateway]),
):
    """Exchanges the verifier for an access token, resolves the user and sets the session cookie."""
    try:
        wikimedia = get_wikimedia_oauth()
        token = await wikimedia.authorize_access_token(request)

        credentials = WikimediaCredentials(
            username="",
            token=token["oauth_token"],
            token_secret=token["oauth_token_secret"],
        )
        user_info = await commons.get_user_info(credentials)
        if not user_info.get("name") or user_info.get("anon") is not None:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Failed to identify Wikimedia user")

        credentials.username = user_info["name"]
        credentials.user_id = str(user_info.get("id")) if user_info.get("id") is not None else None
        logger.info("user_logged_in", username=credentials.username)

    except HTTPException:
        raise
    except AuthlibBaseError as e:
        logger.warning("oauth_callback_rejected", error=str(e))
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Authentication failed")
    except DomainError as e:
        raise domain_http_error(e, "oauth_callback")
    except Exception as e:
        raise unexpected_http_error(e, "oauth_callback", "Authentication failed")

    response = RedirectResponse(url=settings.FRONTEND_URL)
    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=create_session_token(credentials),
        httponly=True,
        max_age=settings.SESSION_MAX_AGE_SEC,
        samesite="lax",
        secure=settings.APP_ENV.value == "production",
    )
    return response


@router.get("/logout")
async def logout():
    response = RedirectResponse(url=settings.FRONTEND_URL)
    response.delete_cookie(key=settings.SESSION_COOKIE_NAME)
    return response


@router.get("/me")
async def me(user: OptionalUser):
    """The logged-in user, or 401."""
    if not user:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated")
    return {"authenticated": True, "username": user.username, "userId": user.user_id}


# Mounted without the /auth prefix
csrf_router = APIRouter(tags=["Authentication"])


@csrf_router.get("/csrf-token")
@inject
async def csrf_token(
    user: CurrentUser,
    commons: ICommonsGateway = Depends(Provide[Container.commons_gateway]),
):
    try:
        return {"csrfToken": await commons.get_csrf_token(user)}
    except DomainError as e:
        raise domain_http_error(e, "csrf_token")
    except Exception as e:
        raise unexpected_http_error(e, "csrf_token", "Failed to fetch CSRF token")