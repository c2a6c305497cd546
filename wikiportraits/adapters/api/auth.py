# wikiportraits/adapters/api/auth.py
"""
Wikimedia login (OAuth 1.0a against meta.wikimedia.org) and the session cookie.

The cookie holds a JWT (username, user id, access token pair) wrapped in a
JWE so the token secret is never readable client-side.
"""
import hashlib
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import structlog
from authlib.integrations.starlette_client import OAuth
from fastapi import HTTPException, Request, status
from jose import JWTError, jwe, jwt
from jose.exceptions import JWEError

from wikiportraits.core.domain.models import WikimediaCredentials
from wikiportraits.shared.config import settings

logger = structlog.get_logger()

oauth = OAuth()

oauth.register(
    name="wikimedia",
    client_id=settings.WIKIMEDIA_CLIENT_ID,
    client_secret=settings.WIKIMEDIA_CLIENT_SECRET,
    request_token_url=f"{settings.OAUTH_BASE_URL}/w/index.php?title=Special:OAuth/initiate",
    access_token_url=f"{settings.OAUTH_BASE_URL}/w/index.php?title=Special:OAuth/token",
    authorize_url=f"{settings.OAUTH_BASE_URL}/wiki/Special:OAuth/authorize",
)


def get_wikimedia_oauth():
    return oauth.wikimedia


# --- Session token ---


def _encryption_key() -> bytes:
    # A256GCM needs exactly 32 bytes
    return hashlib.sha256(settings.SESSION_SECRET.encode("utf-8")).digest()


def create_session_token(credentials: WikimediaCredentials) -> str:
    now = datetime.now(timezone.utc)
    payload = {
        "sub": credentials.username,
        "uid": credentials.user_id,
        "tok": credentials.token,
        "sec": credentials.token_secret,
        "iat": now,
        "exp": now + timedelta(seconds=settings.SESSION_MAX_AGE_SEC),
    }
    signed = jwt.encode(payload, settings.SESSION_SECRET, algorithm=settings.JWT_ALGORITHM)
    return jwe.encrypt(
        signed.encode("ascii"), _encryption_key(), algorithm="dir", encryption="A256GCM"
    ).decode("ascii")


def decode_session_token(token: str) -> WikimediaCredentials:
    """
    Raises:
        JWTError / JWEError: tampered, foreign or expired cookie.
    """
    signed = jwe.decrypt(token, _encryption_key())
    payload: Dict[str, Any] = jwt.decode(
        signed.decode("ascii"), settings.SESSION_SECRET, algorithms=[settings.JWT_ALGORITHM]
    )
    return WikimediaCredentials(
        username=payload["sub"],
        user_id=payload.get("uid"),
        token=payload["tok"],
        token_secret=payload.get("sec") or "",
    )


# --- Dependencies ---


async def get_current_user_optional(request: Request) -> Optional[WikimediaCredentials]:
    """Credentials from the session cookie, or None when absent or invalid."""
    token = request.cookies.get(settings.SESSION_COOKIE_NAME)
    if not token:
        return None

    try:
        return decode_session_token(token)
    except (JWTError, JWEError, KeyError, ValueError) as e:
        logger.info("session_cookie_rejected", error=str(e))
        return None


async def get_current_user(request: Request) -> WikimediaCredentials:
    """
    Credentials for a write. 401 without a session.

    With SERVICE_ACCOUNT_WRITES on, a configured WIKIMEDIA_PERSONAL_ACCESS_TOKEN
    stands in for the missing session.
    """
    user = await get_current_user_optional(request)
    if user:
        return user

    if settings.SERVICE_ACCOUNT_WRITES and settings.WIKIMEDIA_PERSONAL_ACCESS_TOKEN:
        logger.info("service_account_write", path=request.url.path)
        return WikimediaCredentials(username=settings.APP_NAME, token=settings.WIKIMEDIA_PERSONAL_ACCESS_TOKEN)

    raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Authentication required")
