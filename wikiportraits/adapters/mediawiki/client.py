# wikiportraits/adapters/mediawiki/client.py
from typing import Any, Dict, Optional
from urllib.parse import urlparse

import httpx
import structlog
from authlib.integrations.httpx_client import OAuth1Auth

from wikiportraits.core.domain.exceptions import (
    MediaWikiAPIError,
    NotAuthenticatedError,
    UnexpectedResponseError,
)
from wikiportraits.core.domain.models import WikimediaCredentials
from wikiportraits.shared.config import settings
from wikiportraits.shared.resilience import get_circuit_breaker, retry_external_api

logger = structlog.get_logger()


class BearerAuth(httpx.Auth):
    """Owner-only consumers and personal tokens are sent as a plain Bearer header."""

    def __init__(self, token: str):
        self.token = token

    def auth_flow(self, request: httpx.Request):
        request.headers["Authorization"] = f"Bearer {self.token}"
        yield request


def build_auth(auth: Optional[WikimediaCredentials]) -> httpx.Auth:
    """
    Picks the request signer for a signed call.

    1. A session with an OAuth 1.0a token pair and a configured consumer -> OAuth1 signature.
    2. A session holding a single token -> Bearer.
    3. No session but WIKIMEDIA_PERSONAL_ACCESS_TOKEN set -> Bearer with that token.
    """
    if auth and auth.token:
        if auth.token_secret and settings.oauth_enabled:
            return OAuth1Auth(
                client_id=settings.WIKIMEDIA_CLIENT_ID,
                client_secret=settings.WIKIMEDIA_CLIENT_SECRET,
                token=auth.token,
                token_secret=auth.token_secret,
            )
        return BearerAuth(auth.token)

    if settings.WIKIMEDIA_PERSONAL_ACCESS_TOKEN:
        return BearerAuth(settings.WIKIMEDIA_PERSONAL_ACCESS_TOKEN)

    raise NotAuthenticatedError()


def raise_for_api_error(payload: Dict[str, Any], status_code: Optional[int] = None) -> None:
    error = payload.get("error") if isinstance(payload, dict) else None
    if error:
        raise MediaWikiAPIError(
            code=error.get("code", "unknown"),
            info=error.get("info", ""),
            status_code=status_code,
        )


class MediaWikiClient:
    """
    Thin async client for one MediaWiki Action API endpoint.

    Reads go through `query()`: retried on transport errors and guarded by
    the host's circuit breaker. Writes go through `post()` and are sent
    exactly once. Every response body is checked for an `error` object.
    """

    def __init__(self, api_url: str):
        self.api_url = api_url
        self.host = urlparse(api_url).netloc or api_url
        self.circuit_breaker = get_circuit_breaker(self.host)
        self.headers = {"User-Agent": settings.USER_AGENT}

    # --- Reads ---

    async def query(
        self,
        params: Dict[str, Any],
        auth: Optional[WikimediaCredentials] = None,
        timeout: Optional[float] = None,
        signed: bool = False,
    ) -> Dict[str, Any]:
        """GET request. Anonymous unless `auth` is given or `signed` asks for the fallback token."""
        signer = build_auth(auth) if (auth or signed) else None
        return await self.circuit_breaker.a_call(self._get, params, signer, timeout)

    @retry_external_api
    async def _get(
        self,
        params: Dict[str, Any],
        signer: Optional[httpx.Auth],
        timeout: Optional[float],
    ) -> Dict[str, Any]:
        request_params = {**params, "format": "json", "formatversion": "2"}
        async with httpx.AsyncClient(timeout=timeout or settings.HTTP_TIMEOUT_SEC, headers=self.headers) as client:
            response = await client.get(
                self.api_url,
                params=request_params,
                auth=signer if signer is not None else httpx.USE_CLIENT_DEFAULT,
            )
        return self._decode(response, params.get("action", "query"))

    # --- Writes ---

    async def post(
        self,
        auth: Optional[WikimediaCredentials],
        data: Dict[str, Any],
        files: Optional[Dict[str, Any]] = None,
        timeout: Optional[float] = None,
    ) -> Dict[str, Any]:
        signer = build_auth(auth)
        body = {**data, "format": "json", "formatversion": "2"}
        async with httpx.AsyncClient(timeout=timeout or settings.HTTP_TIMEOUT_SEC, headers=self.headers) as client:
            response = await client.post(self.api_url, data=body, files=files, auth=signer)
        return self._decode(response, data.get("action", "post"))

    async def get_csrf_token(self, auth: Optional[WikimediaCredentials]) -> str:
        """Fetches a CSRF token bound to the signing credentials."""
        payload = await self.query(
            {"action": "query", "meta": "tokens", "type": "csrf"},
            auth=auth,
            timeout=settings.TOKEN_TIMEOUT_SEC,
            signed=True,
        )
        token = ((payload.get("query") or {}).get("tokens") or {}).get("csrftoken")
        # "+\\" is the anonymous token
        if not token or token == "+\\":
            logger.error("csrf_token_missing", host=self.host)
            raise UnexpectedResponseError("Failed to obtain CSRF token")
        return token

    async def get_user_info(self, auth: WikimediaCredentials) -> Dict[str, Any]:
        payload = await self.query({"action": "query", "meta": "userinfo"}, auth=auth)
        return (payload.get("query") or {}).get("userinfo") or {}

    # --- Helpers ---

    def _decode(self, response: httpx.Response, action: str) -> Dict[str, Any]:
        try:
            payload = response.json()
        except ValueError:
            logger.error("mediawiki_invalid_json", host=self.host, action=action, status=response.status_code)
            if response.status_code >= 400:
                raise MediaWikiAPIError(f"http-{response.status_code}", response.reason_phrase, response.status_code)
            raise UnexpectedResponseError(f"Invalid JSON from {self.host}")

        if isinstance(payload, dict) and payload.get("error"):
            logger.warning(
                "mediawiki_api_error",
                host=self.host,
                action=action,
                code=payload["error"].get("code"),
                info=payload["error"].get("info"),
            )
            raise_for_api_error(payload, response.status_code)

        if response.status_code >= 400:
            raise MediaWikiAPIError(f"http-{response.status_code}", response.reason_phrase, response.status_code)

        return payload
