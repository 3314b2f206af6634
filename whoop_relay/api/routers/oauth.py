"""WHOOP OAuth callback route."""

from __future__ import annotations

import logging
import time
from typing import Optional

import httpx
from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse, RedirectResponse, Response

from ... import whoop
from ...core import ConfigurationError, Settings, elapsed_ms, get_settings
from ..deps import get_http_client

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["oauth"])


def _fail(status_code: int, message: str) -> PlainTextResponse:
    return PlainTextResponse(message, status_code=status_code)


@router.get("/oauthcallback")
async def oauth_callback(
    code: Optional[str] = None,
    state: Optional[str] = None,
    error: Optional[str] = None,
    error_description: Optional[str] = None,
    settings: Settings = Depends(get_settings),
    client: httpx.AsyncClient = Depends(get_http_client),
) -> Response:
    """Exchange the authorization code and hand the token to the frontend.

    The token travels in the URL fragment so it never reaches a server log.
    ``state`` is echoed back as received; the frontend compares it with the
    value it generated.
    """

    started = time.perf_counter()
    try:
        if error:
            logger.error("OAuth error received: %s (%s)", error, error_description)
            return _fail(
                400,
                f"OAuth Error: {error} - {error_description or 'No description provided'}",
            )
        if not code:
            logger.error("OAuth callback without authorization code")
            return _fail(400, "Error: No authorization code provided.")
        if not state:
            logger.error("OAuth callback without state parameter")
            return _fail(400, "Error: No state parameter provided.")

        try:
            settings.require_oauth()
        except ConfigurationError as exc:
            logger.error("OAuth callback misconfigured: %s", exc)
            return _fail(500, "Server configuration error: Missing environment variables.")

        logger.info(
            "Exchanging authorization code (code_length=%d, state_length=%d, redirect_uri=%s)",
            len(code),
            len(state),
            settings.redirect_uri,
        )
        try:
            token = await whoop.exchange_code_for_token(
                client,
                code=code,
                client_id=settings.whoop_client_id,
                client_secret=settings.whoop_client_secret,
                redirect_uri=settings.redirect_uri,
            )
        except httpx.HTTPError as exc:
            status = exc.response.status_code if isinstance(exc, httpx.HTTPStatusError) else None
            logger.error(
                "Error exchanging authorization code (status=%s, elapsed=%s): %s",
                status,
                elapsed_ms(started),
                exc,
            )
            return _fail(
                500,
                f"Authentication Error: {whoop.token_error_message(exc)} "
                "Check server logs for details.",
            )

        if not token.access_token:
            logger.error("Token endpoint response carried no access_token")
            return _fail(500, "Error: No access token received from WHOOP.")

        logger.info(
            "OAuth flow completed (token_type=%s, expires_in=%s, elapsed=%s)",
            token.token_type,
            token.expires_in,
            elapsed_ms(started),
        )
        return RedirectResponse(
            f"{settings.app_url}#access_token={token.access_token}&state={state}",
            status_code=302,
        )
    except Exception:
        logger.exception("Critical error in OAuth callback (elapsed=%s)", elapsed_ms(started))
        return _fail(500, "Critical server error. Please check server logs.")


__all__ = ["router"]
