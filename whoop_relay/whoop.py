"""
WHOOP API Client
OAuth code exchange and reachability probes against the WHOOP platform.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional
from urllib.parse import quote

import httpx

from .models import TokenResponse

logger = logging.getLogger(__name__)

AUTH_BASE = "https://api.prod.whoop.com/oauth/oauth2/auth"
TOKEN_URL = "https://api.prod.whoop.com/oauth/oauth2/token"
API_BASE = "https://api.prod.whoop.com/developer/v1"
PROFILE_PATH = "/user/profile"
SCOPES = "read:workout"

# Public echo endpoint used to prove outbound HTTP works at all.
ECHO_URL = "https://httpbin.org/get"

TOKEN_TIMEOUT = 10.0
PROBE_TIMEOUT = 5.0

_TOKEN_ERROR_MESSAGES = {
    400: "Invalid authorization code or redirect URI. Please try again.",
    401: "Authentication failed. Please check your WHOOP credentials.",
    500: "WHOOP server error. Please try again later.",
}
_DEFAULT_TOKEN_ERROR = "An error occurred during authentication."


def auth_url(client_id: str, redirect_uri: str, state: str, scope: str = SCOPES) -> str:
    """Generate WHOOP OAuth authorization URL."""

    return (
        f"{AUTH_BASE}?client_id={client_id}"
        f"&redirect_uri={quote(redirect_uri, safe='')}"
        f"&scope={scope}&response_type=code&state={state}"
    )


async def exchange_code_for_token(
    client: httpx.AsyncClient,
    *,
    code: str,
    client_id: str,
    client_secret: str,
    redirect_uri: str,
) -> TokenResponse:
    """Trade an authorization code for a token.

    Raises ``httpx.HTTPStatusError`` on a non-2xx reply and
    ``httpx.RequestError`` when no reply arrives. Nothing is retried.
    """

    response = await client.post(
        TOKEN_URL,
        data={
            "grant_type": "authorization_code",
            "code": code,
            "client_id": client_id,
            "client_secret": client_secret,
            "redirect_uri": redirect_uri,
        },
        headers={"Content-Type": "application/x-www-form-urlencoded"},
        timeout=TOKEN_TIMEOUT,
    )
    response.raise_for_status()
    logger.info(
        "Token exchange succeeded (status=%s)", response.status_code
    )
    return TokenResponse.model_validate(_json_object(response))


def token_error_message(exc: Exception) -> str:
    """User-facing explanation for a failed token exchange."""

    if isinstance(exc, httpx.HTTPStatusError):
        return _TOKEN_ERROR_MESSAGES.get(exc.response.status_code, _DEFAULT_TOKEN_ERROR)
    return _DEFAULT_TOKEN_ERROR


async def probe_api(
    client: httpx.AsyncClient, bearer: str = "invalid_token_for_testing"
) -> httpx.Response:
    """GET the profile endpoint with a dummy token.

    Any HTTP reply, 401 included, proves the API is reachable; transport
    failures propagate as ``httpx.RequestError``.
    """

    return await client.get(
        f"{API_BASE}{PROFILE_PATH}",
        headers={"Authorization": f"Bearer {bearer}"},
        timeout=PROBE_TIMEOUT,
    )


async def probe_echo(client: httpx.AsyncClient) -> httpx.Response:
    response = await client.get(ECHO_URL, timeout=PROBE_TIMEOUT)
    response.raise_for_status()
    return response


def _json_object(response: httpx.Response) -> Dict[str, Any]:
    try:
        data: Optional[Any] = response.json()
    except ValueError:
        logger.warning("Token endpoint returned a non-JSON body")
        return {}
    return data if isinstance(data, dict) else {}


__all__ = [
    "API_BASE",
    "AUTH_BASE",
    "ECHO_URL",
    "PROBE_TIMEOUT",
    "SCOPES",
    "TOKEN_TIMEOUT",
    "TOKEN_URL",
    "auth_url",
    "exchange_code_for_token",
    "probe_api",
    "probe_echo",
    "token_error_message",
]
