"""Operator troubleshooting endpoints. Not used by the frontend."""

from __future__ import annotations

import json
import logging
import time
from typing import Any, Dict

import httpx
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from ... import whoop
from ...core import Settings, elapsed_ms, epoch_ms, get_settings, iso_timestamp, system_info
from ..deps import get_http_client

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["diagnostics"])

ENDPOINTS = {
    "oauthCallback": "/api/oauthcallback",
    "webhookHandler": "/api/webhook-handler",
    "test": "/api/test",
    "health": "/api/health",
    "debug": "/api/debug",
}


def _basic_tests(client: httpx.AsyncClient) -> Dict[str, bool]:
    try:
        can_parse_json = json.loads('{"test": "value"}') == {"test": "value"}
    except ValueError:
        can_parse_json = False
    return {
        "canParseJSON": can_parse_json,
        "canCreateDate": bool(iso_timestamp()),
        "canUseHttpClient": isinstance(client, httpx.AsyncClient),
    }


@router.get("/test")
async def test_endpoint(
    settings: Settings = Depends(get_settings),
    client: httpx.AsyncClient = Depends(get_http_client),
) -> JSONResponse:
    started = time.perf_counter()
    environment = {"hasHttpClient": client is not None, **settings.presence()}
    try:
        response = await whoop.probe_echo(client)
    except httpx.HTTPError as exc:
        logger.error("Test endpoint failed (elapsed=%s): %s", elapsed_ms(started), exc)
        return JSONResponse(
            {
                "message": "Test endpoint failed",
                "error": str(exc) or type(exc).__name__,
                "responseTime": elapsed_ms(started),
                "timestamp": iso_timestamp(),
                "environment": environment,
            },
            status_code=500,
        )

    basic_tests = _basic_tests(client)
    logger.info("Test endpoint completed (elapsed=%s, basic_tests=%s)", elapsed_ms(started), basic_tests)
    return JSONResponse(
        {
            "message": "Test endpoint working",
            "timestamp": iso_timestamp(),
            "responseTime": elapsed_ms(started),
            "httpWorking": True,
            "testResponse": {"status": response.status_code, "url": str(response.request.url)},
            "environment": environment,
            "basicTests": basic_tests,
            "serverInfo": system_info(),
        }
    )


async def _whoop_api_test(settings: Settings, client: httpx.AsyncClient) -> Dict[str, Any]:
    if not settings.has_whoop_credentials:
        return {"status": "skipped", "reason": "Missing WHOOP credentials"}
    try:
        response = await whoop.probe_api(client, bearer="invalid_token_for_debug")
    except httpx.RequestError as exc:
        return {"status": "unreachable", "error": str(exc) or type(exc).__name__}
    if response.is_success:
        return {
            "status": "reachable",
            "statusCode": response.status_code,
            "note": "API endpoint is reachable",
        }
    return {
        "status": "reachable",
        "statusCode": response.status_code,
        "note": "API is reachable (expected error with invalid token)",
        "error": response.reason_phrase,
    }


def _sample_oauth_url(settings: Settings) -> Dict[str, Any]:
    state = f"debug_state_{epoch_ms()}"
    return {
        "url": whoop.auth_url(settings.whoop_client_id, settings.redirect_uri, state),
        "note": "This is a sample OAuth URL for testing. Replace state parameter with a random value.",
        "parameters": {
            "client_id": settings.whoop_client_id,
            "redirect_uri": settings.redirect_uri,
            "scope": whoop.SCOPES,
            "response_type": "code",
            "state": state,
        },
    }


@router.get("/debug")
async def debug_endpoint(
    settings: Settings = Depends(get_settings),
    client: httpx.AsyncClient = Depends(get_http_client),
) -> JSONResponse:
    """Configuration and connectivity report; secrets are reduced to presence flags."""

    try:
        client_id = settings.whoop_client_id
        info: Dict[str, Any] = {
            "timestamp": iso_timestamp(),
            "environment": {**settings.presence(), "appUrl": settings.app_url or "NOT_SET"},
            "oauth": {
                "clientId": f"{client_id[:8]}..." if client_id else "NOT_SET",
                "redirectUri": settings.redirect_uri or "NOT_SET",
                "tokenUrl": whoop.TOKEN_URL,
                "authUrl": whoop.AUTH_BASE,
            },
            "endpoints": dict(ENDPOINTS),
            "system": system_info(),
        }
        info["whoopApiTest"] = await _whoop_api_test(settings, client)
        if settings.whoop_client_id and settings.app_url:
            info["sampleOAuthUrl"] = _sample_oauth_url(settings)
    except Exception as exc:
        logger.exception("Error generating debug info")
        return JSONResponse(
            {
                "error": "Failed to generate debug information",
                "message": str(exc),
                "timestamp": iso_timestamp(),
            },
            status_code=500,
        )

    logger.info("Debug information generated")
    return JSONResponse(info)


@router.api_route(
    "/debug",
    methods=["POST", "PUT", "PATCH", "DELETE"],
    include_in_schema=False,
)
async def debug_method_not_allowed() -> JSONResponse:
    return JSONResponse({"error": "Method not allowed"}, status_code=405)


__all__ = ["router"]
