"""WHOOP OAuth token endpoint response."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict


class TokenResponse(BaseModel):
    """Parsed token payload. Only used to build the frontend redirect."""

    model_config = ConfigDict(extra="allow")

    access_token: Optional[str] = None
    token_type: Optional[str] = None
    expires_in: Optional[int] = None
    refresh_token: Optional[str] = None
    scope: Optional[str] = None


__all__ = ["TokenResponse"]
