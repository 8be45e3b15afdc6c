# mailing_api/auth.py
"""Shared authentication dependencies."""

import secrets

from fastapi import Header, HTTPException

from mailing_api.config import get_settings


def require_token(
    x_token: str | None = Header(default=None, alias="X-Token"),
) -> None:
    """Validate the X-Token header. Fails closed if API_TOKEN is not set."""
    expected_token = get_settings().API_TOKEN

    if not expected_token:
        raise HTTPException(
            status_code=500,
            detail="Server misconfiguration: authentication not configured",
        )

    if not x_token or not secrets.compare_digest(x_token, expected_token):
        raise HTTPException(
            status_code=401,
            detail="Invalid or missing token",
        )
