"""Bearer token verification for access tokens issued by the auth platform."""

from typing import Any

import jwt
from fastapi import Request
from loguru import logger

from app.app_config import get_app_environ_config

JWT_ALGORITHMS = ["HS256"]


def extract_bearer_token(request: Request) -> str | None:
    authorization = request.headers.get("Authorization") or ""
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def decode_access_token(token: str) -> dict[str, Any] | None:
    """Decode and validate an access token; None when it is not acceptable."""
    cfg = get_app_environ_config()
    if not cfg.JWT_SECRET:
        logger.error("JWT_SECRET not configured, rejecting all tokens")
        return None

    try:
        return jwt.decode(
            token,
            cfg.JWT_SECRET,
            algorithms=JWT_ALGORITHMS,
            audience=cfg.JWT_AUDIENCE,
        )
    except jwt.ExpiredSignatureError:
        logger.info("Rejected expired access token")
    except jwt.PyJWTError as e:
        logger.warning(f"Rejected access token: {type(e).__name__}: {e}")
    return None


async def verify_token(request: Request) -> dict[str, Any] | None:
    """Return the caller's identity from the Authorization header, or None."""
    token = extract_bearer_token(request)
    if not token:
        return None

    claims = decode_access_token(token)
    if not claims or not claims.get("sub"):
        return None

    return {
        "user_id": claims["sub"],
        "email": claims.get("email"),
        "role": claims.get("role"),
    }
