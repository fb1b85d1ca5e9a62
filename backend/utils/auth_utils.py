"""
Cognito bearer-token authentication and group checks.

Tokens are issued by the Cognito user pool; this service only verifies them
against the pool's published signing keys and reads the caller's groups.
"""

import json
import logging
import os
import time
import urllib.request
from typing import Any, Dict, List

from dotenv import load_dotenv
from fastapi import Depends, HTTPException, Request, status
from jose import jwt
from jose.exceptions import ExpiredSignatureError, JWTClaimsError, JWTError

load_dotenv()

logger = logging.getLogger(__name__)

COGNITO_REGION = os.getenv("COGNITO_REGION", "ap-south-1")
COGNITO_USER_POOL_ID = os.getenv("COGNITO_USER_POOL_ID")
COGNITO_APP_CLIENT_ID = os.getenv("COGNITO_APP_CLIENT_ID")
COGNITO_ISSUER = f"https://cognito-idp.{COGNITO_REGION}.amazonaws.com/{COGNITO_USER_POOL_ID}"
COGNITO_JWKS_URL = f"{COGNITO_ISSUER}/.well-known/jwks.json"
JWKS_CACHE_SECONDS = int(os.getenv("JWKS_CACHE_SECONDS", str(60 * 60 * 24)))

GROUPS_CLAIM = "cognito:groups"

_jwks_cache: Dict[str, Any] = {"keys": [], "expires_at": 0.0}


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=detail)


def get_jwks() -> List[Dict[str, Any]]:
    """Signing keys of the user pool, refreshed once the cached copy expires."""
    if _jwks_cache["keys"] and _jwks_cache["expires_at"] > time.time():
        return _jwks_cache["keys"]

    logger.info(f"Refreshing signing keys from {COGNITO_JWKS_URL}")
    try:
        with urllib.request.urlopen(COGNITO_JWKS_URL) as response:
            keys = json.loads(response.read().decode("utf-8"))["keys"]
    except Exception as e:
        logger.error(f"Could not load signing keys: {e}")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Token signing keys are unavailable; try again later.",
        )

    _jwks_cache["keys"] = keys
    _jwks_cache["expires_at"] = time.time() + JWKS_CACHE_SECONDS
    return keys


def bearer_token(request: Request) -> str:
    header = request.headers.get("Authorization")
    if not header:
        raise _unauthorized("Authorization header is missing")
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip() or " " in token.strip():
        raise _unauthorized("Authorization header must be 'Bearer <token>'")
    return token.strip()


def signing_key_for(token: str) -> Dict[str, str]:
    try:
        kid = jwt.get_unverified_header(token).get("kid")
    except JWTError:
        raise _unauthorized("Malformed token header")

    for key in get_jwks():
        if key["kid"] == kid:
            return {field: key[field] for field in ("kty", "kid", "use", "n", "e")}
    raise _unauthorized("Token was not signed by a known key")


def get_current_user(request: Request) -> Dict[str, Any]:
    """Dependency returning the verified token claims of the caller."""
    token = bearer_token(request)
    try:
        return jwt.decode(
            token,
            signing_key_for(token),
            algorithms=["RS256"],
            audience=COGNITO_APP_CLIENT_ID,
            issuer=COGNITO_ISSUER,
        )
    except ExpiredSignatureError:
        raise _unauthorized("Token has expired")
    except JWTClaimsError as e:
        raise _unauthorized(f"Invalid token claims: {e}")
    except JWTError as e:
        raise _unauthorized(f"Token validation failed: {e}")


def get_user_identifier(user: Dict[str, Any]) -> str:
    """Value written to created_by/updated_by/deleted_by and audit rows."""
    return user.get("email") or user.get("cognito:username") or user.get("username") or user.get("sub") or "unknown"


def user_groups(user: Dict[str, Any]) -> List[str]:
    groups = user.get(GROUPS_CLAIM) or []
    if isinstance(groups, str):
        groups = [groups]
    return list(groups)


def require_group(allowed_groups: List[str]):
    """
    Dependency factory admitting only members of one of `allowed_groups`.

        user: dict = Depends(require_group(["admin", "superadmin"]))
    """
    def dependency(user: Dict[str, Any] = Depends(get_current_user)) -> Dict[str, Any]:
        groups = user_groups(user)
        if not set(groups) & set(allowed_groups):
            logger.warning(f"User {get_user_identifier(user)} in {groups} denied; needs one of {allowed_groups}")
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="You do not have permission to perform this action",
            )
        return user
    return dependency
