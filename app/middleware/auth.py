"""
Supabase JWT authentication

Verifies `Authorization: Bearer <token>` headers against the project's
JWKS (ES256 or RS256 keys) and exposes the caller's user id as a FastAPI
dependency.
"""
import logging
import time
from typing import Any, Dict, Optional

import httpx
from fastapi import Header, HTTPException
from jose import jwk, jwt

from app import config

logger = logging.getLogger(__name__)

JWKS_CACHE_SECONDS = 60 * 60
JWT_AUDIENCE = "authenticated"
SUPPORTED_ALGORITHMS = ["ES256", "RS256"]


def _auth_base_url() -> str:
    if not config.SUPABASE_URL:
        raise HTTPException(status_code=500, detail="SUPABASE_URL is not configured")
    return f"{config.SUPABASE_URL}/auth/v1"


class JwksCache:
    """Signing keys fetched from Supabase, refreshed at most once per JWKS_CACHE_SECONDS"""

    def __init__(self, ttl: float = JWKS_CACHE_SECONDS):
        self._ttl = ttl
        self._jwks: Optional[Dict[str, Any]] = None
        self._fetched_at: float = 0

    def clear(self) -> None:
        self._jwks = None
        self._fetched_at = 0

    async def get(self) -> Dict[str, Any]:
        now = time.time()
        if self._jwks and (now - self._fetched_at) < self._ttl:
            return self._jwks

        url = f"{_auth_base_url()}/.well-known/jwks.json"
        logger.info(f"Fetching JWKS from {url}")
        try:
            async with httpx.AsyncClient() as client:
                response = await client.get(url, timeout=10.0)
                response.raise_for_status()
                self._jwks = response.json()
                self._fetched_at = now
                return self._jwks
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"Failed to fetch JWKS: {e}")
            if self._jwks:
                logger.warning("Using expired JWKS after fetch failure")
                return self._jwks
            raise HTTPException(status_code=500, detail="Failed to fetch authentication keys")

    async def key_for(self, kid: str) -> Dict[str, Any]:
        jwks = await self.get()
        for key in jwks.get("keys", []):
            if key.get("kid") == kid:
                return key
        raise HTTPException(status_code=401, detail=f"Key with ID '{kid}' not found in JWKS")


jwks_cache = JwksCache()


async def verify_token(token: str) -> Dict[str, Any]:
    """
    Verify a Supabase access token and return its claims.

    Raises:
        HTTPException: 401 for any invalid, expired or unverifiable token
    """
    try:
        header = jwt.get_unverified_header(token)
        kid = header.get("kid")
        if not kid:
            raise HTTPException(status_code=401, detail="Token missing key ID (kid)")

        key = jwk.construct(await jwks_cache.key_for(kid))
        return jwt.decode(
            token,
            key,
            algorithms=SUPPORTED_ALGORITHMS,
            audience=JWT_AUDIENCE,
            issuer=_auth_base_url(),
        )
    except HTTPException:
        raise
    except jwt.ExpiredSignatureError:
        raise HTTPException(status_code=401, detail="Token has expired")
    except jwt.JWTClaimsError as e:
        raise HTTPException(status_code=401, detail=f"Token validation failed: {e}")
    except jwt.JWTError as e:
        raise HTTPException(status_code=401, detail=f"Invalid token: {e}")
    except Exception as e:
        logger.error(f"Token verification error: {e}", exc_info=True)
        raise HTTPException(status_code=401, detail="Token verification failed")


async def get_current_user_id(authorization: Optional[str] = Header(None)) -> str:
    """FastAPI dependency: the `sub` claim of a verified Bearer token"""
    if not authorization:
        raise HTTPException(status_code=401, detail="Authorization header missing")

    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token:
        raise HTTPException(
            status_code=401,
            detail="Invalid authorization header format. Expected 'Bearer <token>'",
        )

    payload = await verify_token(token)
    user_id = payload.get("sub")
    if not user_id:
        raise HTTPException(status_code=401, detail="Invalid token: no user ID")
    return user_id
