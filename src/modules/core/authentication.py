"""Auth0 JWT Authentication backend for Django REST Framework.

Uses PyJWT with RS256 asymmetric verification.  JWKS keys are fetched
from the Auth0 tenant and cached in-memory (300 s) via ``PyJWKClient``,
so there is no network call on every request.

The backend only establishes *who* is calling (the ``sub`` claim plus the
role claim).  Mapping that subject to a local user profile happens in
``modules.users.principal``.

Security decisions
------------------
* **Fail Closed**: any decode / validation error returns 401.
* ``algorithms`` is pinned to the configured value (default RS256),
  never derived from the incoming token.
* Audience **and** issuer are always validated.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Optional

import jwt as pyjwt
import structlog
from django.conf import settings
from jwt import PyJWKClient
from jwt.exceptions import PyJWTError
from rest_framework.authentication import BaseAuthentication
from rest_framework.exceptions import AuthenticationFailed

logger = structlog.get_logger(__name__)


def _issuer() -> str:
    return f"https://{settings.AUTH0_DOMAIN}/" if settings.AUTH0_DOMAIN else ""


@lru_cache(maxsize=4)
def _jwks_client(domain: str) -> PyJWKClient:
    return PyJWKClient(
        f"https://{domain}/.well-known/jwks.json",
        cache_jwk_set=True,
        lifespan=300,
    )


def _auth0_enabled() -> bool:
    return bool(settings.AUTH0_DOMAIN and settings.AUTH0_AUDIENCE)


class Auth0User:
    """Lightweight user object for requests authenticated via Auth0.

    Auth0 is the source of truth for identity; no Django ``User`` row is
    required.  ``sub`` identifies the caller; ``role`` is the optional
    role claim used when the caller creates their profile.
    """

    def __init__(self, payload: dict):
        self.payload = payload
        self.sub: str = payload.get("sub", "")
        self.permissions: list[str] = payload.get("permissions", [])
        self.role: Optional[str] = payload.get(settings.AUTH0_ROLE_CLAIM)

    # DRF checks
    is_authenticated = True
    is_active = True

    @property
    def pk(self) -> str:
        """Throttle identity."""
        return self.sub

    def __str__(self) -> str:  # pragma: no cover
        return self.sub


class Auth0JSONWebTokenAuthentication(BaseAuthentication):
    """DRF authentication class that validates Auth0 JWT Bearer tokens."""

    keyword = "Bearer"

    def authenticate(self, request):
        """Return ``(Auth0User, token)`` or ``None`` (no credentials)."""
        header = request.META.get("HTTP_AUTHORIZATION", "")
        if not header:
            return None

        token = self._extract_token(header)

        # Defer to SimpleJWT when Auth0 is not configured or the token
        # was not issued by the Auth0 tenant.
        if not _auth0_enabled():
            return None
        if not self._token_has_auth0_issuer(token):
            return None

        payload = self._decode_token(token)
        user = Auth0User(payload)
        logger.info("jwt_authenticated", sub=user.sub)
        return (user, token)

    def authenticate_header(self, request):
        """Value for the ``WWW-Authenticate`` response header on 401."""
        return f'{self.keyword} realm="api"'

    @staticmethod
    def _extract_token(header: str) -> str:
        parts = header.split()
        if len(parts) != 2 or parts[0].lower() != "bearer":
            raise AuthenticationFailed("Invalid Authorization header format.")
        return parts[1]

    @staticmethod
    def _token_has_auth0_issuer(token: str) -> bool:
        try:
            payload = pyjwt.decode(
                token,
                options={
                    "verify_signature": False,
                    "verify_aud": False,
                    "verify_iss": False,
                },
            )
        except PyJWTError:
            return False
        return payload.get("iss") == _issuer()

    @staticmethod
    def _decode_token(token: str) -> dict:
        try:
            signing_key = _jwks_client(settings.AUTH0_DOMAIN).get_signing_key_from_jwt(
                token
            )
            payload = pyjwt.decode(
                token,
                signing_key.key,
                algorithms=[settings.AUTH0_ALGORITHM],
                audience=settings.AUTH0_AUDIENCE,
                issuer=_issuer(),
                leeway=60,
            )
        except PyJWTError as exc:
            logger.warning("jwt_validation_failed", error=str(exc))
            raise AuthenticationFailed("Failed to validate JWT.") from exc
        return payload
