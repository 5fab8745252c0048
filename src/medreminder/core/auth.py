"""
Authentication service.

Stands in for the identity provider: every API key maps to exactly one
owner (user) id, and all reminder and dose data is scoped by that id.
"""

import logging
import os
from typing import Dict, Optional

from fastapi import HTTPException

logger = logging.getLogger(__name__)

MISSING_CREDENTIALS = "Authentication required. Provide X-API-Key header or Authorization Bearer token."
BEARER_PREFIX = "Bearer "


def parse_api_keys(raw: str) -> Dict[str, str]:
    """
    Parse ``API_KEYS``.

    Format: "key1:user1,key2:user2". A bare key without a colon is its own
    owner id; blank entries and pairs with an empty side are ignored.
    """
    owners: Dict[str, str] = {}
    for entry in (raw or "").split(","):
        entry = entry.strip()
        if not entry:
            continue
        key, sep, owner = (part.strip() for part in entry.partition(":"))
        if not sep:
            owners[key] = key
        elif key and owner:
            owners[key] = owner
    return owners


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(status_code=401, detail=detail, headers={"WWW-Authenticate": "Bearer"})


class AuthService:
    """Resolves the owner id behind an API key or Bearer token."""

    def __init__(self, api_keys_str: Optional[str] = None):
        if api_keys_str is None:
            api_keys_str = os.getenv("API_KEYS", "")
        self.api_keys: Dict[str, str] = parse_api_keys(api_keys_str)
        if self.api_keys:
            logger.info("Loaded %d API key(s)", len(self.api_keys))
        else:
            logger.warning("⚠️  No API keys configured. Authentication will fail for all requests.")

    def owner_for(self, credential: Optional[str]) -> str:
        """Owner id for a raw credential; a leading "Bearer " is tolerated."""
        if not credential:
            raise _unauthorized(MISSING_CREDENTIALS)
        if credential.startswith(BEARER_PREFIX):
            credential = credential[len(BEARER_PREFIX):].strip()

        owner = self.api_keys.get(credential)
        if owner is None:
            logger.warning(f"Invalid API key attempted: {credential[:6]}...")
            raise _unauthorized("Invalid API key or token")
        return owner

    def get_user_from_request(self, api_key: Optional[str] = None, auth_header: Optional[str] = None) -> str:
        """X-API-Key wins over the Authorization header."""
        if api_key:
            return self.owner_for(api_key)
        if auth_header and auth_header.startswith(BEARER_PREFIX):
            return self.owner_for(auth_header)
        raise _unauthorized(MISSING_CREDENTIALS)


_auth_service: Optional[AuthService] = None


def get_auth_service() -> AuthService:
    global _auth_service
    if _auth_service is None:
        _auth_service = AuthService()
    return _auth_service
