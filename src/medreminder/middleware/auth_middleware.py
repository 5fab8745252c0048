"""
Authentication middleware - resolves the owner id before request processing.

Every reminder and dose query is scoped by request.state.user_id, so all
non-public endpoints require a valid API key or Bearer token.
"""
import logging
from datetime import datetime

from fastapi import HTTPException, Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from ..core.auth import get_auth_service

logger = logging.getLogger(__name__)


class AuthenticationMiddleware(BaseHTTPMiddleware):
    """
    Middleware to enforce authentication.

    Public endpoints (root, health checks, API docs) are excluded.
    """

    PUBLIC_PATHS = {
        "/",
        "/favicon.ico",
        "/docs",
        "/redoc",
        "/openapi.json",
        "/health",
        "/health/live",
        "/health/ready",
    }

    PUBLIC_PATH_PREFIXES = {
        "/docs",
        "/redoc",
    }

    def is_public_endpoint(self, path: str) -> bool:
        """Check if endpoint is public and doesn't require authentication."""
        normalized_path = path.rstrip("/") or "/"
        if normalized_path in self.PUBLIC_PATHS:
            return True
        return any(path.startswith(prefix + "/") for prefix in self.PUBLIC_PATH_PREFIXES)

    async def dispatch(self, request: Request, call_next):
        if request.method == "OPTIONS" or self.is_public_endpoint(request.url.path):
            return await call_next(request)

        auth_service = get_auth_service()
        api_key = request.headers.get("X-API-Key")
        auth_header = request.headers.get("Authorization")

        try:
            request.state.user_id = auth_service.get_user_from_request(
                api_key=api_key, auth_header=auth_header
            )
        except HTTPException as e:
            logger.warning(
                f"❌ Authentication failed for {request.method} {request.url.path}: {e.detail} "
                f"(IP: {request.client.host if request.client else 'unknown'})"
            )
            return JSONResponse(
                status_code=401,
                content={
                    "success": False,
                    "error": "UNAUTHORIZED",
                    "message": "Authentication required for this endpoint",
                    "details": {
                        "path": request.url.path,
                        "method": request.method,
                        "hint": "Provide X-API-Key header or Authorization Bearer token",
                    },
                    "timestamp": datetime.utcnow().isoformat(),
                    "request_id": getattr(request.state, "request_id", "") or "",
                },
                headers={"WWW-Authenticate": "Bearer"},
            )

        logger.debug(f"Authenticated user {request.state.user_id} for {request.url.path}")
        return await call_next(request)
