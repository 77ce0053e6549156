from __future__ import annotations

from typing import Callable

from fastapi import HTTPException, Request


def require_user(request: Request) -> dict:
    """Raise 401 if no user is logged in."""
    user = request.session.get("user")
    if not user:
        raise HTTPException(status_code=401, detail="Not authenticated")
    return user


def require_role(*roles: str) -> Callable[[Request], dict]:
    """Dependency factory: 401 if not logged in, 403 if the role is not allowed."""

    def _dependency(request: Request) -> dict:
        user = require_user(request)
        if user.get("role") not in roles:
            raise HTTPException(status_code=403, detail="Access denied for this role")
        return user

    return _dependency


def require_admin(request: Request) -> dict:
    """Raise 401 if not logged in, 403 if not super admin."""
    user = require_user(request)
    if user.get("role") != "super_admin":
        raise HTTPException(status_code=403, detail="Admin access required")
    return user
