from __future__ import annotations

from typing import Any

import bcrypt

ROLES = ("customer", "super_admin", "sales_executive", "salesman", "salon_owner", "independent_pro")

_users: dict[str, dict[str, Any]] = {}


def _hash_password(plain: str) -> str:
    return bcrypt.hashpw(plain.encode(), bcrypt.gensalt()).decode()


def _verify_password(plain: str, hashed: str) -> bool:
    return bcrypt.checkpw(plain.encode(), hashed.encode())


def register_user(
    username: str,
    password: str,
    role: str,
    user_id: str,
    role_id: str | None = None,
) -> None:
    if role not in ROLES:
        raise ValueError(f"Unknown role {role!r}")
    _users[username] = {
        "password_hash": _hash_password(password),
        "role": role,
        "user_id": user_id,
        "role_id": role_id,
    }


def _seed_users() -> None:
    """Pre-seed demo accounts on import (ids match the bundled seed data)."""
    register_user("customer", "customer123", "customer", user_id="u-customer-1")
    register_user("superadmin", "admin123", "super_admin", user_id="u-admin-1")
    register_user("salesman", "sales123", "salesman", user_id="u-salesman-1", role_id="sm-1")
    register_user("salonowner", "owner123", "salon_owner", user_id="u-owner-1")


def authenticate(username: str, password: str) -> dict[str, Any] | None:
    """Verify credentials. Returns the session payload or ``None``."""
    record = _users.get(username)
    if record and _verify_password(password, record["password_hash"]):
        return {
            "username": username,
            "role": record["role"],
            "user_id": record["user_id"],
            "role_id": record["role_id"],
        }
    return None


_seed_users()
