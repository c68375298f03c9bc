from __future__ import annotations

from enum import Enum
from typing import Optional

from .exceptions import Forbidden


class Role(str, Enum):
    """
    Capability of the user driving the browser.

    Passed explicitly into mutating calls (upload, delete, export) instead of
    being read from ambient session state.
    """
    ANONYMOUS = "anonymous"
    USER = "user"
    ADMIN = "admin"

    @classmethod
    def parse(cls, raw: str | None, default: Optional["Role"] = None) -> "Role":
        if raw is None or not str(raw).strip():
            return default if default is not None else cls.USER
        try:
            return cls(str(raw).strip().lower())
        except ValueError:
            raise ValueError(f"Unknown role '{raw}'") from None

    @property
    def is_authenticated(self) -> bool:
        return self is not Role.ANONYMOUS

    @property
    def is_admin(self) -> bool:
        return self is Role.ADMIN


def require_authenticated(role: Role, action: str) -> None:
    if not role.is_authenticated:
        raise Forbidden(f"Sign in to {action}")


def require_admin(role: Role, action: str) -> None:
    if not role.is_admin:
        raise Forbidden(f"Only administrators can {action}")
