from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Any


class UserRole(StrEnum):
    USER = "user"
    ADMIN = "admin"


@dataclass(frozen=True)
class User:
    id: str
    name: str
    email: str
    password_hash: str
    role: UserRole = UserRole.USER
    created_at: str = ""

    def to_public_dict(self) -> dict[str, Any]:
        """Serialize without the password hash."""
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "role": self.role.value,
        }
