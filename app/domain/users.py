from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional

from app.core.security import hash_password, verify_password


@dataclass(frozen=True)
class DemoUser:
    """In-memory dashboard account; the dataset has no user store of its own."""

    id: str
    email: str
    name: str
    password_hash: str

    def check_password(self, plain: str) -> bool:
        return verify_password(plain, self.password_hash)


_DEMO_USERS: List[DemoUser] = [
    DemoUser(
        id="user-analyst",
        email="analyst@salesdash.com",
        name="Priya Sharma",
        password_hash=hash_password("analyst123"),
    ),
    DemoUser(
        id="user-manager",
        email="manager@salesdash.com",
        name="Rahul Verma",
        password_hash=hash_password("manager123"),
    ),
]

_BY_EMAIL: Dict[str, DemoUser] = {user.email.lower(): user for user in _DEMO_USERS}
_BY_ID: Dict[str, DemoUser] = {user.id: user for user in _DEMO_USERS}


def get_demo_user_by_email(email: str) -> Optional[DemoUser]:
    return _BY_EMAIL.get(email.lower())


def get_demo_user_by_id(user_id: str) -> Optional[DemoUser]:
    return _BY_ID.get(user_id)


def list_demo_users() -> Iterable[DemoUser]:
    return tuple(_DEMO_USERS)
