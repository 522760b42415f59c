# backend/services/role_gate.py
"""Caller privilege lookup.

The answer is a rendering hint for clients. Admin routes enforce the role
themselves through ``utils.tokenJWT.role_required`` and every store query is
scoped to the caller, so nothing here grants access on its own.
"""
from typing import Optional

from sqlalchemy.orm import Session

from models.users import User
from services.exceptions import Unauthenticated

ADMIN = "admin"
USER = "user"
ROLES = (USER, ADMIN)


def resolve_role(user: Optional[User]) -> str:
    if user is None or user.id is None:
        raise Unauthenticated()
    role = (user.role or "").lower()
    return role if role in ROLES else USER


def is_admin(user: Optional[User]) -> bool:
    return resolve_role(user) == ADMIN


def session_info(user: Optional[User]) -> dict:
    role = resolve_role(user)
    return {"user_id": user.id, "email": user.email, "role": role, "is_admin": role == ADMIN}


def assign_role(db: Session, user_id: int, role: str) -> Optional[User]:
    if role not in ROLES:
        raise ValueError(f"Unknown role: {role}")
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        return None
    user.role = role
    db.commit()
    db.refresh(user)
    return user
