"""Request principal and owner-or-admin authorization.

Authentication itself lives in front of this service. The identity provider
forwards the authenticated user in the ``X-User-Id`` header and a
comma-separated role list in ``X-User-Role``.
"""

from dataclasses import dataclass

from fastapi import Depends, Header, HTTPException

ADMIN_ROLE = "Admin"


@dataclass(frozen=True)
class Principal:
    user_id: str
    roles: frozenset[str] = frozenset()

    @property
    def is_admin(self) -> bool:
        return ADMIN_ROLE in self.roles

    def can_act_as(self, user_id: str) -> bool:
        return self.is_admin or self.user_id == user_id


def get_principal(
    x_user_id: str = Header(default=""),
    x_user_role: str = Header(default=""),
) -> Principal:
    if not x_user_id.strip():
        raise HTTPException(status_code=401, detail="Authentication required")
    roles = frozenset(role.strip() for role in x_user_role.split(",") if role.strip())
    return Principal(user_id=x_user_id.strip(), roles=roles)


def ensure_owner_or_admin(principal: Principal, user_id: str) -> None:
    if not principal.can_act_as(user_id):
        raise HTTPException(status_code=403, detail="Not allowed to act for this user")


def require_admin(principal: Principal = Depends(get_principal)) -> Principal:
    if not principal.is_admin:
        raise HTTPException(status_code=403, detail="Administrator role required")
    return principal
