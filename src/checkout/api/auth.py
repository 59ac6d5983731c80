"""Request identity for the Checkout API.

Tokens are verified upstream; by the time a request reaches this service
the gateway has resolved it to a user id and role, passed along as the
``X-User-ID`` and ``X-User-Role`` headers.
"""

from dataclasses import dataclass

from fastapi import Depends, Header, HTTPException

ROLES = ("customer", "staff", "admin")


@dataclass(frozen=True)
class Caller:
    user_id: str
    role: str = "customer"

    @property
    def is_staff(self) -> bool:
        return self.role in ("staff", "admin")

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"


def current_caller(
    x_user_id: str | None = Header(default=None),
    x_user_role: str = Header(default="customer"),
) -> Caller:
    if not x_user_id:
        raise HTTPException(status_code=401, detail="Authentication required")
    role = x_user_role.lower()
    if role not in ROLES:
        raise HTTPException(status_code=401, detail="Unknown user role")
    return Caller(user_id=x_user_id, role=role)


def staff_caller(caller: Caller = Depends(current_caller)) -> Caller:
    if not caller.is_staff:
        raise HTTPException(status_code=403, detail="Staff or admin access required")
    return caller


def admin_caller(caller: Caller = Depends(current_caller)) -> Caller:
    if not caller.is_admin:
        raise HTTPException(status_code=403, detail="Admin access required")
    return caller
