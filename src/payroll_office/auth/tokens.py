from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from itsdangerous import BadSignature, SignatureExpired, URLSafeTimedSerializer

from ..core.constants import DEFAULT_TOKEN_MAX_AGE_SECONDS
from ..core.enums import Role
from ..core.exceptions import AuthenticationError

_SALT = "payroll-office-api"


@dataclass(frozen=True)
class Identity:
    """Who is calling, as carried by the bearer token."""

    user_id: int
    role: Role
    organization_id: Optional[int] = None

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN


def _serializer(secret_key: str) -> URLSafeTimedSerializer:
    return URLSafeTimedSerializer(secret_key, salt=_SALT)


def issue_token(identity: Identity, *, secret_key: str) -> str:
    """Sign an identity. Login lives in the external auth service; it calls this."""
    return _serializer(secret_key).dumps(
        {"uid": identity.user_id, "role": identity.role.value, "org": identity.organization_id}
    )


def verify_token(token: str, *, secret_key: str, max_age: int = DEFAULT_TOKEN_MAX_AGE_SECONDS) -> Identity:
    try:
        payload = _serializer(secret_key).loads(token, max_age=max_age)
    except SignatureExpired:
        raise AuthenticationError("Token has expired")
    except BadSignature:
        raise AuthenticationError("Invalid token")

    try:
        org = payload.get("org")
        return Identity(
            user_id=int(payload["uid"]),
            role=Role(payload["role"]),
            organization_id=int(org) if org is not None else None,
        )
    except (AttributeError, KeyError, TypeError, ValueError):
        raise AuthenticationError("Invalid token payload")
