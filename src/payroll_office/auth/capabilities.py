from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from functools import wraps
from typing import Callable, Optional

from flask import current_app, g, request

from ..core.constants import DEFAULT_TOKEN_MAX_AGE_SECONDS
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, AuthorizationError
from .tokens import Identity, verify_token


class Capability(str, Enum):
    """What a caller may act as on a route.

    ADMIN: platform administrator, any organization.
    ORG_MANAGER: client user, only inside their own organization.
    SELF: the caller acting on their own records.
    """

    ADMIN = "admin"
    ORG_MANAGER = "org_manager"
    SELF = "self"


@dataclass(frozen=True)
class Owner:
    """The user and organization a target resource belongs to."""

    user_id: Optional[int]
    organization_id: Optional[int]


def current_identity() -> Identity:
    identity = g.get("identity")
    if identity is not None:
        return identity

    header = request.headers.get("Authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise AuthenticationError("Missing bearer token")

    identity = verify_token(
        token.strip(),
        secret_key=current_app.config["SECRET_KEY"],
        max_age=int(current_app.config.get("TOKEN_MAX_AGE_SECONDS", DEFAULT_TOKEN_MAX_AGE_SECONDS)),
    )
    g.identity = identity
    return identity


def is_allowed(identity: Identity, capabilities, owner: Optional[Owner]) -> bool:
    for cap in capabilities:
        if cap == Capability.ADMIN and identity.role == Role.ADMIN:
            return True
        if cap == Capability.ORG_MANAGER and identity.role == Role.CLIENT:
            if owner is None or (
                identity.organization_id is not None and owner.organization_id == identity.organization_id
            ):
                return True
        if cap == Capability.SELF:
            if owner is None or owner.user_id == identity.user_id:
                return True
    return False


def requires(*capabilities: Capability, owner: Optional[Callable[..., Owner]] = None):
    """Route decorator: authenticate, then check capabilities once.

    `owner` receives the view's URL arguments and resolves who owns the
    target resource. Without it, ORG_MANAGER and SELF views must scope
    their queries to the caller themselves.
    """

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            identity = current_identity()
            target = owner(**kwargs) if owner else None
            if not is_allowed(identity, capabilities, target):
                raise AuthorizationError("You do not have permission to perform this action")
            return view(*args, **kwargs)

        return wrapper

    return decorator


def organization_scope(requested: Optional[int] = None) -> int:
    """Organization a manager-level call operates on.

    Admins must name one; client users are pinned to their own.
    """
    identity = current_identity()
    if identity.is_admin:
        if requested is None:
            raise AuthorizationError("organizationId is required for administrators")
        return int(requested)

    if identity.organization_id is None:
        raise AuthorizationError("No organization associated with this account")
    if requested is not None and int(requested) != identity.organization_id:
        raise AuthorizationError("Cannot act on another organization")
    return identity.organization_id


def authorize(owner: Owner, *capabilities: Capability) -> Identity:
    """Inline form of `requires` for targets named in the request body."""
    identity = current_identity()
    if not is_allowed(identity, capabilities, owner):
        raise AuthorizationError("You do not have permission to perform this action")
    return identity
