from __future__ import annotations

import pytest

from payroll_office.auth.capabilities import Capability, Owner, is_allowed
from payroll_office.auth.tokens import Identity, issue_token, verify_token
from payroll_office.core.enums import Role
from payroll_office.core.exceptions import AuthenticationError

SECRET = "unit-secret"

ADMIN = Identity(user_id=1, role=Role.ADMIN)
MANAGER = Identity(user_id=2, role=Role.CLIENT, organization_id=10)
EMPLOYEE = Identity(user_id=3, role=Role.EMPLOYEE, organization_id=10)

OWN = Owner(user_id=3, organization_id=10)
OTHER_ORG = Owner(user_id=4, organization_id=20)


def test_token_round_trip():
    token = issue_token(MANAGER, secret_key=SECRET)

    assert verify_token(token, secret_key=SECRET) == MANAGER


def test_token_with_wrong_secret_is_rejected():
    token = issue_token(EMPLOYEE, secret_key=SECRET)

    with pytest.raises(AuthenticationError):
        verify_token(token, secret_key="other")


def test_expired_token_is_rejected():
    token = issue_token(EMPLOYEE, secret_key=SECRET)

    with pytest.raises(AuthenticationError, match="expired"):
        verify_token(token, secret_key=SECRET, max_age=-1)


def test_garbage_token_is_rejected():
    with pytest.raises(AuthenticationError):
        verify_token("not-a-token", secret_key=SECRET)


@pytest.mark.parametrize(
    "identity, caps, owner, expected",
    [
        (ADMIN, (Capability.ADMIN,), OTHER_ORG, True),
        (MANAGER, (Capability.ADMIN,), OWN, False),
        (MANAGER, (Capability.ORG_MANAGER,), OWN, True),
        (MANAGER, (Capability.ORG_MANAGER,), OTHER_ORG, False),
        (EMPLOYEE, (Capability.ORG_MANAGER,), OWN, False),
        (EMPLOYEE, (Capability.SELF,), OWN, True),
        (EMPLOYEE, (Capability.SELF,), OTHER_ORG, False),
        (EMPLOYEE, (Capability.ADMIN, Capability.ORG_MANAGER, Capability.SELF), OWN, True),
        (ADMIN, (Capability.SELF,), OWN, False),
    ],
)
def test_capability_matrix(identity, caps, owner, expected):
    assert is_allowed(identity, caps, owner) is expected
