"""Tests for the JWT admin gate."""

import pytest

from gardenbook.auth import JwtAdminGate, create_access_token
from gardenbook.core.domain_types import Table
from gardenbook.core.errors import InvalidCredentialError, MissingCredentialError, NotAuthorizedError

SECRET = "gate-secret-gate-secret-gate-secret-0000"


@pytest.fixture
def gate(repository):
    repository.seed(Table.USERS, id=1, email="admin@garden.test", role="admin", is_active=True)
    repository.seed(Table.USERS, id=2, email="viewer@garden.test", role="viewer", is_active=True)
    repository.seed(Table.USERS, id=3, email="former@garden.test", role="admin", is_active=False)
    return JwtAdminGate(repository, SECRET)


def _token(user_id, secret=SECRET, minutes=5):
    return create_access_token(user_id, secret, minutes)


async def test_admin_token_resolves_identity(gate):
    identity = await gate.authenticate(_token(1))
    assert (identity.id, identity.email) == (1, "admin@garden.test")


async def test_bearer_prefix_is_accepted(gate):
    identity = await gate.authenticate(f"Bearer {_token(1)}")
    assert identity.id == 1


@pytest.mark.parametrize("scheme", ["bearer", "BEARER", "Bearer  "])
async def test_bearer_scheme_ignores_case_and_spacing(gate, scheme):
    identity = await gate.authenticate(f"{scheme} {_token(1)}")
    assert identity.id == 1


@pytest.mark.parametrize("credential", [None, "", "   ", "Bearer ", "Bearer", "bearer   "])
async def test_missing_credential(gate, credential):
    with pytest.raises(MissingCredentialError):
        await gate.authenticate(credential)


@pytest.mark.parametrize("credential", [
    "not-a-jwt",
    _token(1, secret="another-secret-another-secret-another-0"),
    _token(1, minutes=-5),
])
async def test_invalid_credential(gate, credential):
    with pytest.raises(InvalidCredentialError):
        await gate.authenticate(credential)


@pytest.mark.parametrize("user_id", [2, 3, 99])
async def test_not_an_active_admin(gate, user_id):
    with pytest.raises(NotAuthorizedError):
        await gate.authenticate(_token(user_id))
