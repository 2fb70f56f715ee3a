"""Tests for bearer token authentication."""

from uuid import uuid4

import pytest

from meal_planner.services.auth import AuthService
from tests.conftest import FakeAuthClient


def test_authenticate_resolves_bearer_token() -> None:
    user_id = uuid4()
    service = AuthService(FakeAuthClient({"abc": user_id}))

    assert service.authenticate("Bearer abc") == user_id
    assert service.authenticate("bearer  abc ") == user_id


@pytest.mark.parametrize(
    "header", [None, "", "abc", "Basic abc", "Bearer ", "Bearer unknown"]
)
def test_authenticate_rejects_bad_headers(header: str | None) -> None:
    service = AuthService(FakeAuthClient({"abc": uuid4()}))

    assert service.authenticate(header) is None
