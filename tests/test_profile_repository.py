from __future__ import annotations

from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest
from pydantic import ValidationError

from accessgate.client import SupabaseConnection
from accessgate.models.enums import Role
from accessgate.repositories.profile_repository import (
    ProfileNotFoundError,
    ProfileRepository,
)


def _repo(logger, response, table=""):
    client = MagicMock()
    query = client.table.return_value.select.return_value.eq.return_value
    query.maybe_single.return_value.execute.return_value = response
    connection = SupabaseConnection("", "", logger, client=client)
    return ProfileRepository(connection, logger, table=table), client


def test_fetch_profile_by_user_id(logger):
    repo, client = _repo(logger, SimpleNamespace(data={
        "id": "uid-1",
        "role": "location_admin",
        "name": "Lee",
        "created_at": "2026-01-01T00:00:00Z",
    }))

    profile = repo.fetch_profile_by_user_id("uid-1")

    assert profile.role is Role.LOCATION_ADMIN
    assert profile.name == "Lee"
    client.table.assert_called_once_with("profiles")
    client.table.return_value.select.return_value.eq.assert_called_once_with("id", "uid-1")


def test_custom_table_name(logger):
    repo, client = _repo(
        logger, SimpleNamespace(data={"id": "uid-1", "role": "staff"}), table="app_profiles",
    )
    repo.fetch_profile_by_user_id("uid-1")
    client.table.assert_called_once_with("app_profiles")


@pytest.mark.parametrize("response", [None, SimpleNamespace(data=None)])
def test_missing_row_raises(logger, response):
    repo, _ = _repo(logger, response)
    with pytest.raises(ProfileNotFoundError) as exc_info:
        repo.fetch_profile_by_user_id("uid-404")
    assert exc_info.value.user_id == "uid-404"


def test_unknown_role_raises(logger):
    repo, _ = _repo(logger, SimpleNamespace(data={"id": "uid-1", "role": "owner"}))
    with pytest.raises(ValidationError):
        repo.fetch_profile_by_user_id("uid-1")


def test_unconfigured_connection_raises(logger):
    repo = ProfileRepository(SupabaseConnection("", "", logger), logger)
    with pytest.raises(RuntimeError):
        repo.fetch_profile_by_user_id("uid-1")
