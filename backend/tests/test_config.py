# ruff: noqa: INP001
"""Settings validation for record-store connection and admin roles."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from teamdesk.core.config import Settings


def _settings(**overrides: object) -> Settings:
    values = {
        "record_store_url": "https://records.example.com",
        "record_store_anon_key": "anon",
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


def test_record_store_url_is_required() -> None:
    with pytest.raises(ValidationError, match="RECORD_STORE_URL must be set and non-empty."):
        _settings(record_store_url="  ")


def test_anon_key_is_required() -> None:
    with pytest.raises(ValidationError, match="RECORD_STORE_ANON_KEY must be set and non-empty."):
        _settings(record_store_anon_key="")


def test_trailing_slash_is_stripped() -> None:
    assert _settings(record_store_url="https://records.example.com/ ").record_store_url == (
        "https://records.example.com"
    )


def test_default_admin_roles() -> None:
    assert _settings().admin_role_set == frozenset(
        {"Manager Technique", "Responsable Technique", "Responsable Marketing"},
    )


def test_admin_roles_are_parsed_from_comma_list() -> None:
    assert _settings(admin_roles=" Lead , ,Owner").admin_role_set == frozenset({"Lead", "Owner"})


def test_settle_delay_cannot_be_negative() -> None:
    with pytest.raises(ValidationError):
        _settings(write_settle_delay_seconds=-1)
