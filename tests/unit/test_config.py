"""
Unit tests for configuration helpers.
"""

import pytest

from chicken_admin.core import config as config_module
from chicken_admin.core.config import Config


def test_int_env_falls_back_on_bad_values(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("CHICKEN_TEST_INT", "abc")
    assert config_module._int_env("CHICKEN_TEST_INT", 7) == 7

    monkeypatch.setenv("CHICKEN_TEST_INT", " ")
    assert config_module._int_env("CHICKEN_TEST_INT", 7) == 7

    monkeypatch.setenv("CHICKEN_TEST_INT", "42")
    assert config_module._int_env("CHICKEN_TEST_INT", 7) == 42


def test_float_env(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("CHICKEN_TEST_FLOAT", "2.5")
    assert config_module._float_env("CHICKEN_TEST_FLOAT", 30.0) == 2.5
    monkeypatch.delenv("CHICKEN_TEST_FLOAT")
    assert config_module._float_env("CHICKEN_TEST_FLOAT", 30.0) == 30.0


def test_api_root_joins_base_and_prefix(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setattr(Config, "ADMIN_API_BASE_URL", "https://admin.example/")
    monkeypatch.setattr(Config, "ADMIN_API_PREFIX", "admin/api/v1/")

    assert Config.api_root() == "https://admin.example/admin/api/v1"


def test_api_root_arguments_override_env(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setattr(Config, "ADMIN_API_BASE_URL", "https://admin.example")

    assert Config.api_root("http://localhost:3000/", "/v2") == "http://localhost:3000/v2"
    assert Config.api_root(prefix="v2") == "https://admin.example/v2"


def test_validate_rejects_inconsistent_limits(monkeypatch: pytest.MonkeyPatch):
    Config.validate()

    monkeypatch.setattr(Config, "DEFAULT_PAGE_LIMIT", 200)
    with pytest.raises(ValueError):
        Config.validate()

    monkeypatch.setattr(Config, "DEFAULT_PAGE_LIMIT", 20)
    monkeypatch.setattr(Config, "ADMIN_API_BASE_URL", "")
    with pytest.raises(ValueError):
        Config.validate()
