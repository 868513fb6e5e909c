"""Tests for settings loading."""

import pytest

from gradetrack.config import Settings, load_settings
from gradetrack.exceptions import ConfigError
from gradetrack.tracker import create_store
from gradetrack.data import LocalStore, SupabaseStore


def test_defaults_without_config_file(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    settings = load_settings(environ={})
    assert settings == Settings()
    assert not settings.uses_supabase


def test_yaml_then_environment(tmp_path):
    path = tmp_path / "gradetrack.yaml"
    path.write_text(
        "user_id: alice\n"
        "supabase_url: https://demo.supabase.co\n"
        "supabase_key: anon\n"
        "request_timeout: [3, 15]\n"
        "max_retries: 5\n"
    )
    settings = load_settings(str(path), environ={"GRADETRACK_USER_ID": "bob"})

    assert settings.user_id == "bob"
    assert settings.supabase_url == "https://demo.supabase.co"
    assert settings.request_timeout == (3.0, 15.0)
    assert settings.max_retries == 5
    assert settings.uses_supabase


def test_missing_explicit_file(tmp_path):
    with pytest.raises(ConfigError):
        load_settings(str(tmp_path / "nope.yaml"), environ={})


def test_invalid_yaml(tmp_path):
    path = tmp_path / "bad.yaml"
    path.write_text("user_id: [unclosed\n")
    with pytest.raises(ConfigError):
        load_settings(str(path), environ={})


def test_non_mapping_yaml(tmp_path):
    path = tmp_path / "list.yaml"
    path.write_text("- a\n- b\n")
    with pytest.raises(ConfigError):
        load_settings(str(path), environ={})


def test_url_without_key(tmp_path):
    path = tmp_path / "gradetrack.yaml"
    path.write_text("supabase_url: https://demo.supabase.co\n")
    with pytest.raises(ConfigError):
        load_settings(str(path), environ={})


def test_create_store_picks_backend(tmp_path):
    local = create_store(Settings(store_file=str(tmp_path / "data.json")))
    assert isinstance(local, LocalStore)

    hosted = create_store(Settings(supabase_url="https://demo.supabase.co", supabase_key="anon"))
    assert isinstance(hosted, SupabaseStore)
    assert hosted.base_url == "https://demo.supabase.co/rest/v1"
    hosted.close()
