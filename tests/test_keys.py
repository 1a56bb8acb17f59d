"""Tests for sitestream.keys — provider API key loading."""

from __future__ import annotations

import os
from unittest.mock import patch

from sitestream import keys
from sitestream.keys import _load_env_file, has_any_key, key_status, load_keys_env
from sitestream.providers.registry import load_settings

_PROVIDER_ENVS = ("ANTHROPIC_API_KEY", "OPENAI_API_KEY", "GEMINI_API_KEY", "GROQ_API_KEY")


class TestLoadEnvFile:
    def test_sets_missing_vars(self, tmp_path, monkeypatch):
        monkeypatch.delenv("SITESTREAM_TEST_KEY", raising=False)
        env = tmp_path / ".env"
        env.write_text(
            "# comment\n\nSITESTREAM_TEST_KEY='abc123'\nnot a pair\n",
            encoding="utf-8",
        )
        _load_env_file(env)
        assert os.environ["SITESTREAM_TEST_KEY"] == "abc123"
        monkeypatch.delenv("SITESTREAM_TEST_KEY")

    def test_existing_vars_not_overwritten(self, tmp_path, monkeypatch):
        monkeypatch.setenv("SITESTREAM_TEST_KEY", "from-shell")
        env = tmp_path / ".env"
        env.write_text("SITESTREAM_TEST_KEY=from-file\n", encoding="utf-8")
        _load_env_file(env)
        assert os.environ["SITESTREAM_TEST_KEY"] == "from-shell"


class TestLoadKeysEnv:
    def test_keys_file_wins_over_project_env(self, tmp_path, monkeypatch):
        monkeypatch.delenv("SITESTREAM_TEST_KEY", raising=False)
        keys_file = tmp_path / "keys.env"
        keys_file.write_text("SITESTREAM_TEST_KEY=user\n", encoding="utf-8")
        project = tmp_path / "project"
        project.mkdir()
        (project / ".env").write_text("SITESTREAM_TEST_KEY=project\n", encoding="utf-8")
        monkeypatch.chdir(project)

        with patch.object(keys, "KEYS_FILE", keys_file):
            load_keys_env()

        assert os.environ["SITESTREAM_TEST_KEY"] == "user"
        monkeypatch.delenv("SITESTREAM_TEST_KEY")

    def test_missing_files_ignored(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        with patch.object(keys, "KEYS_FILE", tmp_path / "absent.env"):
            load_keys_env()


class TestKeyStatus:
    def test_reports_each_provider(self, monkeypatch):
        for env in _PROVIDER_ENVS:
            monkeypatch.delenv(env, raising=False)
        monkeypatch.setenv("GROQ_API_KEY", "gsk-test")

        status = key_status(load_settings())
        assert status == {
            "anthropic": False, "openai": False, "google": False, "groq": True,
        }

    def test_has_any_key(self, monkeypatch):
        for env in _PROVIDER_ENVS:
            monkeypatch.delenv(env, raising=False)
        settings = load_settings()
        assert has_any_key(settings) is False
        monkeypatch.setenv("ANTHROPIC_API_KEY", "sk-ant")
        assert has_any_key(settings) is True
