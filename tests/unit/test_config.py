"""Unit tests for AI credential resolution."""

import json

import pytest

from voxprompt.config import Settings


def make_settings(**overrides) -> Settings:
    return Settings(_env_file=None, **overrides)


@pytest.mark.unit
class TestResolveAICredentials:

    def test_environment_key_wins(self, tmp_path):
        config_file = tmp_path / ".z-ai-config"
        config_file.write_text(json.dumps({"apiKey": "file-key"}))

        app_settings = make_settings(ai_api_key="env-key", ai_config_path=str(config_file))

        assert app_settings.resolve_ai_credentials() == ("env-key", app_settings.ai_base_url)

    def test_zai_env_variable_is_read(self, monkeypatch, tmp_path):
        monkeypatch.setenv("ZAI_API_KEY", "from-env")
        app_settings = make_settings(ai_config_path=str(tmp_path / "absent"))

        assert app_settings.resolve_ai_credentials()[0] == "from-env"

    def test_falls_back_to_config_file(self, tmp_path):
        config_file = tmp_path / ".z-ai-config"
        config_file.write_text(
            json.dumps({"apiKey": "file-key", "baseUrl": "https://proxy.test/v4"})
        )

        app_settings = make_settings(ai_api_key="", ai_config_path=str(config_file))

        assert app_settings.resolve_ai_credentials() == ("file-key", "https://proxy.test/v4")

    def test_config_file_without_base_url_uses_default(self, tmp_path):
        config_file = tmp_path / ".z-ai-config"
        config_file.write_text(json.dumps({"apiKey": "file-key"}))

        app_settings = make_settings(ai_api_key="   ", ai_config_path=str(config_file))

        assert app_settings.resolve_ai_credentials() == ("file-key", app_settings.ai_base_url)

    @pytest.mark.parametrize("content", ["not json", "[1, 2]", json.dumps({"apiKey": ""})])
    def test_unusable_config_file(self, tmp_path, content):
        config_file = tmp_path / ".z-ai-config"
        config_file.write_text(content)

        app_settings = make_settings(ai_api_key="", ai_config_path=str(config_file))

        assert app_settings.resolve_ai_credentials() is None

    def test_nothing_configured(self, tmp_path):
        app_settings = make_settings(ai_api_key="", ai_config_path=str(tmp_path / "absent"))
        assert app_settings.resolve_ai_credentials() is None


@pytest.mark.unit
class TestSettingsParsing:

    def test_cors_origins_from_comma_list(self):
        app_settings = make_settings(cors_origins="http://a.test, http://b.test")
        assert app_settings.cors_origins == ["http://a.test", "http://b.test"]

    def test_cors_origins_from_json(self):
        app_settings = make_settings(cors_origins='["http://a.test"]')
        assert app_settings.cors_origins == ["http://a.test"]
