"""
test_config.py - Settings 로드 테스트

- 환경변수 → 비밀값/origin/포트
- default.yaml → 튜닝 값
- 파일/변수 없으면 기본값
"""

from pathlib import Path

import pytest

from src.core.config import (
    DEFAULT_ALLOWED_ORIGIN,
    DEFAULT_PORT,
    RateLimitConfig,
    Settings,
    load_config,
    load_settings,
)


@pytest.fixture
def missing_config(tmp_path: Path) -> Path:
    return tmp_path / "missing.yaml"


# =============================================================================
# load_config
# =============================================================================


class TestLoadConfig:
    """YAML 로드 테스트."""

    def test_missing_file_returns_empty(self, missing_config):
        assert load_config(missing_config) == {}

    def test_empty_file_returns_empty(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("", encoding="utf-8")

        assert load_config(path) == {}

    def test_non_mapping_root_rejected(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n", encoding="utf-8")

        with pytest.raises(ValueError):
            load_config(path)

    def test_project_default_yaml_loads(self):
        """저장소의 default.yaml이 코드 기본값과 일치."""
        settings = load_settings(env={})

        assert settings.upstream.chat_model == "gpt-4o-mini"
        assert settings.upstream.image_model == "gpt-image-1"
        assert settings.chat.temperature == 0.8
        assert settings.chat.max_tokens == 80
        assert settings.summary.temperature == 0.4
        assert settings.avatar.size == "1024x1024"
        assert settings.rate_limit == RateLimitConfig(enabled=True, requests=30, window_seconds=60)
        assert settings.max_body_bytes == 1024 * 1024


# =============================================================================
# load_settings (환경변수)
# =============================================================================


class TestLoadSettingsEnv:
    """환경변수 처리 테스트."""

    def test_defaults_without_env(self, missing_config):
        settings = load_settings(env={}, config_path=missing_config)

        assert settings.openai_api_key is None
        assert settings.openai_org_id is None
        assert settings.allowed_origins == (DEFAULT_ALLOWED_ORIGIN,)
        assert settings.port == DEFAULT_PORT
        assert settings.cors_allow_all is False

    def test_reads_key_org_port(self, missing_config):
        env = {"OPENAI_API_KEY": "sk-abc", "ORG_ID": "org-1", "PORT": "9000"}

        settings = load_settings(env=env, config_path=missing_config)

        assert settings.openai_api_key == "sk-abc"
        assert settings.openai_org_id == "org-1"
        assert settings.port == 9000

    def test_org_id_alias(self, missing_config):
        settings = load_settings(env={"OPENAI_ORG_ID": "org-2"}, config_path=missing_config)

        assert settings.openai_org_id == "org-2"

    def test_empty_key_treated_as_missing(self, missing_config):
        settings = load_settings(env={"OPENAI_API_KEY": ""}, config_path=missing_config)

        assert settings.openai_api_key is None

    def test_allowed_origins_csv(self, missing_config):
        env = {"ALLOWED_ORIGIN": "http://localhost:5500, https://App.Example.com/ ,"}

        settings = load_settings(env=env, config_path=missing_config)

        assert settings.allowed_origins == ("http://localhost:5500", "https://App.Example.com/")
        assert settings.origin_policy().allowed == (
            "http://localhost:5500",
            "https://app.example.com",
        )

    def test_allowed_origins_plural_alias(self, missing_config):
        settings = load_settings(
            env={"ALLOWED_ORIGINS": "https://a.test"}, config_path=missing_config
        )

        assert settings.allowed_origins == ("https://a.test",)

    def test_invalid_port(self, missing_config):
        with pytest.raises(ValueError, match="PORT"):
            load_settings(env={"PORT": "eighty"}, config_path=missing_config)

    @pytest.mark.parametrize("value,expected", [("1", True), ("true", True), ("0", False), ("", False)])
    def test_cors_allow_all_flag(self, missing_config, value, expected):
        settings = load_settings(env={"CORS_ALLOW_ALL": value}, config_path=missing_config)

        assert settings.cors_allow_all is expected
        assert settings.origin_policy().allow_all is expected

    def test_log_level_uppercased(self, missing_config):
        settings = load_settings(env={"LOG_LEVEL": "debug"}, config_path=missing_config)

        assert settings.log_level == "DEBUG"


# =============================================================================
# load_settings (YAML)
# =============================================================================


class TestLoadSettingsYaml:
    """YAML 섹션 처리 테스트."""

    def test_yaml_sections(self, tmp_path):
        path = tmp_path / "relay.yaml"
        path.write_text(
            """
server:
  port: 9100
ai:
  upstream:
    base_url: "http://stub.local/v1"
    chat_model: "gpt-test"
  chat:
    max_tokens: 50
rate_limit:
  requests: 5
  window_seconds: 10
cors:
  allow_headers: ["Content-Type"]
""",
            encoding="utf-8",
        )

        settings = load_settings(env={}, config_path=path)

        assert settings.port == 9100
        assert settings.upstream.base_url == "http://stub.local/v1"
        assert settings.upstream.chat_model == "gpt-test"
        assert settings.upstream.image_model == "gpt-image-1"
        assert settings.chat.max_tokens == 50
        assert settings.chat.temperature == 0.8
        assert settings.rate_limit.limit_string == "5 per 10 seconds"
        assert settings.cors.allow_headers == ("Content-Type",)
        assert settings.cors.allow_methods == ("GET", "POST", "OPTIONS")

    def test_env_port_overrides_yaml(self, tmp_path):
        path = tmp_path / "relay.yaml"
        path.write_text("server:\n  port: 9100\n", encoding="utf-8")

        settings = load_settings(env={"PORT": "9200"}, config_path=path)

        assert settings.port == 9200

    def test_max_body_bytes_from_yaml(self, tmp_path):
        path = tmp_path / "relay.yaml"
        path.write_text("server:\n  max_body_bytes: 2048\n", encoding="utf-8")

        settings = load_settings(env={}, config_path=path)

        assert settings.max_body_bytes == 2048

    def test_relay_config_env(self, tmp_path):
        path = tmp_path / "relay.yaml"
        path.write_text("ai:\n  avatar:\n    size: \"512x512\"\n", encoding="utf-8")

        settings = load_settings(env={"RELAY_CONFIG": str(path)})

        assert settings.avatar.size == "512x512"

    def test_unknown_keys_ignored(self, tmp_path):
        path = tmp_path / "relay.yaml"
        path.write_text("ai:\n  chat:\n    temperature: 0.5\n    colour: blue\n", encoding="utf-8")

        settings = load_settings(env={}, config_path=path)

        assert settings.chat.temperature == 0.5


class TestSettingsDefaults:
    def test_settings_is_frozen(self):
        settings = Settings()

        with pytest.raises(AttributeError):
            settings.port = 1  # type: ignore[misc]
