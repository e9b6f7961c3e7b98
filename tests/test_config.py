"""Tests for settings loading and the credential store."""

import json

import pytest

from cron8n.config import (
    AppConfig,
    AuthCredentials,
    AuthMode,
    CredentialStore,
    get_home_dir,
    load_config,
    mask_secret,
    normalize_base_url,
    parse_auth_mode,
)
from cron8n.errors import AuthError, FileError, ValidationError


class TestAppConfig:
    """Tests for AppConfig dataclass."""

    def test_default_config(self):
        """Test default configuration values."""
        config = AppConfig()

        assert config.defaults.timezone == "Europe/Istanbul"
        assert config.defaults.template == "cron-only"
        assert config.api.timeout == 30.0
        assert config.ui.host == "127.0.0.1"
        assert config.ui.port == 3847
        assert config.ui.open_browser is True
        assert config.logging.level == "WARNING"

    def test_from_yaml_missing_file(self, tmp_path):
        """Test loading from non-existent file returns defaults."""
        config = AppConfig.from_yaml(tmp_path / "nonexistent.yaml")

        assert config.defaults.timezone == "Europe/Istanbul"

    def test_from_yaml_valid_file(self, tmp_path):
        """Test loading from valid YAML file."""
        config_file = tmp_path / "settings.yaml"
        config_file.write_text("""
defaults:
  timezone: UTC
  template: shell-command

api:
  timeout: 5

ui:
  port: 9000
  open_browser: false
""")
        config = AppConfig.from_yaml(config_file)

        assert config.defaults.timezone == "UTC"
        assert config.defaults.template == "shell-command"
        assert config.api.timeout == 5
        assert config.ui.port == 9000
        assert config.ui.open_browser is False
        assert config.ui.host == "127.0.0.1"

    def test_unknown_keys_ignored(self, tmp_path):
        """Test unknown sections and keys do not fail or leak in."""
        config_file = tmp_path / "settings.yaml"
        config_file.write_text("""
mystery:
  value: 1
ui:
  colour: blue
""")
        config = AppConfig.from_yaml(config_file)

        assert not hasattr(config, "mystery")
        assert not hasattr(config.ui, "colour")

    def test_invalid_yaml_raises_file_error(self, tmp_path):
        config_file = tmp_path / "settings.yaml"
        config_file.write_text("ui: [unclosed")

        with pytest.raises(FileError, match="Invalid settings file"):
            AppConfig.from_yaml(config_file)

    def test_non_mapping_raises_file_error(self, tmp_path):
        config_file = tmp_path / "settings.yaml"
        config_file.write_text("- just\n- a list\n")

        with pytest.raises(FileError):
            AppConfig.from_yaml(config_file)


class TestLoadConfig:
    """Tests for load_config and environment overrides."""

    def test_home_from_env(self, home):
        assert get_home_dir() == home

    def test_reads_settings_from_home(self, home):
        home.mkdir()
        (home / "settings.yaml").write_text("defaults:\n  timezone: Asia/Tokyo\n")

        assert load_config().defaults.timezone == "Asia/Tokyo"

    def test_environment_overrides_file(self, home, monkeypatch):
        """Test environment variables win over settings.yaml."""
        home.mkdir()
        (home / "settings.yaml").write_text("defaults:\n  timezone: Asia/Tokyo\nui:\n  port: 9000\n")
        monkeypatch.setenv("CRON8N_TIMEZONE", "UTC")
        monkeypatch.setenv("CRON8N_UI_PORT", "8080")
        monkeypatch.setenv("CRON8N_LOG_LEVEL", "DEBUG")

        config = load_config()

        assert config.defaults.timezone == "UTC"
        assert config.ui.port == 8080
        assert config.logging.level == "DEBUG"

    def test_explicit_path(self, tmp_path):
        path = tmp_path / "custom.yaml"
        path.write_text("api:\n  timeout: 2.5\n")

        assert load_config(path).api.timeout == 2.5


class TestAuthHelpers:
    """Tests for URL, mode and secret helpers."""

    def test_api_key_header(self):
        """Test API key mode sends only X-N8N-API-KEY."""
        creds = AuthCredentials("https://n8n.example.com", AuthMode.API_KEY, "secret")
        assert creds.auth_headers() == {"X-N8N-API-KEY": "secret"}

    def test_bearer_header(self):
        """Test bearer mode sends only Authorization."""
        creds = AuthCredentials("https://n8n.example.com", AuthMode.BEARER_TOKEN, "secret")
        assert creds.auth_headers() == {"Authorization": "Bearer secret"}

    @pytest.mark.parametrize(
        ("url", "expected"),
        [
            ("https://n8n.example.com/", "https://n8n.example.com"),
            ("http://localhost:5678", "http://localhost:5678"),
            ("  https://n8n.example.com/base/ ", "https://n8n.example.com/base"),
        ],
    )
    def test_normalize_base_url(self, url, expected):
        assert normalize_base_url(url) == expected

    @pytest.mark.parametrize("url", ["n8n.example.com", "ftp://n8n.example.com", "https://", "", "http://[::1"])
    def test_normalize_rejects_bad_urls(self, url):
        with pytest.raises(ValidationError, match="Invalid URL"):
            normalize_base_url(url)

    def test_parse_auth_mode(self):
        assert parse_auth_mode("bearerToken") is AuthMode.BEARER_TOKEN
        with pytest.raises(ValidationError):
            parse_auth_mode("basic")

    def test_mask_secret(self):
        assert mask_secret("abcdefgh") == "****efgh"
        assert mask_secret("abc") == "***"


class TestCredentialStore:
    """Tests for CredentialStore."""

    def test_missing_file_is_unauthenticated(self, tmp_path):
        store = CredentialStore(tmp_path)

        assert store.get_auth() is None
        assert not store.is_authenticated()

    def test_save_and_get(self, tmp_path, credentials):
        store = CredentialStore(tmp_path / "home")
        store.save_auth(credentials)

        assert store.get_auth() == credentials
        data = json.loads((tmp_path / "home" / "config.json").read_text())
        assert data == {"baseUrl": credentials.base_url, "authMode": "apiKey", "secret": credentials.secret}

    def test_save_preserves_other_keys(self, tmp_path, credentials):
        (tmp_path / "config.json").write_text(json.dumps({"theme": "dark"}))
        store = CredentialStore(tmp_path)
        store.save_auth(credentials)
        store.clear_auth()

        assert json.loads((tmp_path / "config.json").read_text()) == {"theme": "dark"}

    def test_clear_auth(self, tmp_path, credentials):
        store = CredentialStore(tmp_path)
        store.save_auth(credentials)
        store.clear_auth()

        assert store.get_auth() is None

    def test_corrupt_file_reads_as_empty(self, tmp_path):
        (tmp_path / "config.json").write_text("{not json")

        assert CredentialStore(tmp_path).get_auth() is None

    def test_partial_credentials_are_ignored(self, tmp_path):
        """Test all three fields are required."""
        (tmp_path / "config.json").write_text(json.dumps({"baseUrl": "https://x.example", "authMode": "apiKey"}))

        assert CredentialStore(tmp_path).get_auth() is None

    def test_require_auth_raises_with_hint(self, tmp_path):
        with pytest.raises(AuthError) as exc_info:
            CredentialStore(tmp_path).require_auth()

        assert "cron8n auth login" in exc_info.value.hint
