"""
Configuration management - YAML settings, environment overrides and stored credentials.

Everything lives under the cron8n home directory (~/.cron8n by default,
overridable with CRON8N_HOME):
- settings.yaml: optional tool settings (defaults, api, ui, logging)
- config.json: n8n credentials written by `cron8n auth login`
"""

import json
import logging
import os
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from urllib.parse import urlparse

import yaml

from .constants import (
    API_KEY_HEADER,
    CREDENTIALS_FILE,
    DEFAULT_TEMPLATE,
    DEFAULT_TIMEOUT,
    DEFAULT_TIMEZONE,
    DEFAULT_UI_HOST,
    DEFAULT_UI_PORT,
    HOME_DIR_NAME,
    SETTINGS_FILE,
)
from .errors import AuthError, FileError, ValidationError

logger = logging.getLogger(__name__)


def get_home_dir() -> Path:
    """Get the cron8n home directory."""
    if home := os.environ.get("CRON8N_HOME"):
        return Path(home)
    return Path.home() / HOME_DIR_NAME


@dataclass
class DefaultsConfig:
    timezone: str = DEFAULT_TIMEZONE
    template: str = DEFAULT_TEMPLATE


@dataclass
class ApiConfig:
    timeout: float = DEFAULT_TIMEOUT


@dataclass
class UIConfig:
    host: str = DEFAULT_UI_HOST
    port: int = DEFAULT_UI_PORT
    open_browser: bool = True


@dataclass
class LoggingConfig:
    level: str = "WARNING"


@dataclass
class AppConfig:
    defaults: DefaultsConfig = field(default_factory=DefaultsConfig)
    api: ApiConfig = field(default_factory=ApiConfig)
    ui: UIConfig = field(default_factory=UIConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    SECTIONS = ("defaults", "api", "ui", "logging")

    @classmethod
    def from_yaml(cls, path: Path) -> "AppConfig":
        """Load configuration from YAML file."""
        if not path.exists():
            return cls()

        try:
            with open(path) as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise FileError(f"Invalid settings file: {path}", str(e)) from None

        if not isinstance(data, dict):
            raise FileError(f"Invalid settings file: {path}", "Expected a mapping of sections")
        return cls._from_dict(data)

    @classmethod
    def _from_dict(cls, data: dict) -> "AppConfig":
        """Create config from dictionary, ignoring unknown sections and keys."""
        config = cls()

        for section_name in cls.SECTIONS:
            values = data.get(section_name)
            if not isinstance(values, dict):
                continue
            section = getattr(config, section_name)
            for key, value in values.items():
                if hasattr(section, key):
                    setattr(section, key, value)

        return config


def load_config(config_path: Path | None = None, home: Path | None = None) -> AppConfig:
    """
    Load settings.

    Args:
        config_path: Explicit settings file (default: <home>/settings.yaml)
        home: cron8n home directory (default: get_home_dir())

    Returns:
        AppConfig with defaults for anything not set
    """
    if config_path is None:
        config_path = (home or get_home_dir()) / SETTINGS_FILE
    config = AppConfig.from_yaml(config_path)

    # Environment wins over the settings file
    if tz := os.environ.get("CRON8N_TIMEZONE"):
        config.defaults.timezone = tz
    if port := os.environ.get("CRON8N_UI_PORT"):
        config.ui.port = int(port)
    if level := os.environ.get("CRON8N_LOG_LEVEL"):
        config.logging.level = level

    return config


class AuthMode(str, Enum):
    """How the API secret is sent to n8n."""

    API_KEY = "apiKey"
    BEARER_TOKEN = "bearerToken"


@dataclass
class AuthCredentials:
    base_url: str
    auth_mode: AuthMode
    secret: str

    def auth_headers(self) -> dict[str, str]:
        """Exactly one auth header, depending on the mode."""
        if self.auth_mode == AuthMode.API_KEY:
            return {API_KEY_HEADER: self.secret}
        return {"Authorization": f"Bearer {self.secret}"}

    def masked_secret(self, visible: int = 4) -> str:
        return mask_secret(self.secret, visible)


def mask_secret(value: str, visible: int = 4) -> str:
    """Mask all but the last `visible` characters."""
    if len(value) <= visible:
        return "*" * len(value)
    return "*" * (len(value) - visible) + value[-visible:]


def normalize_base_url(base_url: str) -> str:
    """Validate an http(s) URL and strip the trailing slash."""
    try:
        parsed = urlparse(base_url.strip())
        valid = parsed.scheme in ("http", "https") and bool(parsed.netloc)
    except ValueError:
        valid = False
    if not valid:
        raise ValidationError(f"Invalid URL format: {base_url}", "Use a full URL like https://n8n.example.com")
    return base_url.strip().rstrip("/")


def parse_auth_mode(value: str) -> AuthMode:
    try:
        return AuthMode(value)
    except ValueError:
        choices = ", ".join(m.value for m in AuthMode)
        raise ValidationError(f"Invalid auth mode: {value}", f"Use one of: {choices}") from None


class CredentialStore:
    """
    Single-object credential store (<root>/config.json).

    The document is read and rewritten whole. A missing or corrupt file
    reads as empty - the user is simply not logged in.
    """

    def __init__(self, root: Path):
        self.root = root
        self.path = root / CREDENTIALS_FILE

    def _load(self) -> dict:
        if not self.path.exists():
            return {}
        try:
            with open(self.path) as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("Ignoring unreadable config %s: %s", self.path, e)
            return {}
        if not isinstance(data, dict):
            logger.warning("Ignoring malformed config %s", self.path)
            return {}
        return data

    def _save(self, data: dict):
        self.root.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w") as f:
            json.dump(data, f, indent=2)

    def get_auth(self) -> AuthCredentials | None:
        """Stored credentials, or None unless baseUrl, authMode and secret are all present."""
        data = self._load()
        base_url = data.get("baseUrl")
        mode = data.get("authMode")
        secret = data.get("secret")
        if not (isinstance(base_url, str) and base_url and isinstance(secret, str) and secret):
            return None
        if mode not in {m.value for m in AuthMode}:
            return None
        return AuthCredentials(base_url=base_url, auth_mode=AuthMode(mode), secret=secret)

    def require_auth(self) -> AuthCredentials:
        auth = self.get_auth()
        if auth is None:
            raise AuthError("Not authenticated", 'Run "cron8n auth login" to authenticate')
        return auth

    def save_auth(self, credentials: AuthCredentials):
        data = self._load()
        data["baseUrl"] = credentials.base_url
        data["authMode"] = credentials.auth_mode.value
        data["secret"] = credentials.secret
        self._save(data)

    def clear_auth(self):
        data = self._load()
        for key in ("baseUrl", "authMode", "secret"):
            data.pop(key, None)
        self._save(data)

    def is_authenticated(self) -> bool:
        return self.get_auth() is not None
