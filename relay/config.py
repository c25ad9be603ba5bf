"""Configuration loaded from the environment."""

import os
from dataclasses import dataclass, field
from typing import List
from urllib.parse import urlparse

from dotenv import load_dotenv

load_dotenv()

DEFAULT_PORT = 3000
DEFAULT_MAX_FILE_BYTES = 10 * 1024 * 1024

# env var name -> (section, attribute)
REQUIRED_VARS = {
    "SLACK_BOT_TOKEN": ("slack", "bot_token"),
    "SLACK_SIGNING_SECRET": ("slack", "signing_secret"),
    "SLACK_APP_TOKEN": ("slack", "app_token"),
    "FLOWISE_API_ENDPOINT": ("flowise", "api_endpoint"),
    "FLOWISE_API_KEY": ("flowise", "api_key"),
    "FLOWISE_CHATFLOW_ID": ("flowise", "chatflow_id"),
}


class ConfigError(Exception):
    """Raised when required configuration is missing or malformed"""
    pass


def _env_bool(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name, "").strip()
    if not value:
        return default
    try:
        return int(value)
    except ValueError:
        raise ConfigError(f"{name} must be an integer, got {value!r}")


def _env_float(name: str, default: float) -> float:
    value = os.getenv(name, "").strip()
    if not value:
        return default
    try:
        return float(value)
    except ValueError:
        raise ConfigError(f"{name} must be a number, got {value!r}")


@dataclass
class SlackConfig:
    bot_token: str = ""
    signing_secret: str = ""
    app_token: str = ""


@dataclass
class FlowiseConfig:
    api_endpoint: str = ""
    api_key: str = ""
    chatflow_id: str = ""

    @property
    def base_url(self) -> str:
        return self.api_endpoint.rstrip("/")

    @property
    def prediction_url(self) -> str:
        return f"{self.base_url}/api/v1/prediction/{self.chatflow_id}"


@dataclass
class RetryConfig:
    max_attempts: int = 3
    base_delay: float = 1.0
    max_delay: float = 30.0
    jitter: float = 0.1


@dataclass
class AppConfig:
    """Typed configuration for the relay process."""

    port: int = DEFAULT_PORT
    max_file_bytes: int = DEFAULT_MAX_FILE_BYTES
    debug: bool = False
    slack: SlackConfig = field(default_factory=SlackConfig)
    flowise: FlowiseConfig = field(default_factory=FlowiseConfig)
    retry: RetryConfig = field(default_factory=RetryConfig)

    @classmethod
    def from_env(cls) -> "AppConfig":
        """Create AppConfig from environment variables."""
        return cls(
            port=_env_int("PORT", DEFAULT_PORT),
            max_file_bytes=_env_int("MAX_FILE_BYTES", DEFAULT_MAX_FILE_BYTES),
            debug=_env_bool("RELAY_DEBUG"),
            slack=SlackConfig(
                bot_token=os.getenv("SLACK_BOT_TOKEN", "").strip(),
                signing_secret=os.getenv("SLACK_SIGNING_SECRET", "").strip(),
                app_token=os.getenv("SLACK_APP_TOKEN", "").strip(),
            ),
            flowise=FlowiseConfig(
                api_endpoint=os.getenv("FLOWISE_API_ENDPOINT", "").strip(),
                api_key=os.getenv("FLOWISE_API_KEY", "").strip(),
                chatflow_id=os.getenv("FLOWISE_CHATFLOW_ID", "").strip(),
            ),
            retry=RetryConfig(
                max_attempts=_env_int("FLOWISE_MAX_RETRIES", 3),
                base_delay=_env_float("FLOWISE_RETRY_BASE_DELAY", 1.0),
                max_delay=_env_float("FLOWISE_RETRY_MAX_DELAY", 30.0),
            ),
        )

    def missing_vars(self) -> List[str]:
        """Names of required environment variables with no value."""
        return [
            name
            for name, (section, attr) in REQUIRED_VARS.items()
            if not getattr(getattr(self, section), attr)
        ]

    def validate(self) -> "AppConfig":
        """Check presence of every required value and the endpoint URL.

        Raises ConfigError listing all problems at once.
        """
        problems = []
        missing = self.missing_vars()
        if missing:
            problems.append("missing " + ", ".join(missing))

        endpoint = self.flowise.api_endpoint
        if endpoint:
            parsed = urlparse(endpoint)
            if parsed.scheme not in ("http", "https") or not parsed.netloc:
                problems.append(f"FLOWISE_API_ENDPOINT is not a valid http(s) URL: {endpoint!r}")

        if not 0 < self.port < 65536:
            problems.append(f"PORT out of range: {self.port}")
        if self.retry.max_attempts < 1:
            problems.append("FLOWISE_MAX_RETRIES must be at least 1")

        if problems:
            raise ConfigError("; ".join(problems))
        return self
