"""
Configuration for the EVERLIV AI analysis service.

Values come from the environment (optionally a .env file). The DeepSeek API
key is mandatory and is checked once, when the configuration is built.
"""
import os
from dataclasses import dataclass

from dotenv import load_dotenv

DEFAULT_BASE_URL = "https://api.deepseek.com/v1"
DEFAULT_CHAT_MODEL = "deepseek-chat"
DEFAULT_VISION_MODEL = "deepseek-vl-7b-chat"
DEFAULT_TIMEOUT_SECONDS = 120.0


class ConfigurationError(RuntimeError):
    """Raised at startup when required configuration is missing or invalid."""


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class DeepSeekConfig:
    api_key: str
    base_url: str = DEFAULT_BASE_URL
    chat_model: str = DEFAULT_CHAT_MODEL
    vision_model: str = DEFAULT_VISION_MODEL
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    log_json: bool = True

    def __post_init__(self):
        if not self.api_key or not self.api_key.strip():
            raise ConfigurationError(
                "No DeepSeek API key found. Set the DEEPSEEK_API_KEY "
                "environment variable or pass api_key explicitly."
            )
        if self.timeout_seconds <= 0:
            raise ConfigurationError("timeout_seconds must be positive")

    @classmethod
    def from_env(cls, load_env_file: bool = True) -> "DeepSeekConfig":
        """Build the configuration from environment variables."""
        if load_env_file:
            load_dotenv()

        timeout_raw = os.getenv("DEEPSEEK_TIMEOUT_SECONDS")
        try:
            timeout = float(timeout_raw) if timeout_raw else DEFAULT_TIMEOUT_SECONDS
        except ValueError as e:
            raise ConfigurationError(
                f"DEEPSEEK_TIMEOUT_SECONDS is not a number: {timeout_raw!r}"
            ) from e

        return cls(
            api_key=os.getenv("DEEPSEEK_API_KEY", ""),
            base_url=os.getenv("DEEPSEEK_BASE_URL", DEFAULT_BASE_URL).rstrip("/"),
            chat_model=os.getenv("DEEPSEEK_CHAT_MODEL", DEFAULT_CHAT_MODEL),
            vision_model=os.getenv("DEEPSEEK_VISION_MODEL", DEFAULT_VISION_MODEL),
            timeout_seconds=timeout,
            log_json=_env_bool("LOG_JSON", True),
        )
