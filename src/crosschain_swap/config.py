"""Application settings."""

from functools import lru_cache

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from crosschain_swap.domain.chains import DEFAULT_EVM_ADDRESS, DEFAULT_SOLANA_ADDRESS
from crosschain_swap.infrastructure.cross_chain_api import DEFAULT_API_KEY_HEADER, DEFAULT_BASE_URL

_LOG_LEVELS = frozenset({"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"})


class Settings(BaseSettings):
    """Runtime settings loaded from environment variables and `.env`."""

    api_key: str | None = None
    api_base_url: str = DEFAULT_BASE_URL
    api_key_header: str = DEFAULT_API_KEY_HEADER
    http_timeout_seconds: float = 30.0
    monitor_max_attempts: int = 60
    monitor_interval_seconds: float = 5.0
    evm_receiver_address: str = DEFAULT_EVM_ADDRESS
    solana_receiver_address: str = DEFAULT_SOLANA_ADDRESS
    log_level: str = "INFO"
    demo_host: str = "0.0.0.0"
    demo_port: int = 8090

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, value: object) -> object:
        """Accept lower-case level names."""

        if isinstance(value, str):
            return value.strip().upper()
        return value

    @model_validator(mode="after")
    def validate_numeric_settings(self) -> "Settings":
        """Reject values the client and monitor cannot run with."""

        if self.http_timeout_seconds <= 0:
            raise ValueError("ZEROEX_HTTP_TIMEOUT_SECONDS must be > 0.")
        if self.monitor_max_attempts < 1:
            raise ValueError("ZEROEX_MONITOR_MAX_ATTEMPTS must be >= 1.")
        if self.monitor_interval_seconds < 0:
            raise ValueError("ZEROEX_MONITOR_INTERVAL_SECONDS must be >= 0.")
        if not self.api_key_header.strip():
            raise ValueError("ZEROEX_API_KEY_HEADER cannot be empty.")
        if self.log_level not in _LOG_LEVELS:
            raise ValueError(
                f"ZEROEX_LOG_LEVEL must be one of {', '.join(sorted(_LOG_LEVELS))}."
            )
        if not 1 <= self.demo_port <= 65535:
            raise ValueError("ZEROEX_DEMO_PORT must be between 1 and 65535.")
        return self

    def require_api_key(self) -> str:
        """Return the API key or fail with the variable to set."""

        if not self.api_key:
            raise ValueError("ZEROEX_API_KEY is required to call the cross-chain API.")
        return self.api_key

    model_config = SettingsConfigDict(env_prefix="ZEROEX_", env_file=".env", extra="ignore")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return singleton settings."""

    return Settings()


__all__ = ["Settings", "get_settings"]
