from __future__ import annotations

import asyncio
from pathlib import Path

import pytest
from pydantic import ValidationError

from crosschain_swap.bootstrap import build_client, build_transaction_monitor
from crosschain_swap.config import Settings
from crosschain_swap.domain.chains import DEFAULT_EVM_ADDRESS, DEFAULT_SOLANA_ADDRESS
from crosschain_swap.infrastructure.cross_chain_api import CrossChainClient


@pytest.fixture(autouse=True)
def _clean_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "ZEROEX_API_KEY",
        "ZEROEX_API_BASE_URL",
        "ZEROEX_API_KEY_HEADER",
        "ZEROEX_HTTP_TIMEOUT_SECONDS",
        "ZEROEX_MONITOR_MAX_ATTEMPTS",
        "ZEROEX_MONITOR_INTERVAL_SECONDS",
        "ZEROEX_LOG_LEVEL",
        "ZEROEX_DEMO_PORT",
    ):
        monkeypatch.delenv(name, raising=False)


def test_settings_defaults() -> None:
    settings = Settings(_env_file=None)

    assert settings.api_key is None
    assert settings.api_base_url == "https://api.0x.org"
    assert settings.api_key_header == "0x-api-key"
    assert settings.monitor_max_attempts == 60
    assert settings.monitor_interval_seconds == 5.0
    assert settings.evm_receiver_address == DEFAULT_EVM_ADDRESS
    assert settings.solana_receiver_address == DEFAULT_SOLANA_ADDRESS
    assert settings.log_level == "INFO"


def test_settings_read_prefixed_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ZEROEX_API_KEY", "env-key")
    monkeypatch.setenv("ZEROEX_MONITOR_MAX_ATTEMPTS", "120")
    monkeypatch.setenv("ZEROEX_MONITOR_INTERVAL_SECONDS", "2.5")
    monkeypatch.setenv("ZEROEX_LOG_LEVEL", "debug")

    settings = Settings(_env_file=None)

    assert settings.require_api_key() == "env-key"
    assert settings.monitor_max_attempts == 120
    assert settings.monitor_interval_seconds == 2.5
    assert settings.log_level == "DEBUG"


def test_settings_read_dotenv_file(tmp_path: Path) -> None:
    env_file = tmp_path / ".env"
    env_file.write_text("ZEROEX_API_KEY=file-key\nZEROEX_API_KEY_HEADER=api-key\n")

    settings = Settings(_env_file=env_file)

    assert settings.api_key == "file-key"
    assert settings.api_key_header == "api-key"


@pytest.mark.parametrize(
    ("name", "value", "message"),
    [
        ("ZEROEX_MONITOR_MAX_ATTEMPTS", "0", "ZEROEX_MONITOR_MAX_ATTEMPTS"),
        ("ZEROEX_MONITOR_INTERVAL_SECONDS", "-1", "ZEROEX_MONITOR_INTERVAL_SECONDS"),
        ("ZEROEX_HTTP_TIMEOUT_SECONDS", "0", "ZEROEX_HTTP_TIMEOUT_SECONDS"),
        ("ZEROEX_LOG_LEVEL", "chatty", "ZEROEX_LOG_LEVEL"),
        ("ZEROEX_DEMO_PORT", "70000", "ZEROEX_DEMO_PORT"),
    ],
)
def test_settings_reject_invalid_values(
    monkeypatch: pytest.MonkeyPatch,
    name: str,
    value: str,
    message: str,
) -> None:
    monkeypatch.setenv(name, value)

    with pytest.raises(ValidationError, match=message):
        Settings(_env_file=None)


def test_build_client_requires_api_key() -> None:
    with pytest.raises(ValueError, match="ZEROEX_API_KEY"):
        build_client(Settings(_env_file=None))


def test_build_client_and_monitor_use_settings() -> None:
    settings = Settings(
        _env_file=None,
        api_key="key",
        monitor_max_attempts=7,
        monitor_interval_seconds=0.25,
    )

    client = build_client(settings)
    try:
        assert isinstance(client, CrossChainClient)
        monitor = build_transaction_monitor(settings, client)
        assert monitor.max_attempts == 7
        assert monitor.interval_seconds == 0.25
    finally:
        asyncio.run(client.close())
