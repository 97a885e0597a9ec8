# Pinot Controller MCP Server
# File: tests/test_config.py
# Version: v2

from __future__ import annotations

from pinot_controller_mcp.config import ControllerConfig


def test_from_env_reads_connection_settings(monkeypatch) -> None:
    monkeypatch.setenv("PINOT_CONTROLLER_URL", " http://pinot:9000 ")
    monkeypatch.setenv("PINOT_CONTROLLER_TOKEN", "tok")
    monkeypatch.setenv("PINOT_VERIFY_TLS", "off")
    monkeypatch.setenv("PINOT_TIMEOUT_SECONDS", "12.5")
    monkeypatch.setenv("PINOT_MOCK_MODE", "yes")

    cfg = ControllerConfig.from_env()

    assert cfg.controller_url == "http://pinot:9000"
    assert cfg.auth_token == "tok"
    assert cfg.verify_tls is False
    assert cfg.timeout_seconds == 12.5
    assert cfg.mock_mode is True


def test_defaults() -> None:
    cfg = ControllerConfig.from_env()

    assert cfg.verify_tls is True
    assert cfg.timeout_seconds == 30.0
    assert cfg.log_level == "WARNING"
    assert cfg.http_host == "127.0.0.1"
    assert cfg.http_port == 8000
    assert cfg.auth_token is None
    assert cfg.password is None


def test_numbers_are_clamped_or_fall_back(monkeypatch) -> None:
    monkeypatch.setenv("PINOT_TIMEOUT_SECONDS", "100000")
    monkeypatch.setenv("PINOT_MCP_HTTP_PORT", "not-a-port")

    cfg = ControllerConfig.from_env()

    assert cfg.timeout_seconds == 600.0
    assert cfg.http_port == 8000


def test_blank_values_are_treated_as_unset(monkeypatch) -> None:
    monkeypatch.setenv("PINOT_CONTROLLER_URL", "   ")
    monkeypatch.setenv("PINOT_MCP_LOG_LEVEL", "debug")

    cfg = ControllerConfig.from_env()

    assert cfg.controller_url is None
    assert cfg.log_level == "DEBUG"


def test_unrecognised_switch_keeps_default(monkeypatch) -> None:
    monkeypatch.setenv("PINOT_VERIFY_TLS", "maybe")
    monkeypatch.setenv("PINOT_MOCK_MODE", " ON ")
    monkeypatch.setenv("PINOT_MCP_HTTP_PORT", "0")

    cfg = ControllerConfig.from_env()

    assert cfg.verify_tls is True
    assert cfg.mock_mode is True
    assert cfg.http_port == 1
