"""Tests for structlog / stdlib logging wiring."""

from __future__ import annotations

import logging

import structlog

from debridarr.infrastructure.config import AppConfig
from debridarr.infrastructure.logging.setup import (
    _LevelRangeFilter,
    build_formatter,
    build_logging_config,
)


def _record(level: int) -> logging.LogRecord:
    return logging.LogRecord("t", level, __file__, 1, "msg", None, None)


class TestBuildLoggingConfig:
    def test_managed_loggers_use_configured_level(self) -> None:
        cfg = build_logging_config(AppConfig(log_level="WARNING"))
        assert cfg["loggers"]["debridarr"]["level"] == "WARNING"
        assert cfg["loggers"]["uvicorn.access"]["level"] == "WARNING"
        assert cfg["root"]["level"] == "WARNING"

    def test_httpx_quiet_unless_debug(self) -> None:
        info_cfg = build_logging_config(AppConfig(log_level="INFO"))
        debug_cfg = build_logging_config(AppConfig(log_level="DEBUG"))
        assert info_cfg["loggers"]["httpx"]["level"] == "WARNING"
        assert debug_cfg["loggers"]["httpcore"]["level"] == "DEBUG"

    def test_formatter_factory(self) -> None:
        config = AppConfig()
        cfg = build_logging_config(config)
        formatter = cfg["formatters"]["structlog"]
        assert formatter["()"] is build_formatter
        assert formatter["config"] is config


class TestBuildFormatter:
    def test_json_renderer_in_prod(self) -> None:
        formatter = build_formatter(AppConfig(environment="prod"))
        assert isinstance(formatter, structlog.stdlib.ProcessorFormatter)
        assert isinstance(
            formatter.processors[-1], structlog.processors.JSONRenderer
        )

    def test_console_renderer_in_dev(self) -> None:
        formatter = build_formatter(AppConfig(environment="dev"))
        assert isinstance(formatter.processors[-1], structlog.dev.ConsoleRenderer)


class TestLevelRangeFilter:
    def test_stdout_range(self) -> None:
        flt = _LevelRangeFilter(max_level=logging.WARNING)
        assert flt.filter(_record(logging.INFO)) is True
        assert flt.filter(_record(logging.WARNING)) is True
        assert flt.filter(_record(logging.ERROR)) is False

    def test_stderr_range(self) -> None:
        flt = _LevelRangeFilter(min_level=logging.ERROR)
        assert flt.filter(_record(logging.WARNING)) is False
        assert flt.filter(_record(logging.CRITICAL)) is True
