# tests/common/test_logger.py
"""
Unit тесты для модуля логирования (cleaning_market/common/logger.py).
"""

import json
import logging
from unittest.mock import patch

import pytest

from cleaning_market.common.constants import TypeMsg
from cleaning_market.common.logger import (
    ColoredFormatter,
    DateBasedRotatingFileHandler,
    JsonFormatter,
    _get_caller_info,
    get_logger,
    log_debug,
    log_error,
    log_info,
    log_warning,
)


def _record(level: int = logging.INFO, msg: str = "Test message") -> logging.LogRecord:
    record = logging.LogRecord(
        name="test_logger",
        level=level,
        pathname="test.py",
        lineno=10,
        msg=msg,
        args=(),
        exc_info=None,
    )
    record.module = "test_module"
    record.funcName = "test_function"
    return record


class TestJsonFormatter:
    """Тесты для JsonFormatter."""

    def test_format_basic_record(self) -> None:
        result = json.loads(JsonFormatter().format(_record()))

        assert result["level"] == "INFO"
        assert result["message"] == "Test message"
        assert result["module"] == "test_module"
        assert result["function"] == "test_function"
        assert result["line"] == 10

    def test_format_with_extra_data(self) -> None:
        record = _record(logging.WARNING)
        record.extra_data = {"order_id": 42, "cleaner_id": "C1"}

        result = json.loads(JsonFormatter().format(record))

        assert result["extra"] == {"order_id": 42, "cleaner_id": "C1"}

    def test_format_with_exception(self) -> None:
        try:
            raise ValueError("Test exception")
        except ValueError:
            import sys
            record = logging.LogRecord(
                name="test_logger",
                level=logging.ERROR,
                pathname="test.py",
                lineno=1,
                msg="Error",
                args=(),
                exc_info=sys.exc_info(),
            )

        result = json.loads(JsonFormatter().format(record))

        assert "ValueError: Test exception" in result["exception"]

    def test_non_ascii_is_kept(self) -> None:
        result = JsonFormatter().format(_record(msg="Клинер C1 принял заказ"))

        assert "Клинер C1 принял заказ" in result


class TestColoredFormatter:
    """Тесты для ColoredFormatter."""

    def test_contains_level_and_message(self) -> None:
        result = ColoredFormatter().format(_record(logging.WARNING, "Внимание"))

        assert "[WARNING]" in result
        assert "Внимание" in result
        assert ColoredFormatter.COLORS["WARNING"] in result

    def test_caller_info(self) -> None:
        record = _record()
        record.extra_data = {
            "caller_function": "accept_reject_order",
            "caller_module": "cleaning_market.core.cleaners.service",
            "caller_file": "service.py",
            "caller_line": 120,
        }

        result = ColoredFormatter().format(record)

        assert "cleaning_market.core.cleaners.service.accept_reject_order()" in result
        assert "service.py:120" in result


class TestRotatingHandler:
    """Тесты для DateBasedRotatingFileHandler."""

    def test_rollover_archives_file(self, tmp_path) -> None:
        handler = DateBasedRotatingFileHandler(str(tmp_path), max_bytes=10_000, logger_name="app")
        handler.setFormatter(logging.Formatter("%(message)s"))
        try:
            handler.emit(_record(msg="первая запись"))
            handler.doRollover()
        finally:
            handler.close()

        archives = [p.name for p in tmp_path.iterdir() if p.name.startswith("app_")]
        assert len(archives) == 1
        assert (tmp_path / "app.log").exists()


class TestGetLogger:
    """Тесты для get_logger."""

    def test_logger_is_cached(self) -> None:
        assert get_logger("cleaning_market.test_cache") is get_logger("cleaning_market.test_cache")

    def test_logger_does_not_propagate(self) -> None:
        logger = get_logger("cleaning_market.test_propagate")

        assert logger.propagate is False
        assert logger.handlers


class TestCallerInfo:
    """Тесты для _get_caller_info."""

    def test_returns_calling_function(self) -> None:
        def log_info_stub() -> dict:
            return _get_caller_info()

        def business_code() -> dict:
            return log_info_stub()

        info = business_code()

        assert info["caller_function"] == "business_code"
        assert info["caller_file"] == "test_logger.py"


class TestAsyncHelpers:
    """Тесты асинхронных функций логирования."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("type_msg", "method"),
        [
            (TypeMsg.DEBUG, "debug"),
            (TypeMsg.INFO, "info"),
            (TypeMsg.WARNING, "warning"),
            (TypeMsg.ERROR, "error"),
            (TypeMsg.CRITICAL, "critical"),
        ],
    )
    async def test_log_info_dispatches_by_type(self, type_msg: TypeMsg, method: str) -> None:
        logger = get_logger("cleaning_market.test_dispatch")

        with patch.object(logger, method) as mocked:
            await log_info("сообщение", type_msg=type_msg, logger_name="cleaning_market.test_dispatch")

        mocked.assert_called_once()
        assert mocked.call_args.args[0] == "сообщение"
        assert "extra_data" in mocked.call_args.kwargs["extra"]

    @pytest.mark.asyncio
    async def test_extra_is_merged(self) -> None:
        logger = get_logger("cleaning_market.test_extra")

        with patch.object(logger, "info") as mocked:
            await log_info("x", logger_name="cleaning_market.test_extra", extra={"order_id": 7})

        assert mocked.call_args.kwargs["extra"]["extra_data"]["order_id"] == 7

    @pytest.mark.asyncio
    async def test_shortcuts(self) -> None:
        logger = get_logger("cleaning_market.test_shortcuts")

        with patch.object(logger, "debug") as debug, patch.object(logger, "warning") as warning:
            await log_debug("d", logger_name="cleaning_market.test_shortcuts")
            await log_warning("w", logger_name="cleaning_market.test_shortcuts")

        debug.assert_called_once()
        warning.assert_called_once()

    @pytest.mark.asyncio
    async def test_log_error_passes_exc_info(self) -> None:
        logger = get_logger("cleaning_market.test_error")

        with patch.object(logger, "error") as mocked:
            await log_error("ошибка", logger_name="cleaning_market.test_error", exc_info=True)

        assert mocked.call_args.kwargs["exc_info"] is True
