"""Tests for the JSON logger."""

import json
import logging

from easycert.lib.logging_config import LOGGER, CustomJsonFormatter, set_verbose


def _format(record: logging.LogRecord) -> dict:
    formatter = CustomJsonFormatter(
        fmt="%(timestamp)s %(levelname)s %(funcName)s %(lineno)d %(message)s",
        timestamp=True,
    )
    return json.loads(formatter.format(record))


class TestCustomJsonFormatter:
    """Tests for CustomJsonFormatter field filtering."""

    def test_keeps_focused_field_set(self) -> None:
        record = logging.LogRecord(
            "easycert", logging.INFO, __file__, 42, "signed %s", ("www",), None, func="sign"
        )

        fields = _format(record)

        assert set(fields) == {"timestamp", "level", "message", "funcName", "lineno"}
        assert fields["level"] == "INFO"
        assert fields["message"] == "signed www"
        assert fields["lineno"] == 42


class TestLogger:
    """Tests for the singleton logger."""

    def test_does_not_propagate(self) -> None:
        assert LOGGER.name == "easycert"
        assert LOGGER.propagate is False
        assert len(LOGGER.handlers) == 1

    def test_set_verbose_toggles_debug(self) -> None:
        try:
            set_verbose(True)
            assert LOGGER.level == logging.DEBUG
        finally:
            set_verbose(False)

        assert LOGGER.level == logging.INFO
