from __future__ import annotations

import json
import logging

from workforce.common.logging_config import DevelopmentFormatter, JSONFormatter, get_logger, setup_logging


def test_setup_logging_picks_the_formatter():
    logger = setup_logging("debug")
    [handler] = logger.handlers
    assert isinstance(handler.formatter, DevelopmentFormatter)
    assert logger.level == logging.DEBUG

    logger = setup_logging("INFO", json_format=True)
    [handler] = logger.handlers
    assert isinstance(handler.formatter, JSONFormatter)


def test_json_lines_carry_the_logger_name():
    record = get_logger("overtime.import").makeRecord(
        "workforce.overtime.import", logging.WARNING, __file__, 1, "Row %s rejected", (3,), None
    )

    entry = json.loads(JSONFormatter().format(record))

    assert entry["logger"] == "workforce.overtime.import"
    assert entry["level"] == "WARNING"
    assert entry["message"] == "Row 3 rejected"
