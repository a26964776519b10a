"""Tests for logging setup."""

import json
import logging

from parley.observability.logging import ControlLogAdapter, control_logger, setup_logging


def test_setup_logging_sets_package_level():
    setup_logging("DEBUG")

    logger = logging.getLogger("parley")
    assert logger.level == logging.DEBUG
    assert logger.propagate is False
    assert [type(h) for h in logger.handlers] == [logging.StreamHandler]


def test_json_file_handler(tmp_path):
    """
    GIVEN logging configured with a JSON file
    WHEN a control logs a record with extra context
    THEN the file holds one JSON object carrying the control id and the extra
    """
    log_file = tmp_path / "parley.log"
    setup_logging("INFO", json_file=log_file)

    control_logger("parley.test", "color").info("value set", extra={"turn_number": 2})
    for handler in logging.getLogger("parley").handlers:
        handler.flush()

    record = json.loads(log_file.read_text().strip().splitlines()[-1])
    assert record["message"] == "[color] value set"
    assert record["control_id"] == "color"
    assert record["turn_number"] == 2
    assert record["levelname"] == "INFO"


def test_control_logger_prefixes_control_id(caplog):
    log = control_logger("parley.test", "toppings")

    with caplog.at_level(logging.DEBUG, logger="parley.test"):
        log.debug("nothing to change")

    assert isinstance(log, ControlLogAdapter)
    assert caplog.records[0].getMessage() == "[toppings] nothing to change"
    assert caplog.records[0].control_id == "toppings"
