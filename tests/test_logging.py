import json
import logging
import sys

from utils.logging import CustomLogger, JsonFormatter


def make_logger():
    logger = CustomLogger("test_logger")
    handler = logging.StreamHandler()
    formatter = JsonFormatter()
    handler.setFormatter(formatter)
    logger.addHandler(handler)
    return logger, formatter


def test_extra_fields_are_nested():
    logger, formatter = make_logger()
    record = logger.makeRecord(
        "test_logger",
        logging.INFO,
        "worker.py",
        10,
        "Block processed",
        (),
        None,
        extra={"block_height": 80504433},
    )
    log_data = json.loads(formatter.format(record))
    assert log_data["level"] == "INFO"
    assert log_data["fields"]["block_height"] == 80504433
    assert log_data["line_no"] == 10


def test_exceptions_are_formatted():
    logger, formatter = make_logger()
    try:
        raise ValueError("boom")
    except ValueError:
        record = logger.makeRecord(
            "test_logger", logging.ERROR, "worker.py", 1, "failed", (), sys.exc_info()
        )
    log_data = json.loads(formatter.format(record))
    assert log_data["fields"]["message"] == "failed"
    assert "ValueError: boom" in log_data["exception"]


def test_non_serializable_fields():
    logger, formatter = make_logger()
    record = logger.makeRecord(
        "test_logger",
        logging.INFO,
        "sinks.py",
        1,
        "records",
        (),
        None,
        extra={"records": ({"links": ("a", "b")},), "path": object()},
    )
    log_data = json.loads(formatter.format(record))
    assert log_data["fields"]["records"] == [{"links": ["a", "b"]}]
