"""
This module contains the custom logger and formatter for the application.

To use the custom logger, call `configure_logging` once at startup and log
through the standard `logging` module:

        from utils.logging import configure_logging
        configure_logging()
        logging.info("Block processed", extra={"block_height": 80504433})
The resulting log message will be in JSON format:
    {
        "timestamp": "2023-01-09 14:29:31,000",
        "level": "INFO",
        "fields": {
            "message": "Block processed",
            "block_height": 80504433
        },
        "module": "worker",
        "func_name": "consume",
        "path_name": "/.../utils/worker.py",
        "line_no": 41
    }
"""

import logging
import json

DEFAULT_LOGGER_NAME = "default_python_logger"


class CustomLogger(logging.Logger):
    def makeRecord(
        self,
        name,
        level,
        fn,
        lno,
        msg,
        args,
        exc_info,
        func=None,
        extra=None,
        sinfo=None,
    ):
        # Keep extra fields together so they can't clash with LogRecord attributes
        if extra:
            extra = {"fields": extra}
        record = super(CustomLogger, self).makeRecord(
            name,
            level,
            fn,
            lno,
            msg,
            args,
            exc_info,
            func=func,
            extra=extra,
            sinfo=sinfo,
        )
        return record


class JsonFormatter(logging.Formatter):
    def format(self, record):
        fields = {"message": record.getMessage()}
        extra_fields = record.__dict__.get("fields", {})
        fields.update(extra_fields)
        log_data = {
            "timestamp": self.formatTime(record),
            "level": record.levelname,
            "fields": fields,
            "module": record.module,
            "func_name": record.funcName,
            "path_name": record.pathname,
            "line_no": record.lineno,
        }
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_data, default=str)


def configure_logging(level: int = logging.INFO) -> logging.Logger:
    logger = CustomLogger(DEFAULT_LOGGER_NAME)
    logger.setLevel(level)

    # Create a stream handler for stdout
    stream_handler = logging.StreamHandler()
    stream_handler.setFormatter(JsonFormatter())

    logger.addHandler(stream_handler)
    logging.root = logger
    return logger
