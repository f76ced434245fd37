"""
Structured logging for the Rating Gateway.

JSON logs for production (LOG_FORMAT=json), readable lines for development.

Usage:
    from rating_gateway.logger import logger

    logger.info("Condition registered", condition="AppLaunches")
    logger.event("rating_prompt_opened", collection="default")
"""

import logging
import json
import os
from datetime import datetime, timezone
from typing import Any, Dict

from rating_gateway.settings import settings


class StructuredLogger:
    """
    Structured logger with JSON output.

    - JSON format for production (LOG_FORMAT=json)
    - Readable format for development (default)
    - metric() and event() helpers for analytics
    """

    def __init__(self, name: str):
        self.name = name
        self.logger = logging.getLogger(name)

        if not self.logger.handlers:
            self._setup_logger()

    def _setup_logger(self) -> None:
        """Configure level, handler and format from settings and environment"""
        level_name = settings.get_nested("logging.level", "INFO")
        level = getattr(logging, str(level_name).upper(), logging.INFO)
        self.logger.setLevel(level)

        handler = logging.StreamHandler()
        handler.setLevel(level)

        if self._should_use_json():
            formatter = logging.Formatter("%(message)s")
        else:
            formatter = logging.Formatter(
                "[%(asctime)s] %(levelname)s - %(message)s",
                datefmt="%H:%M:%S"
            )

        handler.setFormatter(formatter)
        self.logger.addHandler(handler)

        self.logger.propagate = False

    def _format_structured(self, level: str, message: str, **kwargs: Any) -> Dict[str, Any]:
        log_entry = {
            "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": level,
            "logger": self.name,
            "message": message,
        }
        log_entry.update(kwargs)
        return log_entry

    def _should_use_json(self) -> bool:
        return os.environ.get("LOG_FORMAT", "readable") == "json"

    def _format_readable(self, message: str, **kwargs: Any) -> str:
        if not kwargs:
            return message
        extras = ", ".join(f"{k}={v}" for k, v in kwargs.items())
        return f"{message} [{extras}]"

    def _log(self, level: str, message: str, log_method, **kwargs: Any) -> None:
        if self._should_use_json():
            structured = self._format_structured(level, message, **kwargs)
            log_method(json.dumps(structured, ensure_ascii=False, default=str))
        else:
            log_method(self._format_readable(message, **kwargs))

    def debug(self, message: str, **kwargs: Any) -> None:
        """Log debug message"""
        self._log("DEBUG", message, self.logger.debug, **kwargs)

    def info(self, message: str, **kwargs: Any) -> None:
        """Log info message"""
        self._log("INFO", message, self.logger.info, **kwargs)

    def warning(self, message: str, **kwargs: Any) -> None:
        """Log warning message"""
        self._log("WARNING", message, self.logger.warning, **kwargs)

    def metric(self, name: str, value: Any, **kwargs: Any) -> None:
        """
        Structured metric for analytics.

        Example:
            logger.metric("conditions_reset", 2, collection="default")
        """
        self._log("METRIC", name, self.logger.info, value=value, **kwargs)

    def event(self, event_type: str, **kwargs: Any) -> None:
        """
        Business event for analytics.

        Example:
            logger.event("rating_prompt_opened", collection="default")
        """
        self._log("EVENT", event_type, self.logger.info, **kwargs)


logger = StructuredLogger("rating_gateway")
