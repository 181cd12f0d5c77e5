import logging
from enum import IntEnum
from typing import Any

from django_ipn_fixer.constants import LOG_SOURCE


class Severity(IntEnum):
    DEBUG = logging.DEBUG
    INFO = logging.INFO
    WARNING = logging.WARNING


class DiagnosticsSink:
    """
    Structured logging front for correction outcomes.

    Each record carries the structured fields as ``record.context`` and the
    plugin name as ``record.source`` so handlers can route or format them.
    """

    def __init__(self, logger: logging.Logger | str = "django_ipn_fixer"):
        if isinstance(logger, str):
            logger = logging.getLogger(logger)
        self.logger = logger

    def record(self, severity: Severity, message: str, **fields: Any) -> None:
        if not self.logger.isEnabledFor(severity):
            return

        details = " ".join(f"{key}={value!r}" for key, value in fields.items())
        self.logger.log(
            severity,
            "[django-ipn-fixer] %s %s",
            message,
            details,
            extra={"source": LOG_SOURCE, "context": fields},
        )

    def debug(self, message: str, **fields: Any) -> None:
        self.record(Severity.DEBUG, message, **fields)

    def info(self, message: str, **fields: Any) -> None:
        self.record(Severity.INFO, message, **fields)

    def warning(self, message: str, **fields: Any) -> None:
        self.record(Severity.WARNING, message, **fields)
