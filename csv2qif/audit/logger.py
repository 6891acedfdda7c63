"""
Conversion Logger

DESIGN DECISION: Every significant step of a run is logged as a
structured event. This provides:
1. Traceability of what was converted, from where, to where
2. Visibility of rows whose date could not be translated
3. A clear failure record when a run aborts

The logger:
- Writes to stderr so it never mixes with usage text or QIF output
- Renders either human-readable console lines or JSON
- Tags all events of one run with the same run_id
"""

import logging
import sys
from typing import Optional
from uuid import UUID, uuid4

import structlog

from csv2qif.config import AppSettings, get_settings
from csv2qif.models.events import (
    ConversionEvent,
    ConversionEventBuilder,
    ConversionSummary,
    EventSeverity,
)


def configure_logging(settings: Optional[AppSettings] = None) -> None:
    """
    Configure structlog on top of stdlib logging.

    Called once by the command-line entry point.
    """
    settings = settings or get_settings().app

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=getattr(logging, settings.log_level),
        force=True,
    )

    if settings.log_format == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=False)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


class ConversionLogger:
    """
    Central logging service for conversion runs.
    """

    def __init__(self, run_id: Optional[UUID] = None):
        """
        Initialize conversion logger.

        Args:
            run_id: ID attached to events that do not carry their own.
        """
        self.run_id = run_id
        self.date_warnings = 0
        self._logger = structlog.get_logger("csv2qif")

    def log(self, event: ConversionEvent) -> None:
        """
        Log a conversion event at the level matching its severity.
        """
        if event.run_id is None and self.run_id is not None:
            event = event.model_copy(update={"run_id": self.run_id})

        log_dict = event.to_log_dict()
        # TimeStamper adds the log timestamp
        log_dict.pop("timestamp", None)

        if event.severity == EventSeverity.ERROR:
            self._logger.error(event.event_type.value, **log_dict)
        elif event.severity == EventSeverity.WARNING:
            self._logger.warning(event.event_type.value, **log_dict)
        elif event.severity == EventSeverity.DEBUG:
            self._logger.debug(event.event_type.value, **log_dict)
        else:
            self._logger.info(event.event_type.value, **log_dict)

    def log_config_loaded(self, config_path: str) -> None:
        """Log a successfully loaded config file."""
        self.log(ConversionEventBuilder.config_loaded(config_path))

    def log_conversion_started(
        self,
        csv_path: str,
        qif_path: str,
        account_type: str,
    ) -> None:
        """Log the start of a run."""
        event = ConversionEventBuilder.conversion_started(
            run_id=self.run_id,
            csv_path=csv_path,
            qif_path=qif_path,
            account_type=account_type,
        )
        self.log(event)

    def log_header_skipped(self, header: list[str]) -> None:
        self.log(ConversionEventBuilder.header_skipped(self.run_id, header))

    def log_date_parse_failed(
        self,
        row_number: Optional[int],
        value: str,
        csv_date_format: str,
        error: Exception,
    ) -> None:
        """Log a date that kept its raw value."""
        self.date_warnings += 1
        event = ConversionEventBuilder.date_parse_failed(
            run_id=self.run_id,
            row_number=row_number,
            value=value,
            csv_date_format=csv_date_format,
            error=error,
        )
        self.log(event)

    def log_conversion_completed(self, summary: ConversionSummary) -> None:
        self.log(ConversionEventBuilder.conversion_completed(self.run_id, summary))

    def log_conversion_failed(
        self,
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
    ) -> None:
        """Log a run that aborted."""
        event = ConversionEventBuilder.conversion_failed(
            run_id=self.run_id,
            error_type=error_type,
            error_message=error_message,
            details=details,
        )
        self.log(event)


def create_run_id() -> UUID:
    """
    Create a new run ID for tracking related events.

    Use this at the start of a conversion and pass it to the
    ConversionLogger used for the whole run.
    """
    return uuid4()
