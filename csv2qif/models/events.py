"""
Conversion Event Models

Every significant step of a conversion run is described by an event.
This provides:
1. A structured log trail of each run
2. Debugging information when a row does not look right in Quicken
3. A single place where log payloads are shaped

DESIGN DECISION: Events are plain data. Rendering them (console or JSON)
is the job of the ConversionLogger.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID

from pydantic import BaseModel, Field


class ConversionEventType(str, Enum):
    """Types of events emitted during a run."""
    CONFIG_LOADED = "config_loaded"
    CONVERSION_STARTED = "conversion_started"
    HEADER_SKIPPED = "header_skipped"
    DATE_PARSE_FAILED = "date_parse_failed"
    CONVERSION_COMPLETED = "conversion_completed"
    CONVERSION_FAILED = "conversion_failed"


class EventSeverity(str, Enum):
    """Severity level for conversion events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class ConversionEvent(BaseModel):
    """
    A single conversion event.
    """

    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="When the event occurred (UTC)"
    )
    event_type: ConversionEventType = Field(
        ...,
        description="Type of event"
    )
    severity: EventSeverity = Field(
        default=EventSeverity.INFO,
        description="Event severity"
    )
    run_id: Optional[UUID] = Field(
        default=None,
        description="ID shared by all events of one conversion run"
    )
    description: str = Field(
        ...,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )
    error_message: Optional[str] = None

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "run_id": str(self.run_id) if self.run_id else None,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
        }


class ConversionSummary(BaseModel):
    """Counters describing a finished conversion."""

    rows_read: int = Field(default=0, ge=0, description="CSV records read, header included")
    header_skipped: bool = False
    records_written: int = Field(default=0, ge=0, description="QIF records emitted")
    rows_without_data: int = Field(default=0, ge=0, description="Records that mapped to no field")
    date_warnings: int = Field(default=0, ge=0)


class ConversionEventBuilder:
    """
    Helper class to build conversion events with common patterns.

    Usage:
        event = ConversionEventBuilder.conversion_started(run_id, "in.csv", "out.qif")
        event = ConversionEventBuilder.date_parse_failed(run_id, 3, "13/45/2020", "MM/DD/YYYY", err)
    """

    @staticmethod
    def config_loaded(config_path: str) -> ConversionEvent:
        return ConversionEvent(
            event_type=ConversionEventType.CONFIG_LOADED,
            severity=EventSeverity.DEBUG,
            description=f"Configuration loaded from {config_path}",
            details={"config_path": config_path},
        )

    @staticmethod
    def conversion_started(
        run_id: UUID,
        csv_path: str,
        qif_path: str,
        account_type: str,
    ) -> ConversionEvent:
        return ConversionEvent(
            event_type=ConversionEventType.CONVERSION_STARTED,
            run_id=run_id,
            description=f"Converting {csv_path} to {qif_path}",
            details={
                "csv_path": csv_path,
                "qif_path": qif_path,
                "account_type": account_type,
            },
        )

    @staticmethod
    def header_skipped(run_id: Optional[UUID], header: list[str]) -> ConversionEvent:
        return ConversionEvent(
            event_type=ConversionEventType.HEADER_SKIPPED,
            severity=EventSeverity.DEBUG,
            run_id=run_id,
            description="CSV header row skipped",
            details={"header": header},
        )

    @staticmethod
    def date_parse_failed(
        run_id: Optional[UUID],
        row_number: Optional[int],
        value: str,
        csv_date_format: str,
        error: Exception,
    ) -> ConversionEvent:
        return ConversionEvent(
            event_type=ConversionEventType.DATE_PARSE_FAILED,
            severity=EventSeverity.WARNING,
            run_id=run_id,
            description=f"Could not parse date {value!r}, keeping raw value",
            details={
                "row_number": row_number,
                "value": value,
                "csv_date_format": csv_date_format,
            },
            error_message=str(error),
        )

    @staticmethod
    def conversion_completed(run_id: UUID, summary: ConversionSummary) -> ConversionEvent:
        return ConversionEvent(
            event_type=ConversionEventType.CONVERSION_COMPLETED,
            run_id=run_id,
            description=f"Wrote {summary.records_written} QIF records",
            details=summary.model_dump(),
        )

    @staticmethod
    def conversion_failed(
        run_id: Optional[UUID],
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
    ) -> ConversionEvent:
        return ConversionEvent(
            event_type=ConversionEventType.CONVERSION_FAILED,
            severity=EventSeverity.ERROR,
            run_id=run_id,
            description=f"Conversion failed: {error_type}",
            details=details or {},
            error_message=error_message,
        )
