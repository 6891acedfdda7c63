"""
Data Models Package

This package contains the Pydantic models and QIF vocabulary used by the
converter. All configuration and log payloads conform to these schemas.
"""

from csv2qif.models.config import (
    ColumnMapping,
    ConversionOptions,
    ConverterConfig,
)
from csv2qif.models.events import (
    ConversionEvent,
    ConversionEventBuilder,
    ConversionEventType,
    ConversionSummary,
    EventSeverity,
)
from csv2qif.models.qif import (
    AMOUNT_FIELDS,
    DEFAULT_ACCOUNT_TYPE,
    FIELD_EMISSION_ORDER,
    RECORD_SEPARATOR,
    QifField,
    account_header,
    field_line,
)

__all__ = [
    # Config models
    "ColumnMapping",
    "ConversionOptions",
    "ConverterConfig",
    # Event models
    "ConversionEvent",
    "ConversionEventBuilder",
    "ConversionEventType",
    "ConversionSummary",
    "EventSeverity",
    # QIF vocabulary
    "AMOUNT_FIELDS",
    "DEFAULT_ACCOUNT_TYPE",
    "FIELD_EMISSION_ORDER",
    "RECORD_SEPARATOR",
    "QifField",
    "account_header",
    "field_line",
]
