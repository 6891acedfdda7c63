"""
Row-to-Record Mapper

Turns one CSV record into the lines of one QIF record.

Each field is handled independently, in FIELD_EMISSION_ORDER:
- Unmapped, out-of-range and empty cells are skipped
- Dates are rewritten when both date patterns are configured
- Amounts are stripped of currency decoration, sign optionally reversed
- Everything else is copied verbatim

A record with no populated field produces no output at all
(not even the `^` separator).
"""

from collections.abc import Sequence
from typing import Optional

from csv2qif.audit import ConversionLogger
from csv2qif.formatting import normalize_amount, reformat_date, reverse_sign
from csv2qif.models.config import ColumnMapping, ConversionOptions
from csv2qif.models.qif import (
    AMOUNT_FIELDS,
    FIELD_EMISSION_ORDER,
    RECORD_SEPARATOR,
    QifField,
    field_line,
)


def _cell(row: Sequence[str], column: Optional[int]) -> Optional[str]:
    """Get a non-empty cell, or None if it should be skipped."""
    if column is None or column >= len(row):
        return None
    value = row[column]
    return value if value != "" else None


def _convert_date(
    value: str,
    options: ConversionOptions,
    event_logger: ConversionLogger,
    row_number: Optional[int],
) -> str:
    if not options.translates_dates:
        return value
    try:
        return reformat_date(value, options.csv_date_format, options.qif_date_format)
    except ValueError as e:
        event_logger.log_date_parse_failed(
            row_number=row_number,
            value=value,
            csv_date_format=options.csv_date_format,
            error=e,
        )
        return value


def _convert_amount(value: str, options: ConversionOptions) -> str:
    amount = normalize_amount(value.strip())
    if options.reverse_amount_sign:
        amount = reverse_sign(amount)
    return amount


def map_row(
    row: Sequence[str],
    mapping: ColumnMapping,
    options: ConversionOptions,
    event_logger: Optional[ConversionLogger] = None,
    row_number: Optional[int] = None,
) -> tuple[list[str], bool]:
    """
    Map a CSV record to QIF lines.

    Args:
        row: The CSV record
        mapping: Column index per QIF field
        options: Date and amount options
        event_logger: Receives date parse warnings
        row_number: 1-based record number, used in warnings

    Returns:
        (lines, has_data). When has_data is True the last line is `^`;
        otherwise lines is empty.
    """
    event_logger = event_logger or ConversionLogger()
    lines: list[str] = []

    for field in FIELD_EMISSION_ORDER:
        value = _cell(row, mapping.column_for(field))
        if value is None:
            continue

        if field == QifField.DATE:
            value = _convert_date(value, options, event_logger, row_number)
        elif field in AMOUNT_FIELDS:
            # May be empty (e.g. "$"); the bare code line is still written
            value = _convert_amount(value, options)

        lines.append(field_line(field, value))

    has_data = bool(lines)
    if has_data:
        lines.append(RECORD_SEPARATOR)
    return lines, has_data
