"""
CSV to QIF Converter

This module ties together the row mapper and the file handling and
defines the end-to-end conversion:
1. Open the CSV source and create the QIF destination
2. Write the `!Type:` header
3. Stream CSV records, skip the header record if configured
4. Map each record and append its lines, in input order

DESIGN DECISION: A malformed CSV record aborts the whole run.
There is no per-row partial success. A date that cannot be parsed
is NOT malformed: it is logged and written unchanged.

Both files are closed on every exit path. The destination is truncated
up front, so a failed run may leave a partial QIF file behind.
"""

import csv
from collections.abc import Iterator
from pathlib import Path
from typing import Optional, TextIO, Union

from csv2qif.audit import ConversionLogger, create_run_id
from csv2qif.config import get_settings
from csv2qif.errors import (
    ConfigurationMissingError,
    ConversionError,
    ConversionIOError,
    CsvParseError,
)
from csv2qif.mapping import map_row
from csv2qif.models.config import ConverterConfig
from csv2qif.models.events import ConversionSummary
from csv2qif.models.qif import account_header

PathLike = Union[str, Path]


class _LineRecorder:
    """Iterate over source lines, keeping the ones read for the current record."""

    def __init__(self, source: TextIO):
        self._source = iter(source)
        self.lines: list[str] = []

    def __iter__(self):
        return self

    def __next__(self) -> str:
        line = next(self._source)
        self.lines.append(line)
        return line


def _has_bare_quote(raw: str, delimiter: str = ",") -> bool:
    """
    True when a quote appears inside a field that does not start with one.

    csv.reader keeps such quotes as literal text. Quoted fields are
    already checked by the reader in strict mode.
    """
    in_quotes = False
    field_quoted = False
    at_field_start = True

    for char in raw:
        if in_quotes:
            if char == '"':
                in_quotes = False
            continue
        if char == '"':
            if not (at_field_start or field_quoted):
                return True
            in_quotes = True
            field_quoted = True
            at_field_start = False
        elif char in (delimiter, "\r", "\n"):
            at_field_start = True
            field_quoted = False
        else:
            at_field_start = False
    return False


def _iter_records(source: TextIO) -> Iterator[tuple[int, list[str]]]:
    """
    Yield (line_number, record) for every non-blank CSV record.

    Every record must have as many fields as the first one.

    Raises:
        CsvParseError: On bad quoting, undecodable bytes or a field
            count that differs from the first record
    """
    recorder = _LineRecorder(source)
    reader = csv.reader(recorder, strict=True)
    expected_fields: Optional[int] = None

    while True:
        recorder.lines.clear()
        try:
            record = next(reader)
        except StopIteration:
            return
        except csv.Error as e:
            raise CsvParseError(
                reader.line_num,
                f"Malformed CSV at line {reader.line_num}: {e}",
            ) from e
        except UnicodeDecodeError as e:
            raise CsvParseError(
                reader.line_num + 1,
                f"Cannot decode CSV near line {reader.line_num + 1}: {e}",
            ) from e

        if not record:
            continue

        if _has_bare_quote("".join(recorder.lines)):
            raise CsvParseError(
                reader.line_num,
                f'Malformed CSV at line {reader.line_num}: bare " in non-quoted field',
            )

        if expected_fields is None:
            expected_fields = len(record)
        elif len(record) != expected_fields:
            raise CsvParseError(
                reader.line_num,
                f"Malformed CSV at line {reader.line_num}: "
                f"wrong number of fields (expected {expected_fields}, got {len(record)})",
            )

        yield reader.line_num, record


def _write_records(
    source: TextIO,
    destination: TextIO,
    config: ConverterConfig,
    event_logger: ConversionLogger,
) -> ConversionSummary:
    options = config.options
    rows_read = 0
    records_written = 0
    rows_without_data = 0
    header_skipped = False
    warnings_before = event_logger.date_warnings

    destination.write(account_header(options.qif_account_type) + "\n")

    for row_number, record in _iter_records(source):
        rows_read += 1
        if options.csv_has_header and rows_read == 1:
            header_skipped = True
            event_logger.log_header_skipped(record)
            continue

        lines, has_data = map_row(
            record,
            config.mapping,
            options,
            event_logger=event_logger,
            row_number=row_number,
        )

        if not has_data:
            rows_without_data += 1
            continue

        destination.writelines(line + "\n" for line in lines)
        records_written += 1

    return ConversionSummary(
        rows_read=rows_read,
        header_skipped=header_skipped,
        records_written=records_written,
        rows_without_data=rows_without_data,
        date_warnings=event_logger.date_warnings - warnings_before,
    )


def convert(
    csv_path: PathLike,
    qif_path: PathLike,
    config: Optional[ConverterConfig],
    event_logger: Optional[ConversionLogger] = None,
) -> ConversionSummary:
    """
    Convert a CSV file to a QIF file.

    Args:
        csv_path: CSV source
        qif_path: QIF destination, created or truncated
        config: Column mapping and options
        event_logger: Logger for the run. A new run ID is created if omitted.

    Returns:
        Counters for the finished run

    Raises:
        ConfigurationMissingError: If config is None
        ConversionIOError: If the source cannot be opened or the
            destination cannot be created
        CsvParseError: If a CSV record is malformed
    """
    event_logger = event_logger or ConversionLogger(run_id=create_run_id())

    try:
        if config is None:
            raise ConfigurationMissingError("Missing configuration")

        summary = _convert_files(str(csv_path), str(qif_path), config, event_logger)
    except ConversionError as e:
        event_logger.log_conversion_failed(
            error_type=type(e).__name__,
            error_message=str(e),
            details={"csv_path": str(csv_path), "qif_path": str(qif_path)},
        )
        raise

    event_logger.log_conversion_completed(summary)
    return summary


def _convert_files(
    csv_path: str,
    qif_path: str,
    config: ConverterConfig,
    event_logger: ConversionLogger,
) -> ConversionSummary:
    settings = get_settings().app

    try:
        source = open(csv_path, "r", encoding=settings.csv_encoding, newline="")
    except OSError as e:
        raise ConversionIOError(csv_path, f"Cannot open CSV file {csv_path}: {e}") from e

    with source:
        try:
            destination = open(qif_path, "w", encoding=settings.qif_encoding, newline="")
        except OSError as e:
            raise ConversionIOError(qif_path, f"Cannot create QIF file {qif_path}: {e}") from e

        with destination:
            event_logger.log_conversion_started(
                csv_path=csv_path,
                qif_path=qif_path,
                account_type=config.options.qif_account_type,
            )
            return _write_records(source, destination, config, event_logger)
