"""
csv2qif - CSV to QIF Converter

Converts bank and card CSV exports into QIF files that Quicken (and
other personal finance tools) can import.

DESIGN PRINCIPLES:
1. One immutable config per run, passed explicitly
2. Field order in the output is fixed, never inferred
3. Malformed input fails the run loudly
4. Unparseable dates are logged, never dropped
"""

from csv2qif.converter import convert
from csv2qif.errors import (
    ConfigLoadError,
    ConfigurationMissingError,
    ConversionError,
    ConversionIOError,
    CsvParseError,
)
from csv2qif.models.config import ColumnMapping, ConversionOptions, ConverterConfig

__version__ = "1.0.0"

__all__ = [
    "ColumnMapping",
    "ConfigLoadError",
    "ConfigurationMissingError",
    "ConversionError",
    "ConversionIOError",
    "ConversionOptions",
    "ConverterConfig",
    "CsvParseError",
    "convert",
]
