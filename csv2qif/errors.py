"""
Conversion Errors

Every fatal condition of a run has its own exception type so the CLI can
report it clearly. All of them derive from ConversionError.

Date values that fail to parse are NOT errors: they are logged as
warnings and the raw value is written instead.
"""

from typing import Optional


class ConversionError(Exception):
    """Base exception for conversion failures."""
    pass


class ConfigurationMissingError(ConversionError):
    """No configuration was supplied to the converter."""
    pass


class ConfigLoadError(ConversionError):
    """The JSON config file could not be read or validated."""

    def __init__(self, config_path: str, message: str):
        self.config_path = config_path
        super().__init__(message)


class ConversionIOError(ConversionError):
    """The CSV source could not be opened or the QIF file not created."""

    def __init__(self, path: str, message: str):
        self.path = path
        super().__init__(message)


class CsvParseError(ConversionError):
    """A CSV record is malformed. Aborts the whole run."""

    def __init__(self, line_number: Optional[int], message: str):
        self.line_number = line_number
        super().__init__(message)
