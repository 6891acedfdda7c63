"""Conversion logging package."""

from csv2qif.audit.logger import ConversionLogger, configure_logging, create_run_id

__all__ = ["ConversionLogger", "configure_logging", "create_run_id"]
