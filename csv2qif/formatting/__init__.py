"""Value formatting helpers (dates and amounts)."""

from csv2qif.formatting.amounts import normalize_amount, reverse_sign
from csv2qif.formatting.dates import (
    format_date,
    parse_date,
    reformat_date,
    translate_date_pattern,
)

__all__ = [
    "format_date",
    "normalize_amount",
    "parse_date",
    "reformat_date",
    "reverse_sign",
    "translate_date_pattern",
]
