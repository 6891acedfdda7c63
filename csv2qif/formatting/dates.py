"""
Date Pattern Translation

Users describe dates with readable tokens (`YYYY-MM-DD`, `D/M/YY`,
`DD MMM YYYY`). These are translated to `datetime` directives.

Tokens are matched in a single left-to-right pass, longest first within
each field, so that `DD` is never half-consumed by the `D` replacement:
1. DD, D
2. MMMM, MMM, MM, M
3. YYYY, YY, Y

Replaced text is never scanned again, so the `Y` inside a produced
`%Y` is left alone.
"""

import re
from datetime import datetime

_TOKEN_DIRECTIVES: dict[str, str] = {
    "DD": "%d",
    "D": "%-d",
    "MMMM": "%B",
    "MMM": "%b",
    "MM": "%m",
    "M": "%-m",
    "YYYY": "%Y",
    "YY": "%y",
    "Y": "%y",
}

_TOKEN = re.compile("|".join(_TOKEN_DIRECTIVES))

# `%-d` / `%-m` are not understood by strptime and are platform dependent
# in strftime, so they are rewritten before either call.
_UNPADDED_DIRECTIVE = re.compile(r"%%|%-([dm])")


def translate_date_pattern(pattern: str) -> str:
    """
    Translate a token pattern into a strftime/strptime pattern.

    Empty input returns empty output. Unknown characters pass through.

    >>> translate_date_pattern("YYYY-MM-DD")
    '%Y-%m-%d'
    """
    if not pattern:
        return pattern

    escaped = pattern.replace("%", "%%").upper()
    return _TOKEN.sub(lambda match: _TOKEN_DIRECTIVES[match.group(0)], escaped)


def parse_date(value: str, directive_pattern: str) -> datetime:
    """
    Parse a date with a translated pattern.

    Raises:
        ValueError: If the value does not match the whole pattern
    """
    def padded(match: re.Match) -> str:
        return f"%{match.group(1)}" if match.group(1) else match.group(0)

    return datetime.strptime(value, _UNPADDED_DIRECTIVE.sub(padded, directive_pattern))


def format_date(value: datetime, directive_pattern: str) -> str:
    """Format a date with a translated pattern."""
    def unpadded(match: re.Match) -> str:
        if match.group(1) == "d":
            return str(value.day)
        if match.group(1) == "m":
            return str(value.month)
        return match.group(0)

    return value.strftime(_UNPADDED_DIRECTIVE.sub(unpadded, directive_pattern))


def reformat_date(value: str, csv_date_format: str, qif_date_format: str) -> str:
    """
    Rewrite a date from the CSV token pattern to the QIF token pattern.

    Raises:
        ValueError: If the value does not match csv_date_format
    """
    parsed = parse_date(value, translate_date_pattern(csv_date_format))
    return format_date(parsed, translate_date_pattern(qif_date_format))
