"""
Amount Normalization

Bank exports decorate amounts with currency symbols, codes and spaces
(`$1,234.56`, `USD -99`, `1 234,50 EUR`). QIF wants the bare number.

IMPORTANT: No locale handling is done. Thousands and decimal separators
are passed through exactly as they appear in the CSV.
"""

import re

# A minus sign on its own, or a digit followed by digits and separators
_AMOUNT_PART = re.compile(r"-|\d[\d,.]*")


def normalize_amount(raw: str) -> str:
    """
    Keep only minus signs and digit runs (with `,` and `.`).

    >>> normalize_amount("$1,234.56")
    '1,234.56'
    >>> normalize_amount("USD -99")
    '-99'
    """
    if not raw:
        return raw
    return "".join(_AMOUNT_PART.findall(raw))


def reverse_sign(amount: str) -> str:
    """Toggle a leading minus sign. Empty stays empty."""
    if not amount:
        return amount
    if amount.startswith("-"):
        return amount[1:]
    return f"-{amount}"
