"""
QIF Output Vocabulary

A QIF file is line oriented. The first line declares the account type
(`!Type:Bank`), then each transaction is written as one line per field,
where the first character is the field code, and the record is closed
by a line holding only `^`.

DESIGN DECISION: The order in which fields are written is part of the
output format contract. It is declared explicitly in FIELD_EMISSION_ORDER
and must never be derived from enum or model declaration order.
"""

from enum import Enum


class QifField(str, Enum):
    """
    QIF transaction field codes supported by the converter.

    The value is the one-character prefix written at the start of the line.
    """
    DATE = "D"
    AMOUNT = "T"
    MEMO = "M"
    PAYEE = "P"
    CATEGORY = "L"
    ADDRESS = "A"
    REF_NUMBER = "N"
    CLEARED = "C"
    REIMBURSE_FLAG = "F"
    SPLIT_CATEGORY = "S"
    SPLIT_MEMO = "E"
    SPLIT_AMOUNT = "$"
    SPLIT_PERCENTAGE = "%"


FIELD_EMISSION_ORDER: tuple[QifField, ...] = (
    QifField.DATE,
    QifField.AMOUNT,
    QifField.MEMO,
    QifField.PAYEE,
    QifField.CATEGORY,
    QifField.ADDRESS,
    QifField.REF_NUMBER,
    QifField.CLEARED,
    QifField.REIMBURSE_FLAG,
    QifField.SPLIT_CATEGORY,
    QifField.SPLIT_MEMO,
    QifField.SPLIT_AMOUNT,
    QifField.SPLIT_PERCENTAGE,
)

# Fields whose value goes through amount normalization
AMOUNT_FIELDS = frozenset({QifField.AMOUNT, QifField.SPLIT_AMOUNT})

RECORD_SEPARATOR = "^"
DEFAULT_ACCOUNT_TYPE = "Bank"


def field_line(field: QifField, value: str) -> str:
    """Render a single `<code><value>` line."""
    return f"{field.value}{value}"


def account_header(account_type: str) -> str:
    """Render the `!Type:` header line, falling back to Bank."""
    return f"!Type:{account_type or DEFAULT_ACCOUNT_TYPE}"
