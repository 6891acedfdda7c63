"""
Conversion Configuration Models

These models describe HOW a CSV file is turned into QIF:
1. Which CSV column feeds which QIF field (ColumnMapping)
2. How the values are interpreted (ConversionOptions)

DESIGN DECISION: Configuration is an immutable value.
It is built once at startup (from CLI flags or a JSON file) and passed
explicitly to the converter and the row mapper. Nothing reads it from
module-level state.

The JSON config file uses flat keys (`CsvColumnDate`, `QifAccountType`, ...).
Those names are kept as field aliases so one file can be validated into
both models.
"""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

from csv2qif.models.qif import DEFAULT_ACCOUNT_TYPE, QifField


class ColumnMapping(BaseModel):
    """
    Zero-based CSV column index for each QIF field.

    None means the field is not mapped. The legacy sentinel -1 (or any
    negative index) is accepted on input and stored as None.
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    date: Optional[int] = Field(default=None, alias="CsvColumnDate")
    amount: Optional[int] = Field(default=None, alias="CsvColumnAmount")
    memo: Optional[int] = Field(default=None, alias="CsvColumnMemo")
    payee: Optional[int] = Field(default=None, alias="CsvColumnPayee")
    category: Optional[int] = Field(default=None, alias="CsvColumnCategory")
    address: Optional[int] = Field(default=None, alias="CsvColumnAddress")
    ref_number: Optional[int] = Field(default=None, alias="CsvColumnRefNumber")
    cleared: Optional[int] = Field(default=None, alias="CsvColumnCleared")
    reimburse_flag: Optional[int] = Field(default=None, alias="CsvColumnReimburseFlag")
    split_category: Optional[int] = Field(default=None, alias="CsvColumnSplitCategory")
    split_memo: Optional[int] = Field(default=None, alias="CsvColumnSplitMemo")
    split_amount: Optional[int] = Field(default=None, alias="CsvColumnSplitAmount")
    split_percentage: Optional[int] = Field(default=None, alias="CsvColumnSplitPercentage")

    @field_validator("*", mode="before")
    @classmethod
    def negative_index_is_absent(cls, v: Any) -> Any:
        """Map the -1 sentinel (any negative index) to None."""
        if isinstance(v, int) and not isinstance(v, bool) and v < 0:
            return None
        return v

    def column_for(self, field: QifField) -> Optional[int]:
        """Get the column index mapped to a QIF field."""
        return getattr(self, _FIELD_ATTRIBUTES[field])

    @property
    def is_empty(self) -> bool:
        """True when no field is mapped at all."""
        return all(self.column_for(field) is None for field in QifField)


_FIELD_ATTRIBUTES: dict[QifField, str] = {
    QifField.DATE: "date",
    QifField.AMOUNT: "amount",
    QifField.MEMO: "memo",
    QifField.PAYEE: "payee",
    QifField.CATEGORY: "category",
    QifField.ADDRESS: "address",
    QifField.REF_NUMBER: "ref_number",
    QifField.CLEARED: "cleared",
    QifField.REIMBURSE_FLAG: "reimburse_flag",
    QifField.SPLIT_CATEGORY: "split_category",
    QifField.SPLIT_MEMO: "split_memo",
    QifField.SPLIT_AMOUNT: "split_amount",
    QifField.SPLIT_PERCENTAGE: "split_percentage",
}


class ConversionOptions(BaseModel):
    """Options controlling how mapped values are written."""
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    csv_has_header: bool = Field(
        default=False,
        alias="CsvHasHeader",
        description="Skip the first CSV record"
    )
    csv_date_format: str = Field(
        default="",
        alias="CsvDateFormat",
        description="Date pattern used in the CSV file (e.g. YYYY-MM-DD)"
    )
    qif_date_format: str = Field(
        default="",
        alias="QifDateFormat",
        description="Date pattern to write in the QIF file"
    )
    reverse_amount_sign: bool = Field(
        default=False,
        alias="CsvReverseAmountSign",
        description="Flip the sign of amount and split amount values"
    )
    qif_account_type: str = Field(
        default=DEFAULT_ACCOUNT_TYPE,
        alias="QifAccountType",
        description="Account type written in the !Type header"
    )

    @field_validator(
        "csv_has_header", "csv_date_format", "qif_date_format", "reverse_amount_sign",
        mode="before",
    )
    @classmethod
    def null_keeps_default(cls, v: Any, info: ValidationInfo) -> Any:
        if v is None:
            return cls.model_fields[info.field_name].default
        return v

    @field_validator("qif_account_type", mode="before")
    @classmethod
    def default_account_type(cls, v: Any) -> Any:
        if v is None or (isinstance(v, str) and not v.strip()):
            return DEFAULT_ACCOUNT_TYPE
        return v

    @property
    def translates_dates(self) -> bool:
        """Dates are only rewritten when both patterns are set."""
        return bool(self.csv_date_format and self.qif_date_format)


class ConverterConfig(BaseModel):
    """
    Complete, immutable configuration for one conversion run.
    """
    model_config = ConfigDict(frozen=True)

    options: ConversionOptions = Field(default_factory=ConversionOptions)
    mapping: ColumnMapping = Field(default_factory=ColumnMapping)

    @classmethod
    def from_flat(cls, data: dict[str, Any]) -> "ConverterConfig":
        """
        Build a config from the flat key layout of the JSON config file.

        Key matching is case-insensitive (`csvColumnDate` and
        `CsvColumnDate` are the same key). Unknown keys are ignored.

        Raises:
            pydantic.ValidationError: If a value has the wrong type
        """
        normalized = _normalize_keys(data)
        return cls(
            options=ConversionOptions.model_validate(normalized),
            mapping=ColumnMapping.model_validate(normalized),
        )


def _known_aliases() -> dict[str, str]:
    aliases = {}
    for model in (ColumnMapping, ConversionOptions):
        for field_info in model.model_fields.values():
            if field_info.alias:
                aliases[field_info.alias.lower()] = field_info.alias
    return aliases


def _normalize_keys(data: dict[str, Any]) -> dict[str, Any]:
    """Rewrite keys to their canonical alias spelling."""
    aliases = _known_aliases()
    normalized: dict[str, Any] = {}
    for key, value in data.items():
        canonical = aliases.get(str(key).lower())
        if canonical is not None:
            normalized[canonical] = value
    return normalized
