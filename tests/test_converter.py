"""Integration tests for the CSV to QIF converter."""

from pathlib import Path

import pytest
from structlog.testing import capture_logs

from csv2qif import (
    ColumnMapping,
    ConfigurationMissingError,
    ConversionError,
    ConversionIOError,
    ConversionOptions,
    ConverterConfig,
    CsvParseError,
    convert,
)
from csv2qif.audit import ConversionLogger, create_run_id


def _write_csv(path: Path, text: str) -> Path:
    path.write_text(text, encoding="utf-8")
    return path


def _read_qif(path: Path) -> list[str]:
    return path.read_text(encoding="utf-8").split("\n")


@pytest.fixture()
def config() -> ConverterConfig:
    return ConverterConfig(
        options=ConversionOptions(csv_has_header=True),
        mapping=ColumnMapping(date=0, amount=1, payee=2, memo=3),
    )


class TestConvert:
    """Tests for convert()."""

    def test_basic_conversion(self, tmp_path, config):
        csv_file = _write_csv(
            tmp_path / "in.csv",
            "Date,Amount,Payee,Memo\n"
            "2023-01-05,-12.50,Coffee,\n"
            '2023-01-06,"$1,000.00",Employer,Salary\n',
        )
        qif_file = tmp_path / "out.qif"

        summary = convert(csv_file, qif_file, config)

        assert _read_qif(qif_file) == [
            "!Type:Bank",
            "D2023-01-05",
            "T-12.50",
            "PCoffee",
            "^",
            "D2023-01-06",
            "T1,000.00",
            "MSalary",
            "PEmployer",
            "^",
            "",
        ]
        assert summary.rows_read == 3
        assert summary.header_skipped is True
        assert summary.records_written == 2

    def test_header_row_is_never_mapped(self, tmp_path):
        config = ConverterConfig(
            options=ConversionOptions(csv_has_header=True),
            mapping=ColumnMapping(payee=0),
        )
        csv_file = _write_csv(tmp_path / "in.csv", "Payee\nShop\n")
        qif_file = tmp_path / "out.qif"

        convert(csv_file, qif_file, config)

        assert _read_qif(qif_file) == ["!Type:Bank", "PShop", "^", ""]

    def test_without_header_first_row_is_mapped(self, tmp_path):
        config = ConverterConfig(mapping=ColumnMapping(payee=0))
        csv_file = _write_csv(tmp_path / "in.csv", "Payee\nShop\n")
        qif_file = tmp_path / "out.qif"

        convert(csv_file, qif_file, config)

        assert _read_qif(qif_file) == ["!Type:Bank", "PPayee", "^", "PShop", "^", ""]

    def test_account_type_header(self, tmp_path):
        config = ConverterConfig(options=ConversionOptions(qif_account_type="CCard"))
        csv_file = _write_csv(tmp_path / "in.csv", "a,b\n")
        qif_file = tmp_path / "out.qif"

        summary = convert(csv_file, qif_file, config)

        assert _read_qif(qif_file) == ["!Type:CCard", ""]
        assert summary.rows_without_data == 1
        assert summary.records_written == 0

    def test_empty_csv_writes_only_header(self, tmp_path, config):
        csv_file = _write_csv(tmp_path / "in.csv", "")
        qif_file = tmp_path / "out.qif"

        summary = convert(csv_file, qif_file, config)

        assert _read_qif(qif_file) == ["!Type:Bank", ""]
        assert summary.rows_read == 0

    def test_rows_without_data_are_omitted(self, tmp_path):
        config = ConverterConfig(mapping=ColumnMapping(memo=1))
        csv_file = _write_csv(tmp_path / "in.csv", "x,\ny,note\nz,\n")
        qif_file = tmp_path / "out.qif"

        summary = convert(csv_file, qif_file, config)

        assert _read_qif(qif_file) == ["!Type:Bank", "Mnote", "^", ""]
        assert summary.rows_without_data == 2

    def test_blank_lines_are_skipped(self, tmp_path):
        config = ConverterConfig(mapping=ColumnMapping(payee=0))
        csv_file = _write_csv(tmp_path / "in.csv", "A\n\nB\n")
        qif_file = tmp_path / "out.qif"

        summary = convert(csv_file, qif_file, config)

        assert _read_qif(qif_file) == ["!Type:Bank", "PA", "^", "PB", "^", ""]
        assert summary.rows_read == 2

    def test_quoted_fields_keep_commas_and_newlines(self, tmp_path):
        config = ConverterConfig(mapping=ColumnMapping(payee=0, memo=1))
        csv_file = _write_csv(tmp_path / "in.csv", '"Smith, J.","two\nlines"\n')
        qif_file = tmp_path / "out.qif"

        convert(csv_file, qif_file, config)

        assert _read_qif(qif_file) == ["!Type:Bank", "Mtwo", "lines", "PSmith, J.", "^", ""]

    def test_byte_order_mark_is_dropped(self, tmp_path):
        config = ConverterConfig(mapping=ColumnMapping(payee=0))
        csv_file = tmp_path / "in.csv"
        csv_file.write_bytes("\ufeffShop\n".encode("utf-8"))
        qif_file = tmp_path / "out.qif"

        convert(csv_file, qif_file, config)

        assert _read_qif(qif_file) == ["!Type:Bank", "PShop", "^", ""]

    def test_date_translation_and_sign_reversal(self, tmp_path):
        config = ConverterConfig.from_flat({
            "CsvColumnDate": 0,
            "CsvColumnAmount": 1,
            "CsvDateFormat": "DD/MM/YYYY",
            "QifDateFormat": "MM/DD/YY",
            "CsvReverseAmountSign": True,
        })
        csv_file = _write_csv(tmp_path / "in.csv", "05/01/2023,50.00\n06/01/2023,-50.00\n")
        qif_file = tmp_path / "out.qif"

        convert(csv_file, qif_file, config)

        assert _read_qif(qif_file) == [
            "!Type:Bank",
            "D01/05/23",
            "T-50.00",
            "^",
            "D01/06/23",
            "T50.00",
            "^",
            "",
        ]

    def test_bad_date_is_written_raw_and_counted(self, tmp_path):
        config = ConverterConfig(
            options=ConversionOptions(csv_date_format="YYYY-MM-DD", qif_date_format="MM/DD/YYYY"),
            mapping=ColumnMapping(date=0),
        )
        csv_file = _write_csv(tmp_path / "in.csv", "2023-01-05\nyesterday\n")
        qif_file = tmp_path / "out.qif"

        with capture_logs() as logs:
            summary = convert(csv_file, qif_file, config)

        assert _read_qif(qif_file) == ["!Type:Bank", "D01/05/2023", "^", "Dyesterday", "^", ""]
        assert summary.date_warnings == 1
        warning = next(entry for entry in logs if entry["event"] == "date_parse_failed")
        assert warning["details"]["row_number"] == 2

    def test_deep_output_path(self, tmp_path):
        config = ConverterConfig(mapping=ColumnMapping(payee=0))
        csv_file = _write_csv(tmp_path / "in.csv", "Shop\n")
        out_dir = tmp_path
        for part in "abcde":
            out_dir = out_dir / (part * 120)
        out_dir.mkdir(parents=True)
        qif_file = out_dir / "out.qif"

        with capture_logs() as logs:
            summary = convert(csv_file, qif_file, config)

        assert summary.records_written == 1
        assert _read_qif(qif_file) == ["!Type:Bank", "PShop", "^", ""]
        started = next(entry for entry in logs if entry["event"] == "conversion_started")
        assert started["details"]["qif_path"] == str(qif_file)

    def test_events_share_run_id(self, tmp_path, config):
        run_id = create_run_id()
        csv_file = _write_csv(tmp_path / "in.csv", "Date,Amount,Payee,Memo\n")

        with capture_logs() as logs:
            convert(csv_file, tmp_path / "out.qif", config, event_logger=ConversionLogger(run_id))

        events = [entry["event"] for entry in logs]
        assert events == ["conversion_started", "header_skipped", "conversion_completed"]
        assert {entry["run_id"] for entry in logs} == {str(run_id)}


class TestConvertErrors:
    """Tests for fatal conversion errors."""

    def test_missing_config(self, tmp_path):
        csv_file = _write_csv(tmp_path / "in.csv", "a\n")
        with pytest.raises(ConfigurationMissingError, match="Missing configuration"):
            convert(csv_file, tmp_path / "out.qif", None)

    def test_missing_csv_file(self, tmp_path, config):
        qif_file = tmp_path / "out.qif"
        with pytest.raises(ConversionIOError, match="Cannot open CSV file"):
            convert(tmp_path / "missing.csv", qif_file, config)
        assert not qif_file.exists()

    def test_uncreatable_qif_file(self, tmp_path, config):
        csv_file = _write_csv(tmp_path / "in.csv", "a\n")
        with pytest.raises(ConversionIOError, match="Cannot create QIF file") as exc_info:
            convert(csv_file, tmp_path / "no-such-dir" / "out.qif", config)
        assert exc_info.value.path.endswith("out.qif")

    def test_wrong_field_count_aborts(self, tmp_path, config):
        csv_file = _write_csv(
            tmp_path / "in.csv",
            "Date,Amount,Payee,Memo\n2023-01-05,1.00,Shop,\n2023-01-06,2.00\n",
        )
        with pytest.raises(CsvParseError, match="wrong number of fields") as exc_info:
            convert(csv_file, tmp_path / "out.qif", config)
        assert exc_info.value.line_number == 3

    def test_bad_quoting_aborts(self, tmp_path, config):
        csv_file = _write_csv(tmp_path / "in.csv", 'a,"b"c,d,e\n')
        with pytest.raises(CsvParseError):
            convert(csv_file, tmp_path / "out.qif", config)

    @pytest.mark.parametrize("text", ['a"b,c\n', 'a,b"\n', 'a,b\nc,d""\n'])
    def test_bare_quote_in_unquoted_field_aborts(self, tmp_path, text):
        config = ConverterConfig(mapping=ColumnMapping(payee=0))
        csv_file = _write_csv(tmp_path / "in.csv", text)
        with pytest.raises(CsvParseError, match='bare " in non-quoted field'):
            convert(csv_file, tmp_path / "out.qif", config)

    def test_escaped_quotes_in_quoted_field(self, tmp_path):
        config = ConverterConfig(mapping=ColumnMapping(payee=0, memo=1))
        csv_file = _write_csv(tmp_path / "in.csv", '"Joe ""The Plumber""","x"\n')
        qif_file = tmp_path / "out.qif"

        convert(csv_file, qif_file, config)

        assert _read_qif(qif_file) == ["!Type:Bank", "Mx", "^", 'PJoe "The Plumber"', "^", ""]

    def test_failure_is_logged(self, tmp_path, config):
        with capture_logs() as logs:
            with pytest.raises(ConversionError):
                convert(tmp_path / "missing.csv", tmp_path / "out.qif", config)

        failed = [entry for entry in logs if entry["event"] == "conversion_failed"]
        assert len(failed) == 1
        assert failed[0]["log_level"] == "error"
        assert failed[0]["description"] == "Conversion failed: ConversionIOError"
