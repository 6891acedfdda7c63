"""
Command-Line Interface

    csv2qif [--config=value ...] csvFile qifFile [configFile]

The conversion config comes either from a JSON file (third positional
argument) or from one flag per config field. When a config file is
given, the flags are ignored.

Exit codes:
    0 - conversion succeeded, or --help was requested
    1 - invalid command line, or the conversion failed
"""

import argparse
import sys
from typing import Any, Optional, Sequence

from pydantic import ValidationError

from csv2qif.audit import ConversionLogger, configure_logging, create_run_id
from csv2qif.config import load_config
from csv2qif.converter import convert
from csv2qif.errors import ConfigLoadError, ConversionError
from csv2qif.models.config import ConverterConfig

EXIT_OK = 0
EXIT_FAILURE = 1

# (JSON key, value kind, default, help). Flags are the keys in lower camel case.
CONFIG_FLAGS: tuple[tuple[str, str, Any, str], ...] = (
    ("CsvHasHeader", "bool", False, "Does the CSV file contain header?"),
    ("CsvColumnDate", "int", -1, "The column index (start with 0) for Date column (D)"),
    ("CsvColumnAmount", "int", -1, "The column index (start with 0) for Amount column (T)"),
    ("CsvColumnMemo", "int", -1, "The column index (start with 0) for Memo column (M)"),
    ("CsvColumnPayee", "int", -1, "The column index (start with 0) for Payee column (P)"),
    ("CsvColumnCategory", "int", -1, "The column index (start with 0) for Category column (L)"),
    ("CsvColumnAddress", "int", -1, "The column index (start with 0) for Address column (A)"),
    ("CsvColumnRefNumber", "int", -1, "The column index (start with 0) for RefNumber column (N)"),
    ("CsvColumnCleared", "int", -1, "The column index (start with 0) for Cleared column (C)"),
    ("CsvColumnReimburseFlag", "int", -1,
     "The column index (start with 0) for ReimburseFlag column (F)"),
    ("CsvColumnSplitCategory", "int", -1,
     "The column index (start with 0) for SplitCategory column (S)"),
    ("CsvColumnSplitMemo", "int", -1, "The column index (start with 0) for SplitMemo column (E)"),
    ("CsvColumnSplitAmount", "int", -1,
     "The column index (start with 0) for SplitAmount column ($)"),
    ("CsvColumnSplitPercentage", "int", -1,
     "The column index (start with 0) for SplitPercentage column (%%)"),
    ("CsvDateFormat", "str", "", "Date format used in CSV file (e.g. YYYY-MM-DD)"),
    ("CsvReverseAmountSign", "bool", False, "Multiply amount with -1?"),
    ("QifAccountType", "str", "Bank", "The account type for QIF file"),
    ("QifDateFormat", "str", "", "Date format used in QIF file (e.g. YYYY-MM-DD)"),
)


class UsageError(Exception):
    """The command line could not be parsed."""
    pass


class _ArgumentParser(argparse.ArgumentParser):
    def error(self, message: str):
        raise UsageError(message)


def _flag_name(json_key: str) -> str:
    return "--" + json_key[0].lower() + json_key[1:]


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = _ArgumentParser(
        prog="csv2qif",
        usage="%(prog)s [--config=value ...] csvFile qifFile [configFile]",
        description="Convert CSV file to QIF file",
        epilog=(
            "csvFile is the CSV input file, qifFile the QIF output file and "
            "configFile an optional config file in JSON format. The config can "
            "also be passed as command line arguments."
        ),
        add_help=False,
        allow_abbrev=False,
    )
    parser.add_argument("files", nargs="*", metavar="file", help=argparse.SUPPRESS)
    parser.add_argument("--help", action="store_true", help="Print usage info")

    group = parser.add_argument_group("config")
    for json_key, kind, default, help_text in CONFIG_FLAGS:
        if kind == "bool":
            group.add_argument(
                _flag_name(json_key),
                dest=json_key,
                action=argparse.BooleanOptionalAction,
                default=default,
                help=help_text,
            )
        else:
            group.add_argument(
                _flag_name(json_key),
                dest=json_key,
                type=int if kind == "int" else str,
                default=default,
                help=help_text,
            )
    return parser


# Values accepted after `=` on a boolean flag, as in `--csvHasHeader=true`.
_TRUE_VALUES = frozenset({"1", "t", "T", "true", "TRUE", "True"})
_FALSE_VALUES = frozenset({"0", "f", "F", "false", "FALSE", "False"})


def expand_bool_values(argv: Sequence[str]) -> list[str]:
    """Rewrite `--flag=true` to `--flag` and `--flag=false` to `--no-flag`."""
    bool_flags = {_flag_name(key) for key, kind, _, _ in CONFIG_FLAGS if kind == "bool"}
    expanded = []
    for position, arg in enumerate(argv):
        if arg == "--":
            expanded.extend(argv[position:])
            break
        flag, sep, value = arg.partition("=")
        if sep and flag in bool_flags:
            if value in _TRUE_VALUES:
                arg = flag
            elif value in _FALSE_VALUES:
                arg = "--no-" + flag[2:]
        expanded.append(arg)
    return expanded


def config_from_args(args: argparse.Namespace) -> ConverterConfig:
    """Build the conversion config from parsed flags."""
    return ConverterConfig.from_flat(
        {json_key: getattr(args, json_key) for json_key, _, _, _ in CONFIG_FLAGS}
    )


def main(argv: Optional[Sequence[str]] = None) -> int:
    """
    Run the converter.

    Returns the process exit code.
    """
    if argv is None:
        argv = sys.argv[1:]

    parser = build_parser()
    try:
        args = parser.parse_intermixed_args(expand_bool_values(argv))
    except UsageError:
        parser.print_help(sys.stdout)
        print("ERROR: Invalid command line argument")
        return EXIT_FAILURE

    if args.help:
        parser.print_help(sys.stdout)
        return EXIT_OK

    if len(args.files) not in (2, 3):
        parser.print_help(sys.stdout)
        print("ERROR: Invalid command line argument")
        return EXIT_FAILURE

    try:
        configure_logging()
    except ValidationError as e:
        print(f"ERROR: Invalid CSV2QIF_ environment settings: {e}", file=sys.stderr)
        return EXIT_FAILURE

    event_logger = ConversionLogger(run_id=create_run_id())
    csv_file, qif_file = args.files[0], args.files[1]

    try:
        if len(args.files) == 3:
            config = load_config(args.files[2])
            event_logger.log_config_loaded(args.files[2])
        else:
            config = config_from_args(args)
    except ConfigLoadError as e:
        event_logger.log_conversion_failed(
            error_type=type(e).__name__,
            error_message=str(e),
            details={"config_path": e.config_path},
        )
        print(f"ERROR: {e}", file=sys.stderr)
        return EXIT_FAILURE

    try:
        convert(csv_file, qif_file, config, event_logger=event_logger)
    except ConversionError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return EXIT_FAILURE

    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
