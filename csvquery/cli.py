import argparse
import codecs
import logging
import re
import sys
from decimal import Decimal
from typing import List, Optional, Union

from .aggregate import DataAggregator
from .constants import DEFAULT_DELIMITER, DEFAULT_ENCODING, DEFAULT_MEM_BUDGET, MB
from .errors import CsvQueryError, NumericParseError
from .memory import ensure_fits
from .reader import TabularReader
from .segregate import DuplicateSegregator
from .utils import parse_decimal

log = logging.getLogger("csvquery")


def parse_column(text: str) -> Union[int, str]:
    """An integer selects by index, anything else by header name."""
    return int(text) if text.lstrip("-").isdigit() else text


def fmt_num(x: Optional[Decimal]) -> str:
    if x is None:
        return "None"
    if x == x.to_integral_value():
        return f"{int(x):,}"
    return f"{x:,}"


def pr(label: str, value: str):
    print(f"    {label.ljust(24)}{value}")


def _numeric_summary(values: List[str]) -> Optional[DataAggregator]:
    filled = [v for v in values if v != ""]
    if not filled:
        return None
    try:
        for v in filled:
            parse_decimal(v)
    except NumericParseError:
        return None
    return DataAggregator(filled, precision=28)


def print_column_stats(reader: TabularReader):
    names = reader.get_column_names() if reader.header_available else []
    width = max(reader.get_max_num_of_columns(), len(names))
    for idx in range(width):
        values = reader.get_column(idx)
        name = names[idx] if idx < len(names) else f"column {idx}"
        nulls = sum(1 for v in values if v == "")
        seg = DuplicateSegregator(values)
        agg = _numeric_summary(values)
        print(f"{idx + 1}. \"{name}\"")
        if agg is not None:
            pr("Type of data:", "Number")
            pr("Contains null values:", f"{'True' if nulls else 'False'} (excluded from numeric stats)")
            pr("Non-null values:", f"{agg.count:,}")
            pr("Unique values:", f"{len(seg.frequencies):,}")
            pr("Duplicated values:", f"{seg.duplicate_count:,}")
            pr("Smallest value:", fmt_num(agg.min))
            pr("Largest value:", fmt_num(agg.max))
            pr("Sum:", fmt_num(agg.sum))
            pr("Mean:", fmt_num(agg.average))
        else:
            pr("Type of data:", "Text")
            pr("Contains null values:", 'True' if nulls else 'False')
            pr("Non-null values:", f"{len(values) - nulls:,}")
            pr("Unique values:", f"{len(seg.frequencies):,}")
            pr("Duplicated values:", f"{seg.duplicate_count:,}")
            pr("Longest value length:", str(max((len(v) for v in values), default=0)))
        print()
    print(f"Row count: {reader.get_row_count():,}")
    consistent = "yes" if reader.is_consistent() else "no"
    print(f"Consistent: {consistent} ({reader.get_min_num_of_columns()}-{reader.get_max_num_of_columns()} columns)")


def print_duplicates(seg: DuplicateSegregator):
    print(f"Duplicated values ({seg.duplicate_count}):")
    for value in seg.duplicate_data:
        print(f"  {value}\t{seg.get_frequency(value)}")
    print(f"Unique values ({seg.unique_count}):")
    for value in seg.unique_data:
        print(f"  {value}")


def print_check(reader: TabularReader):
    start = reader.get_initial_row_index()
    if reader.header_available:
        expected = len(reader.get_column_names())
    elif reader.get_row_count():
        expected = reader.get_column_count(start)
    else:
        expected = 0
    print(f"Consistent: {'yes' if reader.is_consistent() else 'no'}")
    print(f"Columns: min={reader.get_min_num_of_columns()} max={reader.get_max_num_of_columns()} expected={expected}")
    ragged = reader.get_row_numbers_not_having_columns(expected)
    print(f"Rows not having {expected} columns: {len(ragged)}")
    for i in ragged:
        print(f"  {i}: {reader.get_row(i)}")


def build_parser() -> argparse.ArgumentParser:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("file", help="Delimited text file")
    common.add_argument("-d", "--delimiter", default=DEFAULT_DELIMITER, help="Field delimiter; escapes like '\\t' are decoded (default ',')")
    common.add_argument("--no-header", action="store_true", help="First line is data, not column names")
    common.add_argument("--encoding", default=DEFAULT_ENCODING, help="File encoding (default utf-8)")
    common.add_argument("--mem-budget", type=float, default=DEFAULT_MEM_BUDGET, help="Fraction of RAM the loaded table may use (default 0.25)")
    common.add_argument("--hard-cap-mb", type=int, default=0, help="Refuse files larger than this (MB, 0 = no cap)")
    common.add_argument("--force", action="store_true", help="Skip the memory budget check")
    common.add_argument("-v", "--verbose", action="store_true", help="Debug logging on stderr")

    ap = argparse.ArgumentParser(prog="csvquery", description="Query a delimited text file held in memory")
    sub = ap.add_subparsers(dest="command", required=True)
    sub.add_parser("stat", parents=[common], help="Per-column statistics")
    sub.add_parser("check", parents=[common], help="Column count consistency report")

    p = sub.add_parser("rows", parents=[common], help="Data rows, optionally filtered by a regex on one column")
    p.add_argument("-c", "--column", type=parse_column, help="Column index or name to filter on")
    p.add_argument("-r", "--regex", help="Pattern the whole cell must match")
    p.add_argument("--with-header", action="store_true", help="Print the header line first")

    p = sub.add_parser("sort", parents=[common], help="Data rows bucket-sorted by one column")
    p.add_argument("-c", "--column", type=parse_column, required=True)
    p.add_argument("-n", "--numeric", action="store_true", help="Compare keys as decimals")

    p = sub.add_parser("column", parents=[common], help="Values of one column")
    p.add_argument("-c", "--column", type=parse_column, required=True)
    p.add_argument("-r", "--regex", help="Only values fully matching this pattern")
    p.add_argument("--with-header", action="store_true")

    p = sub.add_parser("dupes", parents=[common], help="Duplicated and unique values of one column")
    p.add_argument("-c", "--column", type=parse_column, required=True)
    return ap


def load(args) -> TabularReader:
    if not args.force:
        cap = args.hard_cap_mb * MB if args.hard_cap_mb > 0 else None
        why = ensure_fits(args.file, args.mem_budget, cap)
        log.debug("memory check: %s", why)
    # decode backslash escapes only; other non-ASCII characters pass through
    delimiter = codecs.decode(args.delimiter.encode("latin-1", "backslashreplace"), "unicode_escape")
    return TabularReader(args.file, delimiter=delimiter, header=not args.no_header,
                         encoding=args.encoding)


def run(args) -> None:
    reader = load(args)
    if args.command == "stat":
        print_column_stats(reader)
    elif args.command == "check":
        print_check(reader)
    elif args.command == "rows":
        if args.column is not None and args.regex is not None:
            rows = reader.get_rows_matching(args.column, args.regex, with_header=args.with_header)
        else:
            rows = reader.get_rows(with_header=args.with_header)
        for row in rows:
            print(row)
    elif args.command == "sort":
        for row in reader.get_sorted_by(args.column, numeric=args.numeric):
            print(row)
    elif args.command == "column":
        if args.regex is not None:
            values = reader.get_column_matching(args.column, args.regex, with_header=args.with_header)
        else:
            values = reader.get_column(args.column, with_header=args.with_header)
        for value in values:
            print(value)
    elif args.command == "dupes":
        print_duplicates(reader.get_duplicate_segregator(args.column))


def main(argv: Optional[List[str]] = None) -> int:
    ap = build_parser()
    args = ap.parse_args(argv)
    if args.command == "rows" and (args.column is None) != (args.regex is None):
        ap.error("rows: --column and --regex must be given together")
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING,
                        format="%(levelname)s %(name)s: %(message)s", stream=sys.stderr)
    try:
        run(args)
    except (CsvQueryError, re.error) as e:
        print(f"error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
