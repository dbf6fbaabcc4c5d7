import re
from decimal import Decimal, InvalidOperation
from typing import List, Optional

from .errors import NumericParseError

_INT_RE = re.compile(r"[+-]?\d+")
# plain or scientific notation, no whitespace/underscores/NaN/Infinity
_DECIMAL_RE = re.compile(r"[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?")


def is_index_bound(index: int, size: int) -> bool:
    return 0 <= index < size


def is_null_or_empty(value: Optional[str]) -> bool:
    return value is None or value == ""


def split_row(row: str, delimiter: str) -> List[str]:
    # literal split, no quoting rules: a delimiter inside a value is a field boundary.
    # Trailing empty fields are dropped ("a,b," has 2 fields, ",," has none);
    # an empty row stays one empty field.
    if row == "":
        return [row]
    fields = row.split(delimiter)
    while fields and fields[-1] == "":
        fields.pop()
    return fields


def count_fields(row: Optional[str], delimiter: str) -> int:
    if is_null_or_empty(row):
        return 0
    return len(split_row(row, delimiter))


def parse_int(value: str, row: Optional[int] = None, column: Optional[int] = None) -> int:
    if not _INT_RE.fullmatch(value):
        raise NumericParseError(value, "integer", row=row, column=column)
    return int(value)


def parse_decimal(value: str, row: Optional[int] = None, column: Optional[int] = None) -> Decimal:
    if not _DECIMAL_RE.fullmatch(value):
        raise NumericParseError(value, "decimal", row=row, column=column)
    try:
        return Decimal(value)
    except InvalidOperation as e:
        raise NumericParseError(value, "decimal", row=row, column=column) from e
