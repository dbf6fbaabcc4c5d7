"""In-memory row/column store over a delimited text file.

The file is read once. Every row is kept as raw text together with the
number of fields it splits into; queries split rows on demand and always
return fresh lists, so a loaded reader is never mutated and can be shared
between threads.
"""
import logging
import re
from decimal import Decimal
from typing import Callable, Dict, Iterable, List, Optional, Pattern, Union

from .aggregate import DataAggregator
from .constants import DEFAULT_DELIMITER, DEFAULT_ENCODING, EMPTY_STRING
from .errors import ColumnNotFoundError, NoHeaderError, ReaderError, RowIndexError
from .segregate import DuplicateSegregator
from .utils import count_fields, is_index_bound, parse_decimal, parse_int, split_row

log = logging.getLogger(__name__)

Column = Union[int, str]
Regex = Union[str, Pattern]


class TabularReader:
    """Rows, per-row column counts and an optional header of one file.

    Absolute row indices count every line of the file, the header line
    included; ``get_initial_row_index()`` is the first data row.
    Columns may be given as an ``int`` index or, when the file has a
    header, as a ``str`` name.
    """

    def __init__(self, path, delimiter: str = DEFAULT_DELIMITER, header: bool = True,
                 encoding: str = DEFAULT_ENCODING):
        if not delimiter:
            raise ValueError("delimiter must be a non-empty string")
        rows: List[str] = []
        counts: List[int] = []
        try:
            # universal newlines: \r\n and \r arrive as \n
            with open(path, "r", encoding=encoding) as f:
                for line in f:
                    if line.endswith("\n"):
                        line = line[:-1]
                    rows.append(line)
                    counts.append(count_fields(line, delimiter))
        except (OSError, UnicodeDecodeError) as e:
            raise ReaderError(str(path), e) from e

        self._path = str(path)
        self._delimiter = delimiter
        self._header = header
        self._rows = tuple(rows)
        self._counts = tuple(counts)
        self._column_names = tuple(split_row(rows[0], delimiter)) if header and rows else ()
        log.debug("loaded %d lines from %s (header=%s, delimiter=%r)",
                  len(self._rows), self._path, header, delimiter)
        if self._rows and not self.is_consistent():
            log.info("%s is ragged: rows have between %d and %d columns",
                     self._path, self.get_min_num_of_columns(), self.get_max_num_of_columns())

    def __repr__(self) -> str:
        return (f"TabularReader({self._path!r}, delimiter={self._delimiter!r}, "
                f"header={self._header}, rows={len(self._rows)})")

    @property
    def path(self) -> str:
        return self._path

    @property
    def delimiter(self) -> str:
        return self._delimiter

    @property
    def header_available(self) -> bool:
        return self._header

    # ---- rows ----
    def get_row(self, row_index: int) -> str:
        if not is_index_bound(row_index, len(self._rows)):
            raise RowIndexError(row_index, len(self._rows))
        return self._rows[row_index]

    def get_row_split(self, row_index: int) -> List[str]:
        return split_row(self.get_row(row_index), self._delimiter)

    def get_rows(self, with_header: bool = False) -> List[str]:
        rows = list(self._rows)
        if self._header and not with_header and rows:
            del rows[0]
        return rows

    def get_rows_at(self, row_indices: Iterable[int]) -> List[str]:
        """Rows at absolute indices, in the order asked for (repeats allowed)."""
        return [self.get_row(i) for i in row_indices]

    def get_row_range(self, start: int, end: int) -> List[str]:
        """Rows ``start`` through ``end``, both inclusive."""
        return [self.get_row(i) for i in range(start, end + 1)]

    def get_row_count(self) -> int:
        if self._header:
            return max(0, len(self._rows) - 1)
        return len(self._rows)

    def get_initial_row_index(self) -> int:
        return 1 if self._header else 0

    def is_consistent(self) -> bool:
        return len(set(self._counts)) == 1

    # ---- columns ----
    def get_column_names(self) -> List[str]:
        if not self._header:
            raise NoHeaderError()
        return list(self._column_names)

    def find_column_index(self, name: str) -> Optional[int]:
        names = self.get_column_names()
        return names.index(name) if name in names else None

    def get_column_index(self, name: str) -> int:
        """Position of ``name`` in the header, or -1 when absent."""
        index = self.find_column_index(name)
        return -1 if index is None else index

    def get_column_name(self, column_index: int) -> Optional[str]:
        names = self.get_column_names()
        return names[column_index] if is_index_bound(column_index, len(names)) else None

    def get_column(self, column: Column, with_header: bool = False) -> List[str]:
        """One field per row; rows too short for the column give an empty string."""
        index = self._resolve(column)
        values = []
        for record in self._rows:
            fields = split_row(record, self._delimiter)
            values.append(fields[index] if is_index_bound(index, len(fields)) else EMPTY_STRING)
        if self._header and not with_header and values:
            del values[0]
        return values

    def get_column_matching(self, column: Column, regex: Regex, with_header: bool = False) -> List[str]:
        index = self._resolve(column)
        pattern = re.compile(regex)
        values = [v for v in self.get_column(index) if pattern.fullmatch(v)]
        if with_header and self._header:
            values.insert(0, self.get_column_name(index) or EMPTY_STRING)
        return values

    def get_column_as_integers(self, column: Column) -> List[int]:
        index = self._resolve(column)
        start = self.get_initial_row_index()
        return [parse_int(v, row=start + n, column=index)
                for n, v in enumerate(self.get_column(index))]

    def get_column_as_decimals(self, column: Column) -> List[Decimal]:
        index = self._resolve(column)
        start = self.get_initial_row_index()
        return [parse_decimal(v, row=start + n, column=index)
                for n, v in enumerate(self.get_column(index))]

    def get_max_num_of_columns(self) -> int:
        return max(self._counts, default=0)

    def get_min_num_of_columns(self) -> int:
        return min(self._counts, default=0)

    def get_column_count(self, row_index: int) -> int:
        # recomputed from the row text, not the cached count
        return len(self.get_row_split(row_index))

    # ---- cells ----
    def get_value(self, row_index: int, column_index: int) -> Optional[str]:
        fields = self.get_row_split(row_index)
        return fields[column_index] if is_index_bound(column_index, len(fields)) else None

    def get_sub_matrix(self, row_start: int, row_end: int, col_start: int, col_end: int) -> List[str]:
        """Inclusive rectangle of cells, each row re-joined with the delimiter."""
        matrix = []
        for i in range(row_start, row_end + 1):
            cells = []
            for j in range(col_start, col_end + 1):
                value = self.get_value(i, j)
                cells.append(EMPTY_STRING if value is None else value)
            matrix.append(self._delimiter.join(cells))
        return matrix

    # ---- filtering ----
    def get_row_numbers(self, column: Column, regex: Regex) -> List[int]:
        """Absolute indices of rows whose cell fully matches ``regex``.

        Position 0 is never reported. An out-of-range column matches nothing.
        """
        index = self._resolve(column)
        pattern = re.compile(regex)
        if not is_index_bound(index, self.get_max_num_of_columns()):
            return []
        values = self.get_column(index, with_header=True)
        return [i for i in range(1, len(values)) if pattern.fullmatch(values[i])]

    def get_rows_matching(self, column: Column, regex: Regex, with_header: bool = False) -> List[str]:
        rows = self.get_rows_at(self.get_row_numbers(column, regex))
        if with_header and self._header and self._rows:
            rows.insert(0, self._rows[0])
        return rows

    def get_rows_having_columns(self, num_columns: int) -> List[str]:
        return self._rows_where(lambda n: n == num_columns)

    def get_rows_not_having_columns(self, num_columns: int) -> List[str]:
        return self._rows_where(lambda n: n != num_columns)

    def get_rows_having_cols_lesser_than(self, num_columns: int) -> List[str]:
        return self._rows_where(lambda n: n < num_columns)

    def get_rows_having_cols_more_than(self, num_columns: int) -> List[str]:
        return self._rows_where(lambda n: n > num_columns)

    def get_row_numbers_not_having_columns(self, num_columns: int) -> List[int]:
        start = self.get_initial_row_index()
        return [i for i in range(start, len(self._counts)) if self._counts[i] != num_columns]

    # ---- sorting ----
    def get_sorted_by(self, column: Column, numeric: bool = False) -> List[str]:
        """Data rows bucketed by the column's value, buckets in ascending key order.

        Rows sharing a key keep their file order. With ``numeric`` the keys
        are compared as decimals, so ``1.0`` and ``1`` share a bucket.
        """
        index = self._resolve(column)
        buckets: Dict[object, List[str]] = {}
        for i in range(self.get_initial_row_index(), len(self._rows)):
            row = self._rows[i]
            fields = split_row(row, self._delimiter)
            cell = fields[index] if is_index_bound(index, len(fields)) else EMPTY_STRING
            key = parse_decimal(cell, row=i, column=index) if numeric else cell
            buckets.setdefault(key, []).append(row)
        return [row for key in sorted(buckets) for row in buckets[key]]

    # ---- summaries ----
    def get_data_aggregator(self, column: Column, precision: Optional[int] = None) -> DataAggregator:
        return DataAggregator(self.get_column(column), precision=precision)

    def get_duplicate_segregator(self, column: Column) -> DuplicateSegregator:
        return DuplicateSegregator(self.get_column(column))

    # ---- helpers ----
    def _resolve(self, column: Column) -> int:
        if isinstance(column, str):
            index = self.find_column_index(column)
            if index is None:
                raise ColumnNotFoundError(column)
            return index
        return column

    def _rows_where(self, predicate: Callable[[int], bool]) -> List[str]:
        start = self.get_initial_row_index()
        return [self._rows[i] for i in range(start, len(self._counts)) if predicate(self._counts[i])]
