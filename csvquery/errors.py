"""Exception hierarchy shared by the reader, binder and writer."""
from typing import Optional


class CsvQueryError(Exception):
    """Base class for every error raised by csvquery."""


class ReaderError(CsvQueryError):
    """The source file could not be read or closed."""
    def __init__(self, path: str, cause: BaseException):
        super().__init__(f"cannot read {path!r}: {cause}")
        self.path = path
        self.cause = cause


class NoHeaderError(CsvQueryError):
    def __init__(self, operation: str = "column names"):
        super().__init__(f"cannot get {operation}: table was loaded without a header")


class ColumnNotFoundError(CsvQueryError, KeyError):
    def __init__(self, name: str):
        super().__init__(f"no column named {name!r}")
        self.name = name

    def __str__(self) -> str:  # KeyError quotes its argument otherwise
        return self.args[0]


class RowIndexError(CsvQueryError, IndexError):
    def __init__(self, index: int, size: int):
        super().__init__(f"row index {index} is out of bounds [0, {size})")
        self.index = index
        self.size = size


class NumericParseError(CsvQueryError, ValueError):
    """A cell that must be numeric is not; row/column are absolute indices when known."""
    def __init__(self, value: str, kind: str = "decimal",
                 row: Optional[int] = None, column: Optional[int] = None):
        where = ""
        if row is not None:
            where += f" at row {row}"
        if column is not None:
            where += f" in column {column}"
        super().__init__(f"cannot parse {value!r} as {kind}{where}")
        self.value = value
        self.kind = kind
        self.row = row
        self.column = column


class AggregationError(CsvQueryError, ValueError):
    pass


class BindingError(CsvQueryError):
    pass


class WriterError(CsvQueryError):
    def __init__(self, path: str, cause: BaseException):
        super().__init__(f"cannot write {path!r}: {cause}")
        self.path = path
        self.cause = cause


class MemoryBudgetError(CsvQueryError):
    pass
