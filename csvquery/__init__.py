"""csvquery: load a delimited text file once, then filter, sort and summarise it."""
from .aggregate import DataAggregator
from .binding import RecordReader, column, read_records
from .constants import DEFAULT_DELIMITER, EMPTY_STRING
from .errors import (AggregationError, BindingError, ColumnNotFoundError, CsvQueryError,
                     MemoryBudgetError, NoHeaderError, NumericParseError, ReaderError,
                     RowIndexError, WriterError)
from .reader import TabularReader
from .segregate import DuplicateSegregator
from .writer import RecordWriter

__version__ = "0.1.0"

__all__ = [
    "TabularReader", "DataAggregator", "DuplicateSegregator",
    "RecordReader", "RecordWriter", "column", "read_records",
    "CsvQueryError", "ReaderError", "NoHeaderError", "ColumnNotFoundError",
    "RowIndexError", "NumericParseError", "AggregationError", "BindingError",
    "WriterError", "MemoryBudgetError",
    "DEFAULT_DELIMITER", "EMPTY_STRING",
]
