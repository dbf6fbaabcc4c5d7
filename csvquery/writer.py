import logging
from typing import Iterable, List

from .binding import column_name, record_fields
from .constants import DEFAULT_DELIMITER, DEFAULT_ENCODING, EMPTY_STRING
from .errors import WriterError

log = logging.getLogger(__name__)


class RecordWriter:
    """Writes dataclass records as delimited lines under a header of column names.

    Values are not quoted; a value containing the delimiter will not read
    back as one field.
    """

    def __init__(self, record_type, path, delimiter: str = DEFAULT_DELIMITER,
                 encoding: str = DEFAULT_ENCODING):
        self.record_type = record_type
        self.path = str(path)
        self.delimiter = delimiter
        self.encoding = encoding
        self._fields = record_fields(record_type)

    def header(self) -> str:
        return self.delimiter.join(column_name(f) for f in self._fields)

    def line(self, record) -> str:
        if not isinstance(record, self.record_type):
            raise WriterError(self.path, TypeError(
                f"expected {self.record_type.__name__}, got {type(record).__name__}"))
        values: List[str] = []
        for f in self._fields:
            value = getattr(record, f.name)
            values.append(EMPTY_STRING if value is None else str(value))
        return self.delimiter.join(values)

    def write(self, records: Iterable) -> int:
        n = 0
        try:
            with open(self.path, "w", encoding=self.encoding, newline="") as f:
                f.write(self.header() + "\n")
                for record in records:
                    f.write(self.line(record) + "\n")
                    n += 1
        except OSError as e:
            raise WriterError(self.path, e) from e
        log.debug("wrote %d records to %s", n, self.path)
        return n
