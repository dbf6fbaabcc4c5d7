"""Map data rows onto dataclass records through an explicit binding table.

A field binds to the column of the same name; ``column("Some Header")``
overrides the name for fields whose column is called something else::

    @dataclass
    class Person:
        name: str
        age: int = column("Age In Years")
"""
import dataclasses
import logging
import types
import typing
from decimal import Decimal
from typing import Any, Callable, Dict, List

from .constants import DEFAULT_DELIMITER, DEFAULT_ENCODING
from .errors import BindingError, CsvQueryError
from .reader import TabularReader
from .utils import parse_decimal, parse_int

log = logging.getLogger(__name__)

COLUMN_KEY = "csvquery.column"

_TRUE = ("true", "t", "yes", "y", "1")
_FALSE = ("false", "f", "no", "n", "0")


def column(name: str, **kwargs) -> Any:
    """``dataclasses.field`` that reads from / writes to column ``name``."""
    metadata = dict(kwargs.pop("metadata", None) or {})
    metadata[COLUMN_KEY] = name
    return dataclasses.field(metadata=metadata, **kwargs)


def column_name(f: dataclasses.Field) -> str:
    return f.metadata.get(COLUMN_KEY, f.name)


def record_fields(record_type) -> List[dataclasses.Field]:
    if not (isinstance(record_type, type) and dataclasses.is_dataclass(record_type)):
        raise BindingError(f"{record_type!r} is not a dataclass type")
    return [f for f in dataclasses.fields(record_type) if f.init]


def _parse_bool(value: str) -> bool:
    v = value.strip().lower()
    if v in _TRUE:
        return True
    if v in _FALSE:
        return False
    raise ValueError(f"not a boolean: {value!r}")


_CONVERTERS: Dict[Any, Callable[[str], Any]] = {
    str: str,
    int: parse_int,
    float: float,
    Decimal: parse_decimal,
    bool: _parse_bool,
}


def _converter(annotation) -> Callable[[str], Any]:
    # Optional[X]: empty cell -> None
    args = typing.get_args(annotation)
    if typing.get_origin(annotation) in (typing.Union, types.UnionType) and type(None) in args:
        inner = [a for a in args if a is not type(None)]
        convert = _converter(inner[0]) if len(inner) == 1 else str
        return lambda v: None if v == "" else convert(v)
    return _CONVERTERS.get(annotation, str)


class RecordReader:
    """Builds one ``record_type`` instance per data row of a headed table."""

    def __init__(self, reader: TabularReader, record_type):
        self.reader = reader
        self.record_type = record_type
        self.binding = self._build_binding()

    def _build_binding(self) -> Dict[str, str]:
        """column name -> field name"""
        names = self.reader.get_column_names()
        fields = record_fields(self.record_type)
        hints = typing.get_type_hints(self.record_type)
        binding: Dict[str, str] = {}
        self._converters: Dict[str, Callable[[str], Any]] = {}
        for f in fields:
            if f.name in names:
                binding[f.name] = f.name
            elif column_name(f) in names:
                binding[column_name(f)] = f.name
            else:
                log.debug("field %s.%s has no matching column",
                          self.record_type.__name__, f.name)
                continue
            self._converters[f.name] = _converter(hints.get(f.name, str))
        return binding

    def as_mapping(self, row_index: int) -> Dict[str, str]:
        """Untyped field -> raw value mapping for one row."""
        names = self.reader.get_column_names()
        values = self.reader.get_row_split(row_index)
        mapping: Dict[str, str] = {}
        for name, value in zip(names, values):
            field_name = self.binding.get(name)
            if field_name is not None:
                mapping[field_name] = value
        return mapping

    def record(self, row_index: int):
        mapping = self.as_mapping(row_index)
        try:
            kwargs = {k: self._converters[k](v) for k, v in mapping.items()}
            return self.record_type(**kwargs)
        except (ValueError, TypeError, CsvQueryError) as e:
            raise BindingError(
                f"row {row_index}: cannot build {self.record_type.__name__}: {e}") from e

    def records(self) -> List[Any]:
        start = self.reader.get_initial_row_index()
        return [self.record(i) for i in range(start, start + self.reader.get_row_count())]

    def __iter__(self):
        start = self.reader.get_initial_row_index()
        for i in range(start, start + self.reader.get_row_count()):
            yield self.record(i)


def read_records(path, record_type, delimiter: str = DEFAULT_DELIMITER,
                 encoding: str = DEFAULT_ENCODING) -> List[Any]:
    reader = TabularReader(path, delimiter=delimiter, header=True, encoding=encoding)
    return RecordReader(reader, record_type).records()
