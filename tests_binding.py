from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

import pytest

from csvquery import (BindingError, NoHeaderError, RecordReader, RecordWriter, TabularReader,
                      WriterError, column, read_records)


@dataclass
class Employee:
    name: str
    age: int
    salary: Decimal = column("Annual Salary")
    active: Optional[bool] = None


STAFF = "name,age,Annual Salary,active,ignored\nalice,30,1000.50,yes,x\nbob,25,900,,y\n"


def _reader(tmp_path, text=STAFF, **kwargs):
    p = tmp_path / "staff.csv"
    p.write_text(text)
    return TabularReader(str(p), **kwargs)


def test_binding_map(tmp_path):
    binder = RecordReader(_reader(tmp_path), Employee)
    assert binder.binding == {
        "name": "name", "age": "age", "Annual Salary": "salary", "active": "active"}


def test_intermediate_mapping(tmp_path):
    binder = RecordReader(_reader(tmp_path), Employee)
    assert binder.as_mapping(1) == {
        "name": "alice", "age": "30", "salary": "1000.50", "active": "yes"}


def test_records(tmp_path):
    records = RecordReader(_reader(tmp_path), Employee).records()
    assert records == [
        Employee("alice", 30, Decimal("1000.50"), True),
        Employee("bob", 25, Decimal("900"), None),
    ]
    assert list(RecordReader(_reader(tmp_path), Employee)) == records


def test_unconvertible_value_names_row(tmp_path):
    text = "name,age,Annual Salary\nalice,30,1\nbob,old,2\n"
    with pytest.raises(BindingError, match="row 2"):
        RecordReader(_reader(tmp_path, text), Employee).records()


def test_missing_required_column(tmp_path):
    text = "name,Annual Salary\nalice,1\n"
    with pytest.raises(BindingError):
        RecordReader(_reader(tmp_path, text), Employee).records()


def test_headerless_table_cannot_bind(tmp_path):
    with pytest.raises(NoHeaderError):
        RecordReader(_reader(tmp_path, header=False), Employee)


def test_non_dataclass_rejected(tmp_path):
    class Plain:
        name = ""
    with pytest.raises(BindingError):
        RecordReader(_reader(tmp_path), Plain)


def test_write_then_read(tmp_path):
    records = [
        Employee("alice", 30, Decimal("1000.50"), True),
        Employee("bob", 25, Decimal("900"), None),
    ]
    out = tmp_path / "out.csv"
    assert RecordWriter(Employee, out).write(records) == 2
    assert out.read_text() == (
        "name,age,Annual Salary,active\n"
        "alice,30,1000.50,True\n"
        "bob,25,900,\n")
    assert read_records(out, Employee) == records


def test_write_with_delimiter(tmp_path):
    out = tmp_path / "out.tsv"
    RecordWriter(Employee, out, delimiter="\t").write([Employee("c", 1, Decimal("2"))])
    assert out.read_text().splitlines()[1] == "c\t1\t2\t"
    assert read_records(out, Employee, delimiter="\t")[0].salary == Decimal("2")


def test_writer_errors(tmp_path):
    with pytest.raises(WriterError):
        RecordWriter(Employee, tmp_path / "missing" / "out.csv").write([])
    with pytest.raises(WriterError):
        RecordWriter(Employee, tmp_path / "out.csv").write([object()])
