from decimal import Decimal

import pytest

from csvquery import (ColumnNotFoundError, NoHeaderError, NumericParseError, ReaderError,
                      RowIndexError, TabularReader)
from make_csv import write_table

PEOPLE = "name,age\nalice,30\nbob,25\n"


def _load(tmp_path, text, **kwargs):
    p = tmp_path / "table.csv"
    p.write_text(text)
    return TabularReader(str(p), **kwargs)


def test_people_scenario(tmp_path):
    r = _load(tmp_path, PEOPLE)
    assert r.get_column_names() == ["name", "age"]
    assert r.get_column_index("age") == 1
    assert r.get_column_as_integers(1) == [30, 25]
    assert r.get_column_as_integers("age") == [30, 25]
    assert r.get_sorted_by(1, True) == ["bob,25", "alice,30"]
    assert r.get_sorted_by("name") == ["alice,30", "bob,25"]


def test_row_access_and_counts(tmp_path):
    r = _load(tmp_path, PEOPLE)
    assert r.get_rows() == ["alice,30", "bob,25"]
    assert r.get_rows(with_header=True) == ["name,age", "alice,30", "bob,25"]
    assert len(r.get_rows(True)) == len(r.get_rows(False)) + 1
    assert r.get_row_count() == len(r.get_rows()) == 2
    assert r.get_initial_row_index() == 1
    assert r.get_row(0) == "name,age"
    assert r.get_row_split(2) == ["bob", "25"]
    assert r.get_rows_at([2, 1, 2]) == ["bob,25", "alice,30", "bob,25"]
    assert r.get_row_range(1, 2) == ["alice,30", "bob,25"]
    assert r.get_row_range(2, 1) == []
    assert r.header_available and r.delimiter == ","


def test_headerless_counts(tmp_path):
    r = _load(tmp_path, PEOPLE, header=False)
    assert r.get_initial_row_index() == 0
    assert r.get_row_count() == 3
    assert r.get_rows() == r.get_rows(with_header=True)
    assert r.get_column(0) == ["name", "alice", "bob"]


@pytest.mark.parametrize("index", [3, -1, 100])
def test_row_index_out_of_bounds(tmp_path, index):
    r = _load(tmp_path, PEOPLE)
    with pytest.raises(RowIndexError) as exc:
        r.get_row(index)
    assert isinstance(exc.value, IndexError)
    with pytest.raises(IndexError):
        r.get_rows_at([1, index])
    with pytest.raises(IndexError):
        r.get_column_count(index)


def test_row_range_validates_each_index(tmp_path):
    r = _load(tmp_path, PEOPLE)
    with pytest.raises(RowIndexError):
        r.get_row_range(1, 3)


def test_column_with_header_round_trip(tmp_path):
    r = _load(tmp_path, PEOPLE)
    for i, name in enumerate(r.get_column_names()):
        assert r.get_column(i, with_header=True)[0] == name
    assert r.get_column("age") == ["30", "25"]
    assert r.get_column_name(0) == "name"
    assert r.get_column_name(2) is None


def test_ragged_scenario(tmp_path):
    r = _load(tmp_path, "a,b\nc,d,e\nf,g\n", header=False)
    assert not r.is_consistent()
    assert r.get_rows_having_columns(2) == ["a,b", "f,g"]
    assert r.get_rows_not_having_columns(2) == ["c,d,e"]
    assert r.get_rows_having_cols_lesser_than(3) == ["a,b", "f,g"]
    assert r.get_rows_having_cols_more_than(2) == ["c,d,e"]
    assert r.get_row_numbers_not_having_columns(2) == [1]
    assert r.get_max_num_of_columns() == 3
    assert r.get_min_num_of_columns() == 2
    # short rows are padded, never an error
    assert r.get_column(2) == ["", "e", ""]
    assert r.get_column(7) == ["", "", ""]


def test_column_count_predicates_skip_header(tmp_path):
    r = _load(tmp_path, "h1,h2,h3\n1,2\n3,4,5\n")
    assert r.get_rows_having_columns(3) == ["3,4,5"]
    assert r.get_rows_having_cols_lesser_than(3) == ["1,2"]


def test_consistent_table(tmp_path):
    r = _load(tmp_path, PEOPLE)
    assert r.is_consistent()
    assert r.get_max_num_of_columns() == r.get_min_num_of_columns() == 2


def test_empty_line_counts_zero_columns(tmp_path):
    r = _load(tmp_path, "a,b\n\nc,d\n", header=False)
    assert r.get_min_num_of_columns() == 0
    assert r.get_rows_having_columns(0) == [""]
    assert not r.is_consistent()


def test_trailing_empty_fields_are_not_counted(tmp_path):
    r = _load(tmp_path, "a,b,\nc,d\n,,\n", header=False)
    assert [r.get_column_count(i) for i in range(3)] == [2, 2, 0]
    assert r.get_row_split(0) == ["a", "b"]
    assert r.get_row_split(2) == []
    assert r.is_consistent() is False
    assert r.get_rows_having_columns(2) == ["a,b,", "c,d"]
    assert r.get_rows_having_cols_lesser_than(1) == [",,"]
    assert r.get_max_num_of_columns() == 2
    assert r.get_min_num_of_columns() == 0
    # padding keeps column values the same
    assert r.get_column(2) == ["", "", ""]
    assert r.get_value(0, 2) is None


def test_inner_empty_fields_are_counted(tmp_path):
    r = _load(tmp_path, ",a,,b\n", header=False)
    assert r.get_row_split(0) == ["", "a", "", "b"]
    assert r.get_column_count(0) == 4


def test_headerless_rejects_names(tmp_path):
    r = _load(tmp_path, PEOPLE, header=False)
    with pytest.raises(NoHeaderError):
        r.get_column_names()
    with pytest.raises(NoHeaderError):
        r.get_column("age")
    with pytest.raises(NoHeaderError):
        r.get_column_index("age")
    with pytest.raises(NoHeaderError):
        r.get_sorted_by("age")


def test_unknown_column_name(tmp_path):
    r = _load(tmp_path, PEOPLE)
    assert r.get_column_index("height") == -1
    assert r.find_column_index("height") is None
    with pytest.raises(ColumnNotFoundError) as exc:
        r.get_column("height")
    assert isinstance(exc.value, KeyError)
    assert "height" in str(exc.value)
    with pytest.raises(ColumnNotFoundError):
        r.get_rows_matching("height", ".*")
    with pytest.raises(ColumnNotFoundError):
        r.get_data_aggregator("height")
    with pytest.raises(ColumnNotFoundError):
        r.get_duplicate_segregator("height")


CITIES = "name,city\nann,Paris\nben,Rome\ncid,Paris\ndan,Parisian\n"


def test_regex_filter_is_full_match(tmp_path):
    r = _load(tmp_path, CITIES)
    assert r.get_row_numbers(1, "Paris") == [1, 3]
    assert r.get_row_numbers("city", "Par") == []
    assert r.get_row_numbers("city", r"Paris\w*") == [1, 3, 4]
    assert r.get_rows_matching(1, "Rome") == ["ben,Rome"]
    assert r.get_rows_matching("city", "Paris", with_header=True) == [
        "name,city", "ann,Paris", "cid,Paris"]


def test_regex_filter_out_of_range_column_matches_nothing(tmp_path):
    r = _load(tmp_path, CITIES)
    assert r.get_row_numbers(5, ".*") == []
    assert r.get_row_numbers(-1, ".*") == []
    assert r.get_rows_matching(5, ".*", with_header=True) == ["name,city"]


def test_headerless_filter_never_prepends_header(tmp_path):
    r = _load(tmp_path, "x,1\ny,2\nx,3\n", header=False)
    assert r.get_rows_matching(0, "x", with_header=True) == ["x,3"]
    assert r.get_rows_matching(0, "z", with_header=True) == []


def test_regex_filter_never_reports_position_zero(tmp_path):
    r = _load(tmp_path, "x,1\ny,2\nx,3\n", header=False)
    assert r.get_row_numbers(0, "x") == [2]


def test_column_matching(tmp_path):
    r = _load(tmp_path, CITIES)
    assert r.get_column_matching("city", "P.*") == ["Paris", "Paris", "Parisian"]
    assert r.get_column_matching(1, "Rome", with_header=True) == ["city", "Rome"]


def test_numeric_columns(tmp_path):
    r = _load(tmp_path, "v\n1\n2.50\n-3e2\n")
    assert r.get_column_as_decimals("v") == [Decimal("1"), Decimal("2.50"), Decimal("-300")]
    with pytest.raises(NumericParseError) as exc:
        r.get_column_as_integers(0)
    assert exc.value.value == "2.50"
    assert exc.value.row == 2
    assert exc.value.column == 0


def test_numeric_column_names_offending_value(tmp_path):
    r = _load(tmp_path, "v\n1\nabc\n")
    with pytest.raises(NumericParseError, match="abc"):
        r.get_column_as_decimals("v")
    with pytest.raises(ValueError):
        r.get_column_as_integers("v")


def test_string_sort_is_stable(tmp_path):
    r = _load(tmp_path, "k,v\nb,1\na,2\nb,3\na,4\n")
    assert r.get_sorted_by(0) == ["a,2", "a,4", "b,1", "b,3"]


def test_string_and_numeric_ordering_differ(tmp_path):
    r = _load(tmp_path, "n\n10\n9\n100\n")
    assert r.get_sorted_by(0) == ["10", "100", "9"]
    assert r.get_sorted_by(0, numeric=True) == ["9", "10", "100"]


def test_numeric_sort_buckets_equal_decimals(tmp_path):
    r = _load(tmp_path, "n,id\n2,a\n1.0,b\n1,c\n")
    assert r.get_sorted_by("n", numeric=True) == ["1.0,b", "1,c", "2,a"]


def test_numeric_sort_rejects_text(tmp_path):
    r = _load(tmp_path, "n\n2\nx\n")
    with pytest.raises(NumericParseError) as exc:
        r.get_sorted_by(0, numeric=True)
    assert exc.value.row == 2


def test_numeric_sort_is_stable_permutation(tmp_path):
    path = write_table(tmp_path / "big.csv", 300, 2, 1, seed=7)
    r = TabularReader(str(path))
    data = r.get_rows()
    result = r.get_sorted_by("n0", numeric=True)
    assert sorted(result) == sorted(data)
    keys = [Decimal(row.split(",")[0]) for row in result]
    assert keys == sorted(keys)
    for key in set(keys):
        original = [row for row in data if Decimal(row.split(",")[0]) == key]
        assert [row for row in result if Decimal(row.split(",")[0]) == key] == original


def test_summaries_from_reader(tmp_path):
    r = _load(tmp_path, "name,score\na,3\nb,1\nc,2\n")
    agg = r.get_data_aggregator("score")
    assert (agg.min, agg.max, agg.sum, agg.count, agg.average) == (1, 3, 6, 3, 2)
    seg = r.get_duplicate_segregator(1)
    assert seg.unique_data == ["3", "1", "2"]


def test_duplicate_scenario(tmp_path):
    r = _load(tmp_path, "a,1\nb,1\na,2\n", header=False)
    seg = r.get_duplicate_segregator(0)
    assert seg.duplicate_data == {"a"}
    assert seg.unique_data == ["b"]


def test_values_and_sub_matrix(tmp_path):
    r = _load(tmp_path, "a,b,c\n1,2,3\n4,5\n")
    assert r.get_value(1, 0) == "1"
    assert r.get_value(2, 2) is None
    assert r.get_sub_matrix(1, 2, 1, 2) == ["2,3", "5,"]
    with pytest.raises(RowIndexError):
        r.get_value(3, 0)


def test_other_delimiters(tmp_path):
    r = _load(tmp_path, "a|b\n1|2\n", delimiter="|")
    assert r.get_column("b") == ["2"]
    r = _load(tmp_path, "a\tb\n1\t2\n", delimiter="\t")
    assert r.get_row_split(1) == ["1", "2"]


def test_crlf_lines(tmp_path):
    p = tmp_path / "crlf.csv"
    p.write_bytes(b"a,b\r\n1,2\r\n")
    r = TabularReader(str(p))
    assert r.get_rows() == ["1,2"]
    assert r.get_column_names() == ["a", "b"]


def test_empty_file(tmp_path):
    r = _load(tmp_path, "")
    assert r.get_row_count() == 0
    assert r.get_rows() == []
    assert r.get_column_names() == []
    assert r.get_max_num_of_columns() == 0
    assert not r.is_consistent()


def test_results_are_fresh_copies(tmp_path):
    r = _load(tmp_path, PEOPLE)
    rows = r.get_rows()
    rows.clear()
    names = r.get_column_names()
    names.append("extra")
    assert r.get_row_count() == 2
    assert r.get_column_names() == ["name", "age"]


def test_missing_file_raises_reader_error(tmp_path):
    with pytest.raises(ReaderError) as exc:
        TabularReader(str(tmp_path / "nope.csv"))
    assert isinstance(exc.value.cause, OSError)


def test_undecodable_file_raises_reader_error(tmp_path):
    p = tmp_path / "bad.csv"
    p.write_bytes(b"a,b\n\xff\xfe,1\n")
    with pytest.raises(ReaderError):
        TabularReader(str(p))
    assert TabularReader(str(p), encoding="latin-1").get_row_count() == 1


def test_empty_delimiter_rejected(tmp_path):
    with pytest.raises(ValueError):
        _load(tmp_path, PEOPLE, delimiter="")
