from decimal import Decimal

import pytest

from csvquery import AggregationError, DataAggregator, DuplicateSegregator, NumericParseError


def test_aggregate_small_column():
    agg = DataAggregator(["3", "1", "2"])
    assert agg.min == 1
    assert agg.max == 3
    assert agg.sum == 6
    assert agg.count == 3
    assert agg.average == 2


def test_aggregate_is_exact():
    agg = DataAggregator(["0.1", "0.2"])
    assert agg.sum == Decimal("0.3")
    assert agg.average == Decimal("0.15")
    assert DataAggregator(["10", "3"]).average == Decimal("6.5")


def test_aggregate_beyond_default_precision():
    agg = DataAggregator(["12345678901234567890123456789", "1"])
    assert agg.sum == Decimal("12345678901234567890123456790")
    assert agg.average == Decimal("6172839450617283945061728395")


def test_non_terminating_average():
    with pytest.raises(AggregationError):
        DataAggregator(["1", "0", "0"])
    agg = DataAggregator(["1", "0", "0"], precision=5)
    assert agg.average == Decimal("0.33333")
    assert agg.sum == 1


def test_empty_input_rejected():
    with pytest.raises(AggregationError):
        DataAggregator([])


def test_sum_overflow_reported():
    with pytest.raises(AggregationError):
        DataAggregator(["9e999999", "9e999999"])


@pytest.mark.parametrize("bad", ["abc", "", " 1", "NaN", "Infinity", "1_000", "1,5"])
def test_unparsable_values_rejected(bad):
    with pytest.raises(NumericParseError) as exc:
        DataAggregator(["1", bad])
    assert exc.value.value == bad


def test_first_of_equal_extremes_wins():
    agg = DataAggregator(["1.0", "1", "2", "2.00"])
    assert str(agg.min) == "1.0"
    assert str(agg.max) == "2"


def test_negative_and_scientific_values():
    agg = DataAggregator(["-1.5", "2e1", ".5"])
    assert agg.min == Decimal("-1.5")
    assert agg.max == 20
    assert agg.sum == 19
    assert agg.as_dict()["count"] == 3


def test_aggregator_is_read_only():
    agg = DataAggregator(["1"])
    with pytest.raises(AttributeError):
        agg.sum = Decimal(5)


def test_segregate_frequencies():
    data = ["a", "b", "a", "c", "a", "b"]
    seg = DuplicateSegregator(data)
    assert seg.unique_data == ["c"]
    assert list(seg.duplicate_data) == ["a", "b"]
    assert seg.duplicate_count == 2
    assert seg.get_frequency("a") == 3
    assert seg.get_frequency("b") == 2
    assert seg.get_frequency("zz") == 0
    assert seg.unique_count + sum(seg.get_frequency(d) for d in seg.duplicate_data) == len(data)
    assert seg.duplicate_count == len(seg.duplicate_data)


def test_segregate_keeps_first_seen_order():
    seg = DuplicateSegregator(["x", "y", "z", "y", "w", "x"])
    assert seg.unique_data == ["z", "w"]
    assert list(seg.duplicate_data) == ["x", "y"]
    assert list(seg.frequencies) == ["x", "y", "z", "w"]


def test_segregate_empty_input():
    seg = DuplicateSegregator([])
    assert seg.unique_data == []
    assert seg.duplicate_count == 0
    assert len(seg.duplicate_data) == 0


def test_segregate_results_are_copies():
    seg = DuplicateSegregator(["a", "b", "b"])
    seg.unique_data.append("q")
    seg.frequencies["a"] = 10
    assert seg.unique_data == ["a"]
    assert seg.get_frequency("a") == 1
