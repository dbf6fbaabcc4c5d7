"""Exact numeric summary of a column: sum, min, max, average and count."""
import decimal
from decimal import Decimal
from typing import Iterable, Optional

from .errors import AggregationError
from .utils import parse_decimal


class DataAggregator:
    """Built once from numeric strings; read-only afterwards.

    The average is an exact decimal quotient. A quotient that does not
    terminate (e.g. 10 / 3) raises AggregationError unless ``precision``
    is given, in which case it is rounded half-even to that many
    significant digits.
    """
    __slots__ = ("_sum", "_average", "_min", "_max", "_count")

    def __init__(self, data: Iterable[str], precision: Optional[int] = None):
        values = [parse_decimal(v) for v in data]
        if not values:
            raise AggregationError("cannot aggregate an empty sequence")
        with decimal.localcontext() as ctx:
            # additions never round
            ctx.prec = decimal.MAX_PREC
            ctx.traps[decimal.Inexact] = True
            lo = hi = values[0]
            total = Decimal(0)
            try:
                for x in values:
                    if x < lo: lo = x
                    if x > hi: hi = x
                    total += x
            except decimal.DecimalException as e:
                raise AggregationError(f"cannot sum {len(values)} values: {e!r}") from e
        self._sum = total
        self._min = lo
        self._max = hi
        self._count = len(values)
        self._average = _divide(total, self._count, precision)

    @property
    def sum(self) -> Decimal:
        return self._sum

    @property
    def average(self) -> Decimal:
        return self._average

    @property
    def min(self) -> Decimal:
        return self._min

    @property
    def max(self) -> Decimal:
        return self._max

    @property
    def count(self) -> int:
        return self._count

    def as_dict(self) -> dict:
        return {
            "count": self._count,
            "sum": self._sum,
            "min": self._min,
            "max": self._max,
            "average": self._average,
        }

    def __repr__(self) -> str:
        return (f"DataAggregator(count={self._count}, sum={self._sum}, min={self._min}, "
                f"max={self._max}, average={self._average})")


def _divide(total: Decimal, count: int, precision: Optional[int]) -> Decimal:
    with decimal.localcontext() as ctx:
        if precision is not None:
            ctx.prec = precision
            ctx.rounding = decimal.ROUND_HALF_EVEN
            return total / Decimal(count)
        # a terminating quotient needs at most digits(total) + max power of 2/5 in count
        ctx.prec = len(total.as_tuple().digits) + count.bit_length() + 2
        ctx.traps[decimal.Inexact] = True
        try:
            return total / Decimal(count)
        except decimal.Inexact as e:
            raise AggregationError(
                f"average {total} / {count} has no exact decimal representation; "
                "pass a precision to round it") from e
