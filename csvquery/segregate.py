"""Split a column's values into those seen once and those seen more than once."""
from typing import Dict, Iterable, KeysView, List


class DuplicateSegregator:
    __slots__ = ("_frequencies", "_unique", "_duplicates")

    def __init__(self, data: Iterable[str]):
        freq: Dict[str, int] = {}
        for value in data:
            freq[value] = freq.get(value, 0) + 1
        unique: List[str] = []
        duplicates: Dict[str, int] = {}
        for value, n in freq.items():
            if n == 1:
                unique.append(value)
            else:
                duplicates[value] = n
        self._frequencies = freq
        self._unique = unique
        self._duplicates = duplicates

    @property
    def unique_data(self) -> List[str]:
        """Values occurring exactly once, in first-seen order."""
        return list(self._unique)

    @property
    def unique_count(self) -> int:
        return len(self._unique)

    @property
    def duplicate_data(self) -> KeysView:
        """Duplicated values as an ordered, read-only set view."""
        return self._duplicates.keys()

    @property
    def duplicate_count(self) -> int:
        # distinct duplicated values, not occurrences
        return len(self._duplicates)

    @property
    def frequencies(self) -> Dict[str, int]:
        return dict(self._frequencies)

    def get_frequency(self, value: str) -> int:
        return self._frequencies.get(value, 0)

    def __repr__(self) -> str:
        return (f"DuplicateSegregator(unique={self.unique_count}, "
                f"duplicates={self.duplicate_count})")
