import pytest

from csvquery import MemoryBudgetError
from csvquery import memory
from csvquery.constants import GB, MB


def test_human():
    assert memory.human(512) == "512 B"
    assert memory.human(3 * MB) == "3.0 MB"
    assert memory.human(2 * GB) == "2.0 GB"


def test_sample_avg_row_bytes(tmp_path):
    p = tmp_path / "t.csv"
    p.write_bytes(b"ab\ncdef\n")
    assert memory.sample_avg_row_bytes(str(p)) == (4.0, 2)
    assert memory.sample_avg_row_bytes(str(p), n=1) == (3.0, 1)


def test_small_file_fits(tmp_path):
    p = tmp_path / "t.csv"
    p.write_text("a,b\n1,2\n")
    fits, why = memory.check_memory_budget(str(p))
    assert fits
    assert "budget" in why


def test_empty_file_fits(tmp_path):
    p = tmp_path / "t.csv"
    p.write_text("")
    assert memory.check_memory_budget(str(p)) == (True, "empty file")


def test_hard_cap(tmp_path):
    p = tmp_path / "t.csv"
    p.write_text("a,b\n1,2\n")
    fits, why = memory.check_memory_budget(str(p), hard_cap_bytes=4)
    assert not fits
    assert "hard cap" in why


def test_budget_exceeded(tmp_path, monkeypatch):
    p = tmp_path / "t.csv"
    p.write_text("a,b\n1,2\n" * 100)
    monkeypatch.setattr(memory, "total_ram_bytes", lambda: 1000)
    with pytest.raises(MemoryBudgetError):
        memory.ensure_fits(str(p))


def test_missing_file_is_left_to_reader(tmp_path):
    assert memory.ensure_fits(str(tmp_path / "nope.csv")).startswith("not checked")
