import os, re, subprocess, sys, tempfile

import pytest

from csvquery.cli import main, parse_column

HERE = os.path.dirname(os.path.abspath(__file__))
PEOPLE = "name,age\nalice,30\nbob,25\ncarol,30\n"


def _write(tmp_path, text, name="t.csv"):
    p = tmp_path / name
    p.write_text(text)
    return str(p)


def test_module_prints_column_blocks():
    csv = "a,b\n1,2\n,3\n4,\n"
    with tempfile.NamedTemporaryFile("w", delete=False, suffix=".csv") as f:
        f.write(csv); path = f.name
    try:
        out = subprocess.check_output([sys.executable, "-m", "csvquery", "stat", path], text=True, cwd=HERE)
        # numbered column headers in block format
        assert re.search(r'1\. "a"', out)
        assert re.search(r'2\. "b"', out)
        assert re.search(r'Sum:\s*5', out)
        assert re.search(r'Row count:\s*3', out)
        # "4," drops its trailing empty field
        assert "Consistent: no" in out
    finally:
        os.remove(path)


def test_stat_text_and_number(tmp_path, capsys):
    assert main(["stat", _write(tmp_path, PEOPLE)]) == 0
    out = capsys.readouterr().out
    assert re.search(r'Type of data:\s*Text', out)
    assert re.search(r'Type of data:\s*Number', out)
    assert re.search(r'Mean:\s*28\.3', out)
    assert re.search(r'Duplicated values:\s*1', out)


def test_sort_numeric(tmp_path, capsys):
    assert main(["sort", _write(tmp_path, PEOPLE), "-c", "age", "--numeric"]) == 0
    assert capsys.readouterr().out.splitlines() == ["bob,25", "alice,30", "carol,30"]


def test_rows_filter(tmp_path, capsys):
    assert main(["rows", _write(tmp_path, PEOPLE), "-c", "1", "-r", "30", "--with-header"]) == 0
    assert capsys.readouterr().out.splitlines() == ["name,age", "alice,30", "carol,30"]


def test_rows_requires_column_and_regex(tmp_path):
    with pytest.raises(SystemExit) as exc:
        main(["rows", _write(tmp_path, PEOPLE), "-r", "30"])
    assert exc.value.code == 2


def test_column_and_dupes(tmp_path, capsys):
    path = _write(tmp_path, PEOPLE)
    assert main(["column", path, "-c", "age"]) == 0
    assert capsys.readouterr().out.splitlines() == ["30", "25", "30"]
    assert main(["dupes", path, "-c", "age"]) == 0
    out = capsys.readouterr().out
    assert "Duplicated values (1):" in out
    assert "  30\t2" in out
    assert "Unique values (1):" in out


def test_check_reports_ragged_rows(tmp_path, capsys):
    path = _write(tmp_path, "a|b\n1|2\n3\n4|5|6\n")
    assert main(["check", path, "-d", "|"]) == 0
    out = capsys.readouterr().out
    assert "Consistent: no" in out
    assert "Rows not having 2 columns: 2" in out
    assert "  2: 3" in out


def test_tab_delimiter_escape(tmp_path, capsys):
    path = _write(tmp_path, "x\ty\n1\t2\n")
    assert main(["column", path, "-d", "\\t", "-c", "y"]) == 0
    assert capsys.readouterr().out.splitlines() == ["2"]


def test_errors_exit_1(tmp_path, capsys):
    path = _write(tmp_path, PEOPLE)
    assert main(["column", path, "-c", "height"]) == 1
    assert "no column named 'height'" in capsys.readouterr().err
    assert main(["column", path, "--no-header", "-c", "age"]) == 1
    assert main(["sort", path, "-c", "name", "-n"]) == 1
    assert main(["rows", path, "-c", "0", "-r", "("]) == 1
    assert main(["stat", str(tmp_path / "missing.csv")]) == 1


def test_parse_column():
    assert parse_column("3") == 3
    assert parse_column("-1") == -1
    assert parse_column("age") == "age"


def test_non_ascii_delimiter(tmp_path, capsys):
    path = _write(tmp_path, "x§y\n1§2\n")
    assert main(["column", path, "-d", "§", "-c", "y"]) == 0
    assert capsys.readouterr().out.splitlines() == ["2"]
