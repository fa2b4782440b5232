from pathlib import Path

import pytest

from sheetstream.core.errors import WriteError
from sheetstream.infrastructure.xlsx.csv_writer import RecordWriter


def test_fields_with_delimiter_quote_or_newline_are_quoted(tmp_path: Path) -> None:
    out = tmp_path / "quoted.csv"
    with RecordWriter(out, delimiter=";") as writer:
        writer.write_row(["plain", "a;b", 'say "hi"', "two\nlines", "a,b"])

    assert out.read_text(encoding="utf-8") == 'plain;"a;b";"say ""hi""";"two\nlines";a,b\n'


def test_tab_delimiter(tmp_path: Path) -> None:
    out = tmp_path / "tabbed.csv"
    with RecordWriter(out, delimiter="\t") as writer:
        writer.write_row(["x", "y;z"])

    assert out.read_text(encoding="utf-8") == "x\ty;z\n"


def test_unwritable_destination_raises_write_error(tmp_path: Path) -> None:
    with pytest.raises(WriteError, match="Error creating CSV"):
        RecordWriter(tmp_path / "missing-dir" / "out.csv").open()


def test_field_with_bare_carriage_return_is_quoted(tmp_path: Path) -> None:
    out = tmp_path / "cr.csv"
    with RecordWriter(out) as writer:
        writer.write_row(["a\rb", "c"])
        writer.write_row(["d", "e"])

    assert out.read_bytes() == b'"a\rb";"c"\nd;e\n'
