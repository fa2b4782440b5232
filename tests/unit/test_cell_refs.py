import pytest

from sheetstream.infrastructure.xlsx.cell_refs import column_index


@pytest.mark.parametrize(
    ("ref", "expected"),
    [
        ("A", 0),
        ("Z", 25),
        ("AA", 26),
        ("AB", 27),
        ("A1", 0),
        ("AB12", 27),
        ("AZ7", 51),
        ("BA1", 52),
        ("XFD1048576", 16383),
        ("c3", 2),
    ],
)
def test_column_index_decodes_bijective_base26(ref: str, expected: int) -> None:
    assert column_index(ref) == expected


@pytest.mark.parametrize("ref", ["", "12", "1A", "$A$1"])
def test_column_index_rejects_references_without_leading_letters(ref: str) -> None:
    with pytest.raises(ValueError):
        column_index(ref)
