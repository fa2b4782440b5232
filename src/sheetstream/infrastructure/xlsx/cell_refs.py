from __future__ import annotations


def column_index(cell_ref: str) -> int:
    """Decode the column letters of a cell address into a zero-based index.

    ``"A1" -> 0``, ``"Z9" -> 25``, ``"AA3" -> 26``. Only the leading letters
    count; the row digits are ignored. Raises ``ValueError`` when the address
    does not start with a letter.
    """
    total = 0
    letters = 0
    for ch in cell_ref.strip().upper():
        if "A" <= ch <= "Z":
            total = total * 26 + (ord(ch) - ord("A") + 1)
            letters += 1
        else:
            break
    if not letters:
        raise ValueError(f"Cell reference has no column letters: {cell_ref!r}")
    return total - 1
