from __future__ import annotations

import logging
import zipfile
from collections.abc import Callable, Iterator, Sequence
from typing import IO
from xml.etree import ElementTree as ET

from sheetstream.core.errors import SheetReadError
from sheetstream.infrastructure.xlsx.cell_refs import column_index
from sheetstream.infrastructure.xlsx.csv_writer import RecordWriter
from sheetstream.infrastructure.xlsx.ooxml import MEMBER_READ_ERRORS, local_tag
from sheetstream.infrastructure.xlsx.shared_strings import string_item_text

logger = logging.getLogger(__name__)

SHEET_NAME_COLUMN = "sheet_name"

ProgressCallback = Callable[[str, int], None]


def iter_sheet_rows(
    stream: IO[bytes],
    *,
    sheet_name: str,
    shared_strings: Sequence[str],
) -> Iterator[list[str]]:
    """Yield one fixed-width row per ``<row>`` element, in document order.

    The first row fixes the width at its cell count; every yielded row has
    ``width + 1`` fields, the last one being ``sheet_name`` on the header and
    the sheet's display name afterwards. Cells at or past ``width`` are
    dropped and missing cells stay empty. Only the row being assembled is
    kept in memory.
    """
    width: int | None = None
    sheet_data: ET.Element | None = None

    for event, elem in ET.iterparse(stream, events=("start", "end")):
        tag = local_tag(elem.tag)
        if event == "start":
            if tag == "sheetData":
                sheet_data = elem
            continue
        if tag != "row":
            continue

        cells = [child for child in elem if local_tag(child.tag) == "c"]
        if width is None:
            width = len(cells)
            row = [""] * width + [SHEET_NAME_COLUMN]
        else:
            row = [""] * width + [sheet_name]

        position = -1
        for cell in cells:
            ref = cell.attrib.get("r")
            if ref:
                try:
                    position = column_index(ref)
                except ValueError:
                    logger.debug("Dropping cell with malformed reference %r in %s", ref, sheet_name)
                    continue
            else:
                position += 1
            if 0 <= position < width:
                row[position] = cell_value(cell, shared_strings)

        elem.clear()
        if sheet_data is not None:
            sheet_data.clear()
        yield row


def cell_value(cell: ET.Element, shared_strings: Sequence[str]) -> str:
    cell_type = (cell.attrib.get("t") or "").strip()
    if cell_type == "inlineStr":
        for child in cell:
            if local_tag(child.tag) == "is":
                return string_item_text(child)
        return ""

    value_text = ""
    for child in cell:
        if local_tag(child.tag) == "v":
            value_text = child.text or ""
            break
    if cell_type == "s":
        return resolve_shared_string(value_text, shared_strings)
    return value_text


def resolve_shared_string(value_text: str, shared_strings: Sequence[str]) -> str:
    # Unresolvable references keep their raw text.
    try:
        idx = int(value_text.strip())
    except ValueError:
        return value_text
    if 0 <= idx < len(shared_strings):
        return shared_strings[idx]
    logger.debug("Shared string index %d out of range (pool size %d)", idx, len(shared_strings))
    return value_text


def convert_sheet(
    archive: zipfile.ZipFile,
    member_name: str,
    *,
    sheet_name: str,
    shared_strings: Sequence[str],
    writer: RecordWriter,
    progress_every: int,
    progress_callback: ProgressCallback | None = None,
) -> int:
    """Stream one worksheet part into ``writer`` and return the number of rows written."""
    row_count = 0
    try:
        with archive.open(member_name, "r") as stream:
            for row in iter_sheet_rows(stream, sheet_name=sheet_name, shared_strings=shared_strings):
                writer.write_row(row)
                row_count += 1
                if progress_callback is not None and row_count % progress_every == 0:
                    progress_callback(sheet_name, row_count)
    except MEMBER_READ_ERRORS as exc:
        raise SheetReadError(sheet_name, f"Error processing sheet {sheet_name}: {exc}") from exc
    return row_count
