from __future__ import annotations

import logging
import zipfile
from xml.etree import ElementTree as ET

from sheetstream.core.errors import StringsLoadError
from sheetstream.infrastructure.xlsx.ooxml import MEMBER_READ_ERRORS, SHARED_STRINGS_PATH, local_tag

logger = logging.getLogger(__name__)


def load_shared_strings(archive: zipfile.ZipFile) -> tuple[str, ...]:
    """Stream ``xl/sharedStrings.xml`` into an ordered, immutable pool.

    A workbook without the part is valid and yields an empty pool. Each
    ``<si>`` is dropped from the tree as soon as its text is taken, so memory
    stays bounded by the largest single item.
    """
    if SHARED_STRINGS_PATH not in archive.namelist():
        logger.debug("No %s in workbook; using empty shared-string pool", SHARED_STRINGS_PATH)
        return ()

    values: list[str] = []
    try:
        with archive.open(SHARED_STRINGS_PATH, "r") as stream:
            root: ET.Element | None = None
            for event, elem in ET.iterparse(stream, events=("start", "end")):
                if event == "start":
                    if root is None:
                        root = elem
                    continue
                if local_tag(elem.tag) != "si":
                    continue
                values.append(string_item_text(elem))
                elem.clear()
                if root is not None:
                    root.clear()
    except MEMBER_READ_ERRORS as exc:
        raise StringsLoadError(f"Error loading shared strings: {exc}") from exc

    logger.debug("Loaded %d shared strings", len(values))
    return tuple(values)


def string_item_text(item: ET.Element) -> str:
    """Plain text of an ``<si>``/``<is>`` item: its ``<t>``, or its runs' ``<t>`` joined."""
    parts: list[str] = []
    for child in item:
        tag = local_tag(child.tag)
        if tag == "t":
            return child.text or ""
        if tag == "r":
            for run_child in child:
                if local_tag(run_child.tag) == "t":
                    parts.append(run_child.text or "")
    return "".join(parts)
