from __future__ import annotations

import logging
import posixpath
import re
import zipfile
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import PurePosixPath
from xml.etree import ElementTree as ET

from sheetstream.core.errors import NameMapLoadError
from sheetstream.infrastructure.xlsx.ooxml import (
    MEMBER_READ_ERRORS,
    WORKBOOK_PATH,
    WORKBOOK_RELS_PATH,
    WORKSHEET_PREFIX,
    WORKSHEET_SUFFIX,
    local_tag,
)

logger = logging.getLogger(__name__)

_WORKSHEET_PART_RE = re.compile(
    rf"^{re.escape(WORKSHEET_PREFIX)}(\d+){re.escape(WORKSHEET_SUFFIX)}$"
)


@dataclass(frozen=True, slots=True)
class WorksheetPart:
    member_name: str
    display_name: str


def load_sheet_names(archive: zipfile.ZipFile) -> dict[str, str]:
    """Map each ``sheetId`` declared in ``xl/workbook.xml`` to its display name."""
    if WORKBOOK_PATH not in archive.namelist():
        logger.debug("No %s in workbook; sheet names fall back to part names", WORKBOOK_PATH)
        return {}
    root = _read_xml(archive, WORKBOOK_PATH)

    sheet_map: dict[str, str] = {}
    for node in root.iter():
        if local_tag(node.tag) != "sheet":
            continue
        sheet_id = str(node.attrib.get("sheetId") or "").strip()
        name = str(node.attrib.get("name") or "")
        if sheet_id and name:
            sheet_map[sheet_id] = name
    return sheet_map


def convention_worksheet_parts(
    archive: zipfile.ZipFile,
    sheet_names: Mapping[str, str],
) -> list[WorksheetPart]:
    """Worksheet parts named ``xl/worksheets/sheet<N>.xml``, in archive listing order.

    A part whose number is missing from ``sheet_names`` is named after its
    file, e.g. ``sheet3``.
    """
    parts: list[WorksheetPart] = []
    for info in archive.infolist():
        match = _WORKSHEET_PART_RE.match(info.filename)
        if match is None:
            continue
        sheet_id = match.group(1)
        fallback = PurePosixPath(info.filename).stem
        parts.append(WorksheetPart(member_name=info.filename, display_name=sheet_names.get(sheet_id) or fallback))
    return parts


def relationship_worksheet_parts(archive: zipfile.ZipFile) -> list[WorksheetPart]:
    """Worksheet parts resolved through workbook relationships, in declared sheet order."""
    names = set(archive.namelist())
    if WORKBOOK_PATH not in names:
        return []
    workbook_root = _read_xml(archive, WORKBOOK_PATH)

    rel_map: dict[str, str] = {}
    if WORKBOOK_RELS_PATH in names:
        rels_root = _read_xml(archive, WORKBOOK_RELS_PATH)
        for rel in rels_root:
            if local_tag(rel.tag) != "Relationship":
                continue
            rel_id = str(rel.attrib.get("Id") or "").strip()
            target = str(rel.attrib.get("Target") or "").strip()
            if not (rel_id and target):
                continue
            # Targets are relative to xl/ unless they start at the package root.
            target = target.replace("\\", "/")
            if target.startswith("/"):
                rel_map[rel_id] = posixpath.normpath(target.lstrip("/"))
            else:
                rel_map[rel_id] = posixpath.normpath(posixpath.join("xl", target))

    parts: list[WorksheetPart] = []
    for node in workbook_root.iter():
        if local_tag(node.tag) != "sheet":
            continue
        rel_id = ""
        for key in node.attrib.keys():
            if key.endswith("}id") or key == "r:id":
                rel_id = str(node.attrib.get(key) or "").strip()
                break
        member = rel_map.get(rel_id, "")
        if not member:
            logger.warning("Sheet %r has no relationship target; skipping", node.attrib.get("name"))
            continue
        if member not in names:
            logger.warning("Sheet %r points at missing part %s; skipping", node.attrib.get("name"), member)
            continue
        display_name = str(node.attrib.get("name") or "") or PurePosixPath(member).stem
        parts.append(WorksheetPart(member_name=member, display_name=display_name))
    return parts


def _read_xml(archive: zipfile.ZipFile, member: str) -> ET.Element:
    try:
        return ET.fromstring(archive.read(member))
    except MEMBER_READ_ERRORS as exc:
        raise NameMapLoadError(f"Error loading sheet names from {member}: {exc}") from exc
