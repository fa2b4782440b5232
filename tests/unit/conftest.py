from __future__ import annotations

import zipfile
from pathlib import Path
from typing import Callable
from xml.sax.saxutils import escape

import pytest

MAIN_NS = "http://schemas.openxmlformats.org/spreadsheetml/2006/main"
REL_NS = "http://schemas.openxmlformats.org/officeDocument/2006/relationships"
XML_DECL = '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>\n'


def _cell(cell_spec: tuple[str, ...]) -> str:
    ref, value, *rest = cell_spec
    cell_type = rest[0] if rest else ""
    ref_attr = f' r="{ref}"' if ref else ""
    if cell_type == "inlineStr":
        return f'<c{ref_attr} t="inlineStr"><is><t>{escape(value)}</t></is></c>'
    type_attr = f' t="{cell_type}"' if cell_type else ""
    return f"<c{ref_attr}{type_attr}><v>{escape(value)}</v></c>"


@pytest.fixture
def sheet_xml() -> Callable[[list[list[tuple[str, ...]]]], str]:
    def build(rows: list[list[tuple[str, ...]]]) -> str:
        body = []
        for idx, row in enumerate(rows, start=1):
            cells = "".join(_cell(cell_spec) for cell_spec in row)
            body.append(f'<row r="{idx}">{cells}</row>')
        return f'{XML_DECL}<worksheet xmlns="{MAIN_NS}"><sheetData>{"".join(body)}</sheetData></worksheet>'

    return build


@pytest.fixture
def shared_strings_xml() -> Callable[[list[str]], str]:
    def build(values: list[str]) -> str:
        items = "".join(f"<si><t>{escape(v)}</t></si>" for v in values)
        return f'{XML_DECL}<sst xmlns="{MAIN_NS}" count="{len(values)}" uniqueCount="{len(values)}">{items}</sst>'

    return build


@pytest.fixture
def workbook_xml() -> Callable[[list[tuple[str, str]]], str]:
    """Sheets as ``(name, sheetId)``; relationship ids are ``rId<sheetId>``."""

    def build(sheets: list[tuple[str, str]]) -> str:
        entries = "".join(
            f'<sheet name="{escape(name)}" sheetId="{sheet_id}" r:id="rId{sheet_id}"/>' for name, sheet_id in sheets
        )
        return f'{XML_DECL}<workbook xmlns="{MAIN_NS}" xmlns:r="{REL_NS}"><sheets>{entries}</sheets></workbook>'

    return build


@pytest.fixture
def write_xlsx(tmp_path: Path) -> Callable[..., Path]:
    def write(parts: dict[str, str], name: str = "book.xlsx") -> Path:
        path = tmp_path / name
        with zipfile.ZipFile(path, "w", compression=zipfile.ZIP_DEFLATED) as archive:
            for member, content in parts.items():
                archive.writestr(member, content)
        return path

    return write
