from __future__ import annotations

import zipfile
import zlib
from xml.etree import ElementTree as ET

SHARED_STRINGS_PATH = "xl/sharedStrings.xml"
WORKBOOK_PATH = "xl/workbook.xml"
WORKBOOK_RELS_PATH = "xl/_rels/workbook.xml.rels"
WORKSHEET_PREFIX = "xl/worksheets/sheet"
WORKSHEET_SUFFIX = ".xml"

# zipfile raises NotImplementedError for unsupported compression methods and
# RuntimeError for encrypted members.
MEMBER_READ_ERRORS = (
    ET.ParseError,
    zipfile.BadZipFile,
    zlib.error,
    EOFError,
    OSError,
    NotImplementedError,
    RuntimeError,
)


def local_tag(tag: str) -> str:
    if "}" in tag:
        return tag.split("}", 1)[1]
    return tag
