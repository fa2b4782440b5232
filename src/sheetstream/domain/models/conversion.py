from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(slots=True)
class SheetConversionResult:
    name: str
    path: str
    rows: int
    size_bytes: int
    duration_ms: int

    @property
    def size_kb(self) -> int:
        return self.size_bytes // 1024

    def to_dict(self) -> dict[str, object]:
        return {
            "name": self.name,
            "path": self.path,
            "rows": self.rows,
            "size_kb": self.size_kb,
            "duration_ms": self.duration_ms,
        }


@dataclass(slots=True)
class ConversionReport:
    success: bool = True
    sheets: list[SheetConversionResult] = field(default_factory=list)
    total_rows: int = 0
    total_time_ms: int = 0
    error: str | None = None

    def add_sheet(self, result: SheetConversionResult) -> None:
        self.sheets.append(result)
        self.total_rows += result.rows

    def fail(self, message: str) -> None:
        self.success = False
        self.error = message

    def to_dict(self) -> dict[str, object]:
        payload: dict[str, object] = {
            "success": self.success,
            "sheets": [sheet.to_dict() for sheet in self.sheets],
            "total_rows": self.total_rows,
            "total_time_ms": self.total_time_ms,
        }
        if self.error:
            payload["error"] = self.error
        return payload
