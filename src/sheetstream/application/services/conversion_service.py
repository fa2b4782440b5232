from __future__ import annotations

import logging
import zipfile
from pathlib import Path

from sheetstream.core.config import ConversionSettings, validate_settings
from sheetstream.core.errors import DirectoryError, OpenError, SheetStreamError, StatError
from sheetstream.core.files import ensure_directory, safe_filename
from sheetstream.core.time import elapsed_ms, monotonic_start
from sheetstream.domain.models.conversion import ConversionReport, SheetConversionResult
from sheetstream.infrastructure.xlsx.csv_writer import RecordWriter
from sheetstream.infrastructure.xlsx.sheet_reader import ProgressCallback, convert_sheet
from sheetstream.infrastructure.xlsx.shared_strings import load_shared_strings
from sheetstream.infrastructure.xlsx.workbook import (
    WorksheetPart,
    convention_worksheet_parts,
    load_sheet_names,
    relationship_worksheet_parts,
)

logger = logging.getLogger(__name__)


class ConversionService:
    """Convert every worksheet of an XLSX container into its own CSV file.

    Sheets run one at a time in discovery order. The first failure stops the
    run; results for sheets finished before it stay in the report.
    """

    def __init__(self, settings: ConversionSettings | None = None) -> None:
        self.settings = settings or ConversionSettings()
        validate_settings(self.settings)

    def convert(
        self,
        input_path: Path,
        output_dir: Path,
        *,
        progress_callback: ProgressCallback | None = None,
    ) -> ConversionReport:
        started = monotonic_start()
        report = ConversionReport()
        try:
            self._convert_into(report, input_path, output_dir, progress_callback)
        except SheetStreamError as exc:
            logger.error(str(exc))
            report.fail(str(exc))
        report.total_time_ms = elapsed_ms(started)
        if report.success:
            self._log_throughput(report, input_path)
        return report

    def _convert_into(
        self,
        report: ConversionReport,
        input_path: Path,
        output_dir: Path,
        progress_callback: ProgressCallback | None,
    ) -> None:
        if not input_path.is_file():
            raise OpenError(f"Error opening Excel ZIP: file not found: {input_path}")
        try:
            archive = zipfile.ZipFile(input_path, "r")
        except (zipfile.BadZipFile, OSError) as exc:
            raise OpenError(f"Error opening Excel ZIP: {exc}") from exc

        with archive:
            try:
                ensure_directory(output_dir)
            except OSError as exc:
                raise DirectoryError(f"Error creating output directory: {exc}") from exc

            shared_strings = load_shared_strings(archive)
            parts = self._discover_parts(archive)
            logger.info(
                "Converting %d sheet(s) from %s (%d shared strings)",
                len(parts),
                input_path,
                len(shared_strings),
            )
            for part in parts:
                result = self._convert_part(
                    archive,
                    part,
                    shared_strings=shared_strings,
                    output_dir=output_dir,
                    progress_callback=progress_callback,
                )
                report.add_sheet(result)

    def _discover_parts(self, archive: zipfile.ZipFile) -> list[WorksheetPart]:
        if self.settings.discovery == "relationships":
            return relationship_worksheet_parts(archive)
        sheet_names = load_sheet_names(archive)
        return convention_worksheet_parts(archive, sheet_names)

    def _convert_part(
        self,
        archive: zipfile.ZipFile,
        part: WorksheetPart,
        *,
        shared_strings: tuple[str, ...],
        output_dir: Path,
        progress_callback: ProgressCallback | None,
    ) -> SheetConversionResult:
        sheet_started = monotonic_start()
        csv_path = output_dir / f"{safe_filename(part.display_name)}.csv"

        with RecordWriter(csv_path, delimiter=self.settings.delimiter, encoding=self.settings.encoding) as writer:
            rows = convert_sheet(
                archive,
                part.member_name,
                sheet_name=part.display_name,
                shared_strings=shared_strings,
                writer=writer,
                progress_every=self.settings.progress_every,
                progress_callback=progress_callback,
            )

        try:
            size_bytes = csv_path.stat().st_size
        except OSError as exc:
            raise StatError(f"Error getting CSV file info: {exc}") from exc

        result = SheetConversionResult(
            name=part.display_name,
            path=str(csv_path),
            rows=rows,
            size_bytes=size_bytes,
            duration_ms=elapsed_ms(sheet_started),
        )
        logger.info("Sheet %s: %d rows -> %s", result.name, result.rows, result.path)
        return result

    @staticmethod
    def _log_throughput(report: ConversionReport, input_path: Path) -> None:
        seconds = report.total_time_ms / 1000
        if seconds <= 0:
            logger.info("Converted %d sheet(s), %d rows", len(report.sheets), report.total_rows)
            return
        input_mb = input_path.stat().st_size / 1024 / 1024
        logger.info(
            "Converted %d sheet(s), %d rows in %d ms (%d rows/s, %.2f MB/s)",
            len(report.sheets),
            report.total_rows,
            report.total_time_ms,
            round(report.total_rows / seconds),
            input_mb / seconds,
        )
