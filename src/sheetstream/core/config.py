from __future__ import annotations

import os
from dataclasses import dataclass

from sheetstream.core.errors import ConfigurationError

DEFAULT_DELIMITER = ";"
DEFAULT_PROGRESS_EVERY = 50000
DISCOVERY_MODES = ("convention", "relationships")


@dataclass(frozen=True)
class ConversionSettings:
    delimiter: str = DEFAULT_DELIMITER
    progress_every: int = DEFAULT_PROGRESS_EVERY
    discovery: str = "convention"
    encoding: str = "utf-8"


def load_settings(
    *,
    delimiter: str | None = None,
    progress_every: int | None = None,
    discovery: str | None = None,
) -> ConversionSettings:
    """Build settings from explicit values, falling back to SHEETSTREAM_* env vars."""
    if delimiter is None:
        delimiter = os.getenv("SHEETSTREAM_DELIMITER", DEFAULT_DELIMITER)
    if progress_every is None:
        raw = os.getenv("SHEETSTREAM_PROGRESS_EVERY")
        if raw:
            try:
                progress_every = int(raw)
            except ValueError as exc:
                raise ConfigurationError(f"SHEETSTREAM_PROGRESS_EVERY must be an integer, got {raw!r}") from exc
        else:
            progress_every = DEFAULT_PROGRESS_EVERY
    if discovery is None:
        discovery = os.getenv("SHEETSTREAM_DISCOVERY", "convention")

    settings = ConversionSettings(
        delimiter=delimiter,
        progress_every=progress_every,
        discovery=discovery.strip().lower(),
    )
    validate_settings(settings)
    return settings


def validate_settings(settings: ConversionSettings) -> None:
    if len(settings.delimiter) != 1:
        raise ConfigurationError(f"Delimiter must be a single character, got {settings.delimiter!r}")
    if settings.delimiter in {'"', "\r", "\n"}:
        raise ConfigurationError(f"Delimiter cannot be {settings.delimiter!r}")
    if settings.progress_every <= 0:
        raise ConfigurationError(f"Progress interval must be positive, got {settings.progress_every}")
    if settings.discovery not in DISCOVERY_MODES:
        raise ConfigurationError(
            f"Unknown sheet discovery mode {settings.discovery!r}; expected one of {', '.join(DISCOVERY_MODES)}"
        )
