from __future__ import annotations

from dataclasses import dataclass

from rich.console import Console

from sheetstream.core.config import ConversionSettings


@dataclass(slots=True)
class CLIContext:
    settings: ConversionSettings
    console: Console
