class SheetStreamError(Exception):
    """Base error for all user-facing conversion failures."""


class ConfigurationError(SheetStreamError):
    """Raised when conversion settings are invalid."""


class OpenError(SheetStreamError):
    """Raised when the workbook container cannot be opened."""


class DirectoryError(SheetStreamError):
    """Raised when the output directory cannot be created."""


class StringsLoadError(SheetStreamError):
    """Raised when the shared-strings part is malformed."""


class NameMapLoadError(SheetStreamError):
    """Raised when workbook metadata cannot be parsed."""


class SheetReadError(SheetStreamError):
    """Raised when a worksheet part is malformed or cannot be read."""

    def __init__(self, sheet_name: str, message: str) -> None:
        super().__init__(message)
        self.sheet_name = sheet_name


class WriteError(SheetStreamError):
    """Raised when a CSV destination cannot be created or written."""


class StatError(SheetStreamError):
    """Raised when a finished CSV file cannot be sized."""
