"""
Exceptions raised by the sales reporting engine.

Only the data source boundary raises during normal use; reports themselves
never raise for malformed rows.
"""


class SalesReportingError(Exception):
    """Base exception for all sales reporting errors."""

    pass


class DataSourceError(SalesReportingError):
    """Raised when the order table cannot be read."""

    def __init__(self, message: str, path: str | None = None, original_error: Exception | None = None):
        self.path = path
        self.original_error = original_error

        if path:
            message = f"Error reading '{path}': {message}"

        if original_error:
            message = f"{message} (Original error: {original_error})"

        super().__init__(message)


class MissingColumnsError(DataSourceError):
    """Raised once at load when the order table lacks required columns."""

    def __init__(self, missing_columns: list[str], path: str | None = None):
        self.missing_columns = list(missing_columns)
        super().__init__(f"Required column(s) not found: {self.missing_columns}", path=path)


class UnknownReportError(SalesReportingError):
    """Raised when a report name is not in the catalogue."""

    def __init__(self, name: str, available: list[str]):
        self.name = name
        self.available = available
        super().__init__(f"Unknown report '{name}'. Available: {', '.join(available)}")
