from __future__ import annotations


class AdsPrepError(Exception):
    """Base class for structural errors raised by ads_prep."""


class ColumnNotFoundError(AdsPrepError, KeyError):
    """Raised when a label or type operation references an unknown column."""

    def __init__(self, column: str, available: list[str] | None = None) -> None:
        self.column = column
        self.available = list(available or [])
        super().__init__(column)

    def __str__(self) -> str:
        msg = f"Column not found: '{self.column}'"
        if self.available:
            msg += f" (available: {self.available})"
        return msg


class DuplicateNameError(AdsPrepError, ValueError):
    """Raised when a rename (or a file header) would produce duplicate column names."""


class ConfigError(AdsPrepError, ValueError):
    """Raised when a preparation config file violates the contract."""


class TypeCoercionWarning(UserWarning):
    """Values were turned into missing values while typing a column.

    Emitted at most once per column with the aggregate count. Never raised
    per cell.
    """

    def __init__(self, column: str, count: int, semantic_type: str) -> None:
        self.column = column
        self.count = count
        self.semantic_type = semantic_type
        super().__init__(f"{count} value(s) in column '{column}' could not be coerced to {semantic_type} and are now missing.")
