"""Web Log Analytics - Errors and warnings"""

from typing import Optional


class MalformedRecordError(ValueError):
    """A row that does not parse into five well-typed fields"""

    def __init__(self, reason: str, line_number: Optional[int] = None, row=None):
        self.reason = reason
        self.line_number = line_number
        self.row = row
        where = f"line {line_number}: " if line_number is not None else ""
        super().__init__(f"{where}{reason}")


class InvalidArgumentError(ValueError):
    """Rejected analysis parameter, raised before any computation"""


class PartitionModeError(InvalidArgumentError):
    """Strict partition mode refused a fully dynamic build"""


class EmptyInputWarning(UserWarning):
    """No well-formed records to analyze"""
