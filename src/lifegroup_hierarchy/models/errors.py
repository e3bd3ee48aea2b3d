"""Errors raised for malformed hierarchy input."""


class HierarchyValidationError(ValueError):
    """Malformed principal or record data; names the offending field."""

    def __init__(self, field: str, message: str):
        self.field = field
        self.message = message
        super().__init__(f"{field}: {message}")
