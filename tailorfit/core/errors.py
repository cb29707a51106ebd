from __future__ import annotations


class InsufficientInputError(ValueError):
    """Raised when requirement or document text is missing or blank."""

    def __init__(self, field: str):
        super().__init__(f"{field} must be a non-empty string")
        self.field = field


def require_text(value: str | None, field: str) -> str:
    if value is None or not str(value).strip():
        raise InsufficientInputError(field)
    return str(value)
