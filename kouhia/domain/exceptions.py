"""Domain-specific exceptions."""


class DomainError(Exception):
    """Base exception for domain errors."""

    pass


class ValidationError(DomainError):
    """Raised when domain validation fails."""

    pass


class NotFoundError(DomainError):
    """Raised when a referenced entry or journal row does not exist."""

    pass


class StaleRevertError(DomainError):
    """Raised when reverting a journal row that was already processed."""

    def __init__(self, row_id: int):
        super().__init__(f"Undo journal row {row_id} is already processed")
        self.row_id = row_id
