"""Domain error taxonomy shared by all services."""


class DomainError(Exception):
    """Base class for expected, caller-facing failures."""

    kind = "domain_error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(DomainError):
    """Malformed input such as a non-positive price or an empty item list."""

    kind = "validation_error"


class AuthorizationError(DomainError):
    """The caller is not the permitted actor for this transition."""

    kind = "authorization_error"


class StateConflict(DomainError):
    """The operation is not valid from the record's current state."""

    kind = "state_conflict"


class NotFound(DomainError):
    """The record identity does not resolve."""

    kind = "not_found"


class NotComputable(DomainError):
    """An energy budget was requested for an incomplete profile."""

    kind = "not_computable"
