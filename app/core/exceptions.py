"""
Domain errors raised by feature modules.

Routes never catch these; ``app.main`` maps them to HTTP responses.
"""


class PermissionsServiceError(Exception):
    """Base class for errors raised by the role permission core."""


class InvalidIdentifier(PermissionsServiceError, ValueError):
    """An identifier is not a well-formed ULID for the store."""

    def __init__(self, field: str, value: object):
        self.field = field
        self.value = value
        super().__init__(f"Invalid {field.replace('_', ' ')}")
