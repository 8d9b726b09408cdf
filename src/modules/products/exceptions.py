"""Product domain exceptions.

Raised by the Service Layer after classifying storage failures.
The API layer (Views) catches these and translates them into
appropriate HTTP responses.
"""

from __future__ import annotations

UNEXPECTED_ERROR_MESSAGE = "Unexpected error, check server logs"


class ProductAlreadyExists(Exception):
    """A product with the same title or slug already exists.

    The message is the storage engine's detail text.
    """


class ProductNotFound(Exception):
    """No product resolves for the given identifier, title or slug."""


class ProductServiceError(Exception):
    """Unexpected storage failure.

    The message is always opaque; the underlying error is only logged.
    """

    def __init__(self, message: str = UNEXPECTED_ERROR_MESSAGE) -> None:
        super().__init__(message)
