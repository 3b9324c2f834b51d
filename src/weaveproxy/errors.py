"""Exceptions raised while rewriting intercepted daemon requests.

Brief:
  Every error below is terminal for the request being intercepted. The
  surrounding proxy turns them into an HTTP error response using the
  ``http_status`` hint instead of forwarding a partially rewritten body.
"""

from __future__ import annotations

from typing import Any


class InterceptError(Exception):
    """Base class for request interception failures."""

    http_status: int = 500


class MalformedBodyError(InterceptError):
    """Request body could not be decoded as JSON."""

    http_status = 400


class WrongTypeError(InterceptError):
    """Brief: A document field exists but holds an incompatible value.

    Inputs:
      - field: Name of the offending key.
      - expected: Human readable description of the expected type.
      - got: The value actually found.

    Example:
        >>> str(WrongTypeError("Cmd", "array of strings", 5))
        'Wrong type for Cmd field, expected array of strings, but got int (5)'
    """

    http_status = 400

    def __init__(self, field: str, expected: str, got: Any) -> None:
        self.field = field
        self.expected = expected
        self.got = got
        super().__init__(
            f"Wrong type for {field} field, expected {expected}, "
            f"but got {type(got).__name__} ({got!r})"
        )


class MissingFieldError(InterceptError):
    """A field required to continue is absent or empty."""

    http_status = 400

    def __init__(self, field: str) -> None:
        self.field = field
        super().__init__(f"Missing required field {field}")


class NoSuchImageError(InterceptError):
    """Image inspection reported not-found.

    Docker clients match on the image name in this message, so it is always
    included rather than surfacing the daemon's generic not-found error.
    """

    http_status = 404

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"No such image: {name}")


class NoCommandSpecifiedError(InterceptError):
    """Neither an entrypoint nor a command could be resolved."""

    def __init__(self) -> None:
        super().__init__("No command specified")
