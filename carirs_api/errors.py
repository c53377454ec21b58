from __future__ import annotations

from typing import Any

GENERIC_ERROR_BODY: dict[str, Any] = {"error": "Something error"}
NOT_FOUND_BODY: dict[str, Any] = {"error": "Not found"}


class ApiError(Exception):
    """Error envelope carried from a route to the terminal error handler."""

    def __init__(self, status: int, body: dict[str, Any] | None = None) -> None:
        super().__init__(status, body)
        self.status = status
        self.body = body

    @classmethod
    def bad_request(cls, message: str) -> "ApiError":
        return cls(400, {"error": message})

    def render_body(self) -> dict[str, Any]:
        return self.body or dict(GENERIC_ERROR_BODY)


class ProviderError(Exception):
    """Raised by provider adapters.

    ``status`` and ``body`` are only set when the upstream answered with a
    structured failure (an HTTP error response). Transport failures leave
    them empty.
    """

    def __init__(self, message: str, status: int | None = None, body: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.status = status
        self.body = body

    def to_api_error(self) -> ApiError | None:
        if not self.status:
            return None
        return ApiError(self.status, self.body or {"error": str(self)})
