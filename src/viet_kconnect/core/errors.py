"""Exception types rendered as the API error envelope."""

from __future__ import annotations

from fastapi import status


class ApiError(Exception):
    """Base error carrying an HTTP status and a machine-readable code."""

    status_code: int = status.HTTP_400_BAD_REQUEST
    code: str | None = None
    default_message: str = "Bad request"

    def __init__(
        self,
        message: str | None = None,
        *,
        status_code: int | None = None,
        code: str | None = None,
    ) -> None:
        self.message = message or self.default_message
        if status_code is not None:
            self.status_code = status_code
        if code is not None:
            self.code = code
        super().__init__(self.message)


class ValidationError(ApiError):
    code = "VALIDATION_ERROR"
    default_message = "Required fields are missing or invalid"


class SearchQueryTooLongError(ApiError):
    """Raised before any database access when the search term is too long."""

    code = "SEARCH_QUERY_TOO_LONG"

    def __init__(self, max_length: int) -> None:
        super().__init__(f"Search query must be at most {max_length} characters")
        self.max_length = max_length


class ProhibitedContentError(ApiError):
    code = "PROHIBITED_CONTENT"
    default_message = (
        "The post contains prohibited words, advertising or contact details"
    )


class UnauthorizedError(ApiError):
    status_code = status.HTTP_401_UNAUTHORIZED
    code = "UNAUTHORIZED"
    default_message = "Authentication required"


class AccountRestrictedError(ApiError):
    status_code = status.HTTP_403_FORBIDDEN
    code = "ACCOUNT_RESTRICTED"
    default_message = "Account restricted"
