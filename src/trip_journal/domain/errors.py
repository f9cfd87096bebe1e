"""Classified errors raised by the journal client."""


class JournalApiError(Exception):
    """Base error for journal API failures."""


class InvalidURLError(JournalApiError):
    """Request URL could not be resolved against the base endpoint."""

    def __init__(self) -> None:
        super().__init__("Invalid URL.")


class InvalidResponseError(JournalApiError):
    """Transport returned something other than an HTTP response."""

    def __init__(self) -> None:
        super().__init__("Invalid server response.")


class HttpStatusError(JournalApiError):
    """Server answered with a non-2xx status other than 401."""

    def __init__(self, status_code: int) -> None:
        super().__init__(f"Server returned status code {status_code}.")
        self.status_code = status_code


class UnauthorizedError(JournalApiError):
    """No session token is held, or the server rejected it."""

    def __init__(self) -> None:
        super().__init__("Unauthorized. Please log in again.")


class DecodingError(JournalApiError):
    """Response body did not match the expected shape."""

    def __init__(self, cause: Exception) -> None:
        super().__init__("Failed to decode server response.")
        self.cause = cause


class UnderlyingError(JournalApiError):
    """Transport-level failure while sending a request."""

    def __init__(self, cause: Exception) -> None:
        super().__init__(str(cause) or type(cause).__name__)
        self.cause = cause
