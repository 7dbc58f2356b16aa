from typing import Any, Optional


class NordigenError(Exception):
    """Base class for all errors raised by this package."""


class DeserializationError(NordigenError):
    """
    The response body could not be parsed into the expected type.

    Raised when the server replied with malformed JSON or with a payload
    whose shape doesn't match the requested result/error type. This is
    distinct from an API error, which is returned as a regular
    `ApiFailure` value.

    Attributes
    ----------
    status_code : int
        HTTP status of the response that failed to parse.
    body : str
        Raw response body.
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: int,
        body: str
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class NordigenApiError(NordigenError):
    """
    Raised by helpers that aggregate several calls and can't hand back a
    single `ApiFailure` (e.g. collecting every page of a listing).
    """

    def __init__(
        self,
        response: Any,
        message: Optional[str] = None
    ) -> None:
        self.response = response
        if message is None:
            error = response.error
            detail = getattr(error, "detail", None) or error
            message = f"API error {response.status_code}: {detail}"
        super().__init__(message)

    @property
    def status_code(self) -> int:
        return self.response.status_code
