from typing import Any, Callable, ClassVar, Generic, TypeVar, Union
from .errors import DeserializationError, NordigenApiError
from dataclasses import dataclass
from .log import get_logger
import requests
import json


TResult = TypeVar("TResult")
TError = TypeVar("TError")

Parser = Callable[[Any], Any]

logger = get_logger("nordigen.client")


@dataclass(frozen=True)
class ApiSuccess(Generic[TResult]):
    """
    Successful (2xx) API response.

    Attributes
    ----------
    status_code : int
        HTTP status returned by the API.
    result : TResult
        Deserialized response body.
    """

    is_success: ClassVar[bool] = True

    status_code: int
    result: TResult

    @property
    def error(self) -> None:
        return None


@dataclass(frozen=True)
class ApiFailure(Generic[TError]):
    """
    Unsuccessful API response carrying the server's error payload.

    Attributes
    ----------
    status_code : int
        HTTP status returned by the API.
    error : TError
        Deserialized error body.
    """

    is_success: ClassVar[bool] = False

    status_code: int
    error: TError

    @property
    def result(self) -> None:
        return None


# Exactly one of `result` / `error` is set, determined by the variant.
NordigenApiResponse = Union[ApiSuccess[TResult], ApiFailure[TError]]


def from_http_response(
    response: requests.Response,
    result_parser: Parser,
    error_parser: Parser
) -> NordigenApiResponse:
    """
    Build a `NordigenApiResponse` from a completed HTTP exchange.

    Parameters
    ----------
    response : requests.Response
        The response returned by the transport.
    result_parser : callable
        Maps the decoded JSON body of a 2xx response to the result type.
    error_parser : callable
        Maps the decoded JSON body of any other response to the error type.

    Returns
    -------
    ApiSuccess or ApiFailure
        `ApiSuccess` if the status code is 2xx, `ApiFailure` otherwise.

    Raises
    ------
    DeserializationError
        If the body isn't valid JSON or doesn't fit the expected type.
    """
    status_code = response.status_code
    is_success = 200 <= status_code < 300

    # Body is read once; everything below works on this copy.
    raw = response.content or b""
    text = raw.decode(response.encoding or "utf-8", errors="replace")
    logger.debug(f"{status_code} {response.url}: {text}")

    try:
        payload = json.loads(text) if text.strip() else None
    except ValueError as e:
        raise DeserializationError(
            f"Malformed JSON in response ({status_code}): {e}",
            status_code=status_code,
            body=text
        ) from e

    parser = result_parser if is_success else error_parser
    try:
        parsed = parser(payload)
    except (KeyError, TypeError, ValueError, AttributeError) as e:
        kind = "result" if is_success else "error"
        raise DeserializationError(
            f"Could not deserialize {kind} payload ({status_code}): {e!r}",
            status_code=status_code,
            body=text
        ) from e

    if is_success:
        return ApiSuccess(status_code=status_code, result=parsed)
    return ApiFailure(status_code=status_code, error=parsed)


def expect_success(
    response: NordigenApiResponse,
) -> Any:
    """
    Return the result of a successful response or raise.

    Raises
    ------
    NordigenApiError
        If `response` is an `ApiFailure`.
    """
    if not response.is_success:
        raise NordigenApiError(response)
    return response.result
