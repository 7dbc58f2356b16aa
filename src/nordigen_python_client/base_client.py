from typing import Any, Iterable, Mapping, Optional, Tuple, Union
from .response import NordigenApiResponse, Parser, from_http_response
from urllib.parse import urlencode, urljoin
from .log import get_logger
import requests


DEFAULT_BASE_URL = "https://ob.nordigen.com/api/v2/"

QueryParams = Union[Mapping[str, Any], Iterable[Tuple[str, Any]]]


def build_uri_with_query(
    uri: str,
    query: Optional[QueryParams] = None
) -> str:
    """
    Append a URL-encoded query string to `uri`.

    Parameters
    ----------
    uri : str
        Base URI, with or without an existing query string.
    query : mapping or iterable of (key, value), optional
        Query parameters. Order is preserved; pairs whose value is None are
        dropped and booleans are sent as "true"/"false".

    Returns
    -------
    str
        `uri` unchanged if there is nothing to append, otherwise `uri`
        followed by the encoded query.
    """
    if not query:
        return uri

    items = query.items() if isinstance(query, Mapping) else query
    pairs = [
        (k, str(v).lower() if isinstance(v, bool) else v)
        for k, v in items
        if v is not None
    ]
    if not pairs:
        return uri

    separator = "&" if "?" in uri else "?"
    return f"{uri}{separator}{urlencode(pairs)}"


class BaseAPIClient:
    """
    Base HTTP client for the Nordigen API.

    Every call goes through `make_request()`, which resolves the URL,
    attaches the bearer token when required, performs exactly one GET,
    POST or DELETE on the injected `requests.Session` and turns the outcome into a
    typed `NordigenApiResponse`.

    Attributes
    ----------
    session : requests.Session
        Transport used for every request.
    token_manager : TokenManager
        Supplies bearer tokens for authenticated calls.
    base_url : str
        Root of the API; relative paths are resolved against it.
    timeout : float
        Per-request timeout in seconds, passed to `requests`.
    """

    def __init__(
        self,
        *,
        session: Optional[requests.Session] = None,
        token_manager=None,
        base_url: str = DEFAULT_BASE_URL,
        timeout: Optional[float] = 30.0
    ):
        self.session = session if session is not None else requests.Session()
        self.token_manager = token_manager
        self.base_url = base_url if base_url.endswith("/") else f"{base_url}/"
        self.timeout = timeout
        self.logger = get_logger("nordigen.client")

    def _resolve_url(self, path: str) -> str:
        # Absolute URLs (pagination links) are used verbatim.
        if path.startswith(("http://", "https://")):
            return path
        return urljoin(self.base_url, path.lstrip("/"))

    def _auth_headers(self) -> dict:
        token = (
            self.token_manager.get_token()
            if self.token_manager is not None else None
        )
        if token is None:
            self.logger.warning(
                "No valid access token available; sending request "
                "unauthenticated."
            )
            return {}
        return {"Authorization": f"Bearer {token}"}

    def make_request(
        self,
        *,
        path: str,
        method: str,
        result_parser: Parser,
        error_parser: Parser,
        query: Optional[QueryParams] = None,
        body: Optional[Any] = None,
        requires_auth: bool = True,
        timeout: Optional[float] = None
    ) -> NordigenApiResponse:
        """
        Execute a single API call and wrap the outcome.

        Parameters
        ----------
        path : str
            Path relative to `base_url`, or an absolute URL.
        method : str
            "GET", "POST" or "DELETE".
        result_parser : callable
            Builds the result object from a successful JSON body.
        error_parser : callable
            Builds the error object from an unsuccessful JSON body.
        query : mapping or iterable of (key, value), optional
            Query string parameters.
        body : Any, optional
            JSON-serializable request body (POST only).
        requires_auth : bool
            Attach `Authorization: Bearer <token>` when a token is
            obtainable. If none is, the request is still sent and the
            server's rejection is returned as an `ApiFailure`.
        timeout : float, optional
            Timeout for this call in seconds; defaults to the client's
            `timeout`.

        Returns
        -------
        ApiSuccess or ApiFailure
            The parsed response.

        Raises
        ------
        NotImplementedError
            If `method` is not GET, POST or DELETE.
        DeserializationError
            If the response body can't be parsed.
        requests.exceptions.RequestException
            On transport failures (connection errors, timeouts, ...).
        """
        method = method.upper()
        if method not in ("GET", "POST", "DELETE"):
            raise NotImplementedError(f"Unsupported HTTP method: {method}")

        url = build_uri_with_query(self._resolve_url(path), query)
        headers = {"Accept": "application/json"}
        if requires_auth:
            headers.update(self._auth_headers())

        timeout = self.timeout if timeout is None else timeout
        self.logger.debug(f"{method} {url}")

        if method == "GET":
            resp = self.session.get(url, headers=headers, timeout=timeout)
        elif method == "DELETE":
            resp = self.session.delete(url, headers=headers, timeout=timeout)
        else:
            resp = self.session.post(
                url,
                headers=headers,
                json=body,
                timeout=timeout
            )

        return from_http_response(resp, result_parser, error_parser)


def quote_id(value: str, name: str = "id") -> str:
    """
    URL-quote a resource id for use as a path segment.

    Raises
    ------
    ValueError
        If `value` is empty.
    """
    if value is None or not str(value).strip():
        raise ValueError(f"{name} must be a non-empty string.")
    return requests.utils.quote(str(value).strip(), safe="")


def check_page_params(limit: int, offset: int) -> None:
    """Validate `limit`/`offset` of a paginated listing."""
    if not isinstance(limit, int) or limit < 1:
        raise ValueError("limit must be a positive integer.")
    if not isinstance(offset, int) or offset < 0:
        raise ValueError("offset must be a non-negative integer.")
