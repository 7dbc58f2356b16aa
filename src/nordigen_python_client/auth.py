from datetime import datetime, timedelta, timezone
from dataclasses import dataclass, replace
from typing import Any, Dict, Optional
from dateutil.parser import isoparse
from .errors import DeserializationError
from .log import get_logger
from threading import Lock
import os


DEFAULT_EXPIRY_MARGIN = timedelta(minutes=1)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class NordigenClientCredentials:
    """
    Secret id/key pair issued by Nordigen for API access.

    Attributes
    ----------
    secret_id : str
        The user secret id.
    secret_key : str
        The user secret key.
    """

    secret_id: str
    secret_key: str

    @classmethod
    def from_env(
        cls,
        id_var: str = "NORDIGEN_SECRET_ID",
        key_var: str = "NORDIGEN_SECRET_KEY"
    ) -> "NordigenClientCredentials":
        """
        Read credentials from environment variables.

        Raises
        ------
        ValueError
            If either variable is missing or empty.
        """
        secret_id = os.getenv(id_var)
        secret_key = os.getenv(key_var)
        if not secret_id:
            raise ValueError(f"Missing environment variable: {id_var}")
        if not secret_key:
            raise ValueError(f"Missing environment variable: {key_var}")
        return cls(secret_id=secret_id, secret_key=secret_key)

    def to_request_body(self) -> Dict[str, str]:
        return {"secret_id": self.secret_id, "secret_key": self.secret_key}


def _is_expired(
    expires_at: datetime,
    margin: timedelta,
    now: Optional[datetime]
) -> bool:
    now = now or _utcnow()
    return now + margin >= expires_at


@dataclass(frozen=True)
class JsonWebTokenPair:
    """
    Access token plus the refresh token used to renew it.

    Instances are immutable: a refresh produces a new pair carrying the
    new access token and the original refresh token (see `with_access`).

    Attributes
    ----------
    access_token : str
        Short-lived bearer token sent with API calls.
    access_expires_at : datetime
        UTC instant at which the access token expires.
    refresh_token : str
        Longer-lived token used to obtain new access tokens.
    refresh_expires_at : datetime
        UTC instant at which the refresh token expires.
    """

    access_token: str
    access_expires_at: datetime
    refresh_token: str
    refresh_expires_at: datetime

    @classmethod
    def from_token_response(
        cls,
        data: Dict[str, Any],
        now: Optional[datetime] = None
    ) -> "JsonWebTokenPair":
        """
        Build a pair from a `token/new/` response.

        The API reports lifetimes in seconds; they are converted to
        absolute instants relative to `now`.
        """
        now = now or _utcnow()
        return cls(
            access_token=data["access"],
            access_expires_at=now + timedelta(seconds=int(data["access_expires"])),
            refresh_token=data["refresh"],
            refresh_expires_at=now + timedelta(seconds=int(data["refresh_expires"])),
        )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "JsonWebTokenPair":
        """Restore a pair previously serialized with `to_dict`."""
        return cls(
            access_token=data["access_token"],
            access_expires_at=isoparse(data["access_expires_at"]),
            refresh_token=data["refresh_token"],
            refresh_expires_at=isoparse(data["refresh_expires_at"]),
        )

    def to_dict(self) -> Dict[str, str]:
        return {
            "access_token": self.access_token,
            "access_expires_at": self.access_expires_at.isoformat(),
            "refresh_token": self.refresh_token,
            "refresh_expires_at": self.refresh_expires_at.isoformat(),
        }

    def is_access_expired(
        self,
        margin: timedelta = DEFAULT_EXPIRY_MARGIN,
        now: Optional[datetime] = None
    ) -> bool:
        """True if the access token has at most `margin` lifetime left."""
        return _is_expired(self.access_expires_at, margin, now)

    def is_refresh_expired(
        self,
        margin: timedelta = DEFAULT_EXPIRY_MARGIN,
        now: Optional[datetime] = None
    ) -> bool:
        """True if the refresh token has at most `margin` lifetime left."""
        return _is_expired(self.refresh_expires_at, margin, now)

    def with_access(
        self,
        access: "RefreshedAccessToken"
    ) -> "JsonWebTokenPair":
        return replace(
            self,
            access_token=access.access_token,
            access_expires_at=access.access_expires_at,
        )


@dataclass(frozen=True)
class RefreshedAccessToken:
    """New access token returned by `token/refresh/`."""

    access_token: str
    access_expires_at: datetime

    @classmethod
    def from_token_response(
        cls,
        data: Dict[str, Any],
        now: Optional[datetime] = None
    ) -> "RefreshedAccessToken":
        now = now or _utcnow()
        return cls(
            access_token=data["access"],
            access_expires_at=now + timedelta(seconds=int(data["access_expires"])),
        )


class TokenManager:
    """
    Manages the lifecycle of the Nordigen JWT pair.

    Responsibilities:
    - Obtain a brand-new pair from the credentials when none is cached or
      the refresh token is about to expire (reissue).
    - Exchange the refresh token for a new access token when only the
      access token is about to expire (refresh).
    - Otherwise hand back the cached access token without any network call.

    The whole decision runs under a per-instance lock, so concurrent calls
    on one client never observe a half-updated pair.
    """

    def __init__(
        self,
        *,
        credentials: NordigenClientCredentials,
        token_endpoint,
        token_pair: Optional[JsonWebTokenPair] = None,
        expiry_margin: timedelta = DEFAULT_EXPIRY_MARGIN
    ) -> None:
        """
        Initializes the TokenManager.

        Args:
            credentials (NordigenClientCredentials): Secrets used for a
                                                     full reissue.
            token_endpoint (TokenEndpoint): Performs the `token/new/` and
                                            `token/refresh/` calls.
            token_pair (JsonWebTokenPair, optional): A previously obtained
                                                     pair to start from.
            expiry_margin (timedelta, optional): Remaining lifetime below
                                                 which a token counts as
                                                 expired. Defaults to one
                                                 minute.
        """
        self.credentials = credentials
        self.token_endpoint = token_endpoint
        self.expiry_margin = expiry_margin
        self._token_pair = token_pair
        self._lock = Lock()
        self.logger = get_logger("nordigen.auth")

    @property
    def token_pair(self) -> Optional[JsonWebTokenPair]:
        """The currently cached pair, e.g. for persisting between runs."""
        return self._token_pair

    def _now(self) -> datetime:
        return _utcnow()

    def _reissue(self) -> Optional[JsonWebTokenPair]:
        """
        Request a brand-new token pair using the credentials.

        Returns:
            JsonWebTokenPair | None: The new pair, or None if the API
                                     rejected the request or its reply
                                     could not be parsed.
        """
        self.logger.info("Requesting a new token pair.")
        try:
            response = self.token_endpoint.get_token()
        except DeserializationError as e:
            self.logger.warning(f"Token reissue failed ({e.status_code}): {e}")
            return None

        if not response.is_success:
            self.logger.warning(
                f"Token reissue failed ({response.status_code}): "
                f"{response.error}"
            )
            return None

        self._token_pair = response.result
        return self._token_pair

    def _refresh(self) -> Optional[JsonWebTokenPair]:
        """
        Exchange the cached refresh token for a new access token.

        Returns:
            JsonWebTokenPair | None: A pair holding the new access token and
                                     the original refresh token, or None if
                                     the API rejected the request or its
                                     reply could not be parsed.
        """
        self.logger.info("Refreshing access token.")
        try:
            response = self.token_endpoint.refresh_token(
                self._token_pair.refresh_token
            )
        except DeserializationError as e:
            self.logger.warning(f"Token refresh failed ({e.status_code}): {e}")
            return None

        if not response.is_success:
            self.logger.warning(
                f"Token refresh failed ({response.status_code}): "
                f"{response.error}"
            )
            return None

        # Whole-value swap; the refresh token is kept.
        self._token_pair = self._token_pair.with_access(response.result)
        return self._token_pair

    def get_valid_token_pair(self) -> Optional[JsonWebTokenPair]:
        """
        Return a pair whose access token is usable for the next request.

        Returns:
            JsonWebTokenPair | None: A valid pair, or None if neither a
                                     reissue nor a refresh succeeded.
        """
        with self._lock:
            pair = self._token_pair
            now = self._now()

            if pair is None or pair.is_refresh_expired(self.expiry_margin, now):
                return self._reissue()

            if pair.is_access_expired(self.expiry_margin, now):
                return self._refresh()

            return pair

    def get_token(self) -> Optional[str]:
        """
        Retrieve a valid bearer access token in a thread-safe manner.

        Returns:
            str | None: The access token, or None if no token is obtainable.
        """
        pair = self.get_valid_token_pair()
        return pair.access_token if pair is not None else None
