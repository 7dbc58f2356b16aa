from nordigen_python_client.auth import JsonWebTokenPair, NordigenClientCredentials, RefreshedAccessToken, TokenManager
from nordigen_python_client.response import ApiFailure, ApiSuccess
from nordigen_python_client.errors import DeserializationError
from nordigen_python_client.models import BasicError
from datetime import datetime, timedelta, timezone
from unittest.mock import patch, MagicMock
import threading
import pytest


NOW = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)


def make_pair(access_in, refresh_in, access="abc123", refresh="rftoken"):
    return JsonWebTokenPair(
        access_token=access,
        access_expires_at=NOW + timedelta(seconds=access_in),
        refresh_token=refresh,
        refresh_expires_at=NOW + timedelta(seconds=refresh_in),
    )


@pytest.fixture
def credentials():
    return NordigenClientCredentials(secret_id="sid", secret_key="skey")


@pytest.fixture
def token_endpoint():
    """
    Provide a mocked TokenEndpoint returning a fresh pair / access token.
    """
    endpoint = MagicMock()
    endpoint.get_token.return_value = ApiSuccess(
        status_code=200,
        result=make_pair(86400, 2592000, access="new_access", refresh="new_refresh"),
    )
    endpoint.refresh_token.return_value = ApiSuccess(
        status_code=200,
        result=RefreshedAccessToken(
            access_token="refreshed_access",
            access_expires_at=NOW + timedelta(days=1),
        ),
    )
    return endpoint


@pytest.fixture
def failure():
    return ApiFailure(
        status_code=401,
        error=BasicError(
            summary="Authentication failed",
            detail="No active account found with the given credentials",
            status_code=401,
        ),
    )


def manager(credentials, token_endpoint, pair=None):
    tm = TokenManager(
        credentials=credentials,
        token_endpoint=token_endpoint,
        token_pair=pair,
    )
    return tm


@pytest.mark.parametrize(
    "remaining, expired",
    [(59, True), (60, True), (61, False)],
)
def test_access_expiry_boundary(remaining, expired):
    pair = make_pair(remaining, 3600)
    assert pair.is_access_expired(timedelta(minutes=1), now=NOW) is expired


@pytest.mark.parametrize(
    "remaining, expired",
    [(59, True), (60, True), (61, False)],
)
def test_refresh_expiry_boundary(remaining, expired):
    pair = make_pair(3600, remaining)
    assert pair.is_refresh_expired(timedelta(minutes=1), now=NOW) is expired


def test_custom_margin():
    pair = make_pair(200, 3600)
    assert pair.is_access_expired(timedelta(minutes=5), now=NOW) is True
    assert pair.is_access_expired(timedelta(seconds=0), now=NOW) is False


def test_pair_from_token_response():
    pair = JsonWebTokenPair.from_token_response(
        {
            "access": "a",
            "access_expires": 86400,
            "refresh": "r",
            "refresh_expires": 2592000,
        },
        now=NOW,
    )
    assert pair.access_token == "a"
    assert pair.access_expires_at == NOW + timedelta(days=1)
    assert pair.refresh_token == "r"
    assert pair.refresh_expires_at == NOW + timedelta(days=30)


def test_pair_dict_round_trip():
    pair = make_pair(100, 1000)
    assert JsonWebTokenPair.from_dict(pair.to_dict()) == pair


@pytest.mark.parametrize(
    "remaining, refreshes",
    [(59, 1), (60, 1), (61, 0)],
)
@patch.object(TokenManager, "_now", return_value=NOW)
def test_manager_refresh_boundary(
    mock_now,
    remaining,
    refreshes,
    credentials,
    token_endpoint
):
    tm = manager(credentials, token_endpoint, make_pair(remaining, 3600))
    tm.get_token()
    assert token_endpoint.refresh_token.call_count == refreshes
    token_endpoint.get_token.assert_not_called()


def test_no_pair_triggers_single_reissue(credentials, token_endpoint):
    tm = manager(credentials, token_endpoint)

    token = tm.get_token()

    assert token == "new_access"
    token_endpoint.get_token.assert_called_once()
    token_endpoint.refresh_token.assert_not_called()
    assert tm.token_pair.refresh_token == "new_refresh"


@patch.object(TokenManager, "_now", return_value=NOW)
def test_expired_access_triggers_single_refresh(
    mock_now,
    credentials,
    token_endpoint
):
    tm = manager(credentials, token_endpoint, make_pair(10, 3600))

    token = tm.get_token()

    assert token == "refreshed_access"
    token_endpoint.refresh_token.assert_called_once_with("rftoken")
    token_endpoint.get_token.assert_not_called()
    # The refresh token survives a refresh
    assert tm.token_pair.refresh_token == "rftoken"
    assert tm.token_pair.refresh_expires_at == NOW + timedelta(seconds=3600)


@patch.object(TokenManager, "_now", return_value=NOW)
def test_expired_refresh_triggers_reissue(
    mock_now,
    credentials,
    token_endpoint
):
    tm = manager(credentials, token_endpoint, make_pair(10, 30))

    token = tm.get_token()

    assert token == "new_access"
    token_endpoint.get_token.assert_called_once()
    token_endpoint.refresh_token.assert_not_called()
    assert tm.token_pair.refresh_token == "new_refresh"


@patch.object(TokenManager, "_now", return_value=NOW)
def test_valid_pair_is_reused_without_network(
    mock_now,
    credentials,
    token_endpoint
):
    pair = make_pair(3600, 86400)
    tm = manager(credentials, token_endpoint, pair)

    assert tm.get_token() == "abc123"
    assert tm.token_pair is pair
    token_endpoint.get_token.assert_not_called()
    token_endpoint.refresh_token.assert_not_called()


def test_failed_reissue_returns_none(credentials, token_endpoint, failure):
    token_endpoint.get_token.return_value = failure
    tm = manager(credentials, token_endpoint)

    assert tm.get_token() is None
    assert tm.token_pair is None


@patch.object(TokenManager, "_now", return_value=NOW)
def test_failed_refresh_returns_none_and_keeps_pair(
    mock_now,
    credentials,
    token_endpoint,
    failure
):
    pair = make_pair(10, 3600)
    token_endpoint.refresh_token.return_value = failure
    tm = manager(credentials, token_endpoint, pair)

    assert tm.get_token() is None
    assert tm.token_pair is pair


def test_unparseable_reissue_reply_returns_none(credentials, token_endpoint):
    token_endpoint.get_token.side_effect = DeserializationError(
        "Could not parse response body", status_code=200, body="<html>gateway</html>"
    )
    tm = manager(credentials, token_endpoint)

    assert tm.get_token() is None
    assert tm.token_pair is None
    token_endpoint.get_token.assert_called_once()


@patch.object(TokenManager, "_now", return_value=NOW)
def test_unparseable_refresh_reply_returns_none_and_keeps_pair(
    mock_now,
    credentials,
    token_endpoint
):
    pair = make_pair(10, 3600)
    token_endpoint.refresh_token.side_effect = DeserializationError(
        "Could not parse response body", status_code=200, body="<html>gateway</html>"
    )
    tm = manager(credentials, token_endpoint, pair)

    assert tm.get_token() is None
    assert tm.token_pair is pair
    token_endpoint.refresh_token.assert_called_once_with("rftoken")

def test_transport_error_leaves_state_untouched(credentials, token_endpoint):
    token_endpoint.get_token.side_effect = TimeoutError("timed out")
    tm = manager(credentials, token_endpoint)

    with pytest.raises(TimeoutError):
        tm.get_token()
    assert tm.token_pair is None


@patch.object(TokenManager, "_now", return_value=NOW)
def test_thread_safety(mock_now, credentials, token_endpoint):
    tm = manager(credentials, token_endpoint)
    barrier = threading.Barrier(5)

    def worker():
        barrier.wait()
        tm.get_token()

    threads = [threading.Thread(target=worker) for _ in range(5)]
    for t in threads: t.start()
    for t in threads: t.join()

    token_endpoint.get_token.assert_called_once()


@patch.dict("os.environ", {
    "NORDIGEN_SECRET_ID": "id",
    "NORDIGEN_SECRET_KEY": "secret",
})
def test_credentials_from_env():
    creds = NordigenClientCredentials.from_env()
    assert creds == NordigenClientCredentials(secret_id="id", secret_key="secret")
    assert creds.to_request_body() == {"secret_id": "id", "secret_key": "secret"}


@patch.dict("os.environ", {"NORDIGEN_SECRET_ID": "id"}, clear=True)
def test_credentials_from_env_missing_key():
    with pytest.raises(ValueError, match="NORDIGEN_SECRET_KEY"):
        NordigenClientCredentials.from_env()
