from nordigen_python_client.auth import NordigenClientCredentials
from nordigen_python_client.client import NordigenClient
from unittest.mock import MagicMock
import requests
import pytest
import json


BASE_URL = "https://ob.nordigen.com/api/v2/"


def make_response(status_code, payload=None, url=BASE_URL, raw=None):
    """
    Build a real `requests.Response` with the given status and JSON body.
    """
    resp = requests.Response()
    resp.status_code = status_code
    resp.url = url
    resp.encoding = "utf-8"
    if raw is not None:
        resp._content = raw
    elif payload is None:
        resp._content = b""
    else:
        resp._content = json.dumps(payload).encode("utf-8")
    return resp


@pytest.fixture
def credentials():
    return NordigenClientCredentials(secret_id="sid", secret_key="skey")


@pytest.fixture
def session():
    """
    Provide a mocked `requests.Session`.
    """
    return MagicMock(spec=requests.Session)


@pytest.fixture
def client(credentials, session):
    return NordigenClient(credentials, session=session)


@pytest.fixture
def make_resp():
    return make_response
