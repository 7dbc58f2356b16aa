"""Typed client for the Nordigen open-banking API."""

from .auth import JsonWebTokenPair, NordigenClientCredentials, TokenManager
from .errors import DeserializationError, NordigenApiError, NordigenError
from .response import ApiFailure, ApiSuccess, NordigenApiResponse
from .client import NordigenClient
from .pagination import ResponsePage

__all__ = [
    "ApiFailure",
    "ApiSuccess",
    "DeserializationError",
    "JsonWebTokenPair",
    "NordigenApiError",
    "NordigenApiResponse",
    "NordigenClient",
    "NordigenClientCredentials",
    "NordigenError",
    "ResponsePage",
    "TokenManager",
]
