from .auth import DEFAULT_EXPIRY_MARGIN, JsonWebTokenPair, NordigenClientCredentials, TokenManager
from .base_client import DEFAULT_BASE_URL, BaseAPIClient
from datetime import timedelta
from typing import Optional
from .endpoints import (
    AccountsEndpoint,
    AgreementsEndpoint,
    InstitutionsEndpoint,
    RequisitionsEndpoint,
    TokenEndpoint
)
import requests
import os


class NordigenClient(BaseAPIClient):
    """
    Central entry point for all Nordigen API endpoints.
    Aggregates sub-clients such as institutions, requisitions, accounts.
    """

    def __init__(
        self,
        credentials: NordigenClientCredentials,
        *,
        session: Optional[requests.Session] = None,
        token_pair: Optional[JsonWebTokenPair] = None,
        base_url: str = DEFAULT_BASE_URL,
        timeout: Optional[float] = 30.0,
        expiry_margin: timedelta = DEFAULT_EXPIRY_MARGIN
    ):
        """
        Parameters
        ----------
        credentials : NordigenClientCredentials
            Secret id/key used to obtain tokens.
        session : requests.Session, optional
            Transport to use; a new session is created if omitted.
        token_pair : JsonWebTokenPair, optional
            Previously obtained tokens to start from.
        base_url : str
            API root URL.
        timeout : float, optional
            Per-request timeout in seconds.
        expiry_margin : timedelta
            Remaining lifetime below which a token is renewed.
        """
        super().__init__(session=session, base_url=base_url, timeout=timeout)
        self.credentials = credentials

        self.token = TokenEndpoint(client=self)
        self.token_manager = TokenManager(
            credentials=credentials,
            token_endpoint=self.token,
            token_pair=token_pair,
            expiry_margin=expiry_margin,
        )

        # Sub-clients share this client's request pipeline
        self.institutions = InstitutionsEndpoint(client=self)
        self.agreements = AgreementsEndpoint(client=self)
        self.requisitions = RequisitionsEndpoint(client=self)
        self.accounts = AccountsEndpoint(client=self)

    @classmethod
    def from_env(cls, **kwargs) -> "NordigenClient":
        """
        Build a client from `NORDIGEN_SECRET_ID` / `NORDIGEN_SECRET_KEY`,
        honouring `NORDIGEN_API_URL` if set.
        """
        kwargs.setdefault("base_url", os.getenv("NORDIGEN_API_URL", DEFAULT_BASE_URL))
        return cls(NordigenClientCredentials.from_env(), **kwargs)

    @property
    def token_pair(self) -> Optional[JsonWebTokenPair]:
        """Tokens currently held by the client, for persisting externally."""
        return self.token_manager.token_pair
