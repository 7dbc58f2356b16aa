from ..auth import JsonWebTokenPair, RefreshedAccessToken
from ..response import NordigenApiResponse
from ..models import BasicError


class TokenEndpoint:
    """
    Access to the `token/` endpoints.

    These calls are made without authentication; `TokenManager` uses them
    to obtain and renew the JWT pair.
    """

    def __init__(
        self,
        *,
        client
    ) -> None:
        self.client = client

    def get_token(self) -> NordigenApiResponse:
        """
        Obtain a new access/refresh token pair from the client credentials.

        Returns
        -------
        ApiSuccess[JsonWebTokenPair] or ApiFailure[BasicError]
        """
        return self.client.make_request(
            path="token/new/",
            method="POST",
            body=self.client.credentials.to_request_body(),
            result_parser=JsonWebTokenPair.from_token_response,
            error_parser=BasicError.from_dict,
            requires_auth=False,
        )

    def refresh_token(
        self,
        refresh_token: str
    ) -> NordigenApiResponse:
        """
        Exchange a refresh token for a new access token.

        Parameters
        ----------
        refresh_token : str
            A refresh token that hasn't expired yet.

        Returns
        -------
        ApiSuccess[RefreshedAccessToken] or ApiFailure[BasicError]
        """
        return self.client.make_request(
            path="token/refresh/",
            method="POST",
            body={"refresh": refresh_token},
            result_parser=RefreshedAccessToken.from_token_response,
            error_parser=BasicError.from_dict,
            requires_auth=False,
        )
