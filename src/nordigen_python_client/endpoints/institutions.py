from ..base_client import quote_id
from ..response import NordigenApiResponse
from ..models import BasicError, Institution, list_of
from typing import Optional


class InstitutionsEndpoint:
    """
    Provides access to the `institutions/` endpoints.

    Attributes
    ----------
    client : NordigenClient
        Client whose request pipeline performs the calls.
    """

    def __init__(
        self,
        *,
        client
    ) -> None:
        self.client = client

    def get_institutions(
        self,
        *,
        country: Optional[str] = None,
        access_scopes_supported: Optional[bool] = None,
        account_selection_supported: Optional[bool] = None,
        payments_enabled: Optional[bool] = None
    ) -> NordigenApiResponse:
        """
        List the institutions supported by the API.

        Parameters
        ----------
        country : str, optional
            Two-letter ISO 3166 country code to filter by (e.g. "GB").
        access_scopes_supported : bool, optional
            Only institutions that support limiting the access scope.
        account_selection_supported : bool, optional
            Only institutions that let the user pick accounts.
        payments_enabled : bool, optional
            Only institutions that support payments.

        Returns
        -------
        ApiSuccess[list[Institution]] or ApiFailure[BasicError]

        Raises
        ------
        ValueError
            If `country` isn't a two-letter code.
        """
        if country is not None and (len(country) != 2 or not country.isalpha()):
            raise ValueError("country must be a two-letter ISO 3166 code.")

        query = {
            "country": country.lower() if country else None,
            "access_scopes_supported": access_scopes_supported,
            "account_selection_supported": account_selection_supported,
            "payments_enabled": payments_enabled,
        }

        return self.client.make_request(
            path="institutions/",
            method="GET",
            query=query,
            result_parser=list_of(Institution.from_dict),
            error_parser=BasicError.from_dict,
        )

    def get_institution(
        self,
        institution_id: str
    ) -> NordigenApiResponse:
        """
        Retrieve a single institution.

        Returns
        -------
        ApiSuccess[Institution] or ApiFailure[BasicError]
        """
        return self.client.make_request(
            path=f"institutions/{quote_id(institution_id, 'institution_id')}/",
            method="GET",
            result_parser=Institution.from_dict,
            error_parser=BasicError.from_dict,
        )
