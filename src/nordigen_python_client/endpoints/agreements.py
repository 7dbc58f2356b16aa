from ..models import Agreement, BasicError, BasicResponse, CreateAgreementRequest
from ..base_client import check_page_params, quote_id
from ..response import NordigenApiResponse
from ..pagination import ResponsePage


class AgreementsEndpoint:
    """Provides access to the `agreements/enduser/` endpoints."""

    def __init__(
        self,
        *,
        client
    ) -> None:
        self.client = client

    def get_agreements(
        self,
        limit: int = 100,
        offset: int = 0
    ) -> NordigenApiResponse:
        """
        Retrieve one page of end-user agreements.

        Parameters
        ----------
        limit : int
            Maximum number of agreements on the page.
        offset : int
            Index of the first agreement to return.

        Returns
        -------
        ApiSuccess[ResponsePage[Agreement]] or ApiFailure[BasicError]
        """
        check_page_params(limit, offset)

        return self.client.make_request(
            path="agreements/enduser/",
            method="GET",
            query={"limit": limit, "offset": offset},
            result_parser=ResponsePage.parser(Agreement.from_dict),
            error_parser=BasicError.from_dict,
        )

    def get_agreement(
        self,
        agreement_id: str
    ) -> NordigenApiResponse:
        """
        Retrieve a single agreement by id.

        Returns
        -------
        ApiSuccess[Agreement] or ApiFailure[BasicError]
        """
        return self.client.make_request(
            path=f"agreements/enduser/{quote_id(agreement_id, 'agreement_id')}/",
            method="GET",
            result_parser=Agreement.from_dict,
            error_parser=BasicError.from_dict,
        )

    def create_agreement(
        self,
        request: CreateAgreementRequest
    ) -> NordigenApiResponse:
        """
        Create an end-user agreement for an institution.

        Parameters
        ----------
        request : CreateAgreementRequest
            Access scope and validity of the agreement.

        Returns
        -------
        ApiSuccess[Agreement] or ApiFailure[BasicError]

        Raises
        ------
        ValueError
            If the requested durations are not positive.
        """
        if request.max_historical_days < 1 or request.access_valid_for_days < 1:
            raise ValueError(
                "max_historical_days and access_valid_for_days must be positive."
            )

        return self.client.make_request(
            path="agreements/enduser/",
            method="POST",
            body=request.to_dict(),
            result_parser=Agreement.from_dict,
            error_parser=BasicError.from_dict,
        )

    def delete_agreement(
        self,
        agreement_id: str
    ) -> NordigenApiResponse:
        """
        Delete an end-user agreement.

        Returns
        -------
        ApiSuccess[BasicResponse] or ApiFailure[BasicError]
        """
        return self.client.make_request(
            path=f"agreements/enduser/{quote_id(agreement_id, 'agreement_id')}/",
            method="DELETE",
            result_parser=BasicResponse.from_dict,
            error_parser=BasicError.from_dict,
        )
