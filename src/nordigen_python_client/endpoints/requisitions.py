from ..models import BasicError, BasicResponse, CreateRequisitionRequest, Requisition
from ..base_client import check_page_params, quote_id
from ..response import NordigenApiResponse
from ..pagination import ResponsePage


class RequisitionsEndpoint:
    """
    Provides access to the `requisitions/` endpoints.

    A requisition links an end user to their bank; once the user completes
    the flow behind `Requisition.link`, the linked account ids appear in
    `Requisition.accounts`.
    """

    def __init__(
        self,
        *,
        client
    ) -> None:
        self.client = client

    def get_requisitions(
        self,
        limit: int = 100,
        offset: int = 0
    ) -> NordigenApiResponse:
        """
        Retrieve one page of requisitions.

        Returns
        -------
        ApiSuccess[ResponsePage[Requisition]] or ApiFailure[BasicError]
        """
        check_page_params(limit, offset)

        return self.client.make_request(
            path="requisitions/",
            method="GET",
            query={"limit": limit, "offset": offset},
            result_parser=ResponsePage.parser(Requisition.from_dict),
            error_parser=BasicError.from_dict,
        )

    def get_requisition(
        self,
        requisition_id: str
    ) -> NordigenApiResponse:
        return self.client.make_request(
            path=f"requisitions/{quote_id(requisition_id, 'requisition_id')}/",
            method="GET",
            result_parser=Requisition.from_dict,
            error_parser=BasicError.from_dict,
        )

    def create_requisition(
        self,
        request: CreateRequisitionRequest
    ) -> NordigenApiResponse:
        """
        Create a requisition for an institution.

        Parameters
        ----------
        request : CreateRequisitionRequest
            Redirect URL, institution and optional agreement/reference.

        Returns
        -------
        ApiSuccess[Requisition] or ApiFailure[BasicError]
        """
        return self.client.make_request(
            path="requisitions/",
            method="POST",
            body=request.to_dict(),
            result_parser=Requisition.from_dict,
            error_parser=BasicError.from_dict,
        )

    def delete_requisition(
        self,
        requisition_id: str
    ) -> NordigenApiResponse:
        """
        Delete a requisition together with its end-user agreement.

        Returns
        -------
        ApiSuccess[BasicResponse] or ApiFailure[BasicError]
        """
        return self.client.make_request(
            path=f"requisitions/{quote_id(requisition_id, 'requisition_id')}/",
            method="DELETE",
            result_parser=BasicResponse.from_dict,
            error_parser=BasicError.from_dict,
        )
