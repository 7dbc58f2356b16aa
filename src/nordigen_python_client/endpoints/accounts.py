from concurrent.futures import ThreadPoolExecutor, as_completed
from ..models import Account, AccountDetails, AccountTransactions, Balance, BasicError
from ..response import NordigenApiResponse, expect_success
from typing import Any, Dict, List, Optional
from ..base_client import quote_id
import numpy as np


class AccountsEndpoint:
    """
    Provides access to the `accounts/` endpoints.

    Account ids are obtained from a linked `Requisition`. Balances, details
    and transactions are fetched live from the bank and are subject to
    the bank's rate limits.
    """

    def __init__(
        self,
        *,
        client
    ) -> None:
        self.client = client

    def _normalize_date(self, ds: Any) -> str:
        """
        Normalize an input date to YYYY-MM-DD (day precision).

        Raises
        ------
        ValueError
            If the input format cannot be parsed.
        """
        try:
            return str(np.datetime64(ds, "D"))
        except Exception:
            raise ValueError(f"Invalid date format: {ds}")

    def get_account(
        self,
        account_id: str
    ) -> NordigenApiResponse:
        """
        Retrieve account metadata.

        Returns
        -------
        ApiSuccess[Account] or ApiFailure[BasicError]
        """
        return self.client.make_request(
            path=f"accounts/{quote_id(account_id, 'account_id')}/",
            method="GET",
            result_parser=Account.from_dict,
            error_parser=BasicError.from_dict,
        )

    def get_balances(
        self,
        account_id: str
    ) -> NordigenApiResponse:
        """
        Retrieve the balances of an account.

        Returns
        -------
        ApiSuccess[list[Balance]] or ApiFailure[BasicError]
        """
        return self.client.make_request(
            path=f"accounts/{quote_id(account_id, 'account_id')}/balances/",
            method="GET",
            result_parser=Balance.list_from_response,
            error_parser=BasicError.from_dict,
        )

    def get_account_details(
        self,
        account_id: str
    ) -> NordigenApiResponse:
        return self.client.make_request(
            path=f"accounts/{quote_id(account_id, 'account_id')}/details/",
            method="GET",
            result_parser=AccountDetails.from_response,
            error_parser=BasicError.from_dict,
        )

    def get_transactions(
        self,
        account_id: str,
        *,
        date_from: Optional[Any] = None,
        date_to: Optional[Any] = None
    ) -> NordigenApiResponse:
        """
        Retrieve booked and pending transactions of an account.

        Parameters
        ----------
        account_id : str
            The account id.
        date_from : str or date, optional
            First booking date to include.
        date_to : str or date, optional
            Last booking date to include.

        Returns
        -------
        ApiSuccess[AccountTransactions] or ApiFailure[BasicError]

        Raises
        ------
        ValueError
            If a date can't be parsed or `date_from` is after `date_to`.
        """
        f_date = self._normalize_date(date_from) if date_from is not None else None
        l_date = self._normalize_date(date_to) if date_to is not None else None

        if f_date and l_date and f_date > l_date:
            raise ValueError("date_from can't be greater than date_to.")

        return self.client.make_request(
            path=f"accounts/{quote_id(account_id, 'account_id')}/transactions/",
            method="GET",
            query={"date_from": f_date, "date_to": l_date},
            result_parser=AccountTransactions.from_response,
            error_parser=BasicError.from_dict,
        )

    def get_transactions_for_accounts(
        self,
        account_ids: List[str],
        *,
        date_from: Optional[Any] = None,
        date_to: Optional[Any] = None,
        max_workers: int = 4
    ) -> Dict[str, AccountTransactions]:
        """
        Fetch transactions of several accounts concurrently.

        Parameters
        ----------
        account_ids : list[str]
            Accounts to query.
        date_from, date_to : str or date, optional
            Booking date range applied to every account.
        max_workers : int
            Number of threads used for the requests.

        Returns
        -------
        dict
            Mapping of account id to its transactions.

        Raises
        ------
        ValueError
            If no account ids are given.
        NordigenApiError
            If the API rejects any of the requests.
        """
        if not account_ids:
            raise ValueError("At least one account must be provided.")

        results: Dict[str, AccountTransactions] = {}

        with ThreadPoolExecutor(max_workers=max_workers) as ex:
            futures = {
                ex.submit(
                    self.get_transactions,
                    account_id,
                    date_from=date_from,
                    date_to=date_to,
                ): account_id
                for account_id in account_ids
            }

            for fut in as_completed(futures):
                results[futures[fut]] = expect_success(fut.result())

        return results
