from .models import AccountTransactions, Balance
from typing import List
import pandas as pd


TRANSACTION_COLUMNS = [
    "status", "booking_date", "value_date", "amount", "currency",
    "creditor_name", "debtor_name", "description", "transaction_id"
]


def transactions_to_dataframe(
    transactions: AccountTransactions
) -> pd.DataFrame:
    """
    Convert the transactions of an account into a pandas DataFrame.

    Booked and pending transactions are stacked into one frame and told
    apart by the `status` column.

    The function:
    1. Flattens each transaction (amount and currency become columns).
    2. Tags rows as "booked" or "pending".
    3. Enforces dtypes: amounts as float64, dates as datetime64.
    4. Sorts by booking date, keeping pending rows (no date) last.

    Parameters
    ----------
    transactions : AccountTransactions
        Result of `AccountsEndpoint.get_transactions()`.

    Returns
    -------
    pandas.DataFrame
        A DataFrame with the schema:
        ['status', 'booking_date', 'value_date', 'amount', 'currency',
         'creditor_name', 'debtor_name', 'description', 'transaction_id'].

    Raises
    ------
    ValueError
        If an amount can't be converted to a number.
    """
    rows = []
    for status, items in (
        ("booked", transactions.booked),
        ("pending", transactions.pending),
    ):
        for t in items:
            rows.append({
                "status": status,
                "booking_date": t.booking_date,
                "value_date": t.value_date,
                "amount": t.transaction_amount.amount,
                "currency": t.transaction_amount.currency,
                "creditor_name": t.creditor_name,
                "debtor_name": t.debtor_name,
                "description": t.remittance_information_unstructured,
                "transaction_id": t.transaction_id,
            })

    df = pd.DataFrame(rows, columns=TRANSACTION_COLUMNS)

    # Enforce dtypes
    df["amount"] = df["amount"].astype("float64")
    df["booking_date"] = pd.to_datetime(df["booking_date"])
    df["value_date"] = pd.to_datetime(df["value_date"])

    df = df.sort_values("booking_date", na_position="last", kind="stable")
    return df.reset_index(drop=True)


def balances_to_dataframe(
    balances: List[Balance]
) -> pd.DataFrame:
    """
    Convert a list of balances into a DataFrame with the columns
    ['balance_type', 'amount', 'currency', 'reference_date'].
    """
    df = pd.DataFrame(
        [
            {
                "balance_type": b.balance_type,
                "amount": b.balance_amount.amount,
                "currency": b.balance_amount.currency,
                "reference_date": b.reference_date,
            }
            for b in balances
        ],
        columns=["balance_type", "amount", "currency", "reference_date"],
    )

    df["amount"] = df["amount"].astype("float64")
    df["reference_date"] = pd.to_datetime(df["reference_date"])
    return df
