from nordigen_python_client.toolbox import balances_to_dataframe, transactions_to_dataframe
from nordigen_python_client.models import AccountTransactions, Balance
import pandas as pd


def test_transactions_to_dataframe():
    transactions = AccountTransactions.from_response({
        "transactions": {
            "booked": [
                {
                    "transactionId": "t-2",
                    "bookingDate": "2020-11-12",
                    "valueDate": "2020-11-12",
                    "transactionAmount": {"amount": "45.00", "currency": "EUR"},
                    "debtorName": "MON MOTHMA",
                },
                {
                    "transactionId": "t-1",
                    "bookingDate": "2020-11-11",
                    "valueDate": "2020-11-11",
                    "transactionAmount": {"amount": "-15.00", "currency": "EUR"},
                    "creditorName": "Freshto Ltd",
                },
            ],
            "pending": [
                {
                    "valueDate": "2020-11-13",
                    "transactionAmount": {"amount": "10.00", "currency": "EUR"},
                },
            ],
        }
    })

    df = transactions_to_dataframe(transactions)

    assert list(df.columns) == [
        "status", "booking_date", "value_date", "amount", "currency",
        "creditor_name", "debtor_name", "description", "transaction_id"
    ]
    assert list(df["transaction_id"][:2]) == ["t-1", "t-2"]
    assert df["status"].iloc[-1] == "pending"
    assert df["amount"].dtype == "float64"
    assert df["amount"].sum() == 40.0
    assert pd.api.types.is_datetime64_any_dtype(df["booking_date"])


def test_transactions_to_dataframe_empty():
    df = transactions_to_dataframe(AccountTransactions(booked=[], pending=[]))
    assert df.empty
    assert "amount" in df.columns


def test_balances_to_dataframe():
    balances = Balance.list_from_response({
        "balances": [
            {
                "balanceAmount": {"amount": "1913.12", "currency": "EUR"},
                "balanceType": "expected",
                "referenceDate": "2020-11-22",
            },
            {
                "balanceAmount": {"amount": "1900.00", "currency": "EUR"},
                "balanceType": "interimAvailable",
            },
        ]
    })

    df = balances_to_dataframe(balances)

    assert df["amount"].tolist() == [1913.12, 1900.0]
    assert df["balance_type"].tolist() == ["expected", "interimAvailable"]
    assert pd.isna(df["reference_date"].iloc[1])
