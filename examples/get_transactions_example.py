from nordigen_python_client.toolbox import transactions_to_dataframe
from nordigen_python_client.client import NordigenClient
import sys

if __name__ == "__main__":
    client = NordigenClient.from_env()

    # Accounts linked by the end user through a requisition
    requisition = client.requisitions.get_requisition(sys.argv[1])
    if not requisition.is_success:
        sys.exit(f"{requisition.status_code}: {requisition.error}")

    transactions = client.accounts.get_transactions_for_accounts(
        requisition.result.accounts,
        date_from="2024-01-01",
        max_workers=4,
    )

    for account_id, account_transactions in transactions.items():
        print(account_id)
        print(transactions_to_dataframe(account_transactions))
