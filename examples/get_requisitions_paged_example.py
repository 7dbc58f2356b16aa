from nordigen_python_client.client import NordigenClient

if __name__ == "__main__":
    client = NordigenClient.from_env()

    first_page = client.requisitions.get_requisitions(limit=10, offset=0)
    if not first_page.is_success:
        raise SystemExit(f"{first_page.status_code}: {first_page.error}")

    requisitions = first_page.result.get_all_results(client, show_progress=True)
    for requisition in requisitions:
        print(requisition.id, requisition.status, requisition.reference)

    # Tokens can be stored and passed back as `token_pair=` next time.
    print(client.token_pair.to_dict())
