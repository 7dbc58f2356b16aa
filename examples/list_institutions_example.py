from nordigen_python_client.client import NordigenClient

if __name__ == "__main__":
    # Reads NORDIGEN_SECRET_ID / NORDIGEN_SECRET_KEY from the environment.
    client = NordigenClient.from_env()

    response = client.institutions.get_institutions(country="GB")
    if response.is_success:
        for institution in response.result:
            print(institution.id, institution.name)
    else:
        print(response.status_code, response.error)
