# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Integration tests for bank account and account type endpoints."""


def create_account(client, headers, number="001-100"):
    response = client.post(
        "/api/v1/bank-accounts",
        json={"name": "Operations", "account_number": number},
        headers=headers,
    )
    assert response.status_code == 201, response.text
    return response.json()


def test_requires_authentication(client):
    response = client.get("/api/v1/bank-accounts")
    assert response.status_code == 401


def test_teller_reads_but_cannot_create(client, teller_headers):
    response = client.get("/api/v1/bank-accounts", headers=teller_headers)
    assert response.status_code == 200
    assert response.json() == []

    response = client.post(
        "/api/v1/bank-accounts",
        json={"name": "Operations", "account_number": "001-100"},
        headers=teller_headers,
    )
    assert response.status_code == 403
    assert response.json()["detail"] == "Permission denied: create on bank_accounts"


def test_admin_manages_bank_accounts(client, admin_headers):
    account = create_account(client, admin_headers)

    response = client.post(
        "/api/v1/bank-accounts",
        json={"name": "Other", "account_number": "001-100"},
        headers=admin_headers,
    )
    assert response.status_code == 400

    response = client.put(
        f"/api/v1/bank-accounts/{account['id']}",
        json={"name": "Zakat Fund"},
        headers=admin_headers,
    )
    assert response.status_code == 200
    assert response.json()["name"] == "Zakat Fund"

    response = client.delete(
        f"/api/v1/bank-accounts/{account['id']}", headers=admin_headers
    )
    assert response.status_code == 204


def test_account_types(client, admin_headers, auditor_headers):
    account = create_account(client, admin_headers)

    response = client.post(
        "/api/v1/account-types",
        json={
            "name": "Mudarabah Savings",
            "bank_account_id": account["id"],
            "processing_fee": "2.50",
            "is_dividend_eligible": True,
        },
        headers=admin_headers,
    )
    assert response.status_code == 201
    account_type = response.json()

    response = client.get("/api/v1/account-types", headers=auditor_headers)
    assert response.status_code == 200
    assert [t["name"] for t in response.json()] == ["Mudarabah Savings"]

    response = client.put(
        f"/api/v1/account-types/{account_type['id']}",
        json={"is_active": False},
        headers=auditor_headers,
    )
    assert response.status_code == 403

    response = client.delete(
        f"/api/v1/bank-accounts/{account['id']}", headers=admin_headers
    )
    assert response.status_code == 409


def test_account_type_with_unknown_bank_account(client, admin_headers):
    response = client.post(
        "/api/v1/account-types",
        json={
            "name": "Qard",
            "bank_account_id": "00000000-0000-0000-0000-000000000000",
        },
        headers=admin_headers,
    )
    assert response.status_code == 400
