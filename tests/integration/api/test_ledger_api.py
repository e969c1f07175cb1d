"""API tests for the credit ledger routes

Tests cover:
- Customer creation and duplicate phone
- Posting, listing and voiding entries
- Payment recording, receipt, void
- Due summary, aging and due list
- Error body shape and status codes
"""

import pytest
from datetime import date, timedelta

from config import ApplicationConfig

PREFIX = ApplicationConfig.API_PREFIX


async def create_customer(client, phone="+919812345678", **extra):
    response = await client.post(f"{PREFIX}/customers", json={"name": "Asha Traders", "phone": phone, **extra})
    assert response.status_code == 201
    return response.json()


@pytest.mark.asyncio
class TestCustomerApi:
    async def test_create_and_get(self, client):
        created = await create_customer(client, credit_limit="5000")

        response = await client.get(f"{PREFIX}/customers/{created['id']}")

        assert response.status_code == 200
        assert response.json()["phone"] == "+919812345678"
        assert response.json()["current_balance"] == "0.00"

    async def test_duplicate_phone_conflict(self, client):
        await create_customer(client)

        response = await client.post(f"{PREFIX}/customers", json={"name": "Other", "phone": "+919812345678"})

        assert response.status_code == 409
        assert response.json()["error"]["code"] == "DUPLICATE_PHONE"

    async def test_invalid_phone(self, client):
        response = await client.post(f"{PREFIX}/customers", json={"name": "Other", "phone": "call me"})

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INVALID_PHONE"

    async def test_unknown_customer(self, client):
        response = await client.get(f"{PREFIX}/customers/999/balance")

        assert response.status_code == 404
        assert response.json() == {"error": {"code": "CUSTOMER_NOT_FOUND", "message": "Customer 999 not found"}}

    async def test_deactivate(self, client):
        created = await create_customer(client)

        response = await client.delete(f"{PREFIX}/customers/{created['id']}")

        assert response.status_code == 200
        assert response.json()["is_active"] is False


@pytest.mark.asyncio
class TestLedgerApi:
    async def test_post_list_void(self, client):
        customer = await create_customer(client)
        entries_url = f"{PREFIX}/customers/{customer['id']}/entries"

        posted = await client.post(entries_url, json={"description": "Groceries", "debit": "1000"})
        assert posted.status_code == 201
        assert posted.json()["balance"] == "1000.00"

        listed = await client.get(entries_url)
        assert listed.status_code == 200
        assert listed.json()["total"] == 1

        voided = await client.post(f"{PREFIX}/entries/{posted.json()['id']}/void", json={"reason": "Wrong customer"})
        assert voided.status_code == 200
        assert voided.json()["balance"] == "0.00"
        assert voided.json()["reverses_entry_id"] == posted.json()["id"]

        again = await client.post(f"{PREFIX}/entries/{posted.json()['id']}/void", json={})
        assert again.status_code == 409
        assert again.json()["error"]["code"] == "ALREADY_VOIDED"

        balance = await client.get(f"{PREFIX}/customers/{customer['id']}/balance")
        assert balance.json()["current_balance"] == "0.00"

    async def test_both_amounts_rejected(self, client):
        customer = await create_customer(client)

        response = await client.post(
            f"{PREFIX}/customers/{customer['id']}/entries",
            json={"description": "Mixed", "debit": "50", "credit": "50"},
        )

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INVALID_ENTRY"

    async def test_oversized_amount_rejected(self, client):
        customer = await create_customer(client)

        response = await client.post(
            f"{PREFIX}/customers/{customer['id']}/entries", json={"description": "Typo", "debit": "1e30"}
        )

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INVALID_AMOUNT"

    async def test_post_for_unknown_customer(self, client):
        response = await client.post(f"{PREFIX}/customers/999/entries", json={"description": "Sale", "debit": "5"})

        assert response.status_code == 404

    async def test_void_unknown_entry(self, client):
        response = await client.post(f"{PREFIX}/entries/999/void", json={})

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "ENTRY_NOT_FOUND"


@pytest.mark.asyncio
class TestPaymentApi:
    async def test_record_receipt_void(self, client, mock_notifier):
        customer = await create_customer(client)
        await client.post(
            f"{PREFIX}/customers/{customer['id']}/entries", json={"description": "Groceries", "debit": "1000"}
        )

        recorded = await client.post(
            f"{PREFIX}/customers/{customer['id']}/payments",
            json={"amount": "400", "method": "bank", "reference": "TXN-9981", "via": "whatsapp"},
        )
        assert recorded.status_code == 201
        payment = recorded.json()
        assert payment["balance_after"] == "600.00"
        assert payment["status"] == "completed"

        receipt = await client.get(f"{PREFIX}/receipts/{payment['receipt_number']}")
        assert receipt.status_code == 200
        assert receipt.json()["method_label"] == "Bank Transfer"
        assert receipt.json()["customer_name"] == "Asha Traders"

        listed = await client.get(f"{PREFIX}/customers/{customer['id']}/payments")
        assert listed.json()["total"] == 1

        voided = await client.post(f"{PREFIX}/payments/{payment['id']}/void", json={"reason": "Bounced"})
        assert voided.status_code == 200
        assert voided.json()["status"] == "refunded"
        assert voided.json()["balance_after"] == "1000.00"

        # welcome + payment confirmation
        assert mock_notifier.dispatch.call_count == 2

    async def test_payment_entry_cannot_be_voided_directly(self, client):
        customer = await create_customer(client)
        recorded = await client.post(
            f"{PREFIX}/customers/{customer['id']}/payments", json={"amount": "250", "method": "cash"}
        )
        payment = recorded.json()

        response = await client.post(f"{PREFIX}/entries/{payment['ledger_entry_id']}/void", json={})

        assert response.status_code == 409
        assert response.json()["error"]["code"] == "ENTRY_BELONGS_TO_PAYMENT"

        voided = await client.post(f"{PREFIX}/payments/{payment['id']}/void", json={})
        assert voided.status_code == 200
        assert voided.json()["status"] == "refunded"

    async def test_unknown_receipt(self, client):
        response = await client.get(f"{PREFIX}/receipts/RCP-0000-000000")

        assert response.status_code == 404

    async def test_non_positive_amount_is_validation_error(self, client):
        customer = await create_customer(client)

        response = await client.post(
            f"{PREFIX}/customers/{customer['id']}/payments", json={"amount": "0", "method": "cash"}
        )

        assert response.status_code == 422


@pytest.mark.asyncio
class TestDuesApi:
    async def test_due_summary_aging_and_list(self, client):
        customer = await create_customer(client)
        yesterday = (date.today() - timedelta(days=1)).isoformat()
        await client.post(
            f"{PREFIX}/customers/{customer['id']}/entries",
            json={"description": "Fertilizer", "debit": "500", "due_date": yesterday},
        )

        summary = await client.get(f"{PREFIX}/customers/{customer['id']}/dues")
        assert summary.status_code == 200
        assert summary.json()["overdue_amount"] == "500.00"
        assert summary.json()["due_today"] == "0.00"

        aging = await client.get(f"{PREFIX}/customers/{customer['id']}/aging")
        buckets = {b["range_label"]: b["amount"] for b in aging.json()["buckets"]}
        assert buckets["0-30"] == "500.00"

        dues = await client.get(f"{PREFIX}/dues")
        assert [row["customer_id"] for row in dues.json()["customers"]] == [customer["id"]]
