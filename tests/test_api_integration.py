"""
Integration tests for the Account API
Tests end-to-end workflows using FastAPI TestClient
"""

import pytest
from fastapi.testclient import TestClient

from account_core.api import create_app
from account_core.api.dependencies import get_account_system
from account_core.config import AccountConfig
from account_core.storage import InMemoryStorage
from account_core.system import AccountSystem


@pytest.fixture
def system():
    """In-memory account system for a single test"""
    test_system = AccountSystem(
        storage=InMemoryStorage(),
        config=AccountConfig(database_url="memory://")
    )
    yield test_system
    test_system.close()


@pytest.fixture
def client(system):
    """Create a test client wired to the test account system"""
    app = create_app()
    app.dependency_overrides[get_account_system] = lambda: system
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def create_user(client, name="Daehun", user_id=12):
    r = client.post("/users", json={"name": name, "user_id": user_id})
    assert r.status_code == 201
    return r.json()["user_id"]


def create_account(client, user_id=12, initial_balance=10_000):
    r = client.post("/account", json={"user_id": user_id, "initial_balance": initial_balance})
    assert r.status_code == 201
    return r.json()["account_number"]


class TestHealthEndpoints:
    """Test basic health endpoint"""

    def test_health(self, client):
        """Test health endpoint"""
        r = client.get("/health")
        assert r.status_code == 200
        assert r.json()["status"] == "healthy"


class TestUserEndpoints:
    """Account owner registration"""

    def test_create_user(self, client):
        r = client.post("/users", json={"name": "Daehun", "user_id": 12})

        assert r.status_code == 201
        assert r.json() == {"user_id": 12, "name": "Daehun"}

    def test_create_user_sequential_id(self, client):
        r = client.post("/users", json={"name": "Sonny"})

        assert r.status_code == 201
        assert r.json()["user_id"] == 1

    def test_create_duplicate_user(self, client):
        create_user(client)

        r = client.post("/users", json={"name": "Again", "user_id": 12})
        assert r.status_code == 400
        assert r.json()["error_code"] == "INVALID_REQUEST"

    def test_create_user_without_name(self, client):
        r = client.post("/users", json={"name": ""})
        assert r.status_code == 422


class TestAccountFlow:
    """End-to-end account lifecycle tests"""

    def test_create_account(self, client):
        """Test opening an account"""
        create_user(client)

        r = client.post("/account", json={"user_id": 12, "initial_balance": 10_000})

        assert r.status_code == 201
        data = r.json()
        assert data["user_id"] == 12
        assert data["account_number"] == "0000000000"
        assert "registered_at" in data

    def test_create_account_unknown_user(self, client):
        r = client.post("/account", json={"user_id": 99, "initial_balance": 10_000})

        assert r.status_code == 404
        assert r.json() == {"error_code": "USER_NOT_FOUND", "error_message": "User not found"}

    def test_create_account_below_minimum_balance(self, client):
        """Test request validation rejects small opening balances"""
        create_user(client)

        r = client.post("/account", json={"user_id": 12, "initial_balance": 99})
        assert r.status_code == 422

    def test_create_account_limit(self, client):
        create_user(client)
        for _ in range(10):
            create_account(client)

        r = client.post("/account", json={"user_id": 12, "initial_balance": 10_000})
        assert r.status_code == 409
        assert r.json()["error_code"] == "MAX_ACCOUNT_PER_USER_10"

    def test_delete_account(self, client):
        """Test unregistering an emptied account"""
        create_user(client)
        account_number = create_account(client, initial_balance=1000)
        r = client.post("/transaction/use", json={
            "user_id": 12, "account_number": account_number, "amount": 1000
        })
        assert r.status_code == 200

        r = client.request("DELETE", "/account", json={"user_id": 12, "account_number": account_number})

        assert r.status_code == 200
        data = r.json()
        assert data["account_number"] == account_number
        assert data["unregistered_at"]

    def test_delete_account_with_balance(self, client):
        create_user(client)
        account_number = create_account(client)

        r = client.request("DELETE", "/account", json={"user_id": 12, "account_number": account_number})

        assert r.status_code == 409
        assert r.json()["error_code"] == "BALANCE_NOT_EMPTY"

    def test_list_accounts(self, client):
        create_user(client)
        first = create_account(client, initial_balance=1000)
        second = create_account(client, initial_balance=2000)

        r = client.get("/account", params={"user_id": 12})

        assert r.status_code == 200
        assert r.json() == [
            {"account_number": first, "balance": 1000, "account_status": "IN_USE"},
            {"account_number": second, "balance": 2000, "account_status": "IN_USE"},
        ]

    def test_list_accounts_unknown_user(self, client):
        r = client.get("/account", params={"user_id": 99})
        assert r.status_code == 404

    def test_get_account(self, client, system):
        create_user(client)
        account_number = create_account(client)
        account_id = system.repository.find_account_by_number(account_number).id

        r = client.get(f"/account/{account_id}")

        assert r.status_code == 200
        data = r.json()
        assert data["account_number"] == account_number
        assert data["balance"] == 10_000
        assert data["unregistered_at"] is None

    def test_get_account_negative_id(self, client):
        r = client.get("/account/-1")

        assert r.status_code == 400
        assert r.json()["error_code"] == "INVALID_ARGUMENT"

    def test_get_account_not_found(self, client):
        r = client.get("/account/404")

        assert r.status_code == 404
        assert r.json()["error_code"] == "ACCOUNT_NOT_FOUND"


class TestTransactionFlow:
    """End-to-end use/cancel tests"""

    def test_use_cancel_and_query(self, client):
        """Test use, cancel and lookup of both transactions"""
        create_user(client)
        account_number = create_account(client)

        r = client.post("/transaction/use", json={
            "user_id": 12, "account_number": account_number, "amount": 1000
        })
        assert r.status_code == 200
        used = r.json()
        assert used["transaction_type"] == "USE"
        assert used["transaction_result"] == "S"
        assert used["amount"] == 1000

        r = client.post("/transaction/cancel", json={
            "transaction_id": used["transaction_id"], "account_number": account_number, "amount": 1000
        })
        assert r.status_code == 200
        cancelled = r.json()
        assert cancelled["transaction_type"] == "CANCEL"
        assert cancelled["transaction_result"] == "S"

        r = client.get(f"/transaction/{used['transaction_id']}")
        assert r.status_code == 200
        assert r.json() == used

        r = client.get("/account", params={"user_id": 12})
        assert r.json()[0]["balance"] == 10_000

    def test_use_exceeding_balance(self, client):
        create_user(client)
        account_number = create_account(client, initial_balance=100)

        r = client.post("/transaction/use", json={
            "user_id": 12, "account_number": account_number, "amount": 1000
        })

        assert r.status_code == 409
        assert r.json()["error_code"] == "AMOUNT_EXCEED_BALANCE"

    def test_use_amount_below_minimum(self, client):
        create_user(client)
        account_number = create_account(client)

        r = client.post("/transaction/use", json={
            "user_id": 12, "account_number": account_number, "amount": 9
        })
        assert r.status_code == 422

    def test_partial_cancel(self, client):
        create_user(client)
        account_number = create_account(client)
        used = client.post("/transaction/use", json={
            "user_id": 12, "account_number": account_number, "amount": 1000
        }).json()

        r = client.post("/transaction/cancel", json={
            "transaction_id": used["transaction_id"], "account_number": account_number, "amount": 500
        })

        assert r.status_code == 409
        assert r.json()["error_code"] == "CANCEL_MUST_FULLY"

    def test_query_unknown_transaction(self, client):
        r = client.get("/transaction/missing")

        assert r.status_code == 404
        assert r.json()["error_code"] == "TRANSACTION_NOT_FOUND"
