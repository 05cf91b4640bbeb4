"""
Tests for coin account API endpoints.
"""


class TestOpenAccount:

    def test_open_account_returns_201(self, client):
        response = client.post("/accounts", json={"user_id": "alice"})

        assert response.status_code == 201
        data = response.json()
        assert data["user_id"] == "alice"
        assert data["balance"] == 0

    def test_duplicate_returns_409(self, client):
        client.post("/accounts", json={"user_id": "alice"})

        response = client.post("/accounts", json={"user_id": "alice"})

        assert response.status_code == 409
        assert response.json()["kind"] == "AccountAlreadyExists"

    def test_negative_initial_balance_rejected(self, client):
        response = client.post("/accounts", json={
            "user_id": "alice",
            "initial_balance": -1,
        })

        assert response.status_code == 400
        assert response.json()["kind"] == "InvalidAmount"


class TestReadAccount:

    def test_balance(self, client):
        client.post("/accounts", json={"user_id": "alice", "initial_balance": 500})

        response = client.get("/accounts/alice/balance")

        assert response.status_code == 200
        assert response.json() == {"account_id": "alice", "balance": 500}

    def test_unknown_account_returns_404(self, client):
        response = client.get("/accounts/ghost-id")

        assert response.status_code == 404
        assert response.json() == {
            "kind": "AccountNotFound",
            "message": "Account ghost-id not found",
        }

    def test_entries_newest_first(self, client):
        client.post("/accounts", json={"user_id": "alice", "initial_balance": 500})
        client.post("/ledger/debit", json={
            "account_id": "alice",
            "amount": 200,
            "reason": "game_unlock",
            "related_resource": "epic-era-battles",
        })
        client.post("/ledger/credit", json={
            "account_id": "alice",
            "amount": 50,
            "reason": "quiz_reward",
        })

        response = client.get("/accounts/alice/entries")

        assert response.status_code == 200
        entries = response.json()
        assert [e["kind"] for e in entries] == ["credit", "debit", "credit"]
        assert [e["resulting_balance"] for e in entries] == [350, 300, 500]
        assert entries[1]["related_resource"] == "epic-era-battles"

    def test_entries_limit(self, client):
        client.post("/accounts", json={"user_id": "alice", "initial_balance": 500})
        client.post("/ledger/credit", json={
            "account_id": "alice",
            "amount": 50,
            "reason": "quiz_reward",
        })

        response = client.get("/accounts/alice/entries", params={"limit": 1})

        assert len(response.json()) == 1

    def test_verify(self, client):
        client.post("/accounts", json={"user_id": "alice", "initial_balance": 500})
        client.post("/ledger/debit", json={
            "account_id": "alice",
            "amount": 120,
            "reason": "game_unlock",
        })

        response = client.get("/accounts/alice/verify")

        assert response.status_code == 200
        data = response.json()
        assert data["is_consistent"] is True
        assert data["balance"] == data["replayed_balance"] == 380
        assert data["entry_count"] == 2

    def test_boolean_initial_balance_rejected(self, client):
        response = client.post("/accounts", json={
            "user_id": "alice",
            "initial_balance": True,
        })

        assert response.status_code == 400
        assert response.json()["kind"] == "InvalidAmount"
        assert client.get("/accounts/alice").status_code == 404
