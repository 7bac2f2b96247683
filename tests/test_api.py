"""
End-to-end tests through the HTTP API.
"""

import asyncio
import logging

import pytest
from fastapi.testclient import TestClient

from riddles.api.app import create_app
from riddles.auth.jwt import decode_token
from riddles.core.models import Role

from tests.conftest import ADMIN_CODE, bearer


# =============================================================================
# Auth Routes
# =============================================================================


class TestAuthRoutes:
    def test_alice_scenario(self, client, settings):
        response = client.post("/auth/register", json={"username": "alice", "password": "secret1"})
        assert response.status_code == 201
        body = response.json()
        assert body["success"] is True
        assert body["message"] == "User registered successfully"
        assert body["data"]["user"]["role"] == "user"
        
        response = client.post("/auth/register", json={"username": "alice", "password": "secret1"})
        assert response.status_code == 409
        assert response.json() == {
            "success": False,
            "error": {"message": "Username already exists", "statusCode": 409},
        }
        
        response = client.post("/auth/login", json={"username": "alice", "password": "wrong"})
        assert response.status_code == 401
        assert response.json()["error"]["message"] == "Invalid username or password"
        
        response = client.post("/auth/login", json={"username": "alice", "password": "secret1"})
        assert response.status_code == 200
        payload = decode_token(response.json()["data"]["token"], settings)
        assert payload.username == "alice"
        assert payload.role == Role.USER

    def test_unknown_user_same_message_as_wrong_password(self, client, register):
        register("alice")
        
        wrong = client.post("/auth/login", json={"username": "alice", "password": "nope-nope"})
        unknown = client.post("/auth/login", json={"username": "ghost", "password": "nope-nope"})
        
        assert wrong.status_code == unknown.status_code == 401
        assert wrong.json() == unknown.json()

    def test_register_validation_error(self, client):
        response = client.post("/auth/register", json={"username": "al", "password": "secret1"})
        
        assert response.status_code == 400
        assert response.json()["error"]["message"] == "Username must be at least 3 characters long"

    def test_register_wrong_type_is_400(self, client):
        response = client.post("/auth/register", json={"username": ["alice"], "password": "secret1"})
        
        assert response.status_code == 400
        error = response.json()["error"]
        assert error["statusCode"] == 400
        assert error["details"][0]["field"] == "username"

    def test_register_admin(self, client):
        response = client.post(
            "/auth/register",
            json={"username": "boss", "password": "secret1", "adminCode": ADMIN_CODE},
        )
        assert response.json()["data"]["user"]["role"] == "admin"

    def test_profile(self, client, register):
        token = register("alice")
        
        response = client.get("/auth/profile", headers=bearer(token))
        
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["username"] == "alice"
        assert data["role"] == "user"
        assert data["tokenExpiry"]

    def test_profile_requires_token(self, client):
        response = client.get("/auth/profile")
        
        assert response.status_code == 401
        assert response.json()["error"]["message"] == "Authentication token is required"

    def test_validate_with_query_and_custom_header(self, client, register):
        token = register("alice")
        
        by_query = client.post(f"/auth/validate?token={token}")
        by_header = client.post("/auth/validate", headers={"x-auth-token": token})
        
        for response in (by_query, by_header):
            assert response.status_code == 200
            data = response.json()["data"]
            assert data["valid"] is True
            assert data["user"]["username"] == "alice"
            assert data["expiresAt"]

    def test_logout(self, client, register):
        response = client.post("/auth/logout", headers=bearer(register("alice")))
        assert response.status_code == 200
        assert response.json()["success"] is True

    def test_change_password(self, client, register):
        token = register("alice")
        
        response = client.put(
            "/auth/change-password",
            headers=bearer(token),
            json={"currentPassword": "secret1", "newPassword": "secret2"},
        )
        assert response.status_code == 200
        
        login = client.post("/auth/login", json={"username": "alice", "password": "secret2"})
        assert login.status_code == 200


# =============================================================================
# Revocation
# =============================================================================


class TestRevocation:
    def test_role_change_revokes_token(self, client, register, storage):
        token = register("alice")
        player = asyncio.run(storage.players.get_by_username("alice"))
        asyncio.run(storage.players.update_role(player.id, Role.ADMIN))
        
        for _ in range(2):
            response = client.get("/auth/profile", headers=bearer(token))
            assert response.status_code == 401
            assert response.json()["error"]["message"] == "User role has changed. Please login again"

    def test_admin_role_endpoint_revokes_token(self, client, register):
        user_token = register("alice")
        admin_token = register("boss", admin_code=ADMIN_CODE)
        
        response = client.put(
            "/players/alice/role", headers=bearer(admin_token), json={"role": "admin"}
        )
        assert response.status_code == 200
        assert response.json()["data"]["role"] == "admin"
        
        response = client.get("/auth/profile", headers=bearer(user_token))
        assert response.status_code == 401
        
        relogin = client.post("/auth/login", json={"username": "alice", "password": "secret1"})
        fresh = relogin.json()["data"]["token"]
        assert client.get("/players", headers=bearer(fresh)).status_code == 200

    def test_role_endpoint_rejects_guest(self, client, register):
        register("alice")
        admin_token = register("boss", admin_code=ADMIN_CODE)

        response = client.put(
            "/players/alice/role", headers=bearer(admin_token), json={"role": "guest"}
        )

        assert response.status_code == 400
        assert response.json()["error"]["message"] == "Registered players cannot be demoted to guest"

    def test_deleted_user_token_rejected(self, client, register, storage):
        token = register("alice")
        player = asyncio.run(storage.players.get_by_username("alice"))
        asyncio.run(storage.players.delete(player.id))
        
        response = client.get("/auth/profile", headers=bearer(token))
        
        assert response.status_code == 401
        assert response.json()["error"]["message"] == "User not found or has been deleted"

    def test_tampered_token(self, client, register):
        header, payload, signature = register("alice").split(".")
        tampered = f"{header}.{payload}.{signature[::-1]}"
        
        response = client.get("/auth/profile", headers=bearer(tampered))
        
        assert response.status_code == 401
        assert response.json()["error"]["message"] == "Invalid token"


# =============================================================================
# Riddle Routes
# =============================================================================


class TestRiddleRoutes:
    NEW_RIDDLE = {"question": "New question", "answer": "New answer", "level": "medium"}

    def test_list_requires_token(self, client):
        response = client.get("/riddles")
        
        assert response.status_code == 401
        assert response.json()["error"]["message"] == "Authentication token is required"

    def test_user_creates_and_lists(self, client, register):
        token = register("alice")
        
        created = client.post("/riddles", headers=bearer(token), json=self.NEW_RIDDLE)
        assert created.status_code == 201
        riddle_id = created.json()["data"]["id"]
        
        listed = client.get("/riddles", headers=bearer(token))
        assert listed.status_code == 200
        assert listed.json()["count"] == 1
        
        fetched = client.get(f"/riddles/{riddle_id}", headers=bearer(token))
        assert fetched.json()["data"]["question"] == "New question"

    def test_create_without_token(self, client):
        assert client.post("/riddles", json=self.NEW_RIDDLE).status_code == 401

    def test_create_invalid(self, client, register):
        response = client.post(
            "/riddles", headers=bearer(register("alice")), json={"question": "Q", "answer": " "}
        )
        
        assert response.status_code == 400
        assert response.json()["error"]["message"] == "Invalid or missing 'answer'"

    def test_random_is_public(self, client, register):
        admin = register("boss", admin_code=ADMIN_CODE)
        assert client.get("/riddles/random").status_code == 404
        
        client.post("/riddles/load-initial", headers=bearer(admin))
        
        response = client.get("/riddles/random")
        assert response.status_code == 200
        assert response.json()["data"]["question"]

    def test_user_cannot_delete(self, client, register):
        token = register("alice")
        riddle_id = client.post("/riddles", headers=bearer(token), json=self.NEW_RIDDLE).json()["data"]["id"]
        
        response = client.delete(f"/riddles/{riddle_id}", headers=bearer(token))
        
        assert response.status_code == 403
        assert "Access denied" in response.json()["error"]["message"]

    def test_admin_updates_and_deletes(self, client, register):
        admin = register("boss", admin_code=ADMIN_CODE)
        riddle_id = client.post("/riddles", headers=bearer(admin), json=self.NEW_RIDDLE).json()["data"]["id"]
        
        updated = client.put(f"/riddles/{riddle_id}", headers=bearer(admin), json={"level": "hard"})
        assert updated.status_code == 200
        assert updated.json()["data"]["level"] == "hard"
        
        deleted = client.delete(f"/riddles/{riddle_id}", headers=bearer(admin))
        assert deleted.json()["data"] == {"deleted_id": riddle_id}
        
        missing = client.get(f"/riddles/{riddle_id}", headers=bearer(admin))
        assert missing.status_code == 404

    def test_load_initial_is_idempotent(self, client, register):
        admin = register("boss", admin_code=ADMIN_CODE)
        
        first = client.post("/riddles/load-initial", headers=bearer(admin)).json()["data"]
        second = client.post("/riddles/load-initial", headers=bearer(admin)).json()["data"]
        
        assert first["inserted"] > 0
        assert second["inserted"] == 0
        assert second["total"] == first["total"]


# =============================================================================
# Player Routes
# =============================================================================


class TestPlayerRoutes:
    def test_list_players_admin_only(self, client, register):
        user = register("alice")
        admin = register("boss", admin_code=ADMIN_CODE)
        
        assert client.get("/players").status_code == 401
        assert client.get("/players", headers=bearer(user)).status_code == 403
        
        response = client.get("/players", headers=bearer(admin))
        assert response.status_code == 200
        assert {p["username"] for p in response.json()["data"]} == {"alice", "boss"}
        assert all("password_hash" not in p for p in response.json()["data"])

    def test_create_player(self, client, register):
        admin = register("boss", admin_code=ADMIN_CODE)
        
        created = client.post("/players", headers=bearer(admin), json={"username": "newplayer"})
        again = client.post("/players", headers=bearer(admin), json={"username": "newplayer"})
        
        assert created.status_code == 201
        assert again.status_code == 200
        assert again.json()["message"] == "Player already exists"

    def test_user_cannot_create_player(self, client, register):
        response = client.post("/players", headers=bearer(register("alice")), json={"username": "x1y"})
        assert response.status_code == 403

    def test_leaderboard_requires_token(self, client):
        response = client.get("/players/leaderboard")
        
        assert response.status_code == 401
        assert response.json()["error"]["message"] == "Authentication token is required"

    def test_scores_and_leaderboard(self, client, register):
        alice = register("alice")
        bob = register("bobby")
        
        client.post("/players/submit-score", headers=bearer(alice), json={"riddleId": "r1", "timeToSolve": 9.0})
        client.post("/players/submit-score", headers=bearer(alice), json={"riddleId": "r2", "timeToSolve": 3.0})
        client.post("/players/submit-score", headers=bearer(bob), json={"riddleId": "r1", "timeToSolve": 5.0})
        
        response = client.get("/players/leaderboard", headers=bearer(bob))
        
        board = response.json()["data"]
        assert [entry["username"] for entry in board] == ["alice", "bobby"]
        assert board[0] == {"rank": 1, "username": "alice", "best_time": 3.0, "riddles_solved": 2}

    def test_user_cannot_submit_for_someone_else(self, client, register):
        alice = register("alice")
        
        response = client.post(
            "/players/submit-score",
            headers=bearer(alice),
            json={"username": "bobby", "riddleId": "r1", "timeToSolve": 5.0},
        )
        
        assert response.status_code == 403

    def test_submit_score_validation(self, client, register):
        response = client.post(
            "/players/submit-score",
            headers=bearer(register("alice")),
            json={"riddleId": "r1"},
        )
        
        assert response.status_code == 400

    @pytest.mark.parametrize("raw_time", ["Infinity", "-Infinity", "NaN", '"nan"', '"inf"'])
    def test_submit_score_rejects_non_finite_time(self, client, register, raw_time):
        alice = register("alice")
        bob = register("bobby")
        
        response = client.post(
            "/players/submit-score",
            headers={**bearer(alice), "Content-Type": "application/json"},
            content=f'{{"riddleId": "r1", "timeToSolve": {raw_time}}}',
        )
        
        assert response.status_code == 400
        assert response.json()["error"]["message"] == "timeToSolve must be a positive number"
        board = client.get("/players/leaderboard", headers=bearer(bob))
        assert board.status_code == 200
        assert board.json()["data"] == []

    def test_player_stats_visibility(self, client, register):
        alice = register("alice")
        bob = register("bobby")
        admin = register("boss", admin_code=ADMIN_CODE)
        client.post("/players/submit-score", headers=bearer(alice), json={"riddleId": "r1", "timeToSolve": 4.0})
        
        own = client.get("/players/alice", headers=bearer(alice)).json()["data"]
        as_admin = client.get("/players/alice", headers=bearer(admin)).json()["data"]
        as_other = client.get("/players/alice", headers=bearer(bob)).json()["data"]
        as_guest = client.get("/players/alice").json()["data"]
        
        assert own["best_time"] == 4.0
        assert own["detailed_history"][0]["riddle_id"] == "r1"
        assert as_admin == own
        assert set(as_other) == {"username", "created_at", "riddles_solved"}
        assert as_guest == as_other

    def test_player_stats_bad_token_rejected(self, client, register):
        register("alice")
        
        response = client.get("/players/alice", headers=bearer("garbage"))
        
        assert response.status_code == 401

    def test_unknown_player(self, client):
        response = client.get("/players/ghost")
        
        assert response.status_code == 404
        assert response.json()["error"]["message"] == "Player not found"


# =============================================================================
# System
# =============================================================================


def test_health(client):
    response = client.get("/health")
    
    assert response.status_code == 200
    assert response.json()["status"] == "OK"


def test_unknown_route_uses_error_envelope(client):
    response = client.get("/nope")
    
    assert response.status_code == 404
    assert response.json()["success"] is False
    assert response.json()["error"]["statusCode"] == 404


def test_request_log_names_caller(client, register, caplog):
    token = register("alice")
    caplog.set_level(logging.INFO, logger="riddles.api.app")
    
    client.get("/auth/profile", headers=bearer(token))
    client.get("/health")
    
    lines = [record.getMessage() for record in caplog.records if record.name == "riddles.api.app"]
    assert any("GET /auth/profile -> 200" in line and "caller=alice" in line for line in lines)
    assert any("GET /health -> 200" in line and "caller=anonymous" in line for line in lines)


def test_request_log_covers_unhandled_errors(settings, storage, caplog):
    app = create_app(settings, storage=storage)
    
    async def explode():
        raise RuntimeError("boom")
    
    app.add_api_route("/explode", explode)
    caplog.set_level(logging.INFO, logger="riddles.api.app")
    
    with TestClient(app, raise_server_exceptions=False) as test_client:
        response = test_client.get("/explode")
    
    assert response.status_code == 500
    lines = [record.getMessage() for record in caplog.records if record.name == "riddles.api.app"]
    assert any("GET /explode -> 500" in line for line in lines)
