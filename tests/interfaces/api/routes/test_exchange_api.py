"""Integration tests for the request and notification endpoints."""

from __future__ import annotations

import pytest

pytest.importorskip("fastapi")
from fastapi.testclient import TestClient  # noqa: E402
from starlette.websockets import WebSocketDisconnect  # noqa: E402

from app.infrastructure.security import create_access_token  # noqa: E402
from conftest import ALICE, BOB, BOOK_1984, BOOK_DUNE, CAROL  # noqa: E402
from main import create_app  # noqa: E402


def _headers(user_id: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token({'sub': user_id})}"}


@pytest.fixture
def client(engine, seeded):
    app = create_app(engine=engine)
    with TestClient(app) as test_client:
        yield test_client


def _create(client: TestClient, user_id: str = BOB, **payload) -> dict:
    body = {"book_id": BOOK_1984, "owner_id": ALICE, "message": "interested", **payload}
    response = client.post("/requests/", json=body, headers=_headers(user_id))
    assert response.status_code == 201, response.text
    return response.json()


def test_request_lifecycle(client: TestClient) -> None:
    """Bob asks for "1984", Alice accepts and Bob receives the answer."""

    created = _create(client)
    assert created["status"] == "pending"

    received = client.get("/requests/", headers=_headers(ALICE)).json()["received"]
    assert [(item["id"], item["message"]) for item in received] == [(created["id"], "interested")]
    assert received[0]["book_title"] == "1984"

    response = client.post(
        f"/requests/{created['id']}/respond",
        json={"decision": "accepted", "response_message": "sure"},
        headers=_headers(ALICE),
    )
    assert response.status_code == 200
    assert response.json()["status"] == "accepted"

    notifications = client.get(
        "/notifications/", params={"unread_only": True}, headers=_headers(BOB)
    ).json()
    assert len(notifications) == 1
    assert notifications[0]["type"] == "request_accepted"
    assert "sure" in notifications[0]["message"]


def test_missing_token_is_rejected(client: TestClient) -> None:
    response = client.get("/requests/")

    assert response.status_code == 401
    assert response.json()["detail"]["code"] == "unauthenticated"
    assert client.get("/notifications/", headers={"Authorization": "Bearer nope"}).status_code == 401


def test_duplicate_request_conflict(client: TestClient) -> None:
    _create(client)

    response = client.post(
        "/requests/",
        json={"book_id": BOOK_1984, "owner_id": ALICE, "message": "again"},
        headers=_headers(BOB),
    )

    assert response.status_code == 409
    assert response.json()["detail"]["code"] == "duplicate_request"
    assert len(client.get("/requests/", headers=_headers(BOB)).json()["sent"]) == 1


@pytest.mark.parametrize(
    ("user_id", "payload", "expected_status", "expected_code"),
    [
        (BOB, {"book_id": BOOK_DUNE, "owner_id": BOB}, 403, "invalid_operation"),
        (BOB, {"book_id": "missing"}, 404, "not_found"),
        (BOB, {"message": "   "}, 400, "validation_error"),
        (CAROL, {"owner_id": CAROL}, 403, "invalid_operation"),
    ],
)
def test_create_request_errors(client, user_id, payload, expected_status, expected_code) -> None:
    body = {"book_id": BOOK_1984, "owner_id": ALICE, "message": "interested", **payload}

    response = client.post("/requests/", json=body, headers=_headers(user_id))

    assert response.status_code == expected_status
    assert response.json()["detail"]["code"] == expected_code


def test_respond_errors(client: TestClient) -> None:
    created = _create(client)
    url = f"/requests/{created['id']}/respond"

    forbidden = client.post(url, json={"decision": "accepted"}, headers=_headers(CAROL))
    assert forbidden.status_code == 403

    invalid = client.post(url, json={"decision": "maybe"}, headers=_headers(ALICE))
    assert invalid.status_code == 400

    assert client.post(url, json={"decision": "rejected"}, headers=_headers(ALICE)).status_code == 200
    twice = client.post(url, json={"decision": "accepted"}, headers=_headers(ALICE))
    assert twice.status_code == 409
    assert twice.json()["detail"]["code"] == "invalid_state_transition"

    missing = client.post("/requests/missing/respond", json={"decision": "accepted"}, headers=_headers(ALICE))
    assert missing.status_code == 404


def test_mark_read_endpoints(client: TestClient) -> None:
    _create(client)
    _create(client, user_id=CAROL, message="me too")
    notifications = client.get("/notifications/", headers=_headers(ALICE)).json()
    first_id = notifications[0]["id"]

    response = client.post(
        "/notifications/read", json={"ids": [first_id, first_id]}, headers=_headers(ALICE)
    )
    assert response.status_code == 200
    assert [item["id"] for item in response.json()["updated"]] == [first_id]
    assert response.json()["unread_count"] == 1

    again = client.post("/notifications/read", json={"ids": [first_id]}, headers=_headers(ALICE))
    assert again.json() == {"updated": [], "unread_count": 1}

    everything = client.post("/notifications/read-all", headers=_headers(ALICE))
    assert everything.json()["unread_count"] == 0
    assert len(everything.json()["updated"]) == 1


def test_websocket_streams_changes(client: TestClient) -> None:
    _create(client, user_id=CAROL, message="first")
    token = create_access_token({"sub": ALICE})

    with client.websocket_connect(f"/notifications/ws?token={token}") as websocket:
        init = websocket.receive_json()
        assert init["type"] == "init"
        assert [item["message"] for item in init["data"]][0].startswith("Carol wants to borrow")

        _create(client)
        changes = [websocket.receive_json(), websocket.receive_json()]
        assert {message["type"] for message in changes} == {"change"}
        assert {message["data"]["table"] for message in changes} == {"requests", "notifications"}
        inserted = next(m["data"] for m in changes if m["data"]["table"] == "notifications")
        assert inserted["event_type"] == "INSERT"
        assert inserted["new"]["user_id"] == ALICE

        websocket.send_json({"type": "ack", "ids": [inserted["new"]["id"]]})
        websocket.send_json({"type": "ping"})
        replies = [websocket.receive_json(), websocket.receive_json()]
        assert {message["type"] for message in replies} == {"change", "pong"}

    unread = client.get(
        "/notifications/", params={"unread_only": True}, headers=_headers(ALICE)
    ).json()
    assert [item["message"] for item in unread][0].startswith("Carol wants to borrow")
    assert len(unread) == 1


def test_websocket_rejects_invalid_token(client: TestClient) -> None:
    with pytest.raises(WebSocketDisconnect) as excinfo:
        with client.websocket_connect("/notifications/ws?token=invalid") as websocket:
            websocket.receive_json()

    assert excinfo.value.code == 1008
