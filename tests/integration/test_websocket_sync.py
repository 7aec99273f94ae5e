"""End-to-end WebSocket sync: snapshots, broadcasts, errors, convergence."""

from fastapi.testclient import TestClient

WS_URL = "/api/v1/ws"


def _send(ws, message_type: str, data: dict | None = None, request_id: str | None = None) -> None:
    message: dict = {"type": message_type, "data": data or {}}
    if request_id is not None:
        message["request_id"] = request_id
    ws.send_json(message)


def _apply(replica: dict, message: dict) -> None:
    """Apply a change event to a client-side replica of the board."""
    data = message["data"]
    columns = replica["columns"]
    if message["type"] == "task:created":
        columns[data["column"]].append(data["task"])
    elif message["type"] == "task:updated":
        tasks = columns[data["column"]]
        for i, task in enumerate(tasks):
            if task["id"] == data["task"]["id"]:
                tasks[i] = data["task"]
    elif message["type"] == "task:moved":
        columns[data["from_column"]] = [
            t for t in columns[data["from_column"]] if t["id"] != data["task_id"]
        ]
        columns[data["to_column"]].append(data["task"])
    elif message["type"] == "task:deleted":
        columns[data["column"]] = [
            t for t in columns[data["column"]] if t["id"] != data["task_id"]
        ]
    replica["version"] = message["seq"]


def test_connect_receives_initial_snapshot(sync_client: TestClient) -> None:
    with sync_client.websocket_connect(WS_URL) as ws:
        init = ws.receive_json()
        assert init["type"] == "board:init"
        assert init["seq"] == 0
        assert init["data"] == {
            "columns": {"To Do": [], "In Progress": [], "Done": []},
            "version": 0,
        }


def test_create_is_broadcast_to_every_client(sync_client: TestClient) -> None:
    """Both the sender and another client get task:created with the request id."""
    with sync_client.websocket_connect(WS_URL) as a, sync_client.websocket_connect(WS_URL) as b:
        a.receive_json()
        b.receive_json()
        _send(a, "task:create", {"title": "Fix login", "category": "Bug"}, request_id="c1")
        for ws in (a, b):
            event = ws.receive_json()
            assert event["type"] == "task:created"
            assert event["seq"] == 1
            assert event["request_id"] == "c1"
            assert event["data"]["column"] == "To Do"
            assert event["data"]["task"]["title"] == "Fix login"


def test_rejection_goes_to_requester_only(sync_client: TestClient) -> None:
    """A failed move produces an error for the sender and nothing for others."""
    with sync_client.websocket_connect(WS_URL) as a, sync_client.websocket_connect(WS_URL) as b:
        a.receive_json()
        b.receive_json()
        _send(
            a,
            "task:move",
            {"task_id": "ghost", "from_column": "To Do", "to_column": "Done"},
            request_id="m1",
        )
        error = a.receive_json()
        assert error["type"] == "error"
        assert error["error"] == "TASK_NOT_FOUND"
        assert error["request_id"] == "m1"

        # b sees the next successful change first, proving it got no error.
        _send(a, "task:create", {"title": "Real task"})
        assert b.receive_json()["type"] == "task:created"
        assert a.receive_json()["type"] == "task:created"


def test_malformed_messages(sync_client: TestClient) -> None:
    with sync_client.websocket_connect(WS_URL) as ws:
        ws.receive_json()
        ws.send_text("not json")
        assert ws.receive_json()["error"] == "VALIDATION_ERROR"
        _send(ws, "task:explode", request_id="x1")
        error = ws.receive_json()
        assert error["error"] == "VALIDATION_ERROR"
        assert error["request_id"] == "x1"
        _send(ws, "task:create", {"description": "no title"})
        error = ws.receive_json()
        assert error["details"]["field"] == "title"
        _send(ws, "task:create", {"title": "x", "column": "Backlog"})
        assert ws.receive_json()["error"] == "INVALID_COLUMN"


def test_ping_and_sync(sync_client: TestClient) -> None:
    with sync_client.websocket_connect(WS_URL) as ws:
        ws.receive_json()
        _send(ws, "ping", request_id="p1")
        pong = ws.receive_json()
        assert pong["type"] == "pong"
        assert pong["request_id"] == "p1"
        assert pong["timestamp"]

        _send(ws, "task:create", {"title": "One"})
        ws.receive_json()
        _send(ws, "sync:board", request_id="s1")
        sync = ws.receive_json()
        assert sync["type"] == "board:sync"
        assert sync["request_id"] == "s1"
        assert sync["data"]["version"] == 1
        assert [t["title"] for t in sync["data"]["columns"]["To Do"]] == ["One"]


def test_late_joiner_sees_current_board(sync_client: TestClient) -> None:
    with sync_client.websocket_connect(WS_URL) as a:
        a.receive_json()
        _send(a, "task:create", {"title": "Early", "column": "In Progress"})
        a.receive_json()
        with sync_client.websocket_connect(WS_URL) as b:
            init = b.receive_json()
            assert init["data"]["version"] == 1
            assert [t["title"] for t in init["data"]["columns"]["In Progress"]] == ["Early"]


def test_replicas_converge_with_rest_writes(sync_client: TestClient) -> None:
    """Events from both gateways keep every client's replica equal to the server board."""
    with sync_client.websocket_connect(WS_URL) as a, sync_client.websocket_connect(WS_URL) as b:
        replicas = [a.receive_json()["data"], b.receive_json()["data"]]

        _send(a, "task:create", {"id": "t1", "title": "Design"})
        _send(b, "task:create", {"id": "t2", "title": "Build"})
        response = sync_client.post("/api/v1/tasks", json={"id": "t3", "title": "Test"})
        assert response.status_code == 201
        _send(a, "task:move", {"taskId": "t1", "fromColumn": "To Do", "toColumn": "Done"})
        _send(b, "task:update", {"task_id": "t2", "priority": "High"})
        sync_client.delete("/api/v1/tasks/t3", params={"column": "To Do"})

        for ws, replica in zip((a, b), replicas):
            seqs = []
            for _ in range(6):
                message = ws.receive_json()
                seqs.append(message["seq"])
                _apply(replica, message)
            assert seqs == [1, 2, 3, 4, 5, 6]

        board = sync_client.get("/api/v1/board").json()
        assert replicas[0] == board
        assert replicas[1] == board


def test_status_counts_connections(sync_client: TestClient) -> None:
    with sync_client.websocket_connect(WS_URL) as ws:
        ws.receive_json()
        status = sync_client.get("/api/v1/ws/status").json()
        assert status["total_connections"] == 1


def test_binary_frames_are_handled(sync_client: TestClient) -> None:
    """A JSON command in a binary frame works; undecodable bytes get an error reply."""
    with sync_client.websocket_connect(WS_URL) as ws:
        ws.receive_json()
        ws.send_bytes(b'{"type": "ping", "request_id": "b1"}')
        pong = ws.receive_json()
        assert pong["type"] == "pong"
        assert pong["request_id"] == "b1"

        ws.send_bytes(b"\xc3\x28 not utf-8")
        assert ws.receive_json()["error"] == "VALIDATION_ERROR"

        _send(ws, "ping")
        assert ws.receive_json()["type"] == "pong"


def test_task_edit_is_an_update(sync_client: TestClient) -> None:
    with sync_client.websocket_connect(WS_URL) as ws:
        ws.receive_json()
        _send(ws, "task:create", {"id": "e1", "title": "Draft"})
        ws.receive_json()
        _send(ws, "task:edit", {"taskId": "e1", "title": "Final"})
        event = ws.receive_json()
        assert event["type"] == "task:updated"
        assert event["data"]["task"]["title"] == "Final"
