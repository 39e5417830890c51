"""Integration tests for the recording WebSocket endpoint."""

import time

from starlette.testclient import TestClient

from audiojournal.api.app import create_app
from audiojournal.core.models import AuthorizationStatus
from audiojournal.services.recording import StaticAuthorizer
from audiojournal.services.storage import InMemoryStorage
from tests.conftest import FakeSpeechBackend


def _receive_until(ws, predicate, limit=20):
    """Read messages until one matches *predicate*."""
    for _ in range(limit):
        msg = ws.receive_json()
        if predicate(msg):
            return msg
    raise AssertionError("expected WebSocket message was not received")


def _state(predicate):
    return lambda msg: msg["type"] == "state" and predicate(msg["data"])


def _authorize(ws):
    ws.send_json({"action": "authorize"})
    return _receive_until(ws, _state(lambda s: s["authorization_status"] == "authorized"))


# ---------------------------------------------------------------------------
# Connection
# ---------------------------------------------------------------------------


def test_websocket_connection(test_client: TestClient):
    """Connect and receive the 'connected' message plus the current state."""
    with test_client.websocket_connect("/ws/recording") as ws:
        msg = ws.receive_json()
        assert msg["type"] == "connected"
        assert msg["data"]["accepts_audio"] is True

        state = ws.receive_json()
        assert state["type"] == "state"
        assert state["data"]["is_recording"] is False
        assert state["data"]["transcript"] == ""


# ---------------------------------------------------------------------------
# Recording over the socket
# ---------------------------------------------------------------------------


def test_websocket_recording_flow(test_client: TestClient, speech_backend, sample_pcm_bytes):
    """start -> audio -> final result -> session ends, all observed as state messages."""
    with test_client.websocket_connect("/ws/recording") as ws:
        ws.receive_json()
        _authorize(ws)

        ws.send_json({"action": "start"})
        _receive_until(ws, _state(lambda s: s["is_recording"]))

        ws.send_bytes(sample_pcm_bytes)
        for _ in range(100):
            if test_client.portal.call(lambda: list(speech_backend.current.fed)):
                break
            time.sleep(0.01)
        assert test_client.portal.call(lambda: speech_backend.current.fed) == [sample_pcm_bytes]

        test_client.portal.call(speech_backend.current.emit, "Hello there")
        msg = _receive_until(ws, _state(lambda s: s["transcript"] == "Hello there"))
        assert msg["data"]["is_recording"] is True

        test_client.portal.call(speech_backend.current.emit, "Hello there.", True)
        msg = _receive_until(ws, _state(lambda s: not s["is_recording"]))
        assert msg["data"]["transcript"] == "Hello there."
        assert msg["data"]["state"] == "idle"


def test_websocket_stop_command(test_client: TestClient):
    with test_client.websocket_connect("/ws/recording") as ws:
        ws.receive_json()
        _authorize(ws)
        ws.send_json({"action": "start"})
        _receive_until(ws, _state(lambda s: s["is_recording"]))

        ws.send_json({"action": "stop"})
        msg = _receive_until(ws, _state(lambda s: not s["is_recording"]))
        assert msg["data"]["state"] == "idle"


def test_websocket_unknown_command(test_client: TestClient):
    with test_client.websocket_connect("/ws/recording") as ws:
        ws.receive_json()
        ws.send_text("dance")
        msg = _receive_until(ws, lambda m: m["type"] == "error")
        assert "Unknown command" in msg["data"]["detail"]


def test_websocket_start_refused(settings):
    """An unauthorized start is reported as an error message."""
    app = create_app(
        settings,
        storage=InMemoryStorage(),
        backend=FakeSpeechBackend(),
        authorizer=StaticAuthorizer(AuthorizationStatus.denied),
    )
    with TestClient(app) as client, client.websocket_connect("/ws/recording") as ws:
        ws.receive_json()
        ws.send_json({"action": "start"})
        msg = _receive_until(ws, lambda m: m["type"] == "error")
        assert msg["data"]["detail"] == "Recording did not start"


def test_websocket_disconnect_unsubscribes(test_client: TestClient):
    """Closing the socket removes its observer from the controller."""
    with test_client.websocket_connect("/ws/recording") as ws:
        ws.receive_json()
        ws.receive_json()

    controller = test_client.app.state.components.controller
    for _ in range(100):
        if not test_client.portal.call(lambda: len(controller._subscribers)):
            break
        time.sleep(0.01)
    assert test_client.portal.call(lambda: len(controller._subscribers)) == 0
