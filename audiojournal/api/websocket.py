"""WebSocket endpoint for observing (and driving) the recording session.

The server pushes a ``state`` message with a ``RecordingSnapshot`` every
time the controller changes: recording started or stopped, a new partial
transcript, authorization changed.

Client messages:
    - text ``{"action": "start" | "stop" | "authorize"}`` drives the controller.
    - binary frames are raw PCM (16-bit, mono, configured sample rate) and are
      forwarded to the capture stream when the ``stream`` capture provider is
      configured.
"""

import asyncio
import json
import logging

from fastapi import APIRouter, WebSocket

from audiojournal.core.models import WebSocketMessage, WebSocketMessageType
from audiojournal.services.audio import StreamAudioCapture

logger = logging.getLogger(__name__)

router = APIRouter()


def _message(kind: WebSocketMessageType, data: dict) -> dict:
    return WebSocketMessage(type=kind, data=data).model_dump(mode="json")


@router.websocket("/ws/recording")
async def recording_ws(websocket: WebSocket) -> None:
    """Stream controller snapshots to the client; accept commands and PCM audio."""
    await websocket.accept()
    components = websocket.app.state.components
    controller = components.controller
    capture = components.capture
    accepts_audio = isinstance(capture, StreamAudioCapture)

    await websocket.send_json(
        _message(WebSocketMessageType.connected, {"accepts_audio": accepts_audio})
    )
    updates = controller.subscribe()

    async def forward_updates() -> None:
        while True:
            snapshot = await updates.get()
            await websocket.send_json(
                _message(WebSocketMessageType.state, snapshot.model_dump(mode="json"))
            )

    async def handle_command(text: str) -> None:
        try:
            action = json.loads(text).get("action")
        except (ValueError, AttributeError):
            action = None
        if action == "start":
            if not controller.start_recording():
                await websocket.send_json(
                    _message(WebSocketMessageType.error, {"detail": "Recording did not start"})
                )
        elif action == "stop":
            controller.stop_recording()
        elif action == "authorize":
            await controller.request_authorization()
        else:
            await websocket.send_json(
                _message(WebSocketMessageType.error, {"detail": f"Unknown command: {text!r}"})
            )

    forwarder = asyncio.create_task(forward_updates())
    try:
        while True:
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                break
            if message.get("bytes") is not None:
                if accepts_audio:
                    capture.push(message["bytes"])
            elif message.get("text") is not None:
                await handle_command(message["text"])
    except Exception:
        logger.exception("Recording WebSocket failed")
    finally:
        forwarder.cancel()
        controller.unsubscribe(updates)
        await asyncio.gather(forwarder, return_exceptions=True)
    logger.info("Recording WebSocket disconnected")
