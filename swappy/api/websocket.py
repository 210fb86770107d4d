"""WebSocket endpoint for live transient detection."""

import json
import logging

import numpy as np
from fastapi import APIRouter, Query, WebSocket, WebSocketDisconnect
from pydantic import ValidationError

from swappy.api.schemas import ErrorMessage, SetThresholdMessage, TransientMessage
from swappy.audio.stream import FrameAssembler
from swappy.config import settings
from swappy.session import AudioSessionController

logger = logging.getLogger(__name__)

router = APIRouter()

_DEFAULT_LIVE_SR = 44100


@router.websocket("/ws/transients")
async def live_transients(
    websocket: WebSocket,
    sample_rate: int = Query(_DEFAULT_LIVE_SR, gt=0),
    threshold: float | None = None,
):
    """Live transient detection via WebSocket.

    Protocol:
    - Client sends binary Float32 mono PCM chunks of any length
    - Client may send text {"type": "set_threshold", "value": V}
    - Server sends JSON messages:
      - {"type": "transient", "time": T}
      - {"type": "error", "message": M}
    """
    await websocket.accept()

    session = AudioSessionController(sample_rate=sample_rate, track_position=True)
    if threshold is not None:
        session.set_transient_threshold(threshold)
    assembler = FrameAssembler(frame_size=session.frame_size)

    pending: list[float] = []
    session.on_transient(pending.append)

    try:
        while True:
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                raise WebSocketDisconnect(message.get("code", 1000))

            text = message.get("text")
            if text is not None:
                try:
                    update = SetThresholdMessage.model_validate(json.loads(text))
                except (json.JSONDecodeError, ValidationError):
                    await websocket.send_json(
                        ErrorMessage(message="Expected a set_threshold message").model_dump()
                    )
                    continue
                session.set_transient_threshold(update.value)
                logger.info(f"Threshold set to {session.detector.threshold}")
                continue

            data = message.get("bytes") or b""
            # Decode Float32 PCM, dropping a trailing partial sample
            n_samples = len(data) // 4
            if n_samples == 0:
                continue
            chunk = np.frombuffer(data[:n_samples * 4], dtype=np.float32)

            for frame in assembler.append(chunk):
                session.process_frame(frame, sample_rate)

            while pending:
                t = pending.pop(0)
                await websocket.send_json(TransientMessage(time=t).model_dump())

    except WebSocketDisconnect:
        logger.info(
            f"Live session closed after {assembler.frames_emitted} frames "
            f"({assembler.pending} samples dropped)"
        )
    except Exception as e:
        logger.exception("Live session failed")
        try:
            await websocket.send_json(ErrorMessage(message=str(e)).model_dump())
        except (RuntimeError, WebSocketDisconnect):
            pass
    finally:
        session.cleanup()
