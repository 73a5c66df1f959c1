"""Form-feed delimited JSON frames, as spoken by node-ipc peers."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, List

from furby_link.runtime import telemetry

DELIMITER = b"\f"

_log = telemetry.get_logger("furby_link.transport")


@dataclass(frozen=True, slots=True)
class Frame:
    topic: str
    data: Any


def encode_frame(topic: str, data: Any) -> bytes:
    body = json.dumps({"type": topic, "data": data}, ensure_ascii=False)
    return body.encode("utf-8") + DELIMITER


class FrameDecoder:
    """Accumulates stream chunks and yields complete frames."""

    def __init__(self) -> None:
        self._buffer = b""

    def feed(self, chunk: bytes) -> List[Frame]:
        self._buffer += chunk
        frames: List[Frame] = []
        while DELIMITER in self._buffer:
            raw, self._buffer = self._buffer.split(DELIMITER, 1)
            if not raw.strip():
                continue
            try:
                message = json.loads(raw.decode("utf-8"))
            except (UnicodeDecodeError, json.JSONDecodeError) as exc:
                _log.warning(f"skipped undecodable frame: {exc}")
                continue
            if not isinstance(message, dict) or "type" not in message:
                _log.warning(f"skipped frame without a type: {message!r}")
                continue
            frames.append(Frame(topic=str(message["type"]), data=message.get("data")))
        return frames

    @property
    def pending(self) -> int:
        return len(self._buffer)


__all__ = ["DELIMITER", "Frame", "FrameDecoder", "encode_frame"]
