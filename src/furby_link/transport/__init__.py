"""Local socket transport: framing, reconnecting client, notifier."""

from .client import ConnectionCallback, IpcClient, MessageCallback
from .framing import DELIMITER, Frame, FrameDecoder, encode_frame
from .notifier import Notifier, Sender

__all__ = [
    "ConnectionCallback",
    "DELIMITER",
    "Frame",
    "FrameDecoder",
    "IpcClient",
    "MessageCallback",
    "Notifier",
    "Sender",
    "encode_frame",
]
