"""Exception types shared across the furby link core."""

from __future__ import annotations

from typing import Any


class FurbyLinkError(RuntimeError):
    """Base class for every error raised by this package."""


class EventValidationError(FurbyLinkError):
    """Raised when a host adapter builds a raw event with impossible data."""

    def __init__(self, message: str, *, value: Any = None) -> None:
        super().__init__(message)
        self.value = value


class TransportError(FurbyLinkError):
    """Raised inside the transport when the socket cannot be used."""


class CommandRegistrationError(FurbyLinkError):
    """Raised when a command id is registered twice."""

    def __init__(self, command_id: str) -> None:
        super().__init__(f"Command '{command_id}' already registered")
        self.command_id = command_id


class UnknownCommandError(KeyError):
    """Raised when running a command id nobody registered."""


__all__ = [
    "FurbyLinkError",
    "EventValidationError",
    "TransportError",
    "CommandRegistrationError",
    "UnknownCommandError",
]
