"""Commands the link exposes to the host's command palette."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Iterator, List

from furby_link.events.normalized import NormalizedEvent
from furby_link.exceptions import CommandRegistrationError, UnknownCommandError
from furby_link.runtime.telemetry import span
from furby_link.tracking.host import EditorHost
from furby_link.tracking.normalizer import EventNormalizer

CommandHandler = Callable[[], List[NormalizedEvent]]

ENABLE = "Furby.enable"
DISABLE = "Furby.disable"
HELLO = "Furby.hello"

HELLO_MESSAGE = "Hello World from furby!"


@dataclass(frozen=True, slots=True)
class Command:
    id: str
    title: str
    handler: CommandHandler


class CommandRegistry:
    """Id-keyed command table; ids are unique unless ``replace`` is given."""

    def __init__(self) -> None:
        self._commands: Dict[str, Command] = {}

    def __contains__(self, command_id: object) -> bool:
        return command_id in self._commands

    def __iter__(self) -> Iterator[Command]:
        return iter(self._commands.values())

    def register(self, command: Command, *, replace: bool = False) -> Command:
        if not replace and command.id in self._commands:
            raise CommandRegistrationError(command.id)
        self._commands[command.id] = command
        return command

    def run(self, command_id: str) -> List[NormalizedEvent]:
        command = self._commands.get(command_id)
        if command is None:
            raise UnknownCommandError(f"Command '{command_id}' is not registered")
        with span(
            "commands::run",
            logger_name="furby_link.commands",
            component="commands",
            metadata={"command": command_id},
        ):
            return command.handler()


def register_default_commands(
    registry: CommandRegistry, normalizer: EventNormalizer, host: EditorHost
) -> CommandRegistry:
    def _hello() -> List[NormalizedEvent]:
        host.show_information_message(HELLO_MESSAGE)
        return []

    registry.register(
        Command(ENABLE, "Furby: Enable", lambda: normalizer.set_enabled(True))
    )
    registry.register(
        Command(DISABLE, "Furby: Disable", lambda: normalizer.set_enabled(False))
    )
    registry.register(Command(HELLO, "Furby: Hello", _hello))
    return registry


__all__ = [
    "Command",
    "CommandHandler",
    "CommandRegistry",
    "register_default_commands",
    "ENABLE",
    "DISABLE",
    "HELLO",
    "HELLO_MESSAGE",
]
