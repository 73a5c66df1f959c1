"""Mirror live editor state to the furby companion service."""

__all__ = [
    "adapters",
    "bridge",
    "commands",
    "config",
    "events",
    "runtime",
    "state",
    "tracking",
    "transport",
]

__version__ = "0.1.0"
