"""Link configuration with ``FURBY_LINK_*`` environment overrides."""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from typing import Mapping, Optional

ENV_PREFIX = "FURBY_LINK_"


@dataclass(frozen=True)
class LinkConfig:
    service_name: str = "furby"
    client_id: str = "client"
    retry_interval: float = 1.0
    socket_root: str = "/tmp/"
    appspace: str = "app."
    topic: str = "app.message"
    # Sent as an ``open`` right after every connect; empty disables it.
    announce_path: str = "file:///dev/vs-code-extension"
    enabled: bool = True

    def socket_path(self, service_name: Optional[str] = None) -> str:
        return f"{self.socket_root}{self.appspace}{service_name or self.service_name}"

    def with_overrides(self, **changes: object) -> "LinkConfig":
        cleaned = {key: value for key, value in changes.items() if value is not None}
        return replace(self, **cleaned)  # type: ignore[arg-type]


def _env_str(env: Mapping[str, str], key: str, fallback: str) -> str:
    value = env.get(f"{ENV_PREFIX}{key}")
    return fallback if value is None else value


def _env_flag(env: Mapping[str, str], key: str, fallback: bool) -> bool:
    value = env.get(f"{ENV_PREFIX}{key}")
    if value is None:
        return fallback
    lowered = value.strip().lower()
    if lowered in {"1", "true", "yes", "on"}:
        return True
    if lowered in {"0", "false", "no", "off"}:
        return False
    return fallback


def _env_interval(env: Mapping[str, str], key: str, fallback: float) -> float:
    value = env.get(f"{ENV_PREFIX}{key}")
    if value is None:
        return fallback
    try:
        millis = int(value)
    except ValueError:
        return fallback
    if millis <= 0:
        return fallback
    return millis / 1000.0


def load_config(env: Optional[Mapping[str, str]] = None) -> LinkConfig:
    """Build a ``LinkConfig`` from defaults plus environment overrides."""

    source = os.environ if env is None else env
    defaults = LinkConfig()
    return LinkConfig(
        service_name=_env_str(source, "SERVICE", defaults.service_name),
        client_id=_env_str(source, "CLIENT_ID", defaults.client_id),
        retry_interval=_env_interval(source, "RETRY_MS", defaults.retry_interval),
        socket_root=_env_str(source, "SOCKET_ROOT", defaults.socket_root),
        appspace=_env_str(source, "APPSPACE", defaults.appspace),
        topic=defaults.topic,
        announce_path=_env_str(source, "ANNOUNCE_PATH", defaults.announce_path),
        enabled=_env_flag(source, "ENABLED", defaults.enabled),
    )


__all__ = ["ENV_PREFIX", "LinkConfig", "load_config"]
