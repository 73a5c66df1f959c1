from __future__ import annotations

import pytest

from furby_link.runtime import telemetry


def test_config_and_preset_are_exclusive() -> None:
    with pytest.raises(ValueError):
        telemetry.configure(config=object(), preset="development")


def test_unknown_preset_is_rejected() -> None:
    with pytest.raises(ValueError):
        telemetry.configure(preset="verbose")


def test_loggers_are_cached_per_name() -> None:
    first = telemetry.get_logger("furby_link.tests")

    assert telemetry.get_logger("furby_link.tests") is first


def test_span_yields_handle_and_reraises() -> None:
    with pytest.raises(RuntimeError):
        with telemetry.span("tests::span", component=True, metadata={"k": 1}) as handle:
            assert handle.component_name == "tests::span"
            assert handle.metadata == {"k": "1"}
            raise RuntimeError("boom")


class RecordingConfig:
    def __init__(self) -> None:
        self.calls: list = []

    def __getattr__(self, name: str):
        def record(*args):
            self.calls.append((name, args))
            return self

        return record


def test_malformed_buffer_size_falls_back(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("FURBY_LINK_LOG_BUFFERED", "1")
    monkeypatch.setenv("FURBY_LINK_LOG_BUFFER_SIZE", "big")

    assert telemetry._env_int("LOG_BUFFER_SIZE", 2048) == 2048
    telemetry.configure()

    monkeypatch.setenv("FURBY_LINK_LOG_BUFFER_SIZE", "-5")
    assert telemetry._env_int("LOG_BUFFER_SIZE", 2048) == 2048
    monkeypatch.setenv("FURBY_LINK_LOG_BUFFER_SIZE", "512")
    assert telemetry._env_int("LOG_BUFFER_SIZE", 2048) == 512

    monkeypatch.undo()
    telemetry.configure()


def test_console_flag_overrides_any_config() -> None:
    config = RecordingConfig()

    try:
        telemetry.configure(config=config, console=False)
    finally:
        telemetry.configure()

    assert ("with_profiling", (True,)) in config.calls
    assert config.calls[-1] == ("with_console_output", (False,))


def test_every_named_preset_configures(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    monkeypatch.setenv("FURBY_LINK_LOG_FILE", str(tmp_path / "furby.log"))
    try:
        for name in telemetry.PRESETS:
            telemetry.configure(preset=name)
            assert telemetry.get_logger("furby_link.tests") is not None
    finally:
        monkeypatch.undo()
        telemetry.configure()
