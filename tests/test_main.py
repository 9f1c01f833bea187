import sys
from pathlib import Path
from threading import Event
from unittest.mock import patch

import pytest

from releasewatch.__main__ import main
from releasewatch.core.release import ReleaseSeverity


def _run(monkeypatch: pytest.MonkeyPatch, *args: str) -> int:
    monkeypatch.setattr(sys, "argv", ["releasewatch", *args])
    return main()


def test_show_config(monkeypatch: pytest.MonkeyPatch, capsys) -> None:
    assert _run(monkeypatch, "--show-config") == 0
    assert "[notify]" in capsys.readouterr().out


def test_missing_version_exits_1(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    assert _run(monkeypatch, "--config", str(tmp_path / "none.toml")) == 1


def test_bad_config_exits_1(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    path = tmp_path / "config.toml"
    path.write_text("[notify\n")
    assert _run(monkeypatch, "--config", str(path)) == 1


def test_check_prints_versions(monkeypatch: pytest.MonkeyPatch, tmp_path: Path, capsys) -> None:
    with patch(
        "releasewatch.__main__.NotificationDispatcher.evaluate",
        return_value=("2.4.6", ReleaseSeverity.PATCH),
    ):
        code = _run(
            monkeypatch,
            "--config", str(tmp_path / "none.toml"),
            "--current-version", "2.4.5",
            "--check",
        )

    out = capsys.readouterr().out
    assert code == 0
    assert "Latest version:    2.4.6" in out
    assert "Would notify:      patch" in out


def test_run_once(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    with patch("releasewatch.__main__.NotificationDispatcher.run", return_value=[]) as run:
        code = _run(monkeypatch, "--config", str(tmp_path / "none.toml"), "--current-version", "2.4.5")

    assert code == 0
    run.assert_called_once()
    assert run.call_args[0][1] == "2.4.5"


def test_test_channels_without_channels_exits_1(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    assert _run(monkeypatch, "--config", str(tmp_path / "none.toml"), "--test-channels") == 1


def test_unquoted_version_exits_1_before_any_cycle(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    path = tmp_path / "config.toml"
    path.write_text("[application]\nversion = 2.4\n\n[notify]\nenabled = true\npatch = true\n")
    with patch("releasewatch.__main__.NotificationDispatcher.run") as run:
        assert _run(monkeypatch, "--config", str(path)) == 1
    run.assert_not_called()


def test_watch_runs_cycles_until_shutdown(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    shutdown_event = Event()
    calls = []

    def cycle(config, current_version):
        calls.append(current_version)
        if len(calls) == 2:
            shutdown_event.set()
        return []

    with patch("releasewatch.__main__.install_signal_handlers", return_value=shutdown_event), patch(
        "releasewatch.__main__.NotificationDispatcher.run", side_effect=cycle
    ):
        code = _run(
            monkeypatch,
            "--config", str(tmp_path / "none.toml"),
            "--current-version", "2.4.5",
            "--watch",
            "--interval", "0",
        )

    assert code == 0
    assert calls == ["2.4.5", "2.4.5"]
