from __future__ import annotations

import subprocess
from types import SimpleNamespace

import pytest

from lazylinear import clipboard
from lazylinear.clipboard import ClipboardError, SystemClipboard


def _which_only(*available: str):
    def fake_which(name: str) -> str | None:
        return f"/usr/bin/{name}" if name in available else None

    return fake_which


def test_prefers_first_available_utility(monkeypatch) -> None:
    calls: list[tuple[list[str], str]] = []

    def fake_run(command, input, **kwargs):
        calls.append((command, input))
        return SimpleNamespace(returncode=0, stderr="")

    monkeypatch.setattr(clipboard.shutil, "which", _which_only("xsel", "pbcopy"))
    monkeypatch.setattr(clipboard.subprocess, "run", fake_run)

    SystemClipboard().copy("https://linear.app/acme/issue/ENG-1")

    assert calls == [(["xsel", "--clipboard", "--input"], "https://linear.app/acme/issue/ENG-1")]


def test_xclip_wins_when_everything_is_installed(monkeypatch) -> None:
    monkeypatch.setattr(clipboard.shutil, "which", _which_only("xclip", "xsel", "wl-copy", "pbcopy"))

    assert SystemClipboard().resolve_command() == ["xclip", "-selection", "clipboard"]


def test_missing_utilities_raise(monkeypatch) -> None:
    monkeypatch.setattr(clipboard.shutil, "which", _which_only())

    with pytest.raises(ClipboardError, match="no clipboard utility"):
        SystemClipboard().copy("text")


def test_non_zero_exit_raises(monkeypatch) -> None:
    monkeypatch.setattr(clipboard.shutil, "which", _which_only("pbcopy"))
    monkeypatch.setattr(
        clipboard.subprocess,
        "run",
        lambda command, **kwargs: SimpleNamespace(returncode=1, stderr="no display"),
    )

    with pytest.raises(ClipboardError, match="pbcopy failed: no display"):
        SystemClipboard().copy("text")


def test_timeout_raises(monkeypatch) -> None:
    def slow_run(command, **kwargs):
        raise subprocess.TimeoutExpired(command, kwargs.get("timeout", 0))

    monkeypatch.setattr(clipboard.shutil, "which", _which_only("wl-copy"))
    monkeypatch.setattr(clipboard.subprocess, "run", slow_run)

    with pytest.raises(ClipboardError, match="wl-copy failed"):
        SystemClipboard().copy("text")


def test_empty_text_is_rejected() -> None:
    with pytest.raises(ClipboardError):
        SystemClipboard().copy("")
