from __future__ import annotations

import logging
import shutil
import subprocess
from typing import Protocol, Sequence

logger = logging.getLogger(__name__)

# First utility found on PATH wins.
CLIPBOARD_COMMANDS: tuple[tuple[str, ...], ...] = (
    ("xclip", "-selection", "clipboard"),
    ("xsel", "--clipboard", "--input"),
    ("wl-copy",),
    ("pbcopy",),
)


class ClipboardError(Exception):
    pass


class Clipboard(Protocol):
    def copy(self, text: str) -> None: ...


class SystemClipboard:
    def __init__(self, commands: Sequence[Sequence[str]] = CLIPBOARD_COMMANDS, timeout: float = 5.0):
        self.commands = [list(command) for command in commands]
        self.timeout = timeout

    def resolve_command(self) -> list[str] | None:
        for command in self.commands:
            if shutil.which(command[0]) is not None:
                return command
        return None

    def copy(self, text: str) -> None:
        if not text:
            raise ClipboardError("nothing to copy")
        command = self.resolve_command()
        if command is None:
            names = ", ".join(command[0] for command in self.commands)
            raise ClipboardError(f"no clipboard utility found (tried {names})")
        try:
            proc = subprocess.run(
                command,
                input=text,
                text=True,
                capture_output=True,
                timeout=self.timeout,
                check=False,
            )
        except (OSError, subprocess.TimeoutExpired) as e:
            raise ClipboardError(f"{command[0]} failed: {e}") from e
        if proc.returncode != 0:
            detail = (proc.stderr or "").strip() or f"exit status {proc.returncode}"
            raise ClipboardError(f"{command[0]} failed: {detail}")
        logger.debug("copied %d characters with %s", len(text), command[0])
