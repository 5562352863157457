"""Screen hit testing and launching of the companion mirror tool."""

from __future__ import annotations

import logging
import os
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Sequence

__all__ = [
    "Rect",
    "LaunchResult",
    "pause_hit_test",
    "others_hit_test",
    "sanitize_arg",
    "build_launch_command",
    "launch_empty_dea",
]

log = logging.getLogger(__name__)

EXE_NAME = "EmptyDea.exe"
COOKIE_FILE_NAME = ".cookie.json"
DEFAULT_RPC_ADDR = "127.0.0.1:24050"
FIELD_HIT_BASE = 100
FIELD_COUNT = 3
FIELD_LABELS = ("SERVER CODE", "SERVER PASSWORD (OPTIONAL)", "COOKIE / TOKEN")


@dataclass(frozen=True)
class Rect:
    """A screen rectangle in normalised device coordinates."""

    x: float
    y: float
    w: float
    h: float

    def contains(self, x: float, y: float) -> bool:
        """Whether the point lies inside the rectangle, edges included."""
        return self.x <= x <= self.x + self.w and self.y <= y <= self.y + self.h


PAUSE_BUTTONS = (
    Rect(-0.30, -0.12, 0.60, 0.10),
    Rect(-0.30, 0.02, 0.60, 0.10),
    Rect(-0.30, 0.16, 0.60, 0.10),
)

OTHERS_STEP0_BUTTONS = (
    Rect(-0.30, 0.30, 0.28, 0.10),
    Rect(0.02, 0.30, 0.28, 0.10),
)

OTHERS_FIELD_RECTS = (
    Rect(-0.45, -0.28, 0.90, 0.08),
    Rect(-0.45, -0.13, 0.90, 0.08),
    Rect(-0.45, 0.02, 0.90, 0.08),
)

OTHERS_STEP1_BUTTONS = (
    Rect(-0.45, 0.32, 0.42, 0.10),
    Rect(0.03, 0.32, 0.42, 0.10),
)

OTHERS_STEP2_BUTTONS = (
    Rect(-0.45, 0.40, 0.42, 0.10),
    Rect(0.03, 0.40, 0.42, 0.10),
)


def _first_hit(rects: Sequence[Rect], x: float, y: float) -> int:
    return next((i for i, r in enumerate(rects) if r.contains(x, y)), -1)


def pause_hit_test(x: float, y: float) -> int:
    """Index of the pause-menu button under the point, or -1."""
    return _first_hit(PAUSE_BUTTONS, x, y)


def others_hit_test(step: int, x: float, y: float) -> int:
    """Hit test the tool screen at ``step``.

    Buttons give their index; on the form step an input field gives
    100 plus the field index. Nothing hit gives -1.
    """
    if step == 0:
        return _first_hit(OTHERS_STEP0_BUTTONS, x, y)
    if step == 2:
        return _first_hit(OTHERS_STEP2_BUTTONS, x, y)
    field = _first_hit(OTHERS_FIELD_RECTS, x, y)
    if field >= 0:
        return FIELD_HIT_BASE + field
    return _first_hit(OTHERS_STEP1_BUTTONS, x, y)


def sanitize_arg(text: str) -> str:
    """Drop quotes, backslashes and line breaks from a command-line value."""
    return "".join(ch for ch in text if ch not in '"\\\r\n')


def build_launch_command(
    module_dir: str | os.PathLike[str],
    code: str,
    password: str,
    cookie_file: str | os.PathLike[str] | None,
    rpc_addr: str = DEFAULT_RPC_ADDR,
) -> list[str]:
    """The argument list that starts the tool; empty options are left out."""
    command = [str(Path(module_dir) / EXE_NAME), "--http-rpc-addr", rpc_addr]
    if code:
        command += ["--server", code]
    if password:
        command += ["--server-password", password]
    if cookie_file:
        command += ["--token-file", str(cookie_file)]
    return command


@dataclass
class LaunchResult:
    """What a successful launch started and where to reach it."""

    command: list[str]
    rpc_url: str
    cookie_file: Path | None
    process: subprocess.Popen | None = None

    @property
    def status(self) -> str:
        return f"Launched. Connecting to RPC {self.rpc_url.removeprefix('http://')} ..."


def launch_empty_dea(
    module_dir: str | os.PathLike[str],
    fields: Sequence[str],
    rpc_addr: str = DEFAULT_RPC_ADDR,
) -> LaunchResult:
    """Start the tool in ``module_dir`` with the server code, password and cookie.

    The cookie, when given, is written to a file beside the executable.
    Raises FileNotFoundError if the executable is missing and OSError if
    the cookie cannot be written or the process cannot be started.
    """
    if len(fields) != FIELD_COUNT:
        raise ValueError(f"expected {FIELD_COUNT} fields, got {len(fields)}")
    directory = Path(module_dir)
    exe = directory / EXE_NAME
    if not exe.exists():
        raise FileNotFoundError(f"{EXE_NAME} not found in {directory}; build it first")

    code = sanitize_arg(fields[0])
    server_pass = sanitize_arg(fields[1])
    cookie = fields[2]

    cookie_file: Path | None = None
    if cookie:
        cookie_file = directory / COOKIE_FILE_NAME
        data = cookie.encode("utf-8")
        cookie_file.write_bytes(data)
        log.info("cookie written to %s (%d bytes)", cookie_file, len(data))

    command = build_launch_command(directory, code, server_pass, cookie_file, rpc_addr)
    log.info("starting %s", " ".join(command))
    process = subprocess.Popen(
        command,
        cwd=str(directory),
        creationflags=getattr(subprocess, "CREATE_NEW_CONSOLE", 0),
    )
    return LaunchResult(command, "http://" + rpc_addr, cookie_file, process)