"""Saved connection details for the companion tool, stored as a small JSON file."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

__all__ = [
    "OthersSession",
    "json_escape",
    "extract_json_string",
    "build_session_json",
    "save_session",
    "load_session",
]

log = logging.getLogger(__name__)

_ESCAPES = {
    '"': '\\"',
    "\\": "\\\\",
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
    "\b": "\\b",
    "\f": "\\f",
}


@dataclass(frozen=True)
class OthersSession:
    """Server code, server password and cookie entered on the tool screen."""

    server: str
    password: str
    cookie: str

    @property
    def complete(self) -> bool:
        """Whether every field is filled in."""
        return bool(self.server and self.password and self.cookie)

    def to_json(self) -> str:
        return build_session_json(self.server, self.password, self.cookie)


def json_escape(text: str) -> str:
    """Escape ``text`` for use inside a JSON string literal."""

    def escape(ch: str) -> str:
        if ch in _ESCAPES:
            return _ESCAPES[ch]
        if ord(ch) < 0x20:
            return f"\\u{ord(ch):04x}"
        return ch

    return "".join(escape(ch) for ch in text)


def extract_json_string(body: str, key: str) -> str:
    """Pull the value of ``key`` out of a flat JSON object without a full parser.

    A quoted value is returned with each backslash dropped and the character
    after it kept as is; a bare value runs to the next comma, brace or newline
    and has trailing blanks removed. A missing key gives an empty string.
    """
    pos = body.find(f'"{key}"')
    if pos < 0:
        return ""
    pos = body.find(":", pos)
    if pos < 0:
        return ""
    pos += 1
    end = len(body)
    while pos < end and body[pos] in " \t":
        pos += 1
    if pos >= end:
        return ""

    out: list[str] = []
    if body[pos] == '"':
        pos += 1
        while pos < end and body[pos] != '"':
            if body[pos] == "\\" and pos + 1 < end:
                pos += 1
            out.append(body[pos])
            pos += 1
        return "".join(out)

    while pos < end and body[pos] not in ",}\n":
        out.append(body[pos])
        pos += 1
    return "".join(out).rstrip(" \t")


def build_session_json(server: str, password: str, cookie: str) -> str:
    """Serialise the three session fields in a fixed order."""
    return (
        '{"server":"' + json_escape(server)
        + '","password":"' + json_escape(password)
        + '","cookie":"' + json_escape(cookie)
        + '"}'
    )


def save_session(path: str | os.PathLike[str], session: OthersSession) -> bool:
    """Write ``session`` to ``path``; return False if the file already held it."""
    target = Path(path)
    content = session.to_json().encode("utf-8")
    target.parent.mkdir(parents=True, exist_ok=True)
    try:
        if target.read_bytes() == content:
            log.info("session unchanged, not rewriting %s", target)
            return False
    except OSError:
        pass
    target.write_bytes(content)
    log.info("session saved to %s (%d bytes)", target, len(content))
    return True


def load_session(path: str | os.PathLike[str]) -> OthersSession | None:
    """Read a saved session; None if it is missing, empty or has an empty field."""
    try:
        raw = Path(path).read_bytes()
    except OSError:
        return None
    if not raw:
        return None
    body = raw.decode("utf-8", errors="replace")
    session = OthersSession(
        extract_json_string(body, "server"),
        extract_json_string(body, "password"),
        extract_json_string(body, "cookie"),
    )
    if not session.complete:
        log.info("session file present but incomplete, ignoring it")
        return None
    return session