from pathlib import Path
from unittest import mock

import pytest

from nenet.launcher import (
    LaunchResult,
    Rect,
    build_launch_command,
    launch_empty_dea,
    others_hit_test,
    pause_hit_test,
    sanitize_arg,
)


def test_rect_contains_edges_inclusive():
    r = Rect(0.0, 0.0, 1.0, 1.0)
    assert r.contains(0.0, 0.0)
    assert r.contains(1.0, 1.0)
    assert r.contains(0.5, 0.5)
    assert not r.contains(1.01, 0.5)
    assert not r.contains(0.5, -0.01)


@pytest.mark.parametrize(
    "x, y, expected",
    [(0.0, -0.07, 0), (0.0, 0.07, 1), (0.0, 0.21, 2), (0.0, 0.5, -1), (0.5, 0.0, -1)],
)
def test_pause_hit_test(x, y, expected):
    assert pause_hit_test(x, y) == expected


@pytest.mark.parametrize(
    "step, x, y, expected",
    [
        (0, -0.2, 0.35, 0),
        (0, 0.1, 0.35, 1),
        (0, 0.0, 0.0, -1),
        (1, 0.0, -0.24, 100),
        (1, 0.0, -0.09, 101),
        (1, 0.0, 0.06, 102),
        (1, -0.2, 0.37, 0),
        (1, 0.2, 0.37, 1),
        (1, 0.0, 0.8, -1),
        (2, -0.2, 0.45, 0),
        (2, 0.1, 0.45, 1),
        (2, 0.0, -0.24, -1),
    ],
)
def test_others_hit_test(step, x, y, expected):
    assert others_hit_test(step, x, y) == expected


def test_sanitize_arg_strips_unsafe_characters():
    assert sanitize_arg('a"b\\c\r\nd') == "abcd"
    assert sanitize_arg("plain text") == "plain text"


def test_build_launch_command_includes_only_given_options(tmp_path):
    password = "password"
    cmd = build_launch_command(tmp_path, "ABC", password, tmp_path / "c.json", "127.0.0.1:24050")
    assert cmd[0] == str(tmp_path / "EmptyDea.exe")
    assert cmd[1:3] == ["--http-rpc-addr", "127.0.0.1:24050"]
    assert cmd[3:5] == ["--server", "ABC"]
    assert cmd[5:7] == ["--server-password", "password"]
    assert cmd[7:] == ["--token-file", str(tmp_path / "c.json")]


def test_build_launch_command_omits_empty(tmp_path):
    password = ""
    cmd = build_launch_command(tmp_path, "", password, None, "127.0.0.1:24050")
    assert cmd == [str(tmp_path / "EmptyDea.exe"), "--http-rpc-addr", "127.0.0.1:24050"]


def test_launch_missing_executable_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        launch_empty_dea(tmp_path, ["code", "", ""])


def test_launch_requires_three_fields(tmp_path):
    (tmp_path / "EmptyDea.exe").write_bytes(b"")
    with pytest.raises(ValueError):
        launch_empty_dea(tmp_path, ["only one"])


@mock.patch("subprocess.Popen")
def test_launch_writes_cookie_and_starts(popen, tmp_path):
    (tmp_path / "EmptyDea.exe").write_bytes(b"")
    result = launch_empty_dea(tmp_path, ['co"de', "password", "token"])
    assert isinstance(result, LaunchResult)
    assert result.cookie_file == tmp_path / ".cookie.json"
    assert Path(result.cookie_file).read_text() == "token"
    assert result.rpc_url == "http://127.0.0.1:24050"
    assert "--server" in result.command
    assert result.command[result.command.index("--server") + 1] == "code"
    args, kwargs = popen.call_args
    assert args[0] == result.command
    assert kwargs["cwd"] == str(tmp_path)
    assert result.status == "Launched. Connecting to RPC 127.0.0.1:24050 ..."


@mock.patch("subprocess.Popen")
def test_launch_without_cookie_has_no_token_file(popen, tmp_path):
    (tmp_path / "EmptyDea.exe").write_bytes(b"")
    result = launch_empty_dea(tmp_path, ["code", "", ""], rpc_addr="127.0.0.1:9999")
    assert result.cookie_file is None
    assert "--token-file" not in result.command
    assert not (tmp_path / ".cookie.json").exists()
    assert result.command[1:3] == ["--http-rpc-addr", "127.0.0.1:9999"]
    assert popen.call_count == 1