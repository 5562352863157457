import socket
import threading
import time
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer

import pytest

from nenet.rpc_client import RpcClient, fetch_bytes

STATUS = b'{"uptimeSec": 12, "ready": true}'
VERSION = b'{"version": "0.3"}'
CHUNK = bytes(range(256)) * 4


class _Handler(BaseHTTPRequestHandler):
    def do_GET(self):
        routes = {"/status": STATUS, "/version": VERSION, "/chunk?cx=0&cz=0": CHUNK}
        body = routes.get(self.path)
        if body is None:
            self.send_response(404)
            body = b"missing"
        else:
            self.send_response(200)
        self.send_header("Content-Length", str(len(body)))
        self.end_headers()
        self.wfile.write(body)

    def log_message(self, *args):
        pass


@pytest.fixture
def base_url():
    server = ThreadingHTTPServer(("127.0.0.1", 0), _Handler)
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    yield f"http://127.0.0.1:{server.server_address[1]}"
    server.shutdown()
    server.server_close()


def _unused_port():
    with socket.socket() as s:
        s.bind(("127.0.0.1", 0))
        return s.getsockname()[1]


def test_fetch_bytes_returns_body(base_url):
    assert fetch_bytes(base_url + "/status", 2000) == STATUS


def test_fetch_bytes_returns_error_body(base_url):
    assert fetch_bytes(base_url + "/nothing", 2000) == b"missing"


def test_fetch_bytes_unreachable_is_empty():
    assert fetch_bytes(f"http://127.0.0.1:{_unused_port()}/status", 500) == b""


def test_fetch_binary(base_url):
    with RpcClient(base_url) as client:
        assert client.fetch_binary("/chunk?cx=0&cz=0", 2000) == CHUNK


def test_fetch_binary_without_base_is_empty():
    with RpcClient("") as client:
        assert client.fetch_binary("/chunk", 100) == b""


def test_poll_async_fills_bodies(base_url):
    with RpcClient(base_url) as client:
        assert client.is_reachable is False
        deadline = time.monotonic() + 5.0
        while not client.is_reachable and time.monotonic() < deadline:
            client.poll_async(0, 1000)
            time.sleep(0.01)
        assert client.is_reachable is True
        assert client.status_body == STATUS.decode()
        assert client.version_body == VERSION.decode()


def test_poll_async_unreachable_stays_offline():
    with RpcClient(f"http://127.0.0.1:{_unused_port()}") as client:
        deadline = time.monotonic() + 3.0
        while client._future is None or not client._future.done():
            client.poll_async(0, 300)
            if time.monotonic() > deadline:
                break
            time.sleep(0.01)
        client.poll_async(0, 300)
        assert client.is_reachable is False
        assert client.status_body == ""


def test_setting_base_url_resets_state(base_url):
    with RpcClient(base_url) as client:
        deadline = time.monotonic() + 5.0
        while not client.is_reachable and time.monotonic() < deadline:
            client.poll_async(0, 1000)
            time.sleep(0.01)
        assert client.is_reachable is True
        client.base_url = "http://127.0.0.1:1"
        assert client.base_url == "http://127.0.0.1:1"
        assert client.is_reachable is False
        assert client.status_body == ""
        assert client.version_body == ""