"""UDP mirror client: heartbeats, bot moves and chunk reassembly from slices."""

from __future__ import annotations

import logging
import socket
import struct
import threading
import time
from dataclasses import dataclass, field

__all__ = [
    "PacketHeader",
    "ChunkData",
    "ChunkReassembler",
    "UdpClient",
    "chunk_key",
    "encode_packet",
    "decode_header",
]

log = logging.getLogger(__name__)

MAGIC = 0xCDEA
VERSION = 1
TYPE_HELLO = 0
TYPE_CHUNK = 1
TYPE_BOT_MOVE = 2
TOTAL_SLICES = 256
HEADER_BYTES = 16
SLICE_BYTES = 256
CHUNK_BYTES = TOTAL_SLICES * SLICE_BYTES
MAX_PACKET = HEADER_BYTES + SLICE_BYTES
REASSEMBLY_TIMEOUT = 5.0
HEARTBEAT_INTERVAL = 5.0

_HEADER = struct.Struct("<HBBiiHH")


@dataclass(frozen=True)
class PacketHeader:
    """The fixed 16-byte little-endian header of every packet."""

    magic: int
    version: int
    packet_type: int
    a: int
    b: int
    seq: int
    total: int


@dataclass
class ChunkData:
    """A fully reassembled chunk of block ids."""

    cx: int
    cz: int
    data: bytes


def chunk_key(cx: int, cz: int) -> int:
    """Pack two signed 32-bit chunk coordinates into one 64-bit key."""
    return ((cx & 0xFFFFFFFF) << 32) | (cz & 0xFFFFFFFF)


def encode_packet(
    packet_type: int,
    a: int = 0,
    b: int = 0,
    seq: int = 0,
    total: int = 0,
    payload: bytes = b"",
) -> bytes:
    """Build a packet: header followed by ``payload``."""
    return _HEADER.pack(MAGIC, VERSION, packet_type, a, b, seq, total) + bytes(payload)


def decode_header(packet: bytes) -> PacketHeader:
    """Parse the header of ``packet``; raise ValueError if it is too short."""
    if len(packet) < HEADER_BYTES:
        raise ValueError(f"packet of {len(packet)} bytes is shorter than the header")
    return PacketHeader(*_HEADER.unpack_from(packet, 0))


@dataclass
class _ChunkBuffer:
    first_seen: float
    data: bytearray = field(default_factory=lambda: bytearray(CHUNK_BYTES))
    seen: set[int] = field(default_factory=set)


class ChunkReassembler:
    """Collects chunk slices and yields a chunk once all slices have arrived."""

    def __init__(self, timeout: float = REASSEMBLY_TIMEOUT) -> None:
        self._timeout = timeout
        self._buffers: dict[int, _ChunkBuffer] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._buffers)

    def feed(self, packet: bytes, now: float) -> ChunkData | None:
        """Take one packet; return the finished chunk if this completed one."""
        if len(packet) < HEADER_BYTES:
            return None
        header = decode_header(packet)
        if (
            header.magic != MAGIC
            or header.version != VERSION
            or header.packet_type != TYPE_CHUNK
            or header.total != TOTAL_SLICES
            or header.seq >= TOTAL_SLICES
            or len(packet) != HEADER_BYTES + SLICE_BYTES
        ):
            return None

        key = chunk_key(header.a, header.b)
        with self._lock:
            expired = [k for k, buf in self._buffers.items() if now - buf.first_seen > self._timeout]
            for k in expired:
                del self._buffers[k]

            buf = self._buffers.setdefault(key, _ChunkBuffer(first_seen=now))
            if header.seq not in buf.seen:
                start = header.seq * SLICE_BYTES
                buf.data[start:start + SLICE_BYTES] = packet[HEADER_BYTES:]
                buf.seen.add(header.seq)
            if len(buf.seen) >= TOTAL_SLICES:
                del self._buffers[key]
                return ChunkData(header.a, header.b, bytes(buf.data))
        return None

    def clear(self) -> None:
        with self._lock:
            self._buffers.clear()


class UdpClient:
    """Connected UDP socket with a receive thread and a heartbeat thread."""

    def __init__(self) -> None:
        self._sock: socket.socket | None = None
        self._stop = threading.Event()
        self._threads: list[threading.Thread] = []
        self._reassembler = ChunkReassembler()
        self._completed: list[ChunkData] = []
        self._completed_lock = threading.Lock()

    @property
    def started(self) -> bool:
        return self._sock is not None

    def __enter__(self) -> UdpClient:
        return self

    def __exit__(self, *exc: object) -> None:
        self.stop()

    def start(self, host_port: str) -> None:
        """Connect to ``host:port`` and start the worker threads."""
        if self._sock is not None:
            return
        host, sep, port = host_port.rpartition(":")
        if not sep:
            raise ValueError(f"invalid host:port {host_port!r}")
        infos = socket.getaddrinfo(host, port, socket.AF_INET, socket.SOCK_DGRAM, socket.IPPROTO_UDP)
        if not infos:
            raise OSError(f"cannot resolve {host_port!r}")
        family, socktype, proto, _, address = infos[0]
        sock = socket.socket(family, socktype, proto)
        try:
            sock.bind(("0.0.0.0", 0))
            sock.connect(address)
            sock.settimeout(0.2)
        except OSError:
            sock.close()
            raise

        self._stop.clear()
        self._sock = sock
        self._threads = [
            threading.Thread(target=self._recv_loop, args=(sock,), daemon=True),
            threading.Thread(target=self._heartbeat_loop, daemon=True),
        ]
        for thread in self._threads:
            thread.start()
        log.info("UdpClient connected to %s", host_port)

    def stop(self) -> None:
        """Stop the threads, close the socket and drop all buffered data."""
        if self._sock is None:
            return
        self._stop.set()
        sock, self._sock = self._sock, None
        try:
            sock.shutdown(socket.SHUT_RDWR)
        except OSError:
            pass
        sock.close()
        for thread in self._threads:
            thread.join()
        self._threads = []
        self._reassembler.clear()
        with self._completed_lock:
            self._completed.clear()

    def _send(self, packet: bytes) -> None:
        sock = self._sock
        if sock is None:
            return
        try:
            sock.send(packet)
        except OSError:
            pass

    def _send_hello(self) -> None:
        self._send(encode_packet(TYPE_HELLO))

    def send_bot_move(self, world_x: int, world_z: int) -> None:
        """Tell the server where the player now stands."""
        self._send(encode_packet(TYPE_BOT_MOVE, world_x, world_z))

    def _heartbeat_loop(self) -> None:
        self._send_hello()
        while not self._stop.wait(HEARTBEAT_INTERVAL):
            self._send_hello()

    def _recv_loop(self, sock: socket.socket) -> None:
        while not self._stop.is_set():
            try:
                packet = sock.recv(MAX_PACKET + 64)
            except socket.timeout:
                continue
            except OSError:
                if self._stop.is_set():
                    break
                continue
            done = self._reassembler.feed(packet, time.monotonic())
            if done is not None:
                with self._completed_lock:
                    self._completed.append(done)

    def drain_completed(self) -> list[ChunkData]:
        """Return and forget every chunk finished since the last call."""
        with self._completed_lock:
            out, self._completed = self._completed, []
        return out