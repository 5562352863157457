"""Core game logic for a voxel sandbox: physics, ray casting, input and mirror I/O."""

__version__ = "0.1.0"

__all__ = [
    "aabb",
    "input_state",
    "launcher",
    "player",
    "raycaster",
    "rpc_client",
    "session",
    "udp_client",
    "wallpaper",
]