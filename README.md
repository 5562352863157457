# nenet

The engine-independent core of a small voxel sandbox game: the parts that
decide what happens to the player and how the game talks to its companion
mirror tool, with no window or graphics API tied to them.

- `nenet.aabb` – `AABB` boxes and per-axis motion clipping
  (`clip_axis_x`, `clip_axis_y`, `clip_axis_z`).
- `nenet.raycaster` – voxel ray casting (`cast`) returning a `RaycastHit`
  with the block position, the face normal and the distance.
- `nenet.player` – the walking/flying `Player` driven by a `PlayerInput`:
  gravity, jumping, sprinting, a double-tap flight toggle, collision against
  the blocks around it, and health. `HealthTicker` applies suffocation damage
  and slow regeneration over time. `make_player_aabb` gives the player's box.
- `nenet.input_state` – `InputState`, per-frame keyboard, mouse-button,
  cursor, scroll and typed-text state with "just pressed" edge detection,
  fed from whatever windowing layer you use.
- `nenet.udp_client` – the chunk mirror protocol: `encode_packet`,
  `decode_header`, `chunk_key`, slice reassembly (`ChunkReassembler`) and a
  threaded `UdpClient` that sends heartbeats and bot moves and collects
  finished chunks (`drain_completed`).
- `nenet.rpc_client` – `RpcClient`, which polls `/status` and `/version` of
  the companion tool in the background and fetches binary data on demand;
  `fetch_bytes` is the plain GET it uses.
- `nenet.session` – `OthersSession`, saving and loading the companion-tool
  connection details (`save_session`, `load_session`) and the small JSON
  helpers behind them (`json_escape`, `extract_json_string`,
  `build_session_json`).
- `nenet.launcher` – hit testing of the pause menu and the companion-tool
  screen (`Rect`, `pause_hit_test`, `others_hit_test`) and starting the
  companion tool (`launch_empty_dea`, `build_launch_command`,
  `sanitize_arg`), which returns a `LaunchResult`.
- `nenet.wallpaper` – a cached, daily refreshed menu wallpaper
  (`ensure_wallpaper`, `is_fresh`, `download`).

It has no third-party dependencies.

## Examples

Ray casting takes a block reader and a predicate telling which blocks stop
the ray:

```python
from nenet.raycaster import cast

def reader(x, y, z):
    return "stone" if y < 0 else "air"

hit = cast(reader, (0.5, 2.5, 0.5), (0.0, -1.0, 0.0), 8.0,
           lambda block: block != "air")
# RaycastHit(block_pos=(0, -1, 0), normal=(0, 1, 0), distance=2.5)
```

Input state is latched once per frame; a key counts as "just pressed" only on
the first frame it is down:

```python
from nenet.input_state import InputState

state = InputState()
state.begin_frame(keys_down={65})
state.is_key_just_pressed(65)   # True
state.end_frame()
state.begin_frame(keys_down={65})
state.is_key_just_pressed(65)   # False
state.is_key_down(65)           # True
```

Hit testing works in normalised device coordinates, with y growing
downwards:

```python
from nenet.launcher import pause_hit_test, others_hit_test

pause_hit_test(0.0, -0.07)       # 0, the "continue" button
pause_hit_test(0.0, 0.9)         # -1, nothing there
others_hit_test(1, 0.0, -0.25)   # 100, the first input field
```

Mirror packets carry a 16-byte little-endian header; chunk coordinates are
packed into one 64-bit key:

```python
from nenet.udp_client import TYPE_HELLO, chunk_key, decode_header, encode_packet

packet = encode_packet(TYPE_HELLO)
len(packet)                      # 16
decode_header(packet).magic      # 0xCDEA
chunk_key(-1, 2)                 # 0xFFFFFFFF00000002
```

Values can be read out of the companion tool's flat JSON replies without a
full parser:

```python
from nenet.session import extract_json_string

extract_json_string('{"uptimeSec": 42, "ready":true}', "uptimeSec")   # "42"
```

`ensure_wallpaper` only downloads when it is given a URL, either as its `url`
argument or through the `NENET_WALLPAPER_URL` environment variable; otherwise
it returns an existing cached file or `None`.

## What this package does not do

There is no game to run here and no command: the package has no window,
renderer, HUD drawing, terrain generation or chunk storage. The player and
ray caster read blocks through a function you pass in, and the mirror client
hands back raw chunk bytes; applying them to a world, meshing them and
drawing them is left to the program that uses the package.

## Tests

The test suite uses pytest; install the `test` extra to get it.