"""Per-frame keyboard, mouse, scroll and text input tracking."""

from __future__ import annotations

from typing import Iterable

__all__ = ["InputState"]

KEY_COUNT = 512
MOUSE_BUTTON_COUNT = 8


class InputState:
    """Edge-detecting input state fed from window events once per frame."""

    def __init__(self) -> None:
        self._curr_keys: frozenset[int] = frozenset()
        self._prev_keys: frozenset[int] = frozenset()
        self._curr_buttons: frozenset[int] = frozenset()
        self._prev_buttons: frozenset[int] = frozenset()
        self._cursor: tuple[float, float] = (0.0, 0.0)
        self._last_mouse: tuple[float, float] = (0.0, 0.0)
        self._mouse_delta: tuple[float, float] = (0.0, 0.0)
        self._captured = False
        self._first_mouse = True
        self._scroll_accum = 0.0
        self._scroll_delta = 0.0
        self._text_input_enabled = False
        self._typed_chars = ""
        self._typed_accum: list[str] = []

    @property
    def mouse_delta(self) -> tuple[float, float]:
        return self._mouse_delta

    @property
    def cursor(self) -> tuple[float, float]:
        return self._cursor

    @property
    def scroll_delta(self) -> float:
        return self._scroll_delta

    @property
    def mouse_captured(self) -> bool:
        return self._captured

    @property
    def text_input_enabled(self) -> bool:
        return self._text_input_enabled

    @property
    def typed_chars(self) -> str:
        return self._typed_chars

    def add_scroll(self, yoff: float) -> None:
        self._scroll_accum += yoff

    def add_char(self, codepoint: int) -> None:
        """Queue a typed character; only printable ASCII while text input is on."""
        if not self._text_input_enabled:
            return
        if codepoint < 0x20 or codepoint > 0x7E:
            return
        self._typed_accum.append(chr(codepoint))

    def set_mouse_captured(self, captured: bool) -> None:
        self._captured = captured
        if captured:
            self._first_mouse = True

    def set_text_input_enabled(self, enabled: bool) -> None:
        self._text_input_enabled = enabled

    def begin_frame(
        self,
        keys_down: Iterable[int] = (),
        buttons_down: Iterable[int] = (),
        cursor: tuple[float, float] = (0.0, 0.0),
    ) -> None:
        """Latch this frame's pressed keys, buttons, cursor, scroll and text."""
        self._typed_chars = "".join(self._typed_accum)
        self._typed_accum.clear()

        self._cursor = (float(cursor[0]), float(cursor[1]))
        if self._captured:
            if self._first_mouse:
                self._first_mouse = False
                self._mouse_delta = (0.0, 0.0)
            else:
                self._mouse_delta = (
                    self._cursor[0] - self._last_mouse[0],
                    self._cursor[1] - self._last_mouse[1],
                )
            self._last_mouse = self._cursor
        else:
            self._mouse_delta = (0.0, 0.0)

        self._curr_keys = frozenset(k for k in keys_down if 0 <= k < KEY_COUNT)
        self._curr_buttons = frozenset(b for b in buttons_down if 0 <= b < MOUSE_BUTTON_COUNT)

        self._scroll_delta = self._scroll_accum
        self._scroll_accum = 0.0

    def end_frame(self) -> None:
        self._prev_keys = self._curr_keys
        self._prev_buttons = self._curr_buttons

    def is_key_down(self, key: int) -> bool:
        return key in self._curr_keys

    def is_key_just_pressed(self, key: int) -> bool:
        return key in self._curr_keys and key not in self._prev_keys

    def is_mouse_button_down(self, button: int) -> bool:
        return button in self._curr_buttons

    def is_mouse_button_just_pressed(self, button: int) -> bool:
        return button in self._curr_buttons and button not in self._prev_buttons