"""Terminal input and tick events delivered through a single queue."""

from __future__ import annotations

import queue
import sys
import threading
from dataclasses import dataclass
from typing import Iterable, Iterator

from .config import Key, KeyCode, char_key, ctrl_key


@dataclass(frozen=True)
class Event:
    """Either a key press (``key`` set) or a tick (``key`` is None)."""

    key: Key | None = None

    @property
    def is_tick(self) -> bool:
        return self.key is None


@dataclass(frozen=True)
class EventConfig:
    exit_key: Key = ctrl_key("c")
    tick_rate: float = 0.25


def _decode_char(ch: str) -> Key:
    if ch in ("\r", "\n"):
        return Key(KeyCode.ENTER)
    if ch == "\x1b":
        return Key(KeyCode.ESC)
    if ch == "\x7f":
        return Key(KeyCode.BACKSPACE)
    if ch == "\t":
        return char_key(ch)
    if "\x01" <= ch <= "\x1a":
        return ctrl_key(chr(ord(ch) + ord("a") - 1))
    return char_key(ch)


def _stdin_keys() -> Iterator[Key]:
    while True:
        ch = sys.stdin.read(1)
        if not ch:
            return
        yield _decode_char(ch)


class Events:
    """Runs an input reader and a ticker in background threads."""

    def __init__(
        self,
        config: EventConfig | None = None,
        keys: Iterable[Key] | None = None,
    ) -> None:
        self.config = config or EventConfig()
        self._queue: queue.Queue[Event] = queue.Queue()
        self._closed = threading.Event()
        source = _stdin_keys() if keys is None else keys
        self._input_thread = threading.Thread(
            target=self._read_input, args=(source,), daemon=True
        )
        self._tick_thread = threading.Thread(target=self._tick, daemon=True)
        self._input_thread.start()
        self._tick_thread.start()

    def _read_input(self, source: Iterable[Key]) -> None:
        for key in source:
            if self._closed.is_set():
                return
            self._queue.put(Event(key))
            if key == self.config.exit_key:
                return

    def _tick(self) -> None:
        while not self._closed.is_set():
            self._queue.put(Event())
            self._closed.wait(self.config.tick_rate)

    def next(self, timeout: float | None = None) -> Event:
        """Return the next event, raising TimeoutError if none arrives in time."""
        try:
            return self._queue.get(timeout=timeout)
        except queue.Empty:
            raise TimeoutError("no event received") from None

    def close(self) -> None:
        self._closed.set()

    def __enter__(self) -> Events:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()