"""Formatting helpers shared by the screens: colours, durations and widths."""

from __future__ import annotations

import struct
from dataclasses import dataclass, replace
from typing import Any, Iterable, Mapping

from .config import Color, Theme

SMALL_TERMINAL_HEIGHT = 45

_U16_MAX = 2**16 - 1


@dataclass(frozen=True)
class Style:
    """Foreground and background colours plus text modifiers such as ``bold``."""

    fg: Color | None = None
    bg: Color | None = None
    modifiers: frozenset[str] = frozenset()

    def add_modifier(self, *modifiers: str) -> Style:
        return replace(self, modifiers=self.modifiers | frozenset(modifiers))


def get_color(highlight_state: tuple[bool, bool], theme: Theme) -> Style:
    """Pick the style for a block given its (is_active, is_hovered) state."""
    is_active, is_hovered = highlight_state
    if is_active:
        return Style(fg=theme.selected)
    if is_hovered:
        return Style(fg=theme.hovered)
    return Style(fg=theme.inactive)


def _name(item: Any) -> str:
    if isinstance(item, Mapping):
        return str(item["name"])
    return str(item.name)


def create_artist_string(artists: Iterable[Any]) -> str:
    """Join artist names with commas."""
    return ", ".join(_name(artist) for artist in artists)


def millis_to_minutes(millis: int) -> str:
    """Format milliseconds as ``m:ss``."""
    if millis < 0:
        raise ValueError(f"duration cannot be negative: {millis}")
    minutes, rest = divmod(millis, 60000)
    seconds = rest // 1000
    return f"{minutes}:{seconds:02d}"


def display_track_progress(progress: int, track_duration: int) -> str:
    """Format ``progress/duration (-remaining)``."""
    duration = millis_to_minutes(track_duration)
    progress_display = millis_to_minutes(progress)
    remaining = millis_to_minutes(max(track_duration - progress, 0))
    return f"{progress_display}/{duration} (-{remaining})"


def _f32(value: float) -> float:
    return struct.unpack("f", struct.pack("f", value))[0]


def get_percentage_width(width: int, percentage: float) -> int:
    """Width of a column taking ``percentage`` (0..1) of ``width`` minus padding."""
    padding = 3
    if width < padding:
        raise ValueError(f"width {width} is smaller than the padding {padding}")
    scaled = _f32(_f32(float(width - padding)) * _f32(percentage))
    if scaled != scaled or scaled <= 0:
        return 0
    return min(int(scaled), _U16_MAX)


def get_track_progress_percentage(song_progress_ms: int, track_duration_ms: int) -> int:
    """Track progress as a whole percentage clamped to 0..100."""
    if track_duration_ms <= 0:
        return 0
    track_progress = min(song_progress_ms, track_duration_ms)
    percentage = track_progress / track_duration_ms * 100
    return int(max(0.0, percentage))


def get_main_layout_margin(height: int) -> int:
    """Margin around the main layout: 1 on tall terminals, 0 on small ones.

    Raises ``ValueError`` for a height outside the range a terminal can report.
    """
    if not 0 <= height <= _U16_MAX:
        raise ValueError(f"terminal height out of range: {height}")
    if height > SMALL_TERMINAL_HEIGHT:
        margin = 1
    else:
        margin = 0
    return margin