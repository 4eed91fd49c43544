"""Audio analysis screen: current section info and pitch bars."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Mapping

PITCHES = ("C", "C#", "D", "D#", "E", "F", "F#", "G", "G#", "A", "A#", "B")

NO_ANALYSIS_TEXT = "No analysis available"
NO_PITCH_TEXT = "No pitch information available"

_U64_MAX = 2**64 - 1


@dataclass(frozen=True)
class AnalysisView:
    """What the analysis screen shows: three info lines and the pitch bars."""

    info: tuple[str, ...]
    bars: tuple[tuple[str, int], ...]


def _field(obj: Any, name: str) -> Any:
    if isinstance(obj, Mapping):
        return obj[name]
    return getattr(obj, name)


def _first_from(items: Iterable[Any], progress_seconds: float) -> Any:
    return next(
        (item for item in items if _field(item, "start") >= progress_seconds), None
    )


def _display_number(value: Any) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _saturating_u64(value: float) -> int:
    if value != value or value <= 0:
        return 0
    return min(int(value), _U64_MAX)


def _pitch_name(index: int) -> str:
    return PITCHES[index] if 0 <= index < len(PITCHES) else PITCHES[0]


def bar_chart_title(tick_rate: int) -> str:
    """Title of the pitch chart, showing the tick rate and resulting frame rate."""
    if tick_rate <= 0:
        raise ValueError(f"tick rate must be positive, is {tick_rate}")
    return f"Pitches | Tick Rate {tick_rate} {1000 // tick_rate}FPS"


def bar_width(chart_width: int) -> int:
    """Width of a single pitch bar for a chart of the given width."""
    return int(chart_width / (1 + len(PITCHES)))


def build_analysis_view(analysis: Any, song_progress_ms: int) -> AnalysisView | None:
    """Build the view for the current position, or None if nothing applies."""
    if analysis is None:
        return None
    progress_seconds = song_progress_ms / 1000.0

    beat = _first_from(_field(analysis, "beats"), progress_seconds)
    beat_offset = _field(beat, "start") - progress_seconds if beat is not None else 0.0
    segment = _first_from(_field(analysis, "segments"), progress_seconds)
    section = _first_from(_field(analysis, "sections"), progress_seconds)
    if segment is None or section is None:
        return None

    key = _field(section, "key")
    info = (
        "Tempo: {} (confidence {:.0f}%)\n".format(
            _display_number(_field(section, "tempo")),
            _field(section, "tempo_confidence") * 100.0,
        ),
        "Key: {} (confidence {:.0f}%)\n".format(
            _pitch_name(int(key)),
            _field(section, "key_confidence") * 100.0,
        ),
        "Time Signature: {}/4 (confidence {:.0f}%)\n".format(
            _field(section, "time_signature"),
            _field(section, "time_signature_confidence") * 100.0,
        ),
    )

    # A beat offset makes the bars animate between beats.
    offset_value = _saturating_u64(beat_offset * 3000.0)
    bars = []
    for index, pitch in enumerate(_field(segment, "pitches")):
        value = _saturating_u64(pitch * 1000.0) + offset_value
        if value > _U64_MAX:
            value = 0
        bars.append((_pitch_name(index), value))

    return AnalysisView(info=info, bars=tuple(bars))