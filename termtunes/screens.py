"""Text shown on the main screens: help, playbar, search results, devices and errors."""

from __future__ import annotations

from enum import Enum
from typing import Any, Iterable, Mapping

from .config import Color, Theme
from .formatting import create_artist_string
from .help import get_help_docs
from .io_events import RepeatState

PLAYING_PREFIX = "|> "
LIKED_PREFIX = "♥ "
NO_DEVICE_MESSAGE = "No devices found: Make sure a device is active"
UNRELEASED_HEADER = "\n## [Unreleased]\n"

_REPEAT_TEXT = {
    RepeatState.OFF: "Off",
    RepeatState.TRACK: "Track",
    RepeatState.CONTEXT: "All",
}


class RecommendationsContext(Enum):
    """What a list of recommendations was seeded from."""

    SONG = "song"
    ARTIST = "artist"


def _field(obj: Any, name: str) -> Any:
    if isinstance(obj, Mapping):
        return obj.get(name)
    return getattr(obj, name, None)


def _id_or_empty(obj: Any) -> str:
    value = _field(obj, "id")
    return "" if value is None else str(value)


def help_rows(offset: int = 0) -> list[tuple[str, str, str]]:
    """Help table rows starting at ``offset``."""
    docs = get_help_docs()
    if not 0 <= offset <= len(docs):
        raise IndexError(f"help offset {offset} out of range 0..{len(docs)}")
    return docs[offset:]


def help_block_text(is_loading: bool, theme: Theme) -> tuple[Color, str]:
    """Colour and text of the small help box beside the search input."""
    if is_loading:
        return theme.hint, "Loading..."
    return theme.inactive, "Type ?"


def _repeat_text(state: Any) -> str:
    if not isinstance(state, RepeatState):
        state = RepeatState(str(state).lower())
    return _REPEAT_TEXT[state]


def playbar_title(playback: Any) -> str | None:
    """Title of the playbar, or None when nothing is loaded for playback."""
    if playback is None or _field(playback, "item") is None:
        return None
    play_title = "Playing" if _field(playback, "is_playing") else "Paused"
    shuffle_text = "On" if _field(playback, "shuffle_state") else "Off"
    repeat_text = _repeat_text(_field(playback, "repeat_state"))
    device = _field(playback, "device")
    device_name = _field(device, "name")
    volume = _field(device, "volume_percent")
    return (
        f"{play_title:<7} ({device_name} | Shuffle: {shuffle_text:<3} | "
        f"Repeat: {repeat_text:<5} | Volume: {volume:>2}%)"
    )


def playbar_track_name(track: Any, liked_ids: Iterable[str]) -> str:
    """Name of the playing track, marked with a heart when liked."""
    name = str(_field(track, "name"))
    if _id_or_empty(track) in set(liked_ids):
        return f"{LIKED_PREFIX}{name}"
    return name


def search_song_labels(
    tracks: Iterable[Any], playing_id: str | None, liked_ids: Iterable[str]
) -> list[str]:
    """Labels for track search results: markers, name and artists."""
    liked = set(liked_ids)
    current = playing_id or ""
    labels = []
    for track in tracks:
        track_id = _id_or_empty(track)
        label = ""
        if track_id == current:
            label += PLAYING_PREFIX
        if track_id in liked:
            label += LIKED_PREFIX
        label += str(_field(track, "name"))
        label += f" - {create_artist_string(_field(track, 'artists') or ())}"
        labels.append(label)
    return labels


def search_artist_labels(artists: Iterable[Any], followed_ids: Iterable[str]) -> list[str]:
    """Labels for artist search results, followed artists marked with a heart."""
    followed = set(followed_ids)
    return [
        (LIKED_PREFIX if _id_or_empty(artist) in followed else "")
        + str(_field(artist, "name"))
        for artist in artists
    ]


def search_album_labels(albums: Iterable[Any], saved_ids: Iterable[str]) -> list[str]:
    """Labels for album search results: ``name - artists``, saved ones marked."""
    saved = set(saved_ids)
    labels = []
    for album in albums:
        album_id = _field(album, "id")
        prefix = LIKED_PREFIX if album_id is not None and album_id in saved else ""
        artists = create_artist_string(_field(album, "artists") or ())
        labels.append(f"{prefix}{_field(album, 'name')} - {artists}")
    return labels


def search_playlist_labels(playlists: Iterable[Any]) -> list[str]:
    return [str(_field(playlist, "name")) for playlist in playlists]


def artist_top_track_labels(top_tracks: Iterable[Any], playing_id: str | None) -> list[str]:
    """Labels for an artist's top tracks, the playing one marked."""
    labels = []
    for track in top_tracks:
        marker = ""
        if playing_id is not None and _field(track, "id") == playing_id:
            marker = PLAYING_PREFIX
        labels.append(f"{marker}{_field(track, 'name')}")
    return labels


def device_list_items(devices: Any) -> list[str]:
    """Device names, or a single hint when no device is available."""
    if devices is None:
        return [NO_DEVICE_MESSAGE]
    nested = _field(devices, "devices") if not isinstance(devices, (list, tuple)) else None
    entries = list(nested if nested is not None else devices)
    if not entries:
        return [NO_DEVICE_MESSAGE]
    return [str(_field(device, "name")) for device in entries]


def error_screen_text(api_error: str) -> list[tuple[str, str | None]]:
    """Segments of the error screen as (text, theme entry to colour it with)."""
    return [
        ("Api response: ", None),
        (api_error, "error_text"),
        (
            "\n\nIf you are trying to play a track, please check that\n"
            "    1. You have a Spotify Premium Account\n"
            "    2. Your playback device is active and selected - "
            "press `d` to go to device selection menu\n"
            "    3. If you're using spotifyd as a playback device, "
            "your device name must not contain spaces\n",
            "text",
        ),
        (
            "\nHint: a playback device must be either an official spotify client "
            "or a light weight alternative such as spotifyd\n",
            "hint",
        ),
        ("\nPress <Esc> to return", "inactive"),
    ]


def clean_changelog(changelog: str, debug: bool = False) -> str:
    """Drop the unreleased section header from a release build's changelog."""
    if debug:
        return changelog
    return changelog.replace(UNRELEASED_HEADER, "")