from types import SimpleNamespace

import pytest

from termtunes.config import Theme
from termtunes.help import get_help_docs
from termtunes.io_events import RepeatState
from termtunes.screens import (
    RecommendationsContext,
    artist_top_track_labels,
    clean_changelog,
    device_list_items,
    error_screen_text,
    help_block_text,
    help_rows,
    playbar_title,
    playbar_track_name,
    search_album_labels,
    search_artist_labels,
    search_playlist_labels,
    search_song_labels,
)
from termtunes.tables import recommendations_title


def _playback(is_playing=True, shuffle=False, repeat=RepeatState.OFF, volume=50):
    return {
        "item": {"id": "t1", "name": "Song"},
        "is_playing": is_playing,
        "shuffle_state": shuffle,
        "repeat_state": repeat,
        "device": {"name": "Desk", "volume_percent": volume},
    }


def test_help_rows_offset_slices_docs():
    docs = get_help_docs()
    assert help_rows(0) == docs
    assert help_rows(3) == docs[3:]
    assert help_rows(len(docs)) == []


def test_help_rows_out_of_range():
    with pytest.raises(IndexError):
        help_rows(len(get_help_docs()) + 1)
    with pytest.raises(IndexError):
        help_rows(-1)


def test_help_block_text():
    theme = Theme()
    assert help_block_text(True, theme) == (theme.hint, "Loading...")
    assert help_block_text(False, theme) == (theme.inactive, "Type ?")


def test_playbar_title_columns_are_padded():
    playing = playbar_title(_playback(is_playing=True))
    paused = playbar_title(_playback(is_playing=False))
    assert playing.startswith("Playing")
    assert paused.startswith("Paused")
    assert playing.index("(") == paused.index("(")
    assert "Desk" in playing


def test_playbar_title_repeat_and_shuffle():
    titles = [playbar_title(_playback(repeat=state)) for state in RepeatState]
    assert len({len(title) for title in titles}) == 1
    assert "Track" in playbar_title(_playback(repeat=RepeatState.TRACK))
    assert "All" in playbar_title(_playback(repeat=RepeatState.CONTEXT))
    on = playbar_title(_playback(shuffle=True))
    off = playbar_title(_playback(shuffle=False))
    assert len(on) == len(off)
    assert "Shuffle: On" in on


def test_playbar_title_without_item():
    assert playbar_title(None) is None
    playback = _playback()
    playback["item"] = None
    assert playbar_title(playback) is None


def test_playbar_track_name_liked():
    track = SimpleNamespace(id="t1", name="Song")
    assert playbar_track_name(track, {"t1"}) == "♥ Song"
    assert playbar_track_name(track, set()) == "Song"


def test_search_song_labels_markers():
    artists = [{"name": "A"}, {"name": "B"}]
    tracks = [
        {"id": "t1", "name": "One", "artists": artists},
        {"id": "t2", "name": "Two", "artists": artists},
    ]
    labels = search_song_labels(tracks, "t1", {"t1", "t2"})
    assert labels[0] == "|> ♥ One - A, B"
    assert labels[1] == "♥ Two - A, B"
    plain = search_song_labels(tracks, None, ())
    assert plain == ["One - A, B", "Two - A, B"]


def test_search_artist_and_album_labels():
    artists = [{"id": "a1", "name": "Alpha"}, {"id": "a2", "name": "Beta"}]
    assert search_artist_labels(artists, {"a2"}) == ["Alpha", "♥ Beta"]
    albums = [
        {"id": "x", "name": "Rec", "artists": [{"name": "Alpha"}]},
        {"id": None, "name": "Demo", "artists": []},
    ]
    assert search_album_labels(albums, {"x"}) == ["♥ Rec - Alpha", "Demo - "]


def test_search_playlist_labels():
    assert search_playlist_labels([{"name": "Mix"}, SimpleNamespace(name="Chill")]) == [
        "Mix",
        "Chill",
    ]


def test_artist_top_track_labels():
    tracks = [{"id": "t1", "name": "Hit"}, {"id": "t2", "name": "Other"}]
    assert artist_top_track_labels(tracks, "t2") == ["Hit", "|> Other"]
    assert artist_top_track_labels(tracks, None) == ["Hit", "Other"]


def test_device_list_items():
    message = "No devices found: Make sure a device is active"
    assert device_list_items(None) == [message]
    assert device_list_items({"devices": []}) == [message]
    assert device_list_items([]) == [message]
    devices = {"devices": [{"name": "Phone"}, {"name": "Laptop"}]}
    assert device_list_items(devices) == ["Phone", "Laptop"]


def test_error_screen_text_contains_error():
    segments = error_screen_text("boom")
    assert segments[0] == ("Api response: ", None)
    assert segments[1] == ("boom", "error_text")
    assert segments[-1] == ("\nPress <Esc> to return", "inactive")
    roles = [role for _, role in segments]
    assert all(role is None or hasattr(Theme(), role) for role in roles)


def test_clean_changelog():
    text = "# Changelog\n## [Unreleased]\n- fix\n"
    assert clean_changelog(text, debug=True) == text
    cleaned = clean_changelog(text)
    assert "[Unreleased]" not in cleaned
    assert cleaned.endswith("- fix\n")


def test_recommendations_context_titles():
    assert recommendations_title(RecommendationsContext.SONG, "x") == (
        "Recommendations based on Song 'x'"
    )
    assert recommendations_title(RecommendationsContext.ARTIST, "y") == (
        "Recommendations based on Artist 'y'"
    )