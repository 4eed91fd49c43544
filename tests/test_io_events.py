import dataclasses

import pytest

from termtunes.io_events import (
    ChangeVolume,
    CurrentUserSavedTracksContains,
    GetCurrentPlayback,
    GetRecommendationsForSeed,
    GetSearchResults,
    IoEvent,
    Repeat,
    RepeatState,
    StartPlayback,
    UserFollowPlaylist,
    next_repeat_state,
    token_expiry,
)


def test_repeat_cycle():
    assert next_repeat_state(RepeatState.OFF) is RepeatState.CONTEXT
    assert next_repeat_state(RepeatState.CONTEXT) is RepeatState.TRACK
    assert next_repeat_state(RepeatState.TRACK) is RepeatState.OFF


def test_repeat_cycle_returns_to_start():
    for state in RepeatState:
        assert next_repeat_state(next_repeat_state(next_repeat_state(state))) is state


def test_token_expiry_is_ten_seconds_early():
    assert token_expiry(10, now=5.0) == 5.0


def test_token_expiry_grows_with_lifetime():
    assert token_expiry(60, now=7.0) - token_expiry(0, now=7.0) == 60


def test_list_arguments_become_tuples():
    event = CurrentUserSavedTracksContains(["a", "b"])
    assert event.track_ids == ("a", "b")
    assert event == CurrentUserSavedTracksContains(("a", "b"))
    assert hash(event) == hash(CurrentUserSavedTracksContains(("a", "b")))


def test_start_playback_defaults_and_uris():
    assert StartPlayback() == StartPlayback(None, None, None)
    event = StartPlayback(None, ["spotify:track:x"], 0)
    assert event.uris == ("spotify:track:x",)
    assert event.offset == 0


def test_events_are_immutable():
    event = GetSearchResults("query")
    with pytest.raises(dataclasses.FrozenInstanceError):
        event.search_term = "other"
    assert event.country is None


def test_change_volume_range():
    assert ChangeVolume(100).volume_percent == 100
    with pytest.raises(ValueError):
        ChangeVolume(256)
    with pytest.raises(ValueError):
        ChangeVolume(-1)


def test_events_share_base_and_compare_by_kind():
    assert isinstance(GetCurrentPlayback(), IoEvent)
    assert GetCurrentPlayback() == GetCurrentPlayback()
    assert Repeat(RepeatState.OFF) != Repeat(RepeatState.TRACK)


def test_optional_fields():
    assert UserFollowPlaylist("owner", "pl").is_public is None
    seed = GetRecommendationsForSeed(None, ["t1"], None, "SE")
    assert seed.seed_tracks == ("t1",)
    assert seed.seed_artists is None
    assert seed.country == "SE"