"""Requests passed from the interface to the network worker."""

from __future__ import annotations

import time
from dataclasses import dataclass, fields
from enum import Enum
from typing import Any

TOKEN_EXPIRY_MARGIN_SECONDS = 10


class RepeatState(Enum):
    OFF = "off"
    CONTEXT = "context"
    TRACK = "track"


_NEXT_REPEAT = {
    RepeatState.OFF: RepeatState.CONTEXT,
    RepeatState.CONTEXT: RepeatState.TRACK,
    RepeatState.TRACK: RepeatState.OFF,
}


def next_repeat_state(state: RepeatState) -> RepeatState:
    """Cycle off -> context -> track -> off."""
    return _NEXT_REPEAT[state]


def token_expiry(expires_in: float, now: float | None = None) -> float:
    """Monotonic time at which a token should be refreshed, a little early."""
    start = time.monotonic() if now is None else now
    return start + expires_in - TOKEN_EXPIRY_MARGIN_SECONDS


class IoEvent:
    """Base class of all network requests; list arguments are stored as tuples."""

    def __post_init__(self) -> None:
        for f in fields(self):  # type: ignore[arg-type]
            value = getattr(self, f.name)
            if isinstance(value, list):
                object.__setattr__(self, f.name, tuple(value))


@dataclass(frozen=True)
class GetCurrentPlayback(IoEvent):
    pass


@dataclass(frozen=True)
class RefreshAuthentication(IoEvent):
    pass


@dataclass(frozen=True)
class GetPlaylists(IoEvent):
    pass


@dataclass(frozen=True)
class GetDevices(IoEvent):
    pass


@dataclass(frozen=True)
class GetSearchResults(IoEvent):
    search_term: str
    country: str | None = None


@dataclass(frozen=True)
class SetTracksToTable(IoEvent):
    tracks: tuple[Any, ...]


@dataclass(frozen=True)
class GetMadeForYouPlaylistTracks(IoEvent):
    playlist_id: str
    offset: int


@dataclass(frozen=True)
class GetPlaylistTracks(IoEvent):
    playlist_id: str
    offset: int


@dataclass(frozen=True)
class GetCurrentSavedTracks(IoEvent):
    offset: int | None = None


@dataclass(frozen=True)
class StartPlayback(IoEvent):
    context_uri: str | None = None
    uris: tuple[str, ...] | None = None
    offset: int | None = None


@dataclass(frozen=True)
class UpdateSearchLimits(IoEvent):
    large_search_limit: int
    small_search_limit: int


@dataclass(frozen=True)
class Seek(IoEvent):
    position_ms: int


@dataclass(frozen=True)
class NextTrack(IoEvent):
    pass


@dataclass(frozen=True)
class PreviousTrack(IoEvent):
    pass


@dataclass(frozen=True)
class Shuffle(IoEvent):
    shuffle_state: bool


@dataclass(frozen=True)
class Repeat(IoEvent):
    repeat_state: RepeatState


@dataclass(frozen=True)
class PausePlayback(IoEvent):
    pass


@dataclass(frozen=True)
class ChangeVolume(IoEvent):
    volume_percent: int

    def __post_init__(self) -> None:
        super().__post_init__()
        if not 0 <= self.volume_percent <= 255:
            raise ValueError(f"volume out of range: {self.volume_percent}")


@dataclass(frozen=True)
class GetArtist(IoEvent):
    artist_id: str
    input_artist_name: str
    country: str | None = None


@dataclass(frozen=True)
class GetAlbumTracks(IoEvent):
    album: Any


@dataclass(frozen=True)
class GetRecommendationsForSeed(IoEvent):
    seed_artists: tuple[str, ...] | None = None
    seed_tracks: tuple[str, ...] | None = None
    first_track: Any = None
    country: str | None = None


@dataclass(frozen=True)
class GetCurrentUserSavedAlbums(IoEvent):
    offset: int | None = None


@dataclass(frozen=True)
class CurrentUserSavedAlbumsContains(IoEvent):
    album_ids: tuple[str, ...]


@dataclass(frozen=True)
class CurrentUserSavedAlbumDelete(IoEvent):
    album_id: str


@dataclass(frozen=True)
class CurrentUserSavedAlbumAdd(IoEvent):
    album_id: str


@dataclass(frozen=True)
class UserUnfollowArtists(IoEvent):
    artist_ids: tuple[str, ...]


@dataclass(frozen=True)
class UserFollowArtists(IoEvent):
    artist_ids: tuple[str, ...]


@dataclass(frozen=True)
class UserFollowPlaylist(IoEvent):
    owner_id: str
    playlist_id: str
    is_public: bool | None = None


@dataclass(frozen=True)
class UserUnfollowPlaylist(IoEvent):
    user_id: str
    playlist_id: str


@dataclass(frozen=True)
class MadeForYouSearchAndAdd(IoEvent):
    search_term: str
    country: str | None = None


@dataclass(frozen=True)
class GetAudioAnalysis(IoEvent):
    uri: str


@dataclass(frozen=True)
class GetUser(IoEvent):
    pass


@dataclass(frozen=True)
class ToggleSaveTrack(IoEvent):
    track_id: str


@dataclass(frozen=True)
class GetRecommendationsForTrackId(IoEvent):
    track_id: str
    country: str | None = None


@dataclass(frozen=True)
class GetRecentlyPlayed(IoEvent):
    pass


@dataclass(frozen=True)
class GetFollowedArtists(IoEvent):
    after: str | None = None


@dataclass(frozen=True)
class UserArtistFollowCheck(IoEvent):
    artist_ids: tuple[str, ...]


@dataclass(frozen=True)
class GetAlbum(IoEvent):
    album_id: str


@dataclass(frozen=True)
class SetDeviceIdInConfig(IoEvent):
    device_id: str


@dataclass(frozen=True)
class CurrentUserSavedTracksContains(IoEvent):
    track_ids: tuple[str, ...]