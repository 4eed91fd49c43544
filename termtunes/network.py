"""Network worker: carries out requests against the music service and records results."""

from __future__ import annotations

import asyncio
import inspect
import time
from typing import Any, Callable, Iterable, Mapping

from .io_events import (
    ChangeVolume,
    CurrentUserSavedAlbumAdd,
    CurrentUserSavedAlbumDelete,
    CurrentUserSavedAlbumsContains,
    CurrentUserSavedTracksContains,
    GetAlbum,
    GetAlbumTracks,
    GetArtist,
    GetAudioAnalysis,
    GetCurrentPlayback,
    GetCurrentSavedTracks,
    GetCurrentUserSavedAlbums,
    GetDevices,
    GetFollowedArtists,
    GetMadeForYouPlaylistTracks,
    GetPlaylists,
    GetPlaylistTracks,
    GetRecentlyPlayed,
    GetRecommendationsForSeed,
    GetRecommendationsForTrackId,
    GetSearchResults,
    GetUser,
    IoEvent,
    MadeForYouSearchAndAdd,
    NextTrack,
    PausePlayback,
    PreviousTrack,
    RefreshAuthentication,
    Repeat,
    RepeatState,
    Seek,
    SetDeviceIdInConfig,
    SetTracksToTable,
    Shuffle,
    StartPlayback,
    ToggleSaveTrack,
    UpdateSearchLimits,
    UserArtistFollowCheck,
    UserFollowArtists,
    UserFollowPlaylist,
    UserUnfollowArtists,
    UserUnfollowPlaylist,
    next_repeat_state,
    token_expiry,
)
from .library_ops import SPOTIFY_OWNER_ID, LibraryOperations

# Route identifiers pushed onto the app's navigation stack.
ROUTE_SELECTED_DEVICE = "SelectedDevice"
ROUTE_TRACK_TABLE = "TrackTable"
ROUTE_ALBUM_TRACKS = "AlbumTracks"
ROUTE_RECOMMENDATIONS = "Recommendations"

# Blocks made active along with a route.
BLOCK_SELECT_DEVICE = "SelectDevice"
BLOCK_TRACK_TABLE = "TrackTable"
BLOCK_ALBUM_TRACKS = "AlbumTracks"

TRACK_TABLE_SAVED_TRACKS = "SavedTracks"
TRACK_TABLE_RECOMMENDED_TRACKS = "RecommendedTracks"
ALBUM_TABLE_SIMPLIFIED = "Simplified"
ALBUM_TABLE_FULL = "Full"
ARTIST_BLOCK_TOP_TRACKS = "TopTracks"
ARTIST_BLOCK_EMPTY = "Empty"

NO_DEVICE_MESSAGE = "No device_id selected"
REFRESH_FAILED_MESSAGE = "\nFailed to refresh authentication token"


def _field(obj: Any, name: str) -> Any:
    if isinstance(obj, Mapping):
        return obj.get(name)
    return getattr(obj, name, None)


def _set_field(obj: Any, name: str, value: Any) -> None:
    if isinstance(obj, Mapping):
        obj[name] = value  # type: ignore[index]
    else:
        setattr(obj, name, value)


def _present_ids(items: Iterable[Any]) -> list[str]:
    return [item_id for item in items if (item_id := _field(item, "id")) is not None]


class Network(LibraryOperations):
    """Handles one request at a time, updating the shared app state.

    ``token_refresher`` returns (or awaits to) new token information with an
    ``expires_in`` field, or None on failure; ``client_factory`` builds a new
    service client from that token information.
    """

    def __init__(
        self,
        spotify: Any,
        app: Any,
        client_config: Any,
        token_refresher: Callable[[], Any] | None = None,
        client_factory: Callable[[Any], Any] | None = None,
    ) -> None:
        super().__init__(spotify, app)
        self.client_config = client_config
        self.token_refresher = token_refresher
        self.client_factory = client_factory

    @property
    def _device_id(self) -> str | None:
        return _field(self.client_config, "device_id")

    async def handle_network_event(self, event: IoEvent) -> None:
        match event:
            case RefreshAuthentication():
                await self.refresh_authentication()
            case GetPlaylists():
                await self.get_current_user_playlists()
            case GetUser():
                await self.get_user()
            case GetDevices():
                await self.get_devices()
            case GetCurrentPlayback():
                await self.get_current_playback()
            case SetTracksToTable(tracks):
                await self.set_tracks_to_table(tracks)
            case GetSearchResults(term, country):
                await self.get_search_results(term, country)
            case GetMadeForYouPlaylistTracks(playlist_id, offset):
                await self.get_made_for_you_playlist_tracks(playlist_id, offset)
            case GetPlaylistTracks(playlist_id, offset):
                await self.get_playlist_tracks(playlist_id, offset)
            case GetCurrentSavedTracks(offset):
                await self.get_current_user_saved_tracks(offset)
            case StartPlayback(context_uri, uris, offset):
                await self.start_playback(context_uri, uris, offset)
            case UpdateSearchLimits(large, small):
                self.large_search_limit = large
                self.small_search_limit = small
            case Seek(position_ms):
                await self.seek(position_ms)
            case NextTrack():
                await self.next_track()
            case PreviousTrack():
                await self.previous_track()
            case Repeat(state):
                await self.repeat(state)
            case PausePlayback():
                await self.pause_playback()
            case ChangeVolume(volume):
                await self.change_volume(volume)
            case GetArtist(artist_id, name, country):
                await self.get_artist(artist_id, name, country)
            case GetAlbumTracks(album):
                await self.get_album_tracks(album)
            case GetRecommendationsForSeed(artists, tracks, first_track, country):
                await self.get_recommendations_for_seed(
                    artists, tracks, first_track, country
                )
            case GetCurrentUserSavedAlbums(offset):
                await self.get_current_user_saved_albums(offset)
            case CurrentUserSavedAlbumsContains(album_ids):
                await self.current_user_saved_albums_contains(album_ids)
            case CurrentUserSavedAlbumDelete(album_id):
                await self.current_user_saved_album_delete(album_id)
            case CurrentUserSavedAlbumAdd(album_id):
                await self.current_user_saved_album_add(album_id)
            case UserUnfollowArtists(artist_ids):
                await self.user_unfollow_artists(artist_ids)
            case UserFollowArtists(artist_ids):
                await self.user_follow_artists(artist_ids)
            case UserFollowPlaylist(owner_id, playlist_id, is_public):
                await self.user_follow_playlist(owner_id, playlist_id, is_public)
            case UserUnfollowPlaylist(user_id, playlist_id):
                await self.user_unfollow_playlist(user_id, playlist_id)
            case MadeForYouSearchAndAdd(term, country):
                await self.made_for_you_search_and_add(term, country)
            case GetAudioAnalysis(uri):
                await self.get_audio_analysis(uri)
            case ToggleSaveTrack(track_id):
                await self.toggle_save_track(track_id)
            case GetRecommendationsForTrackId(track_id, country):
                await self.get_recommendations_for_track_id(track_id, country)
            case GetRecentlyPlayed():
                await self.get_recently_played()
            case GetFollowedArtists(after):
                await self.get_followed_artists(after)
            case UserArtistFollowCheck(artist_ids):
                await self.user_artist_check_follow(artist_ids)
            case GetAlbum(album_id):
                await self.get_album(album_id)
            case SetDeviceIdInConfig(device_id):
                await self.set_device_id_in_config(device_id)
            case Shuffle(state):
                await self.shuffle(state)
            case CurrentUserSavedTracksContains(track_ids):
                await self.current_user_saved_tracks_contains(track_ids)
            case _:
                raise TypeError(f"unknown network event {event!r}")

        async with self.app_lock:
            self.app.is_loading = False

    async def get_user(self) -> None:
        try:
            user = await self.spotify.current_user()
        except Exception as exc:
            await self.handle_error(exc)
            return
        async with self.app_lock:
            self.app.user = user

    async def get_devices(self) -> None:
        try:
            result = await self.spotify.device()
        except Exception:
            return
        async with self.app_lock:
            self.app.push_navigation_stack(ROUTE_SELECTED_DEVICE, BLOCK_SELECT_DEVICE)
            if _field(result, "devices"):
                self.app.devices = result
                self.app.selected_device_index = 0

    async def get_current_playback(self) -> None:
        try:
            context = await self.spotify.current_playback(None)
        except Exception:
            context = None

        if context is not None:
            async with self.app_lock:
                self.app.current_playback_context = context
                self.app.instant_since_last_current_playback_poll = time.monotonic()
                track_id = _field(_field(context, "item"), "id")
                if track_id is not None:
                    self.app.dispatch(CurrentUserSavedTracksContains([track_id]))

        async with self.app_lock:
            self.app.is_fetching_current_playback = False

    async def set_tracks_to_table(self, tracks: Iterable[Any]) -> None:
        tracks = list(tracks)
        async with self.app_lock:
            self.app.track_table.tracks = list(tracks)
            self.app.dispatch(CurrentUserSavedTracksContains(_present_ids(tracks)))

    async def _set_playlist_tracks_to_table(self, page: Any) -> None:
        tracks = []
        for item in _field(page, "items") or ():
            track = _field(item, "track")
            if track is None:
                raise ValueError("playlist entry has no track")
            tracks.append(track)
        await self.set_tracks_to_table(tracks)

    async def _fetch_playlist_page(self, playlist_id: str, offset: int) -> Any | None:
        try:
            return await self.spotify.user_playlist_tracks(
                SPOTIFY_OWNER_ID, playlist_id, None, self.large_search_limit, offset, None
            )
        except Exception:
            return None

    async def _show_track_table(self) -> None:
        if self.app.get_current_route().id != ROUTE_TRACK_TABLE:
            self.app.push_navigation_stack(ROUTE_TRACK_TABLE, BLOCK_TRACK_TABLE)

    async def get_playlist_tracks(self, playlist_id: str, offset: int) -> None:
        page = await self._fetch_playlist_page(playlist_id, offset)
        if page is None:
            return
        await self._set_playlist_tracks_to_table(page)
        async with self.app_lock:
            self.app.playlist_tracks = page
            await self._show_track_table()

    async def get_made_for_you_playlist_tracks(self, playlist_id: str, offset: int) -> None:
        page = await self._fetch_playlist_page(playlist_id, offset)
        if page is None:
            return
        await self._set_playlist_tracks_to_table(page)
        async with self.app_lock:
            self.app.made_for_you_tracks = page
            await self._show_track_table()

    async def get_search_results(self, search_term: str, country: str | None = None) -> None:
        limit = self.small_search_limit
        try:
            tracks, artists, albums, playlists = await asyncio.gather(
                self.spotify.search_track(search_term, limit, 0, country),
                self.spotify.search_artist(search_term, limit, 0, country),
                self.spotify.search_album(search_term, limit, 0, country),
                self.spotify.search_playlist(search_term, limit, 0, country),
            )
        except Exception as exc:
            await self.handle_error(exc)
            return

        async with self.app_lock:
            artist_items = _field(_field(artists, "artists"), "items") or ()
            self.app.dispatch(
                UserArtistFollowCheck([_field(item, "id") for item in artist_items])
            )
            album_items = _field(_field(albums, "albums"), "items") or ()
            self.app.dispatch(CurrentUserSavedAlbumsContains(_present_ids(album_items)))

            results = self.app.search_results
            results.tracks = tracks
            results.artists = artists
            results.albums = albums
            results.playlists = playlists

    async def get_current_user_saved_tracks(self, offset: int | None = None) -> None:
        try:
            saved = await self.spotify.current_user_saved_tracks(
                self.large_search_limit, offset
            )
        except Exception as exc:
            await self.handle_error(exc)
            return
        tracks = [_field(item, "track") for item in _field(saved, "items") or ()]
        async with self.app_lock:
            self.app.track_table.tracks = tracks
            self.app.liked_song_ids_set.update(_present_ids(tracks))
            self.app.library.saved_tracks.add_pages(saved)
            self.app.track_table.context = TRACK_TABLE_SAVED_TRACKS

    async def start_playback(
        self,
        context_uri: str | None = None,
        uris: Iterable[str] | None = None,
        offset: int | None = None,
    ) -> None:
        if context_uri is not None:
            uris = None
        elif uris is not None:
            uris = list(uris)
        position = None if offset is None else {"position": offset}

        device_id = self._device_id
        if device_id is None:
            await self.handle_error(RuntimeError(NO_DEVICE_MESSAGE))
            return
        try:
            await self.spotify.start_playback(device_id, context_uri, uris, position, None)
        except Exception as exc:
            await self.handle_error(exc)
            return
        async with self.app_lock:
            self.app.song_progress_ms = 0
            self.app.dispatch(GetCurrentPlayback())

    async def _control_then_refresh(self, method: str, *args: Any) -> None:
        try:
            await getattr(self.spotify, method)(*args)
        except Exception as exc:
            await self.handle_error(exc)
            return
        await self.get_current_playback()

    async def seek(self, position_ms: int) -> None:
        device_id = self._device_id
        if device_id is not None:
            await self._control_then_refresh("seek_track", position_ms, device_id)

    async def next_track(self) -> None:
        await self._control_then_refresh("next_track", self._device_id)

    async def previous_track(self) -> None:
        await self._control_then_refresh("previous_track", self._device_id)

    async def pause_playback(self) -> None:
        await self._control_then_refresh("pause_playback", self._device_id)

    async def shuffle(self, shuffle_state: bool) -> None:
        new_state = not shuffle_state
        try:
            await self.spotify.shuffle(new_state, self._device_id)
        except Exception as exc:
            await self.handle_error(exc)
            return
        # Update eagerly rather than waiting for the next playback poll.
        async with self.app_lock:
            context = self.app.current_playback_context
            if context is not None:
                _set_field(context, "shuffle_state", new_state)

    async def repeat(self, repeat_state: RepeatState) -> None:
        new_state = next_repeat_state(repeat_state)
        try:
            await self.spotify.repeat(new_state, self._device_id)
        except Exception as exc:
            await self.handle_error(exc)
            return
        async with self.app_lock:
            context = self.app.current_playback_context
            if context is not None:
                _set_field(context, "repeat_state", new_state)

    async def change_volume(self, volume_percent: int) -> None:
        try:
            await self.spotify.volume(volume_percent, self._device_id)
        except Exception as exc:
            await self.handle_error(exc)
            return
        async with self.app_lock:
            context = self.app.current_playback_context
            if context is not None:
                _set_field(_field(context, "device"), "volume_percent", volume_percent)

    async def get_artist(
        self, artist_id: str, input_artist_name: str, country: str | None = None
    ) -> None:
        if input_artist_name == "":
            try:
                full_artist = await self.spotify.artist(artist_id)
                artist_name = _field(full_artist, "name") or ""
            except Exception:
                artist_name = ""
        else:
            artist_name = input_artist_name

        try:
            albums, top_tracks, related = await asyncio.gather(
                self.spotify.artist_albums(
                    artist_id, None, country, self.large_search_limit, 0
                ),
                self.spotify.artist_top_tracks(artist_id, country),
                self.spotify.artist_related_artists(artist_id),
            )
        except Exception:
            return

        async with self.app_lock:
            self.app.artist = {
                "artist_name": artist_name,
                "albums": albums,
                "related_artists": list(_field(related, "artists") or ()),
                "top_tracks": list(_field(top_tracks, "tracks") or ()),
                "selected_album_index": 0,
                "selected_related_artist_index": 0,
                "selected_top_track_index": 0,
                "artist_hovered_block": ARTIST_BLOCK_TOP_TRACKS,
                "artist_selected_block": ARTIST_BLOCK_EMPTY,
            }

    async def get_album_tracks(self, album: Any) -> None:
        album_id = _field(album, "id")
        if album_id is None:
            return
        try:
            tracks = await self.spotify.album_track(album_id, self.large_search_limit, 0)
        except Exception as exc:
            await self.handle_error(exc)
            return
        track_ids = _present_ids(_field(tracks, "items") or ())
        async with self.app_lock:
            self.app.selected_album_simplified = {
                "album": album,
                "tracks": tracks,
                "selected_index": 0,
            }
            self.app.album_table_context = ALBUM_TABLE_SIMPLIFIED
            self.app.push_navigation_stack(ROUTE_ALBUM_TRACKS, BLOCK_ALBUM_TRACKS)
            self.app.dispatch(CurrentUserSavedTracksContains(track_ids))

    async def _extract_recommended_tracks(self, recommendations: Any) -> list[Any] | None:
        uris = [_field(item, "uri") for item in _field(recommendations, "tracks") or ()]
        try:
            result = await self.spotify.tracks(uris, None)
        except Exception:
            return None
        return list(_field(result, "tracks") or ())

    async def get_recommendations_for_seed(
        self,
        seed_artists: Iterable[str] | None,
        seed_tracks: Iterable[str] | None,
        first_track: Any = None,
        country: str | None = None,
    ) -> None:
        try:
            result = await self.spotify.recommendations(
                None if seed_artists is None else list(seed_artists),
                None,
                None if seed_tracks is None else list(seed_tracks),
                self.large_search_limit,
                country,
                {},
            )
        except Exception as exc:
            await self.handle_error(exc)
            return

        recommended = await self._extract_recommended_tracks(result)
        if recommended is None:
            return
        if first_track is not None:
            recommended.insert(0, first_track)
        uris = [_field(track, "uri") for track in recommended]

        await self.set_tracks_to_table(recommended)

        async with self.app_lock:
            self.app.recommended_tracks = recommended
            self.app.track_table.context = TRACK_TABLE_RECOMMENDED_TRACKS
            if self.app.get_current_route().id != ROUTE_RECOMMENDATIONS:
                self.app.push_navigation_stack(ROUTE_RECOMMENDATIONS, BLOCK_TRACK_TABLE)
            self.app.dispatch(StartPlayback(None, uris, 0))

    async def get_recommendations_for_track_id(
        self, track_id: str, country: str | None = None
    ) -> None:
        try:
            track = await self.spotify.track(track_id)
        except Exception:
            return
        seed_id = _field(track, "id")
        seeds = None if seed_id is None else [seed_id]
        await self.get_recommendations_for_seed(None, seeds, track, country)

    async def get_audio_analysis(self, uri: str) -> None:
        try:
            result = await self.spotify.audio_analysis(uri)
        except Exception as exc:
            await self.handle_error(exc)
            return
        async with self.app_lock:
            self.app.audio_analysis = result

    async def get_album(self, album_id: str) -> None:
        try:
            album = await self.spotify.album(album_id)
        except Exception as exc:
            await self.handle_error(exc)
            return
        async with self.app_lock:
            self.app.selected_album_full = {"album": album, "selected_index": 0}
            self.app.album_table_context = ALBUM_TABLE_FULL
            self.app.push_navigation_stack(ROUTE_ALBUM_TRACKS, BLOCK_ALBUM_TRACKS)

    async def set_device_id_in_config(self, device_id: str) -> None:
        try:
            self.client_config.set_device_id(device_id)
        except Exception as exc:
            await self.handle_error(exc)
            return
        async with self.app_lock:
            self.app.pop_navigation_stack()

    async def refresh_authentication(self) -> None:
        token_info = None
        if self.token_refresher is not None and self.client_factory is not None:
            token_info = self.token_refresher()
            if inspect.isawaitable(token_info):
                token_info = await token_info
        if token_info is None:
            print(REFRESH_FAILED_MESSAGE)
            return
        expiry = token_expiry(_field(token_info, "expires_in"))
        self.spotify = self.client_factory(token_info)
        async with self.app_lock:
            self.app.spotify_token_expiry = expiry