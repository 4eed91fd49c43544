"""Library requests: saved tracks and albums, followed artists and playlists."""

from __future__ import annotations

import asyncio
from typing import Any, Iterable, Mapping

SPOTIFY_OWNER_ID = "spotify"
DEFAULT_LARGE_SEARCH_LIMIT = 20
DEFAULT_SMALL_SEARCH_LIMIT = 4


def _field(obj: Any, name: str) -> Any:
    if isinstance(obj, Mapping):
        return obj.get(name)
    return getattr(obj, name, None)


def _set_field(obj: Any, name: str, value: Any) -> None:
    if isinstance(obj, Mapping):
        obj[name] = value  # type: ignore[index]
    else:
        setattr(obj, name, value)


def _ids_with_flags(ids: list[str], flags: Iterable[bool]) -> list[tuple[str, bool]]:
    flags = list(flags)
    if len(flags) < len(ids):
        raise ValueError(
            f"expected {len(ids)} follow flags, the service returned {len(flags)}"
        )
    return list(zip(ids, flags))


class LibraryOperations:
    """Library requests against a music service client, recorded in shared app state.

    ``spotify`` is an asynchronous client; ``app`` is the shared application
    state, guarded by ``lock``. Failures are reported through the app's
    ``handle_error`` rather than raised.
    """

    def __init__(
        self,
        spotify: Any,
        app: Any,
        *,
        large_search_limit: int = DEFAULT_LARGE_SEARCH_LIMIT,
        small_search_limit: int = DEFAULT_SMALL_SEARCH_LIMIT,
        lock: asyncio.Lock | None = None,
    ) -> None:
        self.spotify = spotify
        self.app = app
        self.large_search_limit = large_search_limit
        self.small_search_limit = small_search_limit
        self.app_lock = lock if lock is not None else asyncio.Lock()

    async def handle_error(self, error: Exception) -> None:
        async with self.app_lock:
            self.app.handle_error(error)

    async def current_user_saved_tracks_contains(self, ids: Iterable[str]) -> None:
        ids = list(ids)
        try:
            saved = await self.spotify.current_user_saved_tracks_contains(ids)
        except Exception as exc:
            await self.handle_error(exc)
            return
        async with self.app_lock:
            liked = self.app.liked_song_ids_set
            for track_id, is_liked in zip(ids, saved):
                if is_liked:
                    liked.add(track_id)
                else:
                    liked.discard(track_id)

    async def toggle_save_track(self, track_id: str) -> None:
        try:
            saved = await self.spotify.current_user_saved_tracks_contains([track_id])
        except Exception as exc:
            await self.handle_error(exc)
            return
        saved = list(saved)
        is_saved = bool(saved) and saved[0] is True
        try:
            if is_saved:
                await self.spotify.current_user_saved_tracks_delete([track_id])
            else:
                await self.spotify.current_user_saved_tracks_add([track_id])
        except Exception as exc:
            await self.handle_error(exc)
            return
        async with self.app_lock:
            if is_saved:
                self.app.liked_song_ids_set.discard(track_id)
            else:
                self.app.liked_song_ids_set.add(track_id)

    async def get_followed_artists(self, after: str | None = None) -> None:
        try:
            followed = await self.spotify.current_user_followed_artists(
                self.large_search_limit, after
            )
        except Exception as exc:
            await self.handle_error(exc)
            return
        page = _field(followed, "artists")
        async with self.app_lock:
            self.app.artists = list(_field(page, "items") or ())
            self.app.library.saved_artists.add_pages(page)

    async def user_artist_check_follow(self, artist_ids: Iterable[str]) -> None:
        artist_ids = list(artist_ids)
        try:
            followed = await self.spotify.user_artist_check_follow(artist_ids)
        except Exception:
            return
        pairs = _ids_with_flags(artist_ids, followed)
        async with self.app_lock:
            followed_set = self.app.followed_artist_ids_set
            for artist_id, is_followed in pairs:
                if is_followed:
                    followed_set.add(artist_id)
                else:
                    followed_set.discard(artist_id)

    async def get_current_user_saved_albums(self, offset: int | None = None) -> None:
        try:
            saved = await self.spotify.current_user_saved_albums(
                self.large_search_limit, offset
            )
        except Exception as exc:
            await self.handle_error(exc)
            return
        # An empty page would only show a blank screen.
        if _field(saved, "items"):
            async with self.app_lock:
                self.app.library.saved_albums.add_pages(saved)

    async def current_user_saved_albums_contains(self, album_ids: Iterable[str]) -> None:
        album_ids = list(album_ids)
        try:
            saved = await self.spotify.current_user_saved_albums_contains(album_ids)
        except Exception:
            return
        pairs = _ids_with_flags(album_ids, saved)
        async with self.app_lock:
            saved_set = self.app.saved_album_ids_set
            for album_id, is_saved in pairs:
                if is_saved:
                    saved_set.add(album_id)
                else:
                    saved_set.discard(album_id)

    async def current_user_saved_album_delete(self, album_id: str) -> None:
        try:
            await self.spotify.current_user_saved_albums_delete([album_id])
        except Exception as exc:
            await self.handle_error(exc)
            return
        await self.get_current_user_saved_albums(None)
        async with self.app_lock:
            self.app.saved_album_ids_set.discard(album_id)

    async def current_user_saved_album_add(self, album_id: str) -> None:
        try:
            await self.spotify.current_user_saved_albums_add([album_id])
        except Exception as exc:
            await self.handle_error(exc)
            return
        async with self.app_lock:
            self.app.saved_album_ids_set.add(album_id)

    async def user_unfollow_artists(self, artist_ids: Iterable[str]) -> None:
        artist_ids = list(artist_ids)
        try:
            await self.spotify.user_unfollow_artists(artist_ids)
        except Exception as exc:
            await self.handle_error(exc)
            return
        await self.get_followed_artists(None)
        async with self.app_lock:
            for artist_id in artist_ids:
                self.app.followed_artist_ids_set.discard(artist_id)

    async def user_follow_artists(self, artist_ids: Iterable[str]) -> None:
        artist_ids = list(artist_ids)
        try:
            await self.spotify.user_follow_artists(artist_ids)
        except Exception as exc:
            await self.handle_error(exc)
            return
        await self.get_followed_artists(None)
        async with self.app_lock:
            self.app.followed_artist_ids_set.update(artist_ids)

    async def user_follow_playlist(
        self, owner_id: str, playlist_id: str, is_public: bool | None = None
    ) -> None:
        try:
            await self.spotify.user_playlist_follow_playlist(
                owner_id, playlist_id, is_public
            )
        except Exception as exc:
            await self.handle_error(exc)
            return
        await self.get_current_user_playlists()

    async def user_unfollow_playlist(self, user_id: str, playlist_id: str) -> None:
        try:
            await self.spotify.user_playlist_unfollow(user_id, playlist_id)
        except Exception as exc:
            await self.handle_error(exc)
            return
        await self.get_current_user_playlists()

    async def made_for_you_search_and_add(
        self, search_string: str, country: str | None = None
    ) -> None:
        try:
            result = await self.spotify.search_playlist(
                search_string, self.large_search_limit, 0, country
            )
        except Exception as exc:
            await self.handle_error(exc)
            return
        page = _field(result, "playlists")
        filtered = [
            playlist
            for playlist in _field(page, "items") or ()
            if _field(_field(playlist, "owner"), "id") == SPOTIFY_OWNER_ID
            and _field(playlist, "name") == search_string
        ]
        async with self.app_lock:
            store = self.app.library.made_for_you_playlists
            if store.pages:
                current = store.get_mut_results(None)
                _field(current, "items").extend(filtered)
            else:
                _set_field(page, "items", filtered)
                store.add_pages(page)

    async def get_current_user_playlists(self) -> None:
        try:
            playlists = await self.spotify.current_user_playlists(
                self.large_search_limit, None
            )
        except Exception as exc:
            await self.handle_error(exc)
            return
        async with self.app_lock:
            self.app.playlists = playlists
            self.app.selected_playlist_index = 0

    async def get_recently_played(self) -> None:
        try:
            result = await self.spotify.current_user_recently_played(
                self.large_search_limit
            )
        except Exception as exc:
            await self.handle_error(exc)
            return
        track_ids = [
            track_id
            for item in _field(result, "items") or ()
            if (track_id := _field(_field(item, "track"), "id")) is not None
        ]
        await self.current_user_saved_tracks_contains(track_ids)
        async with self.app_lock:
            self.app.recently_played.result = result