"""Table layouts for the track, album, artist and playlist views."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable, Mapping

from .formatting import create_artist_string, get_percentage_width, millis_to_minutes

# Rows taken up by the border, header and header spacing of a table.
TABLE_PADDING = 5

PLAYING_MARKER = "|> "
LIKED_MARKER = " ♥"


class TableId(Enum):
    ALBUM = "album"
    ALBUM_LIST = "album_list"
    ARTIST = "artist"
    SONG = "song"
    RECENTLY_PLAYED = "recently_played"
    MADE_FOR_YOU = "made_for_you"


# Tables whose rows are tracks, and so show the playing and liked markers.
_TRACK_TABLES = frozenset({TableId.SONG, TableId.RECENTLY_PLAYED, TableId.ALBUM})


class ColumnId(Enum):
    NONE = "none"
    SONG_TITLE = "song_title"
    LIKED = "liked"


@dataclass(frozen=True)
class TableHeaderItem:
    text: str
    width: int
    id: ColumnId = ColumnId.NONE


@dataclass(frozen=True)
class TableHeader:
    id: TableId
    items: tuple[TableHeaderItem, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "items", tuple(self.items))

    def get_index(self, column_id: ColumnId) -> int | None:
        """Position of the first column with ``column_id``, or None."""
        return next(
            (index for index, item in enumerate(self.items) if item.id == column_id),
            None,
        )

    @property
    def texts(self) -> tuple[str, ...]:
        return tuple(item.text for item in self.items)

    @property
    def widths(self) -> tuple[int, ...]:
        return tuple(item.width for item in self.items)


@dataclass(frozen=True)
class TableItem:
    """One row of data: the id it stands for and one string per column."""

    id: str
    format: tuple[str, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        object.__setattr__(self, "format", tuple(self.format))


@dataclass(frozen=True)
class TableRow:
    """A visible row, ready to draw."""

    item_id: str
    cells: tuple[str, ...]
    playing: bool = False
    selected: bool = False


def _field(obj: Any, name: str) -> Any:
    if isinstance(obj, Mapping):
        return obj.get(name)
    return getattr(obj, name, None)


def _id_or_empty(obj: Any) -> str:
    value = _field(obj, "id")
    return "" if value is None else str(value)


def table_offset(height: int, selected_index: int) -> int:
    """Number of rows to skip so that the selected row stays visible."""
    visible = height - TABLE_PADDING
    if visible < 0 or selected_index < visible:
        return 0
    return selected_index - visible


def build_table_rows(
    header: TableHeader,
    items: Iterable[TableItem],
    selected_index: int,
    height: int,
    playing_id: str | None = None,
    liked_ids: Iterable[str] = (),
) -> list[TableRow]:
    """Lay out the visible rows, marking the playing, liked and selected ones."""
    items = list(items)
    liked = set(liked_ids)
    offset = table_offset(height, selected_index)

    playing_index = None
    if playing_id is not None:
        playing_index = next(
            (index for index, item in enumerate(items) if item.id == playing_id),
            None,
        )

    title_idx = header.get_index(ColumnId.SONG_TITLE)
    liked_idx = header.get_index(ColumnId.LIKED)
    is_track_table = header.id in _TRACK_TABLES

    rows = []
    for position, item in enumerate(items[offset:], start=offset):
        cells = list(item.format)
        playing = False
        if is_track_table:
            if title_idx is not None and position == playing_index:
                cells[title_idx] = f"{PLAYING_MARKER}{cells[title_idx]}"
                playing = True
            if liked_idx is not None and item.id in liked:
                cells[liked_idx] = LIKED_MARKER
        rows.append(
            TableRow(
                item_id=item.id,
                cells=tuple(cells),
                playing=playing,
                selected=position == selected_index,
            )
        )
    return rows


def song_table_header(width: int) -> TableHeader:
    return TableHeader(
        TableId.SONG,
        (
            TableHeaderItem("", 2, ColumnId.LIKED),
            TableHeaderItem("Title", get_percentage_width(width, 0.3), ColumnId.SONG_TITLE),
            TableHeaderItem("Artist", get_percentage_width(width, 0.3)),
            TableHeaderItem("Album", get_percentage_width(width, 0.3)),
            TableHeaderItem("Length", get_percentage_width(width, 0.1)),
        ),
    )


def album_table_header(width: int) -> TableHeader:
    return TableHeader(
        TableId.ALBUM,
        (
            TableHeaderItem("", 2, ColumnId.LIKED),
            TableHeaderItem("#", 3),
            TableHeaderItem("Title", get_percentage_width(width, 0.80), ColumnId.SONG_TITLE),
            TableHeaderItem("Length", get_percentage_width(width, 0.15)),
        ),
    )


def recently_played_header(width: int) -> TableHeader:
    liked_width = 2
    # The title column gives up the width of the liked column before it.
    title_width = get_percentage_width(width, 2.0 / 5.0) - liked_width
    if title_width < 0:
        raise ValueError(f"width {width} is too small for the recently played table")
    return TableHeader(
        TableId.RECENTLY_PLAYED,
        (
            TableHeaderItem("", liked_width, ColumnId.LIKED),
            TableHeaderItem("Title", title_width, ColumnId.SONG_TITLE),
            TableHeaderItem("Artist", get_percentage_width(width, 2.0 / 5.0)),
            TableHeaderItem("Length", get_percentage_width(width, 1.0 / 5.0)),
        ),
    )


def artist_table_header(width: int) -> TableHeader:
    return TableHeader(
        TableId.ARTIST,
        (TableHeaderItem("Artist", get_percentage_width(width, 1.0)),),
    )


def album_list_header(width: int) -> TableHeader:
    return TableHeader(
        TableId.ALBUM_LIST,
        (
            TableHeaderItem("Name", get_percentage_width(width, 2.0 / 5.0)),
            TableHeaderItem("Artists", get_percentage_width(width, 2.0 / 5.0)),
            TableHeaderItem("Release Date", get_percentage_width(width, 1.0 / 5.0)),
        ),
    )


def made_for_you_header(width: int) -> TableHeader:
    return TableHeader(
        TableId.MADE_FOR_YOU,
        (TableHeaderItem("Name", get_percentage_width(width, 2.0 / 5.0)),),
    )


def _track_row(track: Any) -> TableItem:
    return TableItem(
        _id_or_empty(track),
        (
            "",
            str(_field(track, "name")),
            create_artist_string(_field(track, "artists") or ()),
            str(_field(_field(track, "album"), "name")),
            millis_to_minutes(int(_field(track, "duration_ms"))),
        ),
    )


def song_table_items(tracks: Iterable[Any]) -> list[TableItem]:
    """Rows for full tracks: liked, title, artists, album, length."""
    return [_track_row(track) for track in tracks]


def album_track_items(tracks: Iterable[Any]) -> list[TableItem]:
    """Rows for an album's tracks: liked, number, title, length."""
    return [
        TableItem(
            _id_or_empty(track),
            (
                "",
                str(_field(track, "track_number")),
                str(_field(track, "name")),
                millis_to_minutes(int(_field(track, "duration_ms"))),
            ),
        )
        for track in tracks
    ]


def recently_played_items(items: Iterable[Any]) -> list[TableItem]:
    """Rows for play-history entries: liked, title, artists, length."""
    rows = []
    for item in items:
        track = _field(item, "track")
        rows.append(
            TableItem(
                _id_or_empty(track),
                (
                    "",
                    str(_field(track, "name")),
                    create_artist_string(_field(track, "artists") or ()),
                    millis_to_minutes(int(_field(track, "duration_ms"))),
                ),
            )
        )
    return rows


def artist_table_items(artists: Iterable[Any]) -> list[TableItem]:
    return [
        TableItem(_id_or_empty(artist), (str(_field(artist, "name")),))
        for artist in artists
    ]


def album_list_items(saved_albums: Iterable[Any]) -> list[TableItem]:
    """Rows for saved albums: name, artists, release date."""
    rows = []
    for saved in saved_albums:
        album = _field(saved, "album")
        rows.append(
            TableItem(
                _id_or_empty(album),
                (
                    str(_field(album, "name")),
                    create_artist_string(_field(album, "artists") or ()),
                    str(_field(album, "release_date")),
                ),
            )
        )
    return rows


def made_for_you_items(playlists: Iterable[Any]) -> list[TableItem]:
    return [
        TableItem(_id_or_empty(playlist), (str(_field(playlist, "name")),))
        for playlist in playlists
    ]


def recommendations_title(context: Any, seed: str) -> str:
    """Title of the recommendations table for a song or artist seed."""
    if context is None:
        return "Recommendations"
    kind = str(getattr(context, "value", context)).lower()
    if kind == "song":
        return f"Recommendations based on Song '{seed}'"
    if kind == "artist":
        return f"Recommendations based on Artist '{seed}'"
    raise ValueError(f"unknown recommendations context {context!r}")