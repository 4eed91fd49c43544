from enum import Enum
from types import SimpleNamespace

import pytest

from termtunes.formatting import get_percentage_width, millis_to_minutes
from termtunes.tables import (
    ColumnId,
    TableHeader,
    TableHeaderItem,
    TableId,
    TableItem,
    album_list_header,
    album_list_items,
    album_table_header,
    album_track_items,
    artist_table_header,
    artist_table_items,
    build_table_rows,
    made_for_you_header,
    made_for_you_items,
    recently_played_header,
    recently_played_items,
    recommendations_title,
    song_table_header,
    song_table_items,
    table_offset,
)


def _track(track_id, name, duration_ms=60 * 1000):
    return {
        "id": track_id,
        "name": name,
        "artists": [{"name": "Artist 1"}, {"name": "Artist 2"}],
        "album": {"name": "Album"},
        "duration_ms": duration_ms,
        "track_number": 1,
    }


def _items(count):
    return [TableItem(f"id{n}", ("", f"Song {n}", "A", "B", "1:00")) for n in range(count)]


def test_get_index_finds_columns():
    header = song_table_header(100)
    assert header.get_index(ColumnId.LIKED) == 0
    assert header.get_index(ColumnId.SONG_TITLE) == 1
    assert artist_table_header(100).get_index(ColumnId.SONG_TITLE) is None


def test_song_table_header_layout():
    width = 103
    header = song_table_header(width)
    assert header.id is TableId.SONG
    assert header.texts == ("", "Title", "Artist", "Album", "Length")
    assert header.widths == (
        2,
        get_percentage_width(width, 0.3),
        get_percentage_width(width, 0.3),
        get_percentage_width(width, 0.3),
        get_percentage_width(width, 0.1),
    )


def test_album_table_header_layout():
    width = 80
    header = album_table_header(width)
    assert header.id is TableId.ALBUM
    assert header.texts == ("", "#", "Title", "Length")
    assert header.widths[:2] == (2, 3)
    assert header.widths[2] == get_percentage_width(width, 0.80)
    assert header.get_index(ColumnId.SONG_TITLE) == 2


def test_recently_played_header_subtracts_liked_width():
    width = 60
    header = recently_played_header(width)
    assert header.widths[1] == get_percentage_width(width, 2.0 / 5.0) - 2
    assert header.widths[2] == get_percentage_width(width, 2.0 / 5.0)


def test_recently_played_header_too_narrow():
    with pytest.raises(ValueError):
        recently_played_header(4)


def test_other_headers():
    assert album_list_header(50).texts == ("Name", "Artists", "Release Date")
    assert made_for_you_header(50).texts == ("Name",)
    assert made_for_you_header(50).id is TableId.MADE_FOR_YOU
    assert artist_table_header(50).widths == (get_percentage_width(50, 1.0),)


def test_song_table_items_format():
    items = song_table_items([_track("t1", "Song A")])
    assert items == [
        TableItem("t1", ("", "Song A", "Artist 1, Artist 2", "Album", "1:00"))
    ]


def test_missing_id_becomes_empty():
    items = song_table_items([_track(None, "Song A")])
    assert items[0].id == ""


def test_album_track_items_format():
    track = SimpleNamespace(
        id="t9", name="Intro", track_number=7, duration_ms=60 * 1500
    )
    assert album_track_items([track]) == [
        TableItem("t9", ("", "7", "Intro", millis_to_minutes(60 * 1500)))
    ]


def test_recently_played_items_format():
    items = recently_played_items([{"track": _track("t2", "Song B")}])
    assert items[0].format == ("", "Song B", "Artist 1, Artist 2", "1:00")


def test_artist_album_and_playlist_items():
    artists = [SimpleNamespace(id="a1", name="Band")]
    assert artist_table_items(artists) == [TableItem("a1", ("Band",))]
    saved = [
        {
            "album": {
                "id": "al1",
                "name": "Record",
                "artists": [{"name": "Band"}],
                "release_date": "2019-05-01",
            }
        }
    ]
    assert album_list_items(saved) == [TableItem("al1", ("Record", "Band", "2019-05-01"))]
    playlists = [{"id": "p1", "name": "Daily Mix"}]
    assert made_for_you_items(playlists) == [TableItem("p1", ("Daily Mix",))]


def test_rows_mark_playing_liked_and_selected():
    header = song_table_header(100)
    items = song_table_items([_track("t1", "Song A"), _track("t2", "Song B")])
    rows = build_table_rows(header, items, 1, 30, playing_id="t1", liked_ids={"t2"})
    assert rows[0].cells[1] == "|> Song A"
    assert rows[0].playing
    assert not rows[0].selected
    assert rows[1].cells[0] == " ♥"
    assert rows[1].selected
    assert not rows[1].playing
    assert rows[0].cells[0] == ""


def test_rows_without_playing_id_are_unmarked():
    header = song_table_header(100)
    items = song_table_items([_track("t1", "Song A")])
    rows = build_table_rows(header, items, 0, 30)
    assert rows[0].cells == items[0].format
    assert not rows[0].playing


def test_non_track_table_ignores_markers():
    header = TableHeader(
        TableId.ARTIST,
        (
            TableHeaderItem("", 2, ColumnId.LIKED),
            TableHeaderItem("Name", 10, ColumnId.SONG_TITLE),
        ),
    )
    items = [TableItem("x", ("", "Name"))]
    rows = build_table_rows(header, items, 0, 30, playing_id="x", liked_ids={"x"})
    assert rows[0].cells == ("", "Name")
    assert not rows[0].playing


def test_table_offset_keeps_top_when_selection_visible():
    assert table_offset(30, 3) == 0
    assert table_offset(2, 50) == 0


@pytest.mark.parametrize("height,selected", [(10, 20), (8, 3), (12, 7), (6, 29)])
def test_selected_row_stays_visible(height, selected):
    header = song_table_header(100)
    items = _items(30)
    rows = build_table_rows(header, items, selected, height)
    offset = table_offset(height, selected)
    assert len(rows) == len(items) - offset
    selected_rows = [index for index, row in enumerate(rows) if row.selected]
    assert len(selected_rows) == 1
    assert selected_rows[0] <= max(height - 5, 0)
    assert rows[selected_rows[0]].item_id == f"id{selected}"


def test_playing_row_after_offset_is_marked():
    header = song_table_header(100)
    items = _items(30)
    rows = build_table_rows(header, items, 25, 10, playing_id="id24")
    playing = [row for row in rows if row.playing]
    assert len(playing) == 1
    assert playing[0].item_id == "id24"
    assert playing[0].cells[1] == "|> Song 24"


class _Context(Enum):
    SONG = "song"
    ARTIST = "artist"


def test_recommendations_title():
    assert recommendations_title(None, "x") == "Recommendations"
    assert recommendations_title(_Context.SONG, "Hey") == "Recommendations based on Song 'Hey'"
    assert (
        recommendations_title(_Context.ARTIST, "Band")
        == "Recommendations based on Artist 'Band'"
    )
    assert recommendations_title("song", "Hey") == "Recommendations based on Song 'Hey'"


def test_recommendations_title_unknown_context():
    with pytest.raises(ValueError):
        recommendations_title("genre", "rock")