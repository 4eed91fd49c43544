"""Help screen contents: description, key and context of each shortcut."""

from __future__ import annotations

_HELP_DOCS: tuple[tuple[str, str, str], ...] = (
    ("Jump to currently playing album", "a", "General"),
    ("Jump to currently playing artist's album list", "A", "General"),
    ("Increase volume by 10%", "+", "General"),
    ("Decrease volume by 10%", "-", "General"),
    ("Skip to next track", "n", "General"),
    ("Skip to previous track", "p", "General"),
    ("Seek backwards 5 seconds", "<", "General"),
    ("Seek forwards 5 seconds", ">", "General"),
    ("Toggle shuffle", "<Ctrl+s>", "General"),
    ("Copy url to currently playing song", "c", "General"),
    ("Copy url to currently playing album", "C", "General"),
    ("Cycle repeat mode", "<Ctrl+r>", "General"),
    ("Move selection left", "h | <Left Arrow Key> | <Ctrl+b>", "General"),
    ("Move selection down", "j | <Down Arrow Key> | <Ctrl+n>", "General"),
    ("Move selection up", "k | <Up Arrow Key> | <Ctrl+p>", "General"),
    ("Move selection right", "l | <Right Arrow Key> | <Ctrl+f>", "General"),
    ("Move selection to top of list", "H", "General"),
    ("Move selection to middle of list", "M", "General"),
    ("Move selection to bottom of list", "L", "General"),
    ("Enter input for search", "/", "General"),
    ("Pause/Resume playback", "<Space>", "General"),
    ("Enter active mode", "<Enter>", "General"),
    ("Go to audio analysis screen", "v", "General"),
    ("Go to playbar only screen (basic view)", "B", "General"),
    ("Go back or exit when nowhere left to back to", "q", "General"),
    ("Select device to play music on", "d", "General"),
    ("Enter hover mode", "<Esc>", "Selected block"),
    ("Save track in list or table", "s", "Selected block"),
    ("Start playback or enter album/artist/playlist", "<Enter>", "Selected block"),
    ("Play recommendations for song/artist", "r", "Selected block"),
    ("Play all tracks for artist", "e", "Library -> Artists"),
    ("Delete entire input", "<Ctrl+u>", "Search input"),
    ("Search with input text", "<Enter>", "Search input"),
    ("Move cursor one space left", "<Left Arrow Key>", "Search input"),
    ("Move cursor one space right", "<Right Arrow Key>", "Search input"),
    ("Jump to start of input", "<Ctrl+a>", "Search input"),
    ("Jump to end of input", "<Ctrl+e>", "Search input"),
    ("Escape from the input back to hovered block", "<Esc>", "Search input"),
    ("Scroll down to next result page", "<Ctrl+d>", "Pagination"),
    ("Scroll up to previous result page", "<Ctrl+u>", "Pagination"),
    ("Jump to start of playlist", "<Ctrl+a>", "Pagination"),
    ("Jump to end of playlist", "<Ctrl+e>", "Pagination"),
    ("Delete saved album", "D", "Library -> Albums"),
    ("Delete saved playist", "D", "Playlist"),
    ("Follow an artists/playlist", "w", "Search result"),
    ("Play random song in playlist", "S", "Selected Playlist"),
)


def get_help_docs() -> list[tuple[str, str, str]]:
    """Return the help table rows as (description, event, context)."""
    return list(_HELP_DOCS)