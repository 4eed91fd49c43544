# termtunes

The building blocks of a terminal music client: user configuration with
remappable key bindings and colour themes, a keyboard and tick event queue,
the help table, track and progress formatting, table and screen text builders,
an audio-analysis view, a local redirect server for sign-in, and a request
layer that turns `IoEvent` messages into calls against a streaming-service
client and records the outcome in application state.

## Configuration (`termtunes.config`)

`UserConfig` holds `keys` (`KeyBindings`), `theme` (`Theme`) and `behavior`
(`BehaviorConfig`), each with defaults. `load_config(path=None)` reads a YAML
file; without a path it uses `~/.config/termtunes/config.yml`, creating the
directories (`get_or_build_paths`). A missing or blank file changes nothing.
Any of these sections may be present:

```yaml
keybindings:
  back: "q"
  shuffle: "ctrl-s"
  toggle_playback: "space"
behavior:
  seek_milliseconds: 5000
  volume_increment: 10
  tick_rate_milliseconds: 250
theme:
  active: "Cyan"
  selected: "LightCyan"
  hint: "255, 200, 0"
```

Keys are a single character, `ctrl-<c>`, `alt-<c>`, or a named key: `left`,
`right`, `up`, `down`, `backspace`/`delete`, `del`, `esc`/`escape`, `pageup`,
`pagedown`, `space`. The navigation keys (`h j k l H M L`, the arrow keys,
backspace and enter) are reserved (`check_reserved_keys`). Colours are one of
the named colours (`Reset`, `Black`, `Red`, ... `LightCyan`, `White`) or an
`r, g, b` triple. Invalid values raise `ConfigError`, as do a volume increment
above 100 and a tick rate of 1000 ms or more.

```python
from termtunes.config import parse_key, ctrl_key, parse_theme_item, Color

assert parse_key("ctrl-j") == ctrl_key("j")
assert parse_theme_item("23, 43, 45") == Color.from_rgb(23, 43, 45)
```

## Events (`termtunes.events`)

`Events(config=None, keys=None)` starts two background threads: one reads
keys (from standard input, one character at a time, unless an iterable of
`Key` is given) and stops after `EventConfig.exit_key` (Ctrl-C by default);
the other queues a tick every `tick_rate` seconds (0.25 by default).
`next(timeout=None)` returns the next `Event` (`is_tick` for ticks) or raises
`TimeoutError`. Use it as a context manager or call `close()`.

## Formatting (`termtunes.formatting`)

```python
from termtunes.formatting import (
    millis_to_minutes,
    display_track_progress,
    get_track_progress_percentage,
)

millis_to_minutes(90_000)                        # "1:30"
display_track_progress(60_000, 120_000)          # "1:00/2:00 (-1:00)"
get_track_progress_percentage(30_000, 60_000)    # 50
```

Also `get_color` (a `Style` for an `(is_active, is_hovered)` pair and a
theme), `create_artist_string`, `get_percentage_width` and
`get_main_layout_margin`.

## Screen text

- `termtunes.help.get_help_docs()` — help rows as `(description, key, context)`.
- `termtunes.tables` — table headers (`song_table_header`, `album_table_header`,
  `recently_played_header`, ...), row data (`song_table_items`,
  `album_track_items`, ...), and `build_table_rows`, which scrolls to keep the
  selected row visible and marks the playing (`|> `) and liked (` ♥`) rows.
- `termtunes.screens` — playbar title, search-result labels, device list,
  error-screen segments, help rows and `clean_changelog`.
- `termtunes.analysis.build_analysis_view` — tempo, key and time-signature
  lines and pitch bars for the current playback position.

## Sign-in redirect (`termtunes.redirect`)

`redirect_uri_web_server(port, success_page=..., on_listening=None)` listens
on `127.0.0.1:port`, answers each request, and returns the request path of the
first well-formed one. `parse_request` and `handle_connection` are available
separately; failures raise `RedirectError`.

## Requests (`termtunes.io_events`, `termtunes.network`)

`termtunes.io_events` defines one frozen dataclass per request (`NextTrack`,
`Seek`, `GetSearchResults`, `ToggleSaveTrack`, ...), plus `RepeatState`,
`next_repeat_state` and `token_expiry`.

`Network(spotify, app, client_config, token_refresher=None,
client_factory=None)` awaits `handle_network_event(event)`, calls the matching
method on the asynchronous `spotify` client, and writes results into `app`,
then clears `app.is_loading`. Failures go to `app.handle_error` instead of
being raised. The library requests (saved tracks and albums, followed artists,
playlists, recently played) live in `termtunes.library_ops.LibraryOperations`,
which `Network` extends.

## What this package does not do

It draws nothing on the terminal: there is no screen renderer, no
application-state class and no command to start a player. It ships no
streaming-service client or sign-in flow either. `Network` expects you to
supply the client, an `app` object with the attributes and methods it uses
(`dispatch`, `push_navigation_stack`, `get_current_route`, `library`, ...),
and the token refresher and client factory.

## Tests

The tests use pytest and pytest-asyncio, listed in the `test` extra.