"""User configuration: key bindings, theme colours and behaviour settings."""

from __future__ import annotations

import re
from dataclasses import dataclass, field, fields
from enum import Enum
from pathlib import Path
from typing import Any, Mapping

import yaml

FILE_NAME = "config.yml"
CONFIG_DIR = ".config"
APP_CONFIG_DIR = "termtunes"


class ConfigError(Exception):
    """Raised when the user configuration is invalid or cannot be loaded."""


class KeyCode(Enum):
    CHAR = "char"
    CTRL = "ctrl"
    ALT = "alt"
    LEFT = "left"
    RIGHT = "right"
    UP = "up"
    DOWN = "down"
    BACKSPACE = "backspace"
    DELETE = "delete"
    ESC = "esc"
    PAGE_UP = "pageup"
    PAGE_DOWN = "pagedown"
    ENTER = "enter"


@dataclass(frozen=True)
class Key:
    """A key press, optionally carrying the character it was combined with."""

    code: KeyCode
    char: str | None = None

    def __str__(self) -> str:
        if self.char is None:
            return self.code.name.capitalize()
        if self.code is KeyCode.CHAR:
            return self.char
        return f"{self.code.name.capitalize()}-{self.char}"


def _single_char(c: str) -> str:
    if len(c) != 1:
        raise ValueError(f"expected a single character, got {c!r}")
    return c


def char_key(c: str) -> Key:
    return Key(KeyCode.CHAR, _single_char(c))


def ctrl_key(c: str) -> Key:
    return Key(KeyCode.CTRL, _single_char(c))


def alt_key(c: str) -> Key:
    return Key(KeyCode.ALT, _single_char(c))


_NAMED_KEYS = {
    "left": Key(KeyCode.LEFT),
    "right": Key(KeyCode.RIGHT),
    "up": Key(KeyCode.UP),
    "down": Key(KeyCode.DOWN),
    "backspace": Key(KeyCode.BACKSPACE),
    "delete": Key(KeyCode.BACKSPACE),
    "del": Key(KeyCode.DELETE),
    "esc": Key(KeyCode.ESC),
    "escape": Key(KeyCode.ESC),
    "pageup": Key(KeyCode.PAGE_UP),
    "pagedown": Key(KeyCode.PAGE_DOWN),
    "space": Key(KeyCode.CHAR, " "),
}

_MODIFIERS = {"ctrl": ctrl_key, "alt": alt_key}


def parse_key(key: str) -> Key:
    """Parse a key description such as ``j``, ``ctrl-r`` or ``pageup``."""
    if len(key.encode("utf-8")) == 1:
        return char_key(key)

    sections = key.split("-")
    if len(sections) > 2:
        raise ConfigError(
            f'Shortcut can only have 2 keys, "{key}" has {len(sections)}'
        )

    name = sections[0].lower()
    modifier = _MODIFIERS.get(name)
    if modifier is not None:
        if len(sections) < 2 or not sections[1]:
            raise ConfigError(f'The shortcut "{key}" is missing a key after "{name}"')
        return modifier(sections[1][0])

    try:
        return _NAMED_KEYS[name]
    except KeyError:
        raise ConfigError(f'The key "{sections[0]}" is unknown.') from None


RESERVED_KEYS = frozenset(
    {
        char_key("h"),
        char_key("j"),
        char_key("k"),
        char_key("l"),
        char_key("H"),
        char_key("M"),
        char_key("L"),
        Key(KeyCode.UP),
        Key(KeyCode.DOWN),
        Key(KeyCode.LEFT),
        Key(KeyCode.RIGHT),
        Key(KeyCode.BACKSPACE),
        Key(KeyCode.ENTER),
    }
)


def check_reserved_keys(key: Key) -> None:
    """Raise ConfigError if ``key`` may not be remapped."""
    if key in RESERVED_KEYS:
        raise ConfigError(f"The key {key!r} is reserved and cannot be remapped")


_COLOR_NAMES = (
    "Reset",
    "Black",
    "Red",
    "Green",
    "Yellow",
    "Blue",
    "Magenta",
    "Cyan",
    "Gray",
    "DarkGray",
    "LightRed",
    "LightGreen",
    "LightYellow",
    "LightBlue",
    "LightMagenta",
    "LightCyan",
    "White",
)


@dataclass(frozen=True)
class Color:
    """A terminal colour: one of the named palette entries or an RGB triple."""

    name: str
    rgb: tuple[int, int, int] | None = None

    @classmethod
    def named(cls, name: str) -> Color:
        if name not in _COLOR_NAMES:
            raise ValueError(f"unknown colour name {name!r}")
        return cls(name)

    @classmethod
    def from_rgb(cls, r: int, g: int, b: int) -> Color:
        for component in (r, g, b):
            if not 0 <= component <= 255:
                raise ValueError(f"colour component out of range: {component}")
        return cls("Rgb", (r, g, b))


_U8_PATTERN = re.compile(r"\+?[0-9]+")


def _parse_u8(text: str) -> int:
    if not _U8_PATTERN.fullmatch(text) or int(text) > 255:
        raise ConfigError(f"Invalid colour component {text!r}")
    return int(text)


def parse_theme_item(theme_item: str) -> Color:
    """Parse a colour name or an ``r, g, b`` triple."""
    if theme_item in _COLOR_NAMES:
        return Color(theme_item)
    parts = theme_item.split(",")
    if len(parts) < 3:
        print(f"Unexpected color {theme_item}")
        return Color.named("Black")
    r, g, b = (_parse_u8(part.strip()) for part in parts[:3])
    return Color.from_rgb(r, g, b)


@dataclass
class Theme:
    analysis_bar: Color = Color("LightCyan")
    analysis_bar_text: Color = Color("Black")
    active: Color = Color("Cyan")
    banner: Color = Color("LightCyan")
    error_border: Color = Color("Red")
    error_text: Color = Color("LightRed")
    hint: Color = Color("Yellow")
    hovered: Color = Color("Magenta")
    inactive: Color = Color("Gray")
    playbar_background: Color = Color("Black")
    playbar_progress: Color = Color("LightCyan")
    playbar_text: Color = Color("White")
    selected: Color = Color("LightCyan")
    text: Color = Color("White")


# Theme entries a user may override in the configuration file.
_USER_THEME_FIELDS = (
    "active",
    "banner",
    "error_border",
    "error_text",
    "hint",
    "hovered",
    "inactive",
    "playbar_background",
    "playbar_progress",
    "playbar_text",
    "selected",
    "text",
)


@dataclass
class KeyBindings:
    back: Key = char_key("q")
    jump_to_album: Key = char_key("a")
    jump_to_artist_album: Key = char_key("A")
    manage_devices: Key = char_key("d")
    decrease_volume: Key = char_key("-")
    increase_volume: Key = char_key("+")
    toggle_playback: Key = char_key(" ")
    seek_backwards: Key = char_key("<")
    seek_forwards: Key = char_key(">")
    next_track: Key = char_key("n")
    previous_track: Key = char_key("p")
    help: Key = char_key("?")
    shuffle: Key = ctrl_key("s")
    repeat: Key = ctrl_key("r")
    search: Key = char_key("/")
    submit: Key = Key(KeyCode.ENTER)
    copy_song_url: Key = char_key("c")
    copy_album_url: Key = char_key("C")
    audio_analysis: Key = char_key("v")
    basic_view: Key = char_key("B")


@dataclass
class BehaviorConfig:
    seek_milliseconds: int = 5 * 1000
    volume_increment: int = 10
    tick_rate_milliseconds: int = 250


def _require_mapping(value: Any, section: str) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise ConfigError(f"The {section} section must be a mapping")
    return value


def _optional_int(section: Mapping[str, Any], name: str, maximum: int) -> int | None:
    value = section.get(name)
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigError(f"{name} must be an integer, is {value!r}")
    if not 0 <= value <= maximum:
        raise ConfigError(f"{name} must be between 0 and {maximum}, is {value}")
    return value


@dataclass
class UserConfig:
    keys: KeyBindings = field(default_factory=KeyBindings)
    theme: Theme = field(default_factory=Theme)
    behavior: BehaviorConfig = field(default_factory=BehaviorConfig)

    def get_or_build_paths(self) -> Path:
        """Return the configuration file path, creating its directories."""
        try:
            home = Path.home()
        except (RuntimeError, KeyError):
            raise ConfigError("No $HOME directory found for client config") from None
        app_config_dir = home / CONFIG_DIR / APP_CONFIG_DIR
        try:
            app_config_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise ConfigError(f"Cannot create {app_config_dir}: {exc}") from exc
        return app_config_dir / FILE_NAME

    def load_keybindings(self, keybindings: Mapping[str, Any]) -> None:
        keybindings = _require_mapping(keybindings, "keybindings")
        for binding in fields(KeyBindings):
            value = keybindings.get(binding.name)
            if value is None:
                continue
            if not isinstance(value, str):
                raise ConfigError(f"Key binding {binding.name} must be a string")
            key = parse_key(value)
            setattr(self.keys, binding.name, key)
            check_reserved_keys(key)

    def load_theme(self, theme: Mapping[str, Any]) -> None:
        theme = _require_mapping(theme, "theme")
        for name in _USER_THEME_FIELDS:
            value = theme.get(name)
            if value is None:
                continue
            if not isinstance(value, str):
                raise ConfigError(f"Theme item {name} must be a string")
            setattr(self.theme, name, parse_theme_item(value))

    def load_behavior_config(self, behavior: Mapping[str, Any]) -> None:
        behavior = _require_mapping(behavior, "behavior")
        seek = _optional_int(behavior, "seek_milliseconds", 2**32 - 1)
        volume = _optional_int(behavior, "volume_increment", 255)
        tick_rate = _optional_int(behavior, "tick_rate_milliseconds", 2**64 - 1)

        if seek is not None:
            self.behavior.seek_milliseconds = seek
        if volume is not None:
            if volume > 100:
                raise ConfigError(
                    f"Volume increment must be between 0 and 100, is {volume}"
                )
            self.behavior.volume_increment = volume
        if tick_rate is not None:
            if tick_rate >= 1000:
                raise ConfigError("Tick rate must be below 1000")
            self.behavior.tick_rate_milliseconds = tick_rate

    def load_config(self, path: str | Path | None = None) -> None:
        """Apply the YAML configuration file, if it exists and is not blank."""
        config_path = Path(path) if path is not None else self.get_or_build_paths()
        if not config_path.exists():
            return
        try:
            text = config_path.read_text(encoding="utf-8")
        except OSError as exc:
            raise ConfigError(f"Cannot read {config_path}: {exc}") from exc
        if not text.strip():
            return
        try:
            document = yaml.safe_load(text)
        except yaml.YAMLError as exc:
            raise ConfigError(f"Invalid configuration file: {exc}") from exc
        if document is None:
            return
        document = _require_mapping(document, "top-level")

        if document.get("keybindings") is not None:
            self.load_keybindings(document["keybindings"])
        if document.get("behavior") is not None:
            self.load_behavior_config(document["behavior"])
        if document.get("theme") is not None:
            self.load_theme(document["theme"])