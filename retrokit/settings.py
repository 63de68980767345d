"""Engine settings stored in an INI file: defaults, parsing and writing."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator

from .casepath import case_open

MAX_VOLUME = 100
DEFAULT_SCREEN_XSIZE = 424
DEFAULT_FULLSCREEN = False
RETRO_EN = 0

BUTTONS = ("Up", "Down", "Left", "Right", "A", "B", "C", "Start")

DEFAULT_KEYBOARD = {
    "Up": 82,
    "Down": 81,
    "Left": 80,
    "Right": 79,
    "A": 29,
    "B": 27,
    "C": 6,
    "Start": 40,
}

DEFAULT_CONTROLLER = {
    "Up": 11,
    "Down": 12,
    "Left": 13,
    "Right": 14,
    "A": 0,
    "B": 1,
    "C": 2,
    "Start": 6,
}

PLATFORM_STANDARD = "Standard"
PLATFORM_MOBILE = "Mobile"

_KEYBOARD_SECTION = "Keyboard 1"
_CONTROLLER_SECTION = "Controller 1"

_CONTROLLER_EXTRA_COMMENTS = (
    "Extra buttons can be mapped with the following IDs:",
    "CONTROLLER_BUTTON_ZL             = 16",
    "CONTROLLER_BUTTON_ZR             = 17",
    "CONTROLLER_BUTTON_LSTICK_UP      = 18",
    "CONTROLLER_BUTTON_LSTICK_DOWN    = 19",
    "CONTROLLER_BUTTON_LSTICK_LEFT    = 20",
    "CONTROLLER_BUTTON_LSTICK_RIGHT   = 21",
    "CONTROLLER_BUTTON_RSTICK_UP      = 22",
    "CONTROLLER_BUTTON_RSTICK_DOWN    = 23",
    "CONTROLLER_BUTTON_RSTICK_LEFT    = 24",
    "CONTROLLER_BUTTON_RSTICK_RIGHT   = 25",
)


class _Kind(Enum):
    BOOL = "bool"
    INT = "int"
    FLOAT = "float"
    STRING = "string"


@dataclass(frozen=True)
class _Field:
    section: str
    key: str
    attr: str
    kind: _Kind
    comment: str | None = None


_FIELDS = (
    _Field("Dev", "DevMenu", "dev_menu", _Kind.BOOL,
           "Enable this flag to activate dev menu via the ESC key"),
    _Field("Dev", "EngineDebugMode", "engine_debug_mode", _Kind.BOOL,
           "Enable this flag to activate features used for debugging the engine "
           "(may result in slightly slower game speed)"),
    _Field("Dev", "TxtScripts", "txt_scripts", _Kind.BOOL,
           "Enable this flag to force the engine to load from the scripts folder "
           "instead of from bytecode"),
    _Field("Dev", "StartingCategory", "starting_category", _Kind.INT,
           "Sets the starting category ID"),
    _Field("Dev", "StartingScene", "starting_scene", _Kind.INT,
           "Sets the starting scene ID"),
    _Field("Dev", "FastForwardSpeed", "fast_forward_speed", _Kind.INT,
           "Determines how fast the game will be when fastforwarding is active"),
    _Field("Dev", "UseSteamDir", "use_steam_dir", _Kind.BOOL,
           "Determines if the game will try to use the steam directory for the game "
           "if it can locate it (Windows only)"),
    _Field("Dev", "UseHQModes", "use_hq_modes", _Kind.BOOL,
           "Determines if applicable rendering modes (such as 3D floor from special "
           "stages) will render in \"High Quality\" mode or standard mode"),
    _Field("Dev", "DataFile", "data_file", _Kind.STRING,
           "Determines what RSDK file will be loaded"),
    _Field("Game", "Language", "language", _Kind.INT,
           "Sets the game language (0 = EN, 1 = FR, 2 = IT, 3 = DE, 4 = ES, 5 = JP)"),
    _Field("Game", "OriginalControls", "original_controls", _Kind.INT,
           "Sets the game's spindash style (-1 = let save file decide, 0 = S2, 1 = CD)"),
    _Field("Game", "DisableTouchControls", "disable_touch_controls", _Kind.BOOL,
           "Determines if the game should hide the touch controls UI"),
    _Field("Game", "DisableFocusPause", "disable_focus_pause", _Kind.BOOL,
           "If set to true, disables the game pausing when focus is lost"),
    _Field("Window", "FullScreen", "full_screen", _Kind.BOOL,
           "Determines if the window will be fullscreen or not"),
    _Field("Window", "Borderless", "borderless", _Kind.BOOL,
           "Determines if the window will be borderless or not"),
    _Field("Window", "VSync", "vsync", _Kind.BOOL,
           "Determines if VSync will be active or not"),
    _Field("Window", "ScalingMode", "scaling_mode", _Kind.INT,
           "Determines what scaling is used. 0 is nearest neighbour, 1 or higher is linear."),
    _Field("Window", "WindowScale", "window_scale", _Kind.INT,
           "The window size multiplier"),
    _Field("Window", "ScreenWidth", "screen_width", _Kind.INT,
           "How wide the base screen will be in pixels"),
    _Field("Window", "RefreshRate", "refresh_rate", _Kind.INT,
           "Determines the target FPS"),
    _Field("Window", "DimLimit", "dim_limit", _Kind.INT,
           "Determines the dim timer in seconds, set to -1 to disable dimming"),
    _Field("Window", "HardwareRenderer", "hardware_renderer", _Kind.BOOL,
           "Determines the game uses hardware rendering (like mobile) or software "
           "rendering (like PC)"),
    _Field(_CONTROLLER_SECTION, "LStickDeadzone", "l_stick_deadzone", _Kind.FLOAT,
           "Deadzones, 0.0-1.0"),
    _Field(_CONTROLLER_SECTION, "RStickDeadzone", "r_stick_deadzone", _Kind.FLOAT),
    _Field(_CONTROLLER_SECTION, "LTriggerDeadzone", "l_trigger_deadzone", _Kind.FLOAT),
    _Field(_CONTROLLER_SECTION, "RTriggerDeadzone", "r_trigger_deadzone", _Kind.FLOAT),
)


@dataclass
class Settings:
    """Every value the engine keeps in its settings file.

    ``dim_limit`` is in seconds as stored in the file; a negative value
    disables dimming. Volumes are integers from 0 to ``MAX_VOLUME``.
    """

    dev_menu: bool = False
    engine_debug_mode: bool = False
    txt_scripts: bool = False
    starting_category: int = 0
    starting_scene: int = 0
    fast_forward_speed: int = 8
    use_steam_dir: bool = True
    use_hq_modes: bool = True
    data_file: str = "Data.rsdk"

    language: int = RETRO_EN
    original_controls: int = -1
    disable_touch_controls: bool = False
    disable_focus_pause: bool = False
    game_platform: str = PLATFORM_STANDARD

    full_screen: bool = DEFAULT_FULLSCREEN
    borderless: bool = False
    vsync: bool = False
    scaling_mode: int = 0
    window_scale: int = 2
    screen_width: int = DEFAULT_SCREEN_XSIZE
    refresh_rate: int = 60
    dim_limit: int = 300
    hardware_renderer: bool = False

    bgm_volume: int = MAX_VOLUME
    sfx_volume: int = MAX_VOLUME

    keyboard: dict[str, int] = field(default_factory=lambda: dict(DEFAULT_KEYBOARD))
    controller: dict[str, int] = field(default_factory=lambda: dict(DEFAULT_CONTROLLER))
    l_stick_deadzone: float = 0.3
    r_stick_deadzone: float = 0.3
    l_trigger_deadzone: float = 0.3
    r_trigger_deadzone: float = 0.3

    @property
    def dim_limit_frames(self) -> int:
        """The dim timer in frames; negative values pass through unchanged."""
        if self.dim_limit >= 0:
            return self.dim_limit * self.refresh_rate
        return self.dim_limit

    def _regular(self, section: str) -> Iterator[tuple[str, str, list[str], str]]:
        for spec in _FIELDS:
            if spec.section == section:
                comments = [spec.comment] if spec.comment else []
                yield section, spec.key, comments, _format(spec.kind, getattr(self, spec.attr))

    def _entries(self) -> Iterator[tuple[str, str, list[str], str]]:
        yield from self._regular("Dev")
        yield from self._regular("Game")
        yield (
            "Game",
            "Platform",
            ["The platform type. 0 is standard (PC/Console), 1 is mobile"],
            str(0 if self.game_platform == PLATFORM_STANDARD else 1),
        )
        for spec in _FIELDS:
            if spec.section == "Window":
                value = getattr(self, spec.attr)
                if spec.attr == "dim_limit" and value < 0:
                    value = -1
                yield "Window", spec.key, [spec.comment] if spec.comment else [], _format(spec.kind, value)
        yield "Audio", "BGMVolume", [], _format(_Kind.FLOAT, self.bgm_volume / MAX_VOLUME)
        yield "Audio", "SFXVolume", [], _format(_Kind.FLOAT, self.sfx_volume / MAX_VOLUME)
        for index, button in enumerate(BUTTONS):
            comments = ["Keyboard Mappings for P1 (SDL scancodes)"] if index == 0 else []
            yield _KEYBOARD_SECTION, button, comments, str(self.keyboard[button])
        for index, button in enumerate(BUTTONS):
            comments = []
            if index == 0:
                comments = ["Controller Mappings for P1 (SDL game controller buttons)",
                            *_CONTROLLER_EXTRA_COMMENTS]
            yield _CONTROLLER_SECTION, button, comments, str(self.controller[button])
        yield from self._regular(_CONTROLLER_SECTION)

    def to_ini_text(self) -> str:
        """Render the settings as INI text with explanatory comments."""
        lines: list[str] = []
        current: str | None = None
        for section, key, comments, value in self._entries():
            if section != current:
                if current is not None:
                    lines.append("")
                lines.append(f"[{section}]")
                current = section
            lines.extend(f"; {comment}" for comment in comments)
            lines.append(f"{key}={value}")
        return "\n".join(lines) + "\n"


def _format(kind: _Kind, value: object) -> str:
    if kind is _Kind.BOOL:
        return "true" if value else "false"
    if kind is _Kind.FLOAT:
        return f"{float(value):f}"
    return str(value)


def _convert(kind: _Kind, raw: str | None) -> object | None:
    """Convert a raw INI value, returning ``None`` when it is absent or unreadable."""
    if raw is None:
        return None
    if kind is _Kind.STRING:
        return raw
    if kind is _Kind.BOOL:
        lowered = raw.lower()
        if lowered in ("true", "1"):
            return True
        if lowered in ("false", "0"):
            return False
        return None
    try:
        return int(raw) if kind is _Kind.INT else float(raw)
    except ValueError:
        return None


def _parse_ini(text: str) -> dict[str, dict[str, str]]:
    sections: dict[str, dict[str, str]] = {}
    current = sections.setdefault("", {})
    for line in text.splitlines():
        line = line.strip()
        if not line or line[0] in ";#":
            continue
        if line.startswith("[") and line.endswith("]"):
            current = sections.setdefault(line[1:-1].strip(), {})
            continue
        key, sep, value = line.partition("=")
        if sep:
            current[key.strip()] = value.strip()
    return sections


def _volume(raw: str | None) -> int:
    fraction = _convert(_Kind.FLOAT, raw)
    if fraction is None:
        fraction = 1.0
    return max(0, min(MAX_VOLUME, int(fraction * MAX_VOLUME)))


def _mappings(values: dict[str, str], defaults: dict[str, int]) -> dict[str, int]:
    result = {}
    for button in BUTTONS:
        parsed = _convert(_Kind.INT, values.get(button))
        result[button] = defaults[button] if parsed is None else parsed
    return result


def parse_settings(text: str) -> Settings:
    """Build settings from INI text; missing or unreadable values take their defaults."""
    ini = _parse_ini(text)
    values: dict[str, object] = {}
    for spec in _FIELDS:
        parsed = _convert(spec.kind, ini.get(spec.section, {}).get(spec.key))
        if parsed is not None:
            values[spec.attr] = parsed

    settings = Settings(**values)

    platform = _convert(_Kind.INT, ini.get("Game", {}).get("Platform"))
    if platform == 0:
        settings.game_platform = PLATFORM_STANDARD
    elif platform == 1:
        settings.game_platform = PLATFORM_MOBILE

    audio = ini.get("Audio", {})
    settings.bgm_volume = _volume(audio.get("BGMVolume"))
    settings.sfx_volume = _volume(audio.get("SFXVolume"))

    settings.keyboard = _mappings(ini.get(_KEYBOARD_SECTION, {}), DEFAULT_KEYBOARD)
    settings.controller = _mappings(ini.get(_CONTROLLER_SECTION, {}), DEFAULT_CONTROLLER)
    return settings


def save_settings(settings: Settings, path: str | os.PathLike[str]) -> None:
    """Write the settings to ``path`` as INI text."""
    with open(path, "w", encoding="utf-8", newline="\n") as handle:
        handle.write(settings.to_ini_text())


def load_settings(path: str | os.PathLike[str]) -> Settings:
    """Read settings from ``path``; if the file is missing, write and return the defaults."""
    try:
        with case_open(path, "rb") as handle:
            data = handle.read()
    except FileNotFoundError:
        settings = Settings()
        save_settings(settings, path)
        return settings
    return parse_settings(data.decode("utf-8", errors="replace"))