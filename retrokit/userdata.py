"""Global script variables, save RAM, achievements and leaderboards."""

from __future__ import annotations

import logging
import os
import struct
from dataclasses import dataclass, field
from pathlib import Path

from .settings import MAX_VOLUME, Settings, load_settings

GLOBALVAR_COUNT = 0x100
ACHIEVEMENT_MAX = 0x40
LEADERBOARD_MAX = 0x80
MOD_MAX = 0x100
SAVEDATA_MAX = 0x2000

EMPTY_LEADERBOARD_SCORE = 0x7FFFFFF

_BGM_VOLUME_SLOT = 33
_SFX_VOLUME_SLOT = 34

_INT = struct.Struct("<i")

ACHIEVEMENT_NAMES = (
    "88 Miles Per Hour",
    "Just One Hug is Enough",
    "Paradise Found",
    "Take the High Road",
    "King of the Rings",
    "Statue Saviour",
    "Heavy Metal",
    "All Stages Clear",
    "Treasure Hunter",
    "Dr Eggman Got Served",
    "Just In Time",
    "Saviour of the Planet",
)

log = logging.getLogger(__name__)


class GlobalVariables:
    """Named integer variables shared by all scripts, at most 256 of them."""

    def __init__(self) -> None:
        self.names: list[str] = []
        self.values: list[int] = []

    def __len__(self) -> int:
        return len(self.names)

    def add(self, name: str, value: int = 0) -> int:
        """Register a variable and return its index."""
        if len(self.names) >= GLOBALVAR_COUNT:
            raise OverflowError("too many global variables")
        self.names.append(name)
        self.values.append(value)
        return len(self.names) - 1

    def get(self, name: str) -> int:
        """Return the value of the first variable called ``name``, or 0."""
        for index, known in enumerate(self.names):
            if known == name:
                return self.values[index]
        return 0

    def set(self, name: str, value: int) -> None:
        """Set the first variable called ``name``; unknown names are ignored."""
        for index, known in enumerate(self.names):
            if known == name:
                self.values[index] = value
                return


def _read_ints(data: bytes, count: int) -> list[int]:
    whole = min(len(data) // _INT.size, count)
    return [value for (value,) in _INT.iter_unpack(data[: whole * _INT.size])]


def _pack_ints(values: list[int]) -> bytes:
    return b"".join(_INT.pack(value) for value in values)


@dataclass
class UserData:
    """Persistent per-user state: save RAM, achievements and leaderboards."""

    game_path: str | os.PathLike[str] = "."
    mods_path: str | os.PathLike[str] = "."
    save_path: str = ""
    redirect_save: bool = False
    trial_mode: bool = False
    debug_mode: bool = False
    bgm_volume: int = MAX_VOLUME
    sfx_volume: int = MAX_VOLUME
    use_sgame: bool = False
    settings: Settings = field(default_factory=Settings)
    globals: GlobalVariables = field(default_factory=GlobalVariables)
    save_ram: list[int] = field(default_factory=lambda: [0] * SAVEDATA_MAX)
    achievement_names: list[str] = field(default_factory=lambda: [""] * ACHIEVEMENT_MAX)
    achievements: list[int] = field(default_factory=lambda: [0] * ACHIEVEMENT_MAX)
    leaderboards: list[int] = field(default_factory=lambda: [0] * LEADERBOARD_MAX)

    def _save_file(self, name: str) -> Path:
        base = self.mods_path if self.redirect_save else self.game_path
        return Path(base) / f"{self.save_path}{name}"

    @property
    def save_ram_path(self) -> Path:
        return self._save_file("SGame.bin" if self.use_sgame else "SData.bin")

    @property
    def userdata_path(self) -> Path:
        return self._save_file("UData.bin")

    @property
    def settings_path(self) -> Path:
        return Path(self.game_path) / "settings.ini"

    def _store_volumes(self) -> None:
        self.save_ram[_BGM_VOLUME_SLOT] = self.bgm_volume
        self.save_ram[_SFX_VOLUME_SLOT] = self.sfx_volume

    def read_save_ram(self) -> bool:
        """Load save RAM from SData.bin, falling back to SGame.bin.

        Returns False when neither file exists.
        """
        self.use_sgame = False
        self._store_volumes()
        try:
            data = self._save_file("SData.bin").read_bytes()
        except FileNotFoundError:
            try:
                data = self._save_file("SGame.bin").read_bytes()
            except FileNotFoundError:
                return False
            self.use_sgame = True
        values = _read_ints(data, SAVEDATA_MAX)
        self.save_ram[: len(values)] = values
        return True

    def write_save_ram(self) -> None:
        """Write save RAM to the file it was read from."""
        with open(self.save_ram_path, "wb") as handle:
            self._store_volumes()
            handle.write(_pack_ints(self.save_ram))

    def read_userdata(self) -> None:
        """Load achievement states and leaderboard scores, if the file exists."""
        try:
            data = self.userdata_path.read_bytes()
        except FileNotFoundError:
            return
        values = _read_ints(data, ACHIEVEMENT_MAX + LEADERBOARD_MAX)
        last = 0
        for index in range(ACHIEVEMENT_MAX):
            if index < len(values):
                last = values[index]
            self.achievements[index] = last
        for index in range(LEADERBOARD_MAX):
            position = ACHIEVEMENT_MAX + index
            if position < len(values):
                last = values[position]
            self.leaderboards[index] = last or EMPTY_LEADERBOARD_SCORE

    def write_userdata(self) -> None:
        """Write achievement states followed by leaderboard scores."""
        with open(self.userdata_path, "wb") as handle:
            handle.write(_pack_ints(self.achievements))
            handle.write(_pack_ints(self.leaderboards))

    def init(self) -> Settings:
        """Load settings and user data, creating default files where missing."""
        self.settings = load_settings(self.settings_path)
        self.bgm_volume = self.settings.bgm_volume
        self.sfx_volume = self.settings.sfx_volume

        if self.userdata_path.exists():
            self.read_userdata()
        else:
            self.write_userdata()

        for index, name in enumerate(ACHIEVEMENT_NAMES):
            self.achievement_names[index] = name
        return self.settings

    def award_achievement(self, achievement_id: int, status: int) -> None:
        """Set an achievement's status and save; ids out of range are ignored."""
        if not 0 <= achievement_id < ACHIEVEMENT_MAX:
            return
        if status != self.achievements[achievement_id]:
            log.info("Achieved achievement: %s (%d)!",
                     self.achievement_names[achievement_id], status)
        self.achievements[achievement_id] = status
        self.write_userdata()

    def set_achievement(self, achievement_id: int, done: int) -> None:
        """Award an achievement unless in trial or debug mode."""
        if not self.trial_mode and not self.debug_mode:
            self.award_achievement(achievement_id, done)

    def set_leaderboard(self, leaderboard_id: int, result: int) -> None:
        """Record ``result`` if it beats (is lower than) the stored score."""
        if self.trial_mode or self.debug_mode:
            return
        current = self.leaderboards[leaderboard_id]
        if result < current:
            log.info("Set leaderboard (%d) value to %d", leaderboard_id, result)
            self.leaderboards[leaderboard_id] = result
            self.write_userdata()
        else:
            log.info("Attempted to set leaderboard (%d) value to %d... but score was already %d!",
                     leaderboard_id, result, current)