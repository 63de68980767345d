"""Bitmap font tables and text menus loaded from game data files."""

from __future__ import annotations

import os
import struct
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Sequence

from .casepath import case_open

TEXTDATA_COUNT = 0x2800
TEXTENTRY_COUNT = 0x200
TEXTMENU_COUNT = 0x2
FONTCHAR_COUNT = 0x400

_MAX_ROW = 511
_NEWLINE = 0x0A
_CARRIAGE_RETURN = 0x0D
_UTF16_MARK = 0xFF

_FONT_RECORD = struct.Struct("<i7h2x")


class TextInfoType(IntEnum):
    TEXTDATA = 0
    TEXTSIZE = 1
    ROWCOUNT = 2


@dataclass(frozen=True)
class FontCharacter:
    """One glyph of a bitmap font: its character code and sheet rectangle."""

    id: int
    src_x: int
    src_y: int
    width: int
    height: int
    pivot_x: int
    pivot_y: int
    x_advance: int


class _ByteReader:
    """Sequential reader that yields zero bytes once the data runs out."""

    def __init__(self, data: bytes) -> None:
        self._data = bytes(data)
        self._pos = 0

    @property
    def at_end(self) -> bool:
        return self._pos >= len(self._data)

    def read(self, size: int) -> bytes:
        chunk = self._data[self._pos:self._pos + size]
        self._pos += size
        return chunk.ljust(size, b"\0")

    def byte(self) -> int:
        return self.read(1)[0]

    def string(self) -> str:
        return self.read(self.byte()).decode("latin-1")


def parse_font(data: bytes) -> list[FontCharacter]:
    """Parse a font table: 20-byte little-endian records, at most 1024 of them."""
    reader = _ByteReader(data)
    characters: list[FontCharacter] = []
    while not reader.at_end and len(characters) < FONTCHAR_COUNT:
        fields = _FONT_RECORD.unpack(reader.read(_FONT_RECORD.size))
        characters.append(FontCharacter(*fields))
    return characters


def load_font_file(path: str | os.PathLike[str]) -> list[FontCharacter]:
    """Read and parse a font table file."""
    with case_open(path, "rb") as handle:
        return parse_font(handle.read())


def map_character(font: Sequence[FontCharacter], code: int) -> int:
    """Return the index of the glyph whose id is ``code``, or 0 if there is none.

    The font table has room for 1024 glyphs; unused slots have id 0.
    """
    glyphs = font[:FONTCHAR_COUNT]
    for index, glyph in enumerate(glyphs):
        if glyph.id == code:
            return index
    if code == 0 and len(glyphs) < FONTCHAR_COUNT:
        return len(glyphs)
    return 0


def _codes(text: str) -> list[int]:
    return [ord(char) for char in text.split("\0", 1)[0]]


@dataclass
class TextMenu:
    """A list of text rows stored in one shared character buffer."""

    text_data: list[int] = field(default_factory=lambda: [0] * TEXTDATA_COUNT)
    entry_start: list[int] = field(default_factory=lambda: [0] * TEXTENTRY_COUNT)
    entry_size: list[int] = field(default_factory=lambda: [0] * TEXTENTRY_COUNT)
    entry_highlight: list[int] = field(default_factory=lambda: [0] * TEXTENTRY_COUNT)
    text_data_pos: int = 0
    selection1: int = 0
    selection2: int = 0
    row_count: int = 0
    visible_row_count: int = 0
    visible_row_offset: int = 0
    alignment: int = 0
    selection_count: int = 0
    timer: int = 0

    def setup(self, row_count: int) -> None:
        """Reset the character buffer and set the row count."""
        self.text_data_pos = 0
        self.row_count = row_count

    def _write(self, row: int, start: int, codes: list[int]) -> int:
        end = start + len(codes)
        if end > TEXTDATA_COUNT:
            raise IndexError("text menu character buffer is full")
        self.text_data[start:end] = codes
        self.entry_size[row] = len(codes)
        return end

    def _clear_current_highlight(self) -> None:
        if self.row_count < TEXTENTRY_COUNT:
            self.entry_highlight[self.row_count] = 0

    def _start_row(self, row: int) -> None:
        self.entry_start[row] = self.text_data_pos
        self.entry_size[row] = 0

    def add_entry(self, text: str) -> None:
        """Append a row holding the characters of ``text``."""
        row = self.row_count
        self._start_row(row)
        self.entry_highlight[row] = 0
        self.text_data_pos = self._write(row, self.text_data_pos, _codes(text))
        self.row_count += 1

    def add_entry_mapped(self, text: str, font: Sequence[FontCharacter]) -> None:
        """Append a row holding the font glyph indexes of ``text``."""
        row = self.row_count
        self._start_row(row)
        self.entry_highlight[row] = 0
        codes = [map_character(font, code) for code in _codes(text)]
        self.text_data_pos = self._write(row, self.text_data_pos, codes)
        self.row_count += 1

    def set_entry(self, text: str, row_id: int) -> None:
        """Store ``text`` at the end of the buffer and point row ``row_id`` at it."""
        self._start_row(row_id)
        self._clear_current_highlight()
        self.text_data_pos = self._write(row_id, self.text_data_pos, _codes(text))

    def edit_entry(self, text: str, row_id: int) -> None:
        """Overwrite row ``row_id`` in place, starting where it already starts."""
        self.entry_size[row_id] = 0
        self._clear_current_highlight()
        self._write(row_id, self.entry_start[row_id], _codes(text))

    def entry(self, row_id: int) -> list[int]:
        """Return the character codes of row ``row_id``."""
        start = self.entry_start[row_id]
        return self.text_data[start:start + self.entry_size[row_id]]

    def _take_unit(self, unit: int, font: Sequence[FontCharacter] | None) -> bool:
        """Add one code unit from a text file; return True when rows run out."""
        if unit == _NEWLINE:
            return False
        if unit == _CARRIAGE_RETURN:
            self.row_count += 1
            if self.row_count > _MAX_ROW:
                return True
            self._start_row(self.row_count)
            return False
        if font is not None:
            unit = map_character(font, unit)
        self.text_data[self.text_data_pos] = unit
        self.text_data_pos += 1
        self.entry_size[self.row_count] += 1
        return False

    def load_text(self, data: bytes, font: Sequence[FontCharacter] | None = None) -> None:
        """Fill the menu from text file contents, one row per CR-terminated line.

        Data starting with 0xFF is read as UTF-16LE after its two-byte mark,
        otherwise as single bytes. With ``font`` given, characters are stored
        as glyph indexes.
        """
        reader = _ByteReader(data)
        self.text_data_pos = 0
        self.row_count = 0
        self._start_row(0)

        first = reader.byte()
        if first == _UTF16_MARK:
            reader.read(1)

            def next_unit() -> int:
                return int.from_bytes(reader.read(2), "little")
        else:
            next_unit = reader.byte
            self._take_unit(first, font)

        done = False
        while not done:
            done = self._take_unit(next_unit(), font)
            if not done:
                done = reader.at_end or self.text_data_pos >= TEXTDATA_COUNT
        self.row_count += 1

    def load_text_file(
        self, path: str | os.PathLike[str], font: Sequence[FontCharacter] | None = None
    ) -> None:
        """Read a text file and fill the menu from it."""
        with case_open(path, "rb") as handle:
            data = handle.read()
        self.load_text(data, font)

    def load_config_list(self, data: bytes, list_no: int) -> None:
        """Add the player names (list 0) or a stage category's names (1-4) from game config data."""
        reader = _ByteReader(data)
        for _ in range(3):  # name, data, about
            reader.string()

        object_count = reader.byte()
        for _ in range(object_count * 2):  # object names, then script paths
            reader.string()

        for _ in range(reader.byte()):  # variables
            reader.string()
            reader.read(4)

        for _ in range(reader.byte()):  # sound effects
            reader.string()

        for _ in range(reader.byte()):
            name = reader.string()
            if list_no == 0:
                self.add_entry(name)

        for category in range(1, 5):
            for stage in range(reader.byte()):
                reader.string()  # folder
                reader.string()  # id
                name = reader.string()
                highlight = reader.byte()
                if list_no == category:
                    self.entry_highlight[stage] = highlight
                    self.add_entry(name)

    def load_config_list_file(self, path: str | os.PathLike[str], list_no: int) -> None:
        """Read a game config file and add the requested list from it."""
        with case_open(path, "rb") as handle:
            data = handle.read()
        self.load_config_list(data, list_no)