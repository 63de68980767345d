# retrokit

Helpers for the data files of a classic side-scrolling game engine. The package
has no dependencies outside the standard library.

## Modules

### `retrokit.casepath`

- `case_path(path)` resolves a path against the file system, matching each
  component by directory entry while ignoring ASCII case. The last component
  may be missing and is then kept as given. It returns `None` when an earlier
  component cannot be resolved. Relative paths come back prefixed with `./`.
- `case_open(path, mode="rb")` opens a file as given and, if that fails on a
  system other than Windows, retries with the case-insensitive lookup. If both
  fail, the original error is raised.
- `case_chdir(path)` changes the working directory the same way, raising
  `FileNotFoundError` when the path cannot be resolved.

### `retrokit.text`

- `parse_font(data)` reads a font table of 20-byte little-endian records
  (at most 1024) into `FontCharacter` values (`id`, `src_x`, `src_y`, `width`,
  `height`, `pivot_x`, `pivot_y`, `x_advance`). `load_font_file(path)` does
  the same from a file.
- `map_character(font, code)` returns the index of the glyph whose id is
  `code`, or 0 when there is none.
- `TextMenu` holds rows of character codes in one shared buffer:
  `setup`, `add_entry`, `add_entry_mapped` (stores glyph indexes),
  `set_entry`, `edit_entry` and `entry(row_id)` to read a row back.
  `load_text(data, font=None)` / `load_text_file(path, font=None)` fill the
  menu from text data, one row per CR-terminated line; data starting with
  `0xFF` is read as UTF-16LE. `load_config_list(data, list_no)` /
  `load_config_list_file(path, list_no)` add the player names (list 0) or the
  stage names of category 1 to 4 from binary game configuration data.

### `retrokit.settings`

- `Settings` is a dataclass with every value of `settings.ini` (developer,
  game, window, audio, keyboard and controller sections) and their defaults.
  `to_ini_text()` renders it as commented INI text; `dim_limit_frames` gives
  the dim timer in frames.
- `parse_settings(text)` builds settings from INI text; missing or unreadable
  values take their defaults and volumes are clamped to 0–100.
- `load_settings(path)` reads a settings file, writing and returning the
  defaults if the file does not exist. `save_settings(settings, path)` writes one.

### `retrokit.userdata`

- `GlobalVariables` holds up to 256 named integers: `add`, `get` (0 for an
  unknown name) and `set` (unknown names are ignored).
- `UserData` keeps save RAM, achievements and leaderboards under
  `game_path` (or `mods_path` when `redirect_save` is set):
  `read_save_ram` / `write_save_ram` use `SData.bin`, falling back to
  `SGame.bin`; `read_userdata` / `write_userdata` use `UData.bin`;
  `init()` loads `settings.ini` and the user data, creating default files
  where missing. `award_achievement`, `set_achievement` and
  `set_leaderboard` update and save records; the latter two do nothing in
  trial or debug mode, and a leaderboard only takes a lower score.

## Installation

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## Example

```python
from retrokit.text import TextMenu, load_font_file
from retrokit.settings import load_settings

font = load_font_file("Data/Game/Font.bin")
menu = TextMenu()
menu.add_entry_mapped("PRESS START", font)
print(menu.entry(0))

settings = load_settings("settings.ini")
print(settings.to_ini_text())
```

## What it does not do

retrokit only reads and writes data. It does not draw text menus or sprites,
play audio or video, handle input devices, run game scripts, or provide a
command to start a game; there is no command-line program in the package.