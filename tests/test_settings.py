import pytest

from retrokit.settings import (
    DEFAULT_CONTROLLER,
    DEFAULT_KEYBOARD,
    MAX_VOLUME,
    PLATFORM_MOBILE,
    PLATFORM_STANDARD,
    Settings,
    load_settings,
    parse_settings,
    save_settings,
)


def test_empty_text_gives_defaults():
    assert parse_settings("") == Settings()


def test_defaults_follow_source():
    settings = Settings()
    assert settings.fast_forward_speed == 8
    assert settings.data_file == "Data.rsdk"
    assert settings.original_controls == -1
    assert settings.window_scale == 2
    assert settings.refresh_rate == 60
    assert settings.dim_limit == 300
    assert settings.use_steam_dir is True
    assert settings.l_stick_deadzone == pytest.approx(0.3)


def test_round_trip_defaults():
    settings = Settings()
    assert parse_settings(settings.to_ini_text()) == settings


def test_round_trip_custom_values():
    settings = Settings(
        dev_menu=True,
        starting_category=2,
        data_file="Other.rsdk",
        game_platform=PLATFORM_MOBILE,
        dim_limit=-1,
        bgm_volume=50,
        sfx_volume=25,
        hardware_renderer=True,
        keyboard={**DEFAULT_KEYBOARD, "A": 4},
        controller={**DEFAULT_CONTROLLER, "Start": 7},
        r_trigger_deadzone=0.5,
    )
    assert parse_settings(settings.to_ini_text()) == settings


def test_ini_text_has_sections_and_values():
    text = Settings().to_ini_text()
    assert "[Dev]" in text
    assert "DevMenu=false" in text
    assert "UseSteamDir=true" in text
    assert "[Keyboard 1]" in text
    assert "[Controller 1]" in text


def test_platform_written_as_zero_for_standard():
    text = Settings(game_platform=PLATFORM_STANDARD).to_ini_text()
    assert "Platform=0" in text.splitlines()


@pytest.mark.parametrize("value, expected", [("0", PLATFORM_STANDARD), ("1", PLATFORM_MOBILE)])
def test_platform_parsed(value, expected):
    settings = parse_settings(f"[Game]\nPlatform={value}\n")
    assert settings.game_platform == expected


def test_unknown_platform_keeps_default():
    assert parse_settings("[Game]\nPlatform=-1\n").game_platform == Settings().game_platform


def test_negative_dim_limit_written_as_minus_one():
    text = Settings(dim_limit=-5).to_ini_text()
    assert "DimLimit=-1" in text.splitlines()


def test_dim_limit_frames_disabled_passes_through():
    assert Settings(dim_limit=-1).dim_limit_frames == -1


def test_dim_limit_frames_scales_with_refresh_rate():
    settings = parse_settings("[Window]\nDimLimit=10\nRefreshRate=30\n")
    assert settings.dim_limit_frames == settings.dim_limit * settings.refresh_rate
    assert settings.dim_limit == 10


@pytest.mark.parametrize("raw, expected", [("2.0", MAX_VOLUME), ("-0.5", 0)])
def test_volume_clamped(raw, expected):
    settings = parse_settings(f"[Audio]\nBGMVolume={raw}\nSFXVolume={raw}\n")
    assert settings.bgm_volume == expected
    assert settings.sfx_volume == expected


def test_missing_volume_is_full():
    assert parse_settings("[Audio]\n").bgm_volume == MAX_VOLUME


def test_unreadable_values_fall_back():
    settings = parse_settings("[Dev]\nFastForwardSpeed=fast\nDevMenu=maybe\n")
    assert settings.fast_forward_speed == Settings().fast_forward_speed
    assert settings.dev_menu is False


def test_bool_accepts_numeric_form():
    assert parse_settings("[Dev]\nDevMenu=1\n").dev_menu is True


def test_comments_and_whitespace_ignored():
    text = "; note\n[Window]\n# other\n  WindowScale = 3  \n"
    assert parse_settings(text).window_scale == 3


def test_partial_keyboard_mapping():
    settings = parse_settings("[Keyboard 1]\nUp=100\n")
    assert settings.keyboard["Up"] == 100
    assert settings.keyboard["Down"] == DEFAULT_KEYBOARD["Down"]


def test_values_in_wrong_section_ignored():
    settings = parse_settings("[Game]\nDevMenu=true\n")
    assert settings.dev_menu is False


def test_load_missing_writes_defaults(tmp_path):
    path = tmp_path / "settings.ini"
    settings = load_settings(path)
    assert settings == Settings()
    assert path.exists()
    assert parse_settings(path.read_text()) == Settings()


def test_save_then_load(tmp_path):
    path = tmp_path / "settings.ini"
    settings = Settings(vsync=True, screen_width=400, language=3)
    save_settings(settings, path)
    assert load_settings(path) == settings