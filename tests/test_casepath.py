import os

import pytest

from retrokit.casepath import case_chdir, case_open, case_path


@pytest.fixture
def tree(tmp_path):
    game = tmp_path / "Data" / "Game"
    game.mkdir(parents=True)
    (game / "File.TXT").write_bytes(b"hello")
    return tmp_path


def test_absolute_path_resolves_actual_case(tree):
    base = str(tree)
    assert case_path(base + "/data/game/file.txt") == base + "/Data/Game/File.TXT"


def test_exact_path_is_unchanged(tree):
    base = str(tree)
    assert case_path(base + "/Data/Game/File.TXT") == base + "/Data/Game/File.TXT"


def test_missing_last_component_is_kept(tree):
    base = str(tree)
    assert case_path(base + "/DATA/NEW.txt") == base + "/Data/NEW.txt"


def test_missing_middle_component_fails(tree):
    base = str(tree)
    assert case_path(base + "/nope/file.txt") is None


def test_component_below_a_file_fails(tree):
    base = str(tree)
    assert case_path(base + "/data/game/file.txt/inner") is None


def test_relative_path_gets_dot_prefix(tree, monkeypatch):
    monkeypatch.chdir(tree)
    assert case_path("data/GAME/file.txt") == "./Data/Game/File.TXT"


def test_case_open_finds_file_with_other_case(tree, monkeypatch):
    monkeypatch.chdir(tree)
    with case_open("DATA/game/FILE.txt", "rb") as handle:
        assert handle.read() == b"hello"


def test_case_open_missing_file_raises(tree, monkeypatch):
    monkeypatch.chdir(tree)
    with pytest.raises(FileNotFoundError):
        case_open("data/game/absent.txt", "rb")


def test_case_chdir_changes_directory(tree, monkeypatch):
    monkeypatch.chdir(tree)
    case_chdir("data/GAME")
    assert os.path.samefile(os.getcwd(), tree / "Data" / "Game")
    assert case_path("file.txt") == "./File.TXT"
    with case_open("file.txt", "rb") as handle:
        assert handle.read() == b"hello"


def test_case_chdir_missing_raises(tree, monkeypatch):
    monkeypatch.chdir(tree)
    with pytest.raises(FileNotFoundError):
        case_chdir("nowhere/at/all")