"""Open files and change directories while ignoring the case of path components."""

from __future__ import annotations

import errno
import os
import string
import sys
from typing import IO

_FOLD = str.maketrans(string.ascii_uppercase, string.ascii_lowercase)


def _fold(name: str) -> str:
    return name.translate(_FOLD)


def _list_dir(path: str) -> list[str] | None:
    try:
        names = os.listdir(path)
    except OSError:
        return None
    return [os.curdir, os.pardir, *names]


def case_path(path: str | os.PathLike[str]) -> str | None:
    """Resolve ``path`` against the file system, matching components without case.

    Each component is replaced by the directory entry that matches it ignoring
    ASCII case. The last component may be missing, in which case it is kept as
    given. Returns ``None`` when an earlier component cannot be resolved or is
    not a directory. Relative paths come back prefixed with ``./``.
    """
    path = os.fspath(path)
    if path.startswith("/"):
        result, directory, rest = "", "/", path[1:]
    else:
        result, directory, rest = ".", ".", path

    entries = _list_dir(directory)
    unmatched = False
    for component in rest.split("/"):
        if entries is None or unmatched:
            return None
        result += "/"
        wanted = _fold(component)
        match = next((name for name in entries if _fold(name) == wanted), None)
        if match is None:
            result += component
            unmatched = True
        else:
            result += match
            entries = _list_dir(result)
    return result


def case_open(path: str | os.PathLike[str], mode: str = "rb") -> IO:
    """Open ``path``, retrying with a case-insensitive lookup if it is not found as given."""
    try:
        return open(path, mode)
    except OSError as error:
        if sys.platform == "win32":
            raise
        resolved = case_path(path)
        if resolved is None:
            raise
        try:
            return open(resolved, mode)
        except OSError:
            raise error from None


def case_chdir(path: str | os.PathLike[str]) -> None:
    """Change the working directory, matching path components without case."""
    if sys.platform == "win32":
        os.chdir(path)
        return
    resolved = case_path(path)
    if resolved is None:
        raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), os.fspath(path))
    os.chdir(resolved)