"""Helpers for game data files: case-insensitive lookup, text menus, settings and user data."""

__version__ = "0.1.0"
__all__ = ["casepath", "text", "settings", "userdata"]