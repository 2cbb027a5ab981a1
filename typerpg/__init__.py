"""Typing RPG: keystroke scoring, XP and levels, daily challenge."""

__version__ = "0.1.0"
