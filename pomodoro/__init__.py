"""Pomodoro: a work/break session timer for the system tray."""

__version__ = "0.1.0"
