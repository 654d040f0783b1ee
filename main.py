#!/usr/bin/env python3
"""Pomodoro — entry point.

Run with:
    python main.py
    python -m pomodoro
"""

from pomodoro.__main__ import main


if __name__ == "__main__":
    main()
