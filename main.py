#!/usr/bin/env python3
"""Typing RPG entry point.

Run with:
    python main.py
    python -m typerpg
"""

import sys

from typerpg.__main__ import main


if __name__ == "__main__":
    sys.exit(main())
