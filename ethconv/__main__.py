"""
CLI entry point.

Usage:
    python -m ethconv 0xff
    python -m ethconv --help
"""

import sys

from .cli import main

if __name__ == "__main__":
    sys.exit(main())
