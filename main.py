#!/usr/bin/env python3
"""
main.py - Quick-start entry point.

    python main.py run my_photo.jpg --output out.png

Or use the full CLI:

    python -m linez.cli run --help
    python -m linez.cli batch --input images --output output --frames 200
"""

from linez.cli import app

if __name__ == "__main__":
    app()
