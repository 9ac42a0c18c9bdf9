#!/usr/bin/env python3
"""
main.py - Quick-start entry point.

Put a ``target.png`` next to this file, drop images into ``images/`` and run:

    python main.py batch

Or morph one image:

    python -m pixel_morph.cli single my_photo.jpg --target target.png
"""

from pixel_morph.cli import app

if __name__ == "__main__":
    app()
