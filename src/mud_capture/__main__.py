# mud_capture/__main__.py
# AI-Mind (C) 2025 by Martin Bukowski is licensed under CC BY-NC-SA 4.0
"""
Module entry point for mud-capture.

Allows running with: python -m mud_capture replay session.log
"""

import sys

from .main import main

if __name__ == "__main__":
    sys.exit(main())
