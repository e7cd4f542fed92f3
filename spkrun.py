#!/usr/bin/env python3
"""sparkpods CLI entrypoint -- run without pip install.

Usage:
    python spkrun.py resolve sparkpods.yaml
    python spkrun.py --help
"""

import sys
from pathlib import Path

# Add src/ to import path so the sparkpods package is importable
sys.path.insert(0, str(Path(__file__).resolve().parent / "src"))

from sparkpods.cli import app

if __name__ == "__main__":
    app()
