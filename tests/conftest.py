"""Pytest configuration and fixtures.

The sys.path manipulation below lets the suite run from a checkout without
``pip install -e .``.
"""
import sys
from pathlib import Path

import matplotlib

# Non-interactive backend for every figure test
matplotlib.use("Agg")

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))
