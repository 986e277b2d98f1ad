"""Vercel serverless entrypoint exposing the engine's ASGI app."""

from __future__ import annotations

import sys
from pathlib import Path

_SRC = Path(__file__).resolve().parents[1] / "src"
if str(_SRC) not in sys.path:
    sys.path.insert(0, str(_SRC))

from nutrition_engine.api.asgi import app  # noqa: E402

__all__ = ["app"]
