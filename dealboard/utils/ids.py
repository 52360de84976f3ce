"""Identifier generation helpers."""

from __future__ import annotations

import random
from datetime import datetime, timezone


def generate_deal_code(prefix: str, now: datetime | None = None, rng: random.Random | None = None) -> str:
    """Create a human-facing master order number such as ``MON-2026-417``."""
    year = (now or datetime.now(timezone.utc)).year
    number = (rng or random).randrange(1000)
    return f"{prefix}-{year}-{number}"
