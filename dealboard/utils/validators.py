"""Deterministic sanitizers and coercions shared by services and the board."""

from __future__ import annotations

from decimal import Decimal, InvalidOperation


def sanitize_text(value: str | None, max_len: int = 20000) -> str:
    """Sanitize free-form content before persistence."""
    if value is None:
        return ""
    cleaned = str(value).replace("\x00", "").strip()
    return cleaned[:max_len]


def derive_initials(client_name: str, initials: str | None = None) -> str:
    """Explicit initials win; otherwise the first two letters of the name, upper-cased."""
    chosen = sanitize_text(initials)
    if chosen:
        return chosen[:2].upper()
    return sanitize_text(client_name)[:2].upper()


def coerce_decimal(value: object) -> Decimal:
    """Numeric coercion for money columns; never concatenates text."""
    if value is None or value == "":
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        raise ValueError(f"Not a numeric amount: {value!r}")
    if isinstance(value, float):
        return Decimal(repr(value))
    try:
        return Decimal(str(value).strip())
    except InvalidOperation as exc:
        raise ValueError(f"Not a numeric amount: {value!r}") from exc
