"""Canonical enum values for the board schema."""

from __future__ import annotations

import enum


class DealStatus(str, enum.Enum):
    PAID = "paid"
    UNPAID = "unpaid"


class ActivityType(str, enum.Enum):
    GMAIL = "gmail"
    TWILIO = "twilio"
    SHOPIFY = "shopify"
    NOTE = "note"


class IntegrationType(str, enum.Enum):
    GMAIL = "gmail"
    TWILIO = "twilio"
    SHOPIFY = "shopify"
