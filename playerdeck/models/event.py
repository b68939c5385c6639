"""Model for an event signaled on the PlayerDeck event bus."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from .enums import EventType


@dataclass
class DeckEvent:
    """Representation of an Event emitted in/by PlayerDeck."""

    event: EventType
    object_id: str | None = None
    data: Any = None
