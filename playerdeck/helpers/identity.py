"""Generators for the process-local identity of queued songs."""

from __future__ import annotations

from typing import Protocol

import shortuuid


class UniqueIdGenerator(Protocol):
    """Source of identifiers that tell duplicate queue entries apart."""

    def next(self) -> str:
        """Return a new identifier, never returned before by this generator."""
        ...


class ShortUuidGenerator:
    """Generate random (short) uuids."""

    def next(self) -> str:
        """Return a new random identifier."""
        return shortuuid.uuid()


class SequentialIdGenerator:
    """Generate predictable identifiers (prefix + counter), i.e. for tests."""

    def __init__(self, prefix: str = "q") -> None:
        """Initialize."""
        self.prefix = prefix
        self._counter = 0

    def next(self) -> str:
        """Return the next identifier in the sequence."""
        self._counter += 1
        return f"{self.prefix}{self._counter}"
