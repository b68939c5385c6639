"""Models used throughout PlayerDeck."""
