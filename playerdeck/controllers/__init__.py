"""Package with the (core) controllers of PlayerDeck."""
