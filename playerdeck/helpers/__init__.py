"""Various helpers and utils for PlayerDeck."""
