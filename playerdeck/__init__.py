"""PlayerDeck: unified client core for Subsonic-family music servers."""

from playerdeck.deck import PlayerDeck

__all__ = ["PlayerDeck"]
