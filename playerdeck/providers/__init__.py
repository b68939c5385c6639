"""Backends (server protocol families) supported by PlayerDeck."""
