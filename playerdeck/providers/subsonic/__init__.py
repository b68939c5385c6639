"""Subsonic (and OpenSubsonic) backend for PlayerDeck."""
