"""Navidrome server backend (native api plus Subsonic compatible endpoints)."""
