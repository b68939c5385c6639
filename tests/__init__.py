"""Tests for playerdeck."""
