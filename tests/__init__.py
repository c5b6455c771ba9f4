"""Tests for the eSignet relying party."""
