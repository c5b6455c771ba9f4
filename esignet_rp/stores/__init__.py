"""Stores used by the identity flow."""
