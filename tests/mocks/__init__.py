"""Mocks used by the tests."""
