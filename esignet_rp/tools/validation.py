"""Validation and sanitization helpers for configuration and request inputs."""

from __future__ import annotations

from urllib.parse import urlparse


def validate_url(url: str) -> bool:
    """Validate that a URL is properly formatted."""
    try:
        parsed = urlparse(url.strip())
        return bool(parsed.scheme in ("http", "https") and parsed.netloc)
    except (ValueError, TypeError, AttributeError):
        return False


def sanitize_base_url(url: str) -> str:
    """Strip whitespace and trailing slashes from a service base URL."""
    return url.strip().rstrip("/") if url else ""


def validate_client_id(client_id: str) -> bool:
    """Validate client ID format."""
    return bool(isinstance(client_id, str) and client_id.strip())
