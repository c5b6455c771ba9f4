"""Runs the delegate service: python -m esignet_rp"""

import logging

from aiohttp import web

from .app import create_app
from .config.settings import load_settings
from .flow import IdentityFlow
from .stores.credential_store import MemoryCredentialStore

_LOGGER = logging.getLogger(__name__)


def main() -> None:
    """Starts the delegate service with settings from the environment."""
    settings = load_settings()
    logging.basicConfig(
        level=logging.DEBUG if settings.verbose_debug_mode else logging.INFO
    )

    _LOGGER.info("Starting eSignet delegate service on port %s", settings.port)
    flow = IdentityFlow(settings, MemoryCredentialStore())
    web.run_app(create_app(flow), host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
