"""aiohttp application exposing the delegate login route."""

import logging

from aiohttp import web

from .endpoints import (
    FETCH_USER_INFO_PATH,
    IDENTITY_FLOW,
    WELCOME_PATH,
    FetchUserInfoView,
    WelcomeView,
)
from .flow import IdentityFlow

_LOGGER = logging.getLogger(__name__)


def create_app(identity_flow: IdentityFlow) -> web.Application:
    """Creates the web application around an identity flow."""
    app = web.Application()
    app[IDENTITY_FLOW] = identity_flow

    app.router.add_view(WELCOME_PATH, WelcomeView)
    app.router.add_view(FETCH_USER_INFO_PATH, FetchUserInfoView)

    async def _close_identity_flow(app: web.Application) -> None:
        _LOGGER.debug("Shutting down identity flow")
        await app[IDENTITY_FLOW].async_close()

    app.on_cleanup.append(_close_identity_flow)
    return app
