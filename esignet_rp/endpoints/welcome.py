"""Welcome route, a liveness check for the relying party service."""

from aiohttp import web

from ..config.const import DEFAULT_TITLE

PATH = "/"


class WelcomeView(web.View):
    """Welcome View."""

    async def get(self) -> web.Response:
        """Receive response."""
        return web.Response(text=f"Welcome to {DEFAULT_TITLE} REST APIs!")
