"""Delegate route that completes the login for the frontend."""

import logging

from aiohttp import web

from ..config.const import DEFAULT_GRANT_TYPE
from ..flow import IdentityFlow
from ..tools.exceptions import (
    ConfigurationError,
    IdentityFlowException,
    ProviderError,
)

PATH = "/delegate/fetchUserInfo"
IDENTITY_FLOW = web.AppKey("identity_flow", IdentityFlow)

_LOGGER = logging.getLogger(__name__)

REQUIRED_FIELDS = ("code", "client_id", "redirect_uri")


class FetchUserInfoView(web.View):
    """Exchanges the authorization code for an access token and returns user info."""

    @property
    def identity_flow(self) -> IdentityFlow:
        return self.request.app[IDENTITY_FLOW]

    async def post(self) -> web.Response:
        """Receive the authorization code posted by the frontend."""
        try:
            body = await self.request.json()
        except ValueError:
            return web.json_response({"error": "Request body must be JSON."}, status=400)

        if not isinstance(body, dict):
            return web.json_response({"error": "Request body must be an object."}, status=400)

        missing = [field for field in REQUIRED_FIELDS if not body.get(field)]
        if missing:
            return web.json_response(
                {"error": f"Missing required fields: {', '.join(missing)}"},
                status=400,
            )

        try:
            claims = await self.identity_flow.async_complete_login(
                body["code"],
                body["client_id"],
                body["redirect_uri"],
                body.get("grant_type") or DEFAULT_GRANT_TYPE,
            )
        except ProviderError as e:
            return web.json_response(e.response, status=400)
        except ConfigurationError as e:
            _LOGGER.error("Identity flow is misconfigured: %s", e)
            return web.json_response({"error": str(e)}, status=500)
        except IdentityFlowException as e:
            _LOGGER.warning("Failed to fetch user info: %s", e)
            return web.json_response({"error": str(e)}, status=502)

        return web.json_response(claims)
