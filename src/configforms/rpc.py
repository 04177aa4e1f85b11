"""Submit handler sending configurations to the device over JSON-RPC."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any
from uuid import uuid4

import httpx

from configforms.exceptions import SubmitError
from configforms.logging import get_logger
from configforms.settings import Settings, build_httpx_client_kwargs, get_settings

if TYPE_CHECKING:
    from collections.abc import Mapping

SET_CONFIG_METHOD = "package.config.set"

logger = get_logger(__name__)


class RpcSubmitHandler:
    """Posts ``{"id": package_id, "config": value}`` to the device RPC endpoint."""

    def __init__(
        self,
        package_id: str,
        *,
        settings: Settings | None = None,
        method: str = SET_CONFIG_METHOD,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the handler.

        Args:
            package_id: Package whose configuration is being set.
            settings: Runtime settings; loaded lazily when omitted.
            method: RPC method name.
            transport: Optional httpx transport, e.g. a mock in tests.
        """
        self.package_id = package_id
        self.settings = settings or get_settings()
        self.method = method
        self._transport = transport

    def build_request(self, value: Mapping[str, Any]) -> dict[str, Any]:
        """Build the JSON-RPC request payload.

        Args:
            value: Serialized configuration.

        Returns:
            dict[str, Any]: JSON-RPC 2.0 request.
        """
        return {
            "jsonrpc": "2.0",
            "id": uuid4().hex,
            "method": self.method,
            "params": {"id": self.package_id, "config": dict(value)},
        }

    async def __call__(self, value: dict[str, Any]) -> Any:
        """Send the configuration.

        Args:
            value: Serialized configuration.

        Raises:
            SubmitError: On transport failure, non-2xx status or an RPC error payload.

        Returns:
            Any: The RPC ``result`` member.
        """
        payload = self.build_request(value)
        kwargs = build_httpx_client_kwargs(self.settings)
        if self._transport is not None:
            kwargs["transport"] = self._transport

        try:
            async with httpx.AsyncClient(**kwargs) as client:
                response = await client.post(self.settings.rpc_url, json=payload)
                response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise SubmitError(message=f"Device rejected request: HTTP {exc.response.status_code}") from exc
        except httpx.HTTPError as exc:
            raise SubmitError(message=f"Device unreachable: {exc}") from exc

        try:
            body = response.json()
        except ValueError as exc:
            raise SubmitError(message="Device returned a malformed RPC response") from exc
        if not isinstance(body, dict):
            raise SubmitError(message="Device returned a malformed RPC response")
        if body.get("error"):
            error = body["error"]
            if not isinstance(error, dict):
                raise SubmitError(message=str(error))
            raise SubmitError(message=str(error.get("message", "RPC error")), code=error.get("code"))

        logger.info("Configuration sent", extra={"package_id": self.package_id, "method": self.method})
        return body.get("result")
