from __future__ import annotations

from typing import Any, Callable, Dict, Optional

import socketio
from loguru import logger

from .config import ClientConfig, config
from .errors import ConnectionLost


class LudoConnection:
    """One Socket.IO session with the game server.

    Owned by whoever runs the session and handed to the adapter; nothing is
    created at import time. ``client`` can be injected (tests use a fake).
    """

    def __init__(
        self,
        url: Optional[str] = None,
        namespace: Optional[str] = None,
        auth_token: Optional[str] = None,
        client_config: ClientConfig = config,
        client: Optional[Any] = None,
    ):
        self.url = url or client_config.server_url
        self.namespace = namespace or client_config.namespace
        self.auth_token = auth_token if auth_token is not None else client_config.auth_token
        self.transports = list(client_config.transports) or None
        self.client = client or socketio.AsyncClient(reconnection=False, logger=False)

    @property
    def connected(self) -> bool:
        return bool(self.client.connected)

    @property
    def sid(self) -> Optional[str]:
        return self.client.get_sid(self.namespace)

    def on(self, event: str, handler: Callable[..., Any]) -> None:
        self.client.on(event, handler, namespace=self.namespace)

    async def connect(self) -> None:
        if self.connected:
            return
        headers: Dict[str, str] = {}
        auth = None
        if self.auth_token:
            headers["Authorization"] = f"Bearer {self.auth_token}"
            auth = {"token": self.auth_token}
        logger.info(f"Connecting to {self.url} (namespace {self.namespace})")
        try:
            await self.client.connect(
                self.url,
                headers=headers,
                auth=auth,
                transports=self.transports,
                namespaces=[self.namespace],
            )
        except socketio.exceptions.ConnectionError as exc:
            raise ConnectionLost(str(exc) or "connection refused") from exc

    async def disconnect(self) -> None:
        if self.connected:
            await self.client.disconnect()

    async def emit(self, event: str, data: Any = None) -> None:
        if not self.connected:
            raise ConnectionLost(f"Cannot send '{event}': not connected")
        logger.debug(f"-> {event} {data!r}")
        await self.client.emit(event, data, namespace=self.namespace)
