"""Cache-invalidation signals for the page layer.

After a mutation the engine tells the surrounding application which cached
pages are stale. This is a notification only: failures are logged and never
affect the operation that triggered them.
"""

from __future__ import annotations

import asyncio
import logging

import httpx

from dossier_moderation.core.settings import settings

logger = logging.getLogger(__name__)

ADMIN_PATH = "/admin"
DISCUSSIONS_PATH = "/discussions"
PRODUCTS_PATH = "/products"


class Revalidator:
    """Sends stale page paths to an optional webhook."""

    def __init__(
        self,
        webhook_url: str | None = None,
        timeout_seconds: float | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.webhook_url = webhook_url if webhook_url is not None else settings.revalidate_webhook_url
        self.timeout_seconds = (
            timeout_seconds
            if timeout_seconds is not None
            else settings.revalidate_timeout_seconds
        )
        self._transport = transport
        self._pending: set[asyncio.Task[None]] = set()

    def revalidate(self, *paths: str) -> None:
        """Signal that cached views of ``paths`` are stale.

        Called from a running event loop (a request handler), the webhook is
        sent from a worker thread and this returns immediately. Without a loop
        it is sent inline.
        """
        unique_paths = list(dict.fromkeys(paths))
        if not unique_paths:
            return
        logger.debug("Revalidating %s", ", ".join(unique_paths))
        if not self.webhook_url:
            return

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            self._send(unique_paths)
            return

        task = loop.create_task(asyncio.to_thread(self._send, unique_paths))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def drain(self) -> None:
        """Wait for webhook calls still in flight."""
        if self._pending:
            await asyncio.gather(*self._pending)

    def _send(self, paths: list[str]) -> None:
        try:
            with httpx.Client(timeout=self.timeout_seconds, transport=self._transport) as client:
                response = client.post(self.webhook_url, json={"paths": paths})
                response.raise_for_status()
        except httpx.HTTPError as exc:
            logger.warning("Revalidation webhook failed for %s: %s", paths, exc)


_revalidator: Revalidator | None = None


def get_revalidator() -> Revalidator:
    """Return the process-wide revalidator."""
    global _revalidator
    if _revalidator is None:
        _revalidator = Revalidator()
    return _revalidator
