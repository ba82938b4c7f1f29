"""Periodic unread-count refresh owned by a single UI surface.

Each surface that shows a badge owns its own ``UnreadCountPoller``: start it
when the surface appears and stop it when the surface goes away, so no fetch
outlives its owner.  Used for both conversation and notification badges.
"""

from __future__ import annotations

import asyncio
import contextlib
from collections.abc import Awaitable, Callable
from types import TracebackType

import structlog

from storefront.domain.errors import StorefrontError

logger = structlog.get_logger()

DEFAULT_POLL_INTERVAL = 30.0


class UnreadCountPoller:
    """Fetch an unread count immediately and then on a fixed interval.

    Failed fetches, including malformed counts, are logged and leave the
    last known count in place; the next tick is the retry.

    Usage::

        async with UnreadCountPoller(lambda: inbox.get_unread_count(token)) as poller:
            ...
            badge = format_badge(poller.count)

    Args:
        fetch: Coroutine factory returning the current count.
        interval: Seconds between fetches.
        on_change: Optional callback invoked when the count changes.
        name: Label used in log events.
    """

    def __init__(
        self,
        fetch: Callable[[], Awaitable[int]],
        interval: float = DEFAULT_POLL_INTERVAL,
        on_change: Callable[[int], None] | None = None,
        name: str = "unread_count",
    ) -> None:
        if interval <= 0:
            raise ValueError("interval must be positive")
        self._fetch = fetch
        self._interval = interval
        self._on_change = on_change
        self._name = name
        self._count = 0
        self._task: asyncio.Task[None] | None = None

    @property
    def count(self) -> int:
        """Return the last successfully fetched count (0 before the first)."""
        return self._count

    @property
    def running(self) -> bool:
        """Return ``True`` while the polling task is alive."""
        return self._task is not None and not self._task.done()

    async def refresh(self) -> int:
        """Fetch the count once, outside the timer.

        Used after actions that change read-state (mark read, mark all read).
        """
        try:
            count = await self._fetch()
        except StorefrontError as exc:
            logger.warning("poll_failed", poller=self._name, error=str(exc))
            return self._count
        except (TypeError, ValueError) as exc:
            # Malformed payload; the task must survive until the next tick.
            logger.error(
                "poll_failed",
                poller=self._name,
                error=str(exc),
                error_type=type(exc).__name__,
            )
            return self._count

        if count != self._count:
            self._count = count
            if self._on_change is not None:
                self._on_change(count)
        return self._count

    async def _run(self) -> None:
        while True:
            await self.refresh()
            await asyncio.sleep(self._interval)

    def start(self) -> None:
        """Start polling.  Calling ``start`` on a running poller is a no-op."""
        if self.running:
            return
        self._task = asyncio.get_running_loop().create_task(self._run())
        logger.debug("poller_started", poller=self._name, interval=self._interval)

    async def stop(self) -> None:
        """Cancel the polling task and wait for it to finish.  Safe to repeat."""
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task
        logger.debug("poller_stopped", poller=self._name)

    async def __aenter__(self) -> UnreadCountPoller:
        self.start()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.stop()
