"""Single browser session lifecycle: lazy creation, leasing, idle eviction."""

from __future__ import annotations

import asyncio
import logging
import time
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import AsyncIterator, Optional

from .driver_factory import DriverFactory
from .exceptions import SessionCreationError
from .log_buffer import LogBuffer
from .page import BrowserPage

logger = logging.getLogger(__name__)


@dataclass
class BrowserSession:
    """
    The one live browser plus its page.

    ``in_flight`` counts tool actions currently leasing the session; the
    cleanup scheduler leaves a leased session alone.
    """

    page: BrowserPage
    created_at: float
    last_activity: float
    in_flight: int = 0

    def touch(self) -> None:
        """Update last activity timestamp."""
        self.last_activity = time.time()

    @property
    def busy(self) -> bool:
        return self.in_flight > 0

    def idle_for(self, now: Optional[float] = None) -> float:
        """Seconds since the last recorded activity."""
        return (now if now is not None else time.time()) - self.last_activity


class SessionManager:
    """
    Owns at most one browser session and the console log buffer.

    Session creation is serialized with an asyncio.Lock so concurrent tool
    calls never launch two browsers. A console pump task drains the page's
    console messages into the log buffer while the session lives.
    """

    def __init__(
        self,
        driver_factory: DriverFactory,
        idle_timeout_seconds: int = 1800,
        log_capacity: int = 100,
        console_poll_interval: float = 1.0,
    ):
        self._driver_factory = driver_factory
        self._idle_timeout_seconds = idle_timeout_seconds
        self._console_poll_interval = console_poll_interval
        self._session: Optional[BrowserSession] = None
        self._pump_task: Optional[asyncio.Task] = None
        self._lock = asyncio.Lock()
        self.logs = LogBuffer(log_capacity)

    @property
    def idle_timeout_seconds(self) -> int:
        return self._idle_timeout_seconds

    @property
    def has_session(self) -> bool:
        """Whether a session object is held (liveness not checked)."""
        return self._session is not None

    async def ensure_session(self) -> BrowserSession:
        """
        Return the live session, launching a fresh browser if needed.

        A held session whose driver has disconnected is discarded first.

        Raises:
            SessionCreationError: If the browser cannot be launched
        """
        async with self._lock:
            if self._session is not None:
                if await self._session.page.is_connected():
                    return self._session
                logger.warning("Browser connection lost, replacing session")
                await self._discard()

            try:
                driver = await self._driver_factory.create()
            except SessionCreationError:
                raise
            except Exception as e:
                raise SessionCreationError(str(e)) from e

            now = time.time()
            self._session = BrowserSession(
                page=BrowserPage(driver),
                created_at=now,
                last_activity=now,
            )
            self._start_pump()
            logger.info("Browser session created")
            return self._session

    async def current(self) -> Optional[BrowserSession]:
        """The live session, or None. A disconnected session is discarded."""
        session = self._session
        if session is None:
            return None
        if await session.page.is_connected():
            return session
        async with self._lock:
            if self._session is session:
                logger.warning("Browser connection lost, dropping session")
                await self._discard()
        return None

    def touch(self) -> None:
        if self._session is not None:
            self._session.touch()

    @asynccontextmanager
    async def lease(self) -> AsyncIterator[BrowserSession]:
        """
        Hold the session for the duration of one tool action.

        Activity is stamped only when the action completes without error.
        """
        session = await self.ensure_session()
        session.in_flight += 1
        try:
            yield session
            session.touch()
        finally:
            session.in_flight -= 1

    async def close(self) -> bool:
        """
        Close the session and release its resources.

        Returns:
            True if a session was closed, False if there was none
        """
        async with self._lock:
            if self._session is None:
                return False
            await self._discard()
            logger.info("Browser session closed")
            return True

    async def evict_if_idle(self) -> bool:
        """
        Close the session when it has been idle past the timeout.

        A session with an action in flight is never evicted.

        Returns:
            True if the session was evicted
        """
        session = self._session
        if session is None or session.busy:
            return False
        idle = session.idle_for()
        if idle < self._idle_timeout_seconds:
            return False
        async with self._lock:
            # A tool call may have leased or replaced it while we waited
            if self._session is not session or session.busy:
                return False
            idle = session.idle_for()
            if idle < self._idle_timeout_seconds:
                return False
            logger.info(f"Browser session exceeded max idle time ({idle:.0f}s), closing")
            await self._discard()
        return True

    async def collect_console(self) -> int:
        """
        Move pending console messages from the page into the log buffer.

        Returns:
            Number of entries collected
        """
        session = self._session
        if session is None:
            return 0
        entries = await session.page.drain_console()
        # The session may have been closed while draining
        if entries and self._session is session:
            self.logs.extend(entries)
            return len(entries)
        return 0

    def _start_pump(self) -> None:
        if self._console_poll_interval and self._console_poll_interval > 0:
            self._pump_task = asyncio.create_task(self._pump_console())

    async def _pump_console(self) -> None:
        """Drain console messages until the session goes away."""
        while self._session is not None:
            try:
                await self.collect_console()
            except Exception as e:
                logger.debug(f"Console drain failed: {e}")
            await asyncio.sleep(self._console_poll_interval)

    async def _discard(self) -> None:
        """Quit the browser best-effort and reset state. Caller holds the lock."""
        session, self._session = self._session, None
        self.logs.clear()

        task, self._pump_task = self._pump_task, None
        if task is not None and task is not asyncio.current_task():
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass

        if session is not None:
            try:
                await session.page.close()
            except Exception as e:
                logger.warning(f"Error closing browser: {e}")


class CleanupScheduler:
    """
    Background task that periodically evicts an idle session.

    Started during server lifespan and cancelled on shutdown.
    """

    def __init__(
        self,
        session_manager: SessionManager,
        interval_seconds: float = 60,
    ):
        self._session_manager = session_manager
        self._interval = interval_seconds
        self._task: Optional[asyncio.Task] = None
        self._shutdown_event = asyncio.Event()

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def start(self) -> None:
        """Start the scheduler background task."""
        self._shutdown_event.clear()
        self._task = asyncio.create_task(self._tick_loop())
        logger.info(f"Cleanup scheduler started (interval: {self._interval}s)")

    async def stop(self) -> None:
        """Stop the scheduler gracefully."""
        if self._task:
            self._shutdown_event.set()
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None
            logger.info("Cleanup scheduler stopped")

    async def tick(self) -> bool:
        """Run one eviction check. Returns whether a session was evicted."""
        try:
            return await self._session_manager.evict_if_idle()
        except Exception as e:
            logger.error(f"Error during idle session cleanup: {e}")
            return False

    async def _tick_loop(self) -> None:
        """Main loop - runs until shutdown."""
        while not self._shutdown_event.is_set():
            try:
                # Wait for interval or shutdown signal
                await asyncio.wait_for(
                    self._shutdown_event.wait(), timeout=self._interval
                )
            except asyncio.TimeoutError:
                # Timeout means interval elapsed - time to check
                await self.tick()
