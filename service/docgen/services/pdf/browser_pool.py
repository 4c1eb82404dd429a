# Project Genie Document Service
# Copyright (C) 2025 Project Genie
#
# Licensed under AGPL-3.0. See LICENSE file for details.
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU Affero General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.

"""
Headless Chromium pool.

Launching Chromium costs seconds, so browsers are kept alive between renders
and shared. Each render gets its own browser context and page (a
``PageLease``) so renders never see each other's state. Browsers that sit
unused for ``idle_timeout_seconds`` are closed; a browser that disconnects is
dropped and relaunched on the next request.

The pool does not install process exit hooks. Whoever owns the pool (the
FastAPI lifespan, the CLI) calls ``force_cleanup()`` on shutdown.
"""
import asyncio
import logging
import time
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import Any, AsyncIterator, Awaitable, Callable, Dict, List, Optional

from docgen.services.pdf.exceptions import BrowserDisconnectedError, BrowserLaunchError

logger = logging.getLogger(__name__)

MEMORY_PER_BROWSER_MB = 200

DEFAULT_LAUNCH_ARGS = [
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-dev-shm-usage",
    "--disable-accelerated-2d-canvas",
    "--no-first-run",
    "--no-zygote",
    "--disable-gpu",
]

Launcher = Callable[[], Awaitable[Any]]


@dataclass
class PoolConfig:
    max_browsers: int = 1
    max_pages_per_browser: int = 5
    idle_timeout_seconds: float = 60.0
    headless: bool = True
    launch_args: List[str] = field(default_factory=lambda: list(DEFAULT_LAUNCH_ARGS))

    @classmethod
    def from_settings(cls, settings) -> "PoolConfig":
        return cls(
            max_browsers=settings.browser_max_browsers,
            max_pages_per_browser=settings.browser_max_pages,
            idle_timeout_seconds=settings.browser_idle_timeout_seconds,
            launch_args=settings.launch_args,
        )


@dataclass
class _BrowserEntry:
    browser: Any
    launched_at: float = field(default_factory=time.monotonic)
    active_pages: int = 0
    disconnected: bool = False

    @property
    def connected(self) -> bool:
        if self.disconnected:
            return False
        is_connected = getattr(self.browser, "is_connected", None)
        return bool(is_connected()) if callable(is_connected) else True


class PageLease:
    """A page with its own browser context. ``close()`` is safe to call twice."""

    def __init__(self, pool: "BrowserPool", entry: _BrowserEntry, context: Any, page: Any):
        self._pool = pool
        self._entry = entry
        self.context = context
        self.page = page
        self.closed = False

    @property
    def browser(self) -> Any:
        return self._entry.browser

    async def close(self) -> None:
        if self.closed:
            return
        self.closed = True
        try:
            await self.page.close()
        except Exception as e:
            logger.debug(f"[browser_pool] Page close failed: {e}")
        try:
            await self.context.close()
        except Exception as e:
            logger.debug(f"[browser_pool] Context close failed: {e}")
        await self._pool.release(self)


class BrowserPool:
    def __init__(self, config: Optional[PoolConfig] = None, launcher: Optional[Launcher] = None):
        self.config = config or PoolConfig()
        self._launcher = launcher
        self._playwright = None
        self._browsers: List[_BrowserEntry] = []
        self._lock = asyncio.Lock()
        self._slots = asyncio.Semaphore(self.config.max_browsers * self.config.max_pages_per_browser)
        self._idle_task: Optional[asyncio.Task] = None
        self._pages_created = 0
        self._launches = 0
        # Leases holding a slot but not yet an entry; idle cleanup waits for them
        self._pending_leases = 0

    # Browser lifecycle ----------------------------------------------------

    async def _launch(self) -> Any:
        if self._launcher is not None:
            return await self._launcher()

        from playwright.async_api import async_playwright

        if self._playwright is None:
            self._playwright = await async_playwright().start()
        return await self._playwright.chromium.launch(
            headless=self.config.headless,
            args=self.config.launch_args,
        )

    async def _start_browser(self) -> _BrowserEntry:
        logger.info(f"[browser_pool] Launching browser ({len(self._browsers) + 1}/{self.config.max_browsers})")
        try:
            browser = await self._launch()
        except Exception as e:
            logger.error(f"[browser_pool] Browser launch failed: {e}", exc_info=True)
            raise BrowserLaunchError(f"Failed to launch browser: {e}", cause=e) from e

        entry = _BrowserEntry(browser=browser)
        on = getattr(browser, "on", None)
        if callable(on):
            on("disconnected", lambda *_: self._on_disconnected(entry))
        self._browsers.append(entry)
        self._launches += 1
        return entry

    def _on_disconnected(self, entry: _BrowserEntry) -> None:
        entry.disconnected = True
        if entry in self._browsers:
            self._browsers.remove(entry)
            logger.warning("[browser_pool] Browser disconnected; it will be relaunched on next use")

    def _prune_disconnected(self) -> None:
        for entry in [e for e in self._browsers if not e.connected]:
            self._browsers.remove(entry)
            logger.warning("[browser_pool] Dropping disconnected browser")

    async def _acquire_entry(self, reserve: bool = False) -> _BrowserEntry:
        """Pick (or launch) a browser; with ``reserve`` the page is counted before the lock is released."""
        async with self._lock:
            self._prune_disconnected()
            available = [e for e in self._browsers if e.active_pages < self.config.max_pages_per_browser]
            if available:
                entry = min(available, key=lambda e: e.active_pages)
            elif len(self._browsers) < self.config.max_browsers:
                entry = await self._start_browser()
            else:
                # Only reachable if the slot semaphore was bypassed
                entry = min(self._browsers, key=lambda e: e.active_pages)
            if reserve:
                entry.active_pages += 1
            return entry

    async def get_browser(self) -> Any:
        """A connected browser, launching one if none is running."""
        entry = await self._acquire_entry()
        return entry.browser

    # Pages ----------------------------------------------------------------

    async def create_page(self) -> PageLease:
        """Lease a fresh page; waits while every browser is at its page limit.

        Raises:
            BrowserLaunchError: If a browser had to be started and could not be
            BrowserDisconnectedError: If the browser dropped while creating the page
        """
        await self._slots.acquire()
        self._cancel_idle_timer()
        self._pending_leases += 1
        try:
            entry = await self._acquire_entry(reserve=True)
        except BaseException:
            self._slots.release()
            raise
        finally:
            self._pending_leases -= 1

        try:
            context = await entry.browser.new_context()
            page = await context.new_page()
        except Exception as e:
            entry.active_pages -= 1
            self._slots.release()
            if not entry.connected:
                raise BrowserDisconnectedError(f"Browser disconnected while opening a page: {e}", cause=e) from e
            raise

        self._pages_created += 1
        return PageLease(self, entry, context, page)

    async def release(self, lease: PageLease) -> None:
        """Return a leased page's slot; starts the idle timer once nothing is in use."""
        entry = lease._entry
        entry.active_pages = max(0, entry.active_pages - 1)
        self._slots.release()
        if self.active_pages == 0 and self._browsers:
            self._start_idle_timer()

    @asynccontextmanager
    async def lease(self) -> AsyncIterator[Any]:
        """``async with pool.lease() as page``; the page is closed on exit."""
        page_lease = await self.create_page()
        try:
            yield page_lease.page
        finally:
            await page_lease.close()

    # Idle cleanup ---------------------------------------------------------

    def _start_idle_timer(self) -> None:
        self._cancel_idle_timer()
        self._idle_task = asyncio.create_task(self._close_when_idle())

    def _cancel_idle_timer(self) -> None:
        if self._idle_task is not None and not self._idle_task.done():
            self._idle_task.cancel()
        self._idle_task = None

    async def _close_when_idle(self) -> None:
        try:
            await asyncio.sleep(self.config.idle_timeout_seconds)
        except asyncio.CancelledError:
            return
        self._idle_task = None
        await self._close_idle_browsers()

    async def _close_idle_browsers(self) -> int:
        """Close browsers without pages; a lease waiting for the lock keeps them all."""
        async with self._lock:
            if self._pending_leases:
                return 0
            idle = [entry for entry in self._browsers if entry.active_pages == 0]
            self._browsers = [entry for entry in self._browsers if entry.active_pages > 0]
        if idle:
            logger.info(
                f"[browser_pool] Closing {len(idle)} idle browser(s) after {self.config.idle_timeout_seconds}s"
            )
        for entry in idle:
            await self._close_entry(entry)
        return len(idle)

    # Shutdown and stats ---------------------------------------------------

    async def _close_entry(self, entry: _BrowserEntry) -> None:
        try:
            await entry.browser.close()
        except Exception as e:
            logger.warning(f"[browser_pool] Error closing browser: {e}")

    async def close_browser(self) -> None:
        """Close every pooled browser; the next lease launches a new one."""
        async with self._lock:
            entries, self._browsers = self._browsers, []
        for entry in entries:
            await self._close_entry(entry)

    async def force_cleanup(self) -> None:
        """Close browsers and stop Playwright. Never raises."""
        self._cancel_idle_timer()
        try:
            await self.close_browser()
        except Exception as e:
            logger.error(f"[browser_pool] Cleanup failed: {e}", exc_info=True)
        if self._playwright is not None:
            try:
                await self._playwright.stop()
            except Exception as e:
                logger.warning(f"[browser_pool] Error stopping Playwright: {e}")
            self._playwright = None
        logger.info("[browser_pool] Cleanup complete")

    @property
    def active_pages(self) -> int:
        return sum(entry.active_pages for entry in self._browsers)

    def get_stats(self) -> Dict[str, Any]:
        browsers = len(self._browsers)
        return {
            "browsers": browsers,
            "active_pages": self.active_pages,
            "pages_created": self._pages_created,
            "launches": self._launches,
            "memory_estimate_mb": browsers * MEMORY_PER_BROWSER_MB,
            "connected": any(entry.connected for entry in self._browsers),
        }
