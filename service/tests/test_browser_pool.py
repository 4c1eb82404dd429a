"""Browser pool lifecycle against the fake launcher."""

import asyncio

import pytest

from docgen.services.pdf.browser_pool import MEMORY_PER_BROWSER_MB, BrowserPool, PoolConfig
from docgen.services.pdf.exceptions import BrowserLaunchError


class TestLeasing:

    async def test_first_lease_launches_browser(self, pool, launcher):
        async with pool.lease() as page:
            assert page is launcher.browsers[0].pages[0]
            assert pool.active_pages == 1
        assert pool.active_pages == 0
        assert len(launcher.browsers) == 1

    async def test_browser_reused_between_leases(self, pool, launcher):
        for _ in range(3):
            async with pool.lease():
                pass
        assert len(launcher.browsers) == 1
        assert pool.get_stats()["pages_created"] == 3

    async def test_each_lease_gets_fresh_context(self, pool, launcher):
        first = await pool.create_page()
        second = await pool.create_page()
        assert first.context is not second.context
        assert first.page is not second.page
        await first.close()
        await second.close()
        assert first.page.closed and first.context.closed

    async def test_page_limit_blocks_until_release(self, launcher):
        pool = BrowserPool(PoolConfig(max_browsers=1, max_pages_per_browser=2), launcher=launcher)
        try:
            first = await pool.create_page()
            second = await pool.create_page()
            waiting = asyncio.create_task(pool.create_page())
            await asyncio.sleep(0.01)
            assert not waiting.done()

            await first.close()
            third = await asyncio.wait_for(waiting, timeout=1)
            assert pool.active_pages == 2
            assert len(launcher.browsers) == 1
            await second.close()
            await third.close()
        finally:
            await pool.force_cleanup()

    async def test_concurrent_leases_never_exceed_max_browsers(self, launcher):
        pool = BrowserPool(PoolConfig(max_browsers=2, max_pages_per_browser=1), launcher=launcher)

        async def render():
            async with pool.lease():
                await asyncio.sleep(0.01)

        try:
            await asyncio.gather(*(render() for _ in range(6)))
            assert len(launcher.browsers) <= 2
            assert pool.get_stats()["pages_created"] == 6
        finally:
            await pool.force_cleanup()

    async def test_close_is_idempotent(self, pool):
        lease = await pool.create_page()
        await lease.close()
        await lease.close()
        assert pool.active_pages == 0


class TestFailures:

    async def test_launch_failure(self, pool, launcher):
        launcher.fail = True
        with pytest.raises(BrowserLaunchError) as excinfo:
            await pool.create_page()
        assert "Executable doesn't exist" in str(excinfo.value)
        assert pool.active_pages == 0

    async def test_relaunch_after_disconnect(self, pool, launcher):
        async with pool.lease():
            pass
        launcher.browsers[0].disconnect()
        assert pool.get_stats()["browsers"] == 0

        async with pool.lease():
            pass
        assert len(launcher.browsers) == 2
        assert pool.get_stats()["launches"] == 2

    async def test_silently_dead_browser_is_pruned(self, pool, launcher):
        await pool.get_browser()
        launcher.browsers[0].connected = False
        browser = await pool.get_browser()
        assert browser is launcher.browsers[1]


class TestIdleCleanup:

    async def test_idle_browser_closed(self, launcher):
        pool = BrowserPool(PoolConfig(idle_timeout_seconds=0.01), launcher=launcher)
        async with pool.lease():
            pass
        await asyncio.sleep(0.1)
        assert pool.get_stats()["browsers"] == 0
        assert launcher.browsers[0].closed

    async def test_new_lease_cancels_idle_timer(self, launcher):
        pool = BrowserPool(PoolConfig(idle_timeout_seconds=0.05), launcher=launcher)
        try:
            async with pool.lease():
                pass
            lease = await pool.create_page()
            await asyncio.sleep(0.1)
            assert not launcher.browsers[0].closed
            await lease.close()
        finally:
            await pool.force_cleanup()

    async def test_idle_close_waits_for_lease_in_progress(self, launcher):
        pool = BrowserPool(PoolConfig(idle_timeout_seconds=0.01), launcher=launcher)
        try:
            async with pool.lease():
                pass
            async with pool._lock:
                # Idle timer fires and queues behind the lock
                await asyncio.sleep(0.05)
                waiting = asyncio.create_task(pool.create_page())
                await asyncio.sleep(0)
            lease = await asyncio.wait_for(waiting, timeout=1)

            assert not lease.browser.closed
            assert not launcher.browsers[0].closed
            assert pool.get_stats()["browsers"] == 1
            await lease.close()
        finally:
            await pool.force_cleanup()

    async def test_idle_close_keeps_busy_browsers(self, launcher):
        pool = BrowserPool(PoolConfig(max_browsers=2, max_pages_per_browser=1), launcher=launcher)
        try:
            first = await pool.create_page()
            second = await pool.create_page()
            await second.close()

            assert await pool._close_idle_browsers() == 1
            assert launcher.browsers[1].closed
            assert not first.browser.closed
            assert pool.get_stats()["browsers"] == 1
            await first.close()
        finally:
            await pool.force_cleanup()

    async def test_force_cleanup_closes_everything(self, pool, launcher):
        async with pool.lease():
            pass
        await pool.force_cleanup()
        await pool.force_cleanup()
        assert launcher.browsers[0].closed
        assert pool.get_stats()["browsers"] == 0


class TestStats:

    async def test_empty_pool(self, pool):
        assert pool.get_stats() == {
            "browsers": 0,
            "active_pages": 0,
            "pages_created": 0,
            "launches": 0,
            "memory_estimate_mb": 0,
            "connected": False,
        }

    async def test_memory_estimate(self, pool):
        lease = await pool.create_page()
        stats = pool.get_stats()
        assert stats["memory_estimate_mb"] == MEMORY_PER_BROWSER_MB
        assert stats["active_pages"] == 1
        assert stats["connected"] is True
        await lease.close()

    def test_config_from_settings(self, settings):
        config = PoolConfig.from_settings(settings)
        assert config.max_browsers == settings.browser_max_browsers
        assert "--no-sandbox" in config.launch_args
