"""
Tutorials API — Startup Connector Tests
========================================

What we test:
    ✅ Delay schedule: 2000 * 2**retries, no jitter
    ✅ Always-failing store: 6 attempts, then exit code 1
    ✅ Fails twice then succeeds: 3 attempts, 2s + 4s of waiting
    ✅ Immediate success: 1 attempt, no wait
    ✅ One log line per attempt (WARNING / INFO / ERROR)
    ❌ Real database connections (see test_database.py)
"""

import asyncio
import logging
import time

import pytest

from app.connector import (
    BASE_DELAY_MS,
    MAX_RETRIES,
    backoff_delay_ms,
    connect_or_exit,
    connect_with_retry,
)
from app.exceptions import StoreUnavailableError


def _delays(sleep_mock):
    return [c.args[0] for c in sleep_mock.await_args_list]


class TestBackoffDelay:
    """The delay schedule is exact: no jitter, no cap."""

    def test_constants(self):
        assert MAX_RETRIES == 5
        assert BASE_DELAY_MS == 2000

    @pytest.mark.parametrize(
        "retries,expected",
        [(0, 2000), (1, 4000), (2, 8000), (3, 16000), (4, 32000)],
    )
    def test_documented_schedule(self, retries, expected):
        assert backoff_delay_ms(retries) == expected

    def test_doubles_up_to_max_retries(self):
        for retries in range(MAX_RETRIES + 1):
            assert backoff_delay_ms(retries) == 2000 * 2 ** retries

    def test_custom_base(self):
        assert backoff_delay_ms(3, base_delay_ms=10) == 80

    def test_negative_retries_rejected(self):
        with pytest.raises(ValueError):
            backoff_delay_ms(-1)


class TestConnectWithRetry:

    @pytest.mark.asyncio
    async def test_immediate_success_makes_one_attempt(self, fake_database, no_sleep):
        result = await connect_with_retry(fake_database, sleep=no_sleep)

        assert result is fake_database
        assert fake_database.ping.await_count == 1
        no_sleep.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_fails_twice_then_succeeds(self, fake_database, no_sleep):
        fake_database.ping.side_effect = [
            ConnectionRefusedError("refused"),
            ConnectionRefusedError("refused"),
            None,
        ]

        result = await connect_with_retry(fake_database, sleep=no_sleep)

        assert result is fake_database
        assert fake_database.ping.await_count == 3
        assert _delays(no_sleep) == [2.0, 4.0]
        assert sum(_delays(no_sleep)) * 1000 >= 2000 + 4000

    @pytest.mark.asyncio
    async def test_always_failing_gives_up_after_six_attempts(self, fake_database, no_sleep):
        error = ConnectionRefusedError("refused")
        fake_database.ping.side_effect = error

        with pytest.raises(StoreUnavailableError) as exc_info:
            await connect_with_retry(fake_database, sleep=no_sleep)

        assert fake_database.ping.await_count == MAX_RETRIES + 1
        assert exc_info.value.attempts == 6
        assert exc_info.value.__cause__ is error
        assert _delays(no_sleep) == [2.0, 4.0, 8.0, 16.0, 32.0]

    @pytest.mark.asyncio
    async def test_resumes_from_given_retry_count(self, fake_database, no_sleep):
        fake_database.ping.side_effect = OSError("down")

        with pytest.raises(StoreUnavailableError) as exc_info:
            await connect_with_retry(fake_database, retries=3, sleep=no_sleep)

        assert exc_info.value.attempts == 3
        assert _delays(no_sleep) == [16.0, 32.0]

    @pytest.mark.asyncio
    async def test_zero_retries_means_single_attempt(self, fake_database, no_sleep):
        fake_database.ping.side_effect = OSError("down")

        with pytest.raises(StoreUnavailableError):
            await connect_with_retry(fake_database, max_retries=0, sleep=no_sleep)

        assert fake_database.ping.await_count == 1
        no_sleep.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_real_timer_suspends(self, fake_database):
        fake_database.ping.side_effect = [OSError("down"), None]

        start = time.monotonic()
        await connect_with_retry(fake_database, base_delay_ms=20, sleep=asyncio.sleep)

        assert time.monotonic() - start >= 0.015
        assert fake_database.ping.await_count == 2


class TestConnectorLogging:
    """One log line per attempt."""

    @pytest.mark.asyncio
    async def test_success_after_failures(self, fake_database, no_sleep, caplog):
        caplog.set_level(logging.INFO, logger="app.connector")
        fake_database.ping.side_effect = [OSError("down"), OSError("down"), None]

        await connect_with_retry(fake_database, sleep=no_sleep)

        records = [r for r in caplog.records if r.name == "app.connector"]
        assert [r.levelno for r in records] == [logging.WARNING, logging.WARNING, logging.INFO]
        assert "attempt 1 failed" in records[0].getMessage()
        assert "Retrying in 2s" in records[0].getMessage()
        assert "Retrying in 4s" in records[1].getMessage()

    @pytest.mark.asyncio
    async def test_exhaustion(self, fake_database, no_sleep, caplog):
        caplog.set_level(logging.INFO, logger="app.connector")
        fake_database.ping.side_effect = OSError("down")

        with pytest.raises(StoreUnavailableError):
            await connect_with_retry(fake_database, sleep=no_sleep)

        records = [r for r in caplog.records if r.name == "app.connector"]
        assert [r.levelno for r in records] == [logging.WARNING] * 5 + [logging.ERROR]
        assert "after 5 retries" in records[-1].getMessage()


class TestConnectOrExit:

    @pytest.mark.asyncio
    async def test_exhaustion_exits_with_code_1(self, fake_database, no_sleep):
        fake_database.ping.side_effect = OSError("down")

        with pytest.raises(SystemExit) as exc_info:
            await connect_or_exit(fake_database, sleep=no_sleep)

        assert exc_info.value.code == 1
        assert fake_database.ping.await_count == 6

    @pytest.mark.asyncio
    async def test_success_returns_handle(self, fake_database, no_sleep):
        assert await connect_or_exit(fake_database, sleep=no_sleep) is fake_database
