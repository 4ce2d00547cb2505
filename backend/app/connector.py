"""
Tutorials API — Startup Connector
==================================

What:  Establishes the first database connection before the HTTP listener starts.
Why:   Containers usually come up together; the database may need a few seconds
       before it accepts connections. The server waits for it instead of crashing
       on the first refused connection, and gives up deterministically if it
       never comes.
How:   An explicit bounded loop (tenacity AsyncRetrying) around Database.ping(),
       with an awaited timer between attempts.
Who:   Called once by server.py at boot.

Backoff schedule (defaults):
    attempt 1 fails → wait 2s
    attempt 2 fails → wait 4s
    attempt 3 fails → wait 8s
    attempt 4 fails → wait 16s
    attempt 5 fails → wait 32s
    attempt 6 fails → give up (ERROR log, StoreUnavailableError / exit code 1)

    delay_ms(retries) = BASE_DELAY_MS * 2**retries. No jitter and no cap
    other than the retry count itself.

Log lines:
    One per attempt: WARNING for a failed attempt that will be retried,
    INFO on success, ERROR once retries are exhausted.

Single use:
    The connector runs once per process. Calling it again after a success
    is not supported.
"""

import asyncio
import logging
from typing import Awaitable, Callable

from tenacity import (
    AsyncRetrying,
    RetryCallState,
    RetryError,
    retry_if_exception_type,
    stop_after_attempt,
)

from app.database import Database
from app.exceptions import StoreUnavailableError

logger = logging.getLogger(__name__)

MAX_RETRIES = 5
BASE_DELAY_MS = 2000

SleepFunc = Callable[[float], Awaitable[None]]


def backoff_delay_ms(retries: int, base_delay_ms: int = BASE_DELAY_MS) -> int:
    """Milliseconds to wait after the failed attempt numbered `retries` (0-based)."""
    if retries < 0:
        raise ValueError("retries must be >= 0")
    return base_delay_ms * 2 ** retries


async def connect_with_retry(
    database: Database,
    *,
    retries: int = 0,
    max_retries: int = MAX_RETRIES,
    base_delay_ms: int = BASE_DELAY_MS,
    sleep: SleepFunc = asyncio.sleep,
) -> Database:
    """
    Ping the database until it answers or the retry budget runs out.

    Args:
        database:      Handle to connect; returned unchanged on success.
        retries:       Retries already spent (0 at boot).
        max_retries:   Retries allowed after the first attempt.
        base_delay_ms: Delay after the first failure; doubles every retry.
        sleep:         Awaitable timer taking seconds (asyncio.sleep in production).

    Returns:
        The same Database handle, now known to be reachable.

    Raises:
        StoreUnavailableError: every attempt failed. The last driver error is
        chained as __cause__.
    """

    def wait_for(retry_state: RetryCallState) -> float:
        # attempt_number is 1-based; the delay exponent is the retry count so far
        spent = retries + retry_state.attempt_number - 1
        return backoff_delay_ms(spent, base_delay_ms) / 1000

    def log_failed_attempt(retry_state: RetryCallState) -> None:
        exc = retry_state.outcome.exception() if retry_state.outcome else None
        logger.warning(
            "Database connection attempt %d failed. Retrying in %gs... %s",
            retries + retry_state.attempt_number,
            retry_state.next_action.sleep if retry_state.next_action else 0,
            exc,
        )

    retrying = AsyncRetrying(
        retry=retry_if_exception_type(Exception),
        stop=stop_after_attempt(max(1, max_retries - retries + 1)),
        wait=wait_for,
        before_sleep=log_failed_attempt,
        sleep=sleep,
        reraise=False,
    )

    try:
        async for attempt in retrying:
            with attempt:
                await database.ping()
    except RetryError as e:
        attempts = e.last_attempt.attempt_number
        logger.error(
            "Failed to connect to %s after %d retries. Exiting.",
            database.safe_url,
            max_retries,
        )
        raise StoreUnavailableError(
            message=f"Could not connect to the database after {attempts} attempts",
            attempts=attempts,
            context={"url": database.safe_url},
        ) from e.last_attempt.exception()

    logger.info("Connected to the database at %s", database.safe_url)
    return database


async def connect_or_exit(database: Database, **kwargs) -> Database:
    """
    connect_with_retry() for a supervising entry point.

    Exhaustion terminates the process with exit code 1 so that a supervisor
    (docker, systemd, k8s) sees an infrastructure failure.
    """
    try:
        return await connect_with_retry(database, **kwargs)
    except StoreUnavailableError:
        raise SystemExit(1)
