"""
Pipeline - Rate Limit Retry

Retries a remote call when Notion answers with a rate-limit error.
"""

import asyncio
import logging
import re
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional, TypeVar

from notion_export.pipeline.client import NotionAPIError


logger = logging.getLogger(__name__)

T = TypeVar("T")

RATE_LIMITED = "rate_limited"

_LEADING_INTEGER = re.compile(r"^\s*(\d+)")


@dataclass(frozen=True)
class RetryOptions:
    """Retry budget for a single remote call."""
    max_retries: int = 3
    default_retry_delay: float = 1.0


def is_rate_limit_error(error: BaseException) -> bool:
    return isinstance(error, NotionAPIError) and error.code == RATE_LIMITED


def get_retry_after_seconds(error: BaseException) -> Optional[int]:
    """
    Read the Retry-After hint from a rate-limit error.

    Header lookup is case-insensitive and works for plain mappings as well as
    httpx.Headers. The leading integer of the value is taken as seconds
    ("2.5" and "5s" both count), and only positive values are accepted.

    Returns:
        Seconds to wait, or None when the hint is missing or unusable
    """
    if not isinstance(error, NotionAPIError) or not error.headers:
        return None

    retry_after = None
    for name, value in error.headers.items():
        if name.lower() == "retry-after":
            retry_after = value
            break

    if retry_after is None:
        return None

    match = _LEADING_INTEGER.match(str(retry_after))
    if not match:
        return None

    seconds = int(match.group(1))
    return seconds if seconds > 0 else None


async def retry_on_rate_limit(
    fn: Callable[[], Awaitable[T]],
    options: Optional[RetryOptions] = None,
) -> T:
    """
    Await `fn()`, retrying sequentially while it fails with a rate-limit error.

    Args:
        fn: Zero-argument coroutine factory, called once per attempt
        options: Retry budget (default: 3 retries, 1s default delay)

    Returns:
        Whatever `fn()` returns on the first successful attempt

    Raises:
        The first non-rate-limit error, or the last rate-limit error once
        `max_retries` retries have been spent.
    """
    options = options or RetryOptions()

    attempt = 0
    while True:
        try:
            return await fn()
        except Exception as e:
            if not is_rate_limit_error(e) or attempt >= options.max_retries:
                raise

            retry_after = get_retry_after_seconds(e)
            wait_seconds = retry_after if retry_after is not None else options.default_retry_delay
            attempt += 1
            logger.warning(
                f"Rate limited, retrying in {wait_seconds}s "
                f"(retry {attempt}/{options.max_retries})"
            )
            await asyncio.sleep(wait_seconds)
