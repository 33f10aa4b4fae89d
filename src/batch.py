"""Order-preserving fan-out over coroutines."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass
from typing import Generic, TypeVar

from src.errors import ExtractionError

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class BatchOutcome(Generic[T]):
    """Result of one batch item: exactly one of ``value`` / ``error`` is set."""

    url: str
    value: T | None = None
    error: ExtractionError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


async def gather_strict(
    urls: Sequence[str],
    worker: Callable[[str], Awaitable[T]],
) -> list[T]:
    """Run *worker* for every URL concurrently and return results in input order.

    The first failure propagates unchanged. Completed results are discarded
    and still-running siblings are cancelled.
    """
    tasks = [asyncio.ensure_future(worker(url)) for url in urls]
    try:
        return list(await asyncio.gather(*tasks))
    except BaseException:
        pending = [t for t in tasks if not t.done()]
        for task in pending:
            task.cancel()
        if pending:
            logger.debug("batch aborted", extra={"cancelled": len(pending), "total": len(tasks)})
            await asyncio.gather(*pending, return_exceptions=True)
        raise


async def gather_settled(
    urls: Sequence[str],
    worker: Callable[[str], Awaitable[T]],
) -> list[BatchOutcome[T]]:
    """Run *worker* for every URL concurrently and report each outcome.

    Only pipeline failures (``ExtractionError``) are captured per item;
    anything else propagates once all items have finished.
    """
    results = await asyncio.gather(
        *(worker(url) for url in urls), return_exceptions=True
    )

    outcomes: list[BatchOutcome[T]] = []
    for url, result in zip(urls, results):
        if isinstance(result, ExtractionError):
            outcomes.append(BatchOutcome(url=url, error=result))
        elif isinstance(result, BaseException):
            raise result
        else:
            outcomes.append(BatchOutcome(url=url, value=result))

    failed = sum(1 for o in outcomes if not o.ok)
    logger.debug("batch settled", extra={"total": len(outcomes), "failed": failed})
    return outcomes
