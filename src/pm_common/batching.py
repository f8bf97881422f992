"""Rate-limit friendly fan-out: fixed-size batches, sequential between batches.

Each unit of work gets its own timeout. A unit that times out or raises is
reported as failed and never aborts its batch. A caller-supplied deadline or
cancel event stops the run early; results collected so far are kept and the
outcome is marked partial. Units cut short by the deadline count as skipped,
not failed.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Generic, TypeVar

from src.pm_common.errors import AppError

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")

# Loop timers may fire up to one clock tick early
_DEADLINE_SLACK_S = 0.005


class UnitStatus(str, Enum):
    OK = "ok"
    FAILED = "failed"     # raised, or timed out on its own budget
    EXPIRED = "expired"   # stopped by the run deadline


@dataclass
class BatchOutcome(Generic[T, R]):
    """Results of a batched run; `partial` is True when stopped early."""

    succeeded: list[tuple[T, R]] = field(default_factory=list)
    failed: list[T] = field(default_factory=list)
    skipped: list[T] = field(default_factory=list)
    partial: bool = False


async def gather_all(*aws: Awaitable[Any]) -> list[Any]:
    """asyncio.gather that cancels and awaits the siblings when one raises.

    The first exception propagates unchanged, and no fetch outlives its caller.
    """
    tasks = [asyncio.ensure_future(aw) for aw in aws]
    try:
        return await asyncio.gather(*tasks)
    except BaseException:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise


async def run_in_batches(
    items: Sequence[T],
    worker: Callable[[T], Awaitable[R]],
    batch_size: int,
    unit_timeout: float,
    deadline: float | None = None,
    cancel_event: asyncio.Event | None = None,
) -> BatchOutcome[T, R]:
    """Run `worker` over `items` in sequential batches of concurrent units.

    `deadline` is an absolute event-loop time (loop.time()). Each unit's timeout
    is clipped to the time remaining before it.
    """
    if batch_size < 1:
        raise ValueError(f"batch_size must be >= 1, got {batch_size}")

    loop = asyncio.get_running_loop()
    outcome: BatchOutcome[T, R] = BatchOutcome()

    for start in range(0, len(items), batch_size):
        batch = list(items[start:start + batch_size])

        if _stopped(loop, deadline, cancel_event):
            outcome.partial = True
            outcome.skipped.extend(items[start:])
            break

        timeout = unit_timeout
        if deadline is not None:
            timeout = min(timeout, max(deadline - loop.time(), 0.0))

        tasks = [
            asyncio.ensure_future(_guarded(worker, item, timeout, unit_timeout, deadline))
            for item in batch
        ]
        gathered = asyncio.gather(*tasks)

        if cancel_event is None:
            results = await gathered
        else:
            waiter = asyncio.ensure_future(cancel_event.wait())
            done, _ = await asyncio.wait(
                {gathered, waiter}, return_when=asyncio.FIRST_COMPLETED
            )
            if gathered not in done:
                # Cancelled mid-batch: keep the units that already finished
                gathered.cancel()
                await asyncio.gather(*tasks, return_exceptions=True)
                for item, task in zip(batch, tasks):
                    if task.cancelled() or task.exception() is not None:
                        outcome.skipped.append(item)
                        continue
                    status, value = task.result()
                    _record(outcome, item, status, value)
                outcome.partial = True
                outcome.skipped.extend(items[start + batch_size:])
                logger.info(
                    "Batch run cancelled: %d done, %d skipped",
                    len(outcome.succeeded), len(outcome.skipped),
                )
                break
            waiter.cancel()
            results = gathered.result()

        for item, (status, value) in zip(batch, results):
            _record(outcome, item, status, value)

        if outcome.skipped:
            outcome.partial = True
        if _past(loop, deadline):
            outcome.partial = True
            outcome.skipped.extend(items[start + batch_size:])
            logger.info(
                "Batch run hit its deadline: %d done, %d failed, %d skipped",
                len(outcome.succeeded), len(outcome.failed), len(outcome.skipped),
            )
            break

    return outcome


def _record(
    outcome: BatchOutcome[T, R], item: T, status: UnitStatus, value: R | None
) -> None:
    # Appended only after the unit completed: no concurrent writers
    if status == UnitStatus.OK:
        outcome.succeeded.append((item, value))  # type: ignore[arg-type]
    elif status == UnitStatus.EXPIRED:
        outcome.skipped.append(item)
    else:
        outcome.failed.append(item)


def _stopped(
    loop: asyncio.AbstractEventLoop,
    deadline: float | None,
    cancel_event: asyncio.Event | None,
) -> bool:
    if cancel_event is not None and cancel_event.is_set():
        return True
    return _past(loop, deadline)


def _past(loop: asyncio.AbstractEventLoop, deadline: float | None) -> bool:
    return deadline is not None and loop.time() + _DEADLINE_SLACK_S >= deadline


async def _guarded(
    worker: Callable[[T], Awaitable[R]],
    item: T,
    timeout: float,
    unit_timeout: float,
    deadline: float | None,
) -> tuple[UnitStatus, R | None]:
    if timeout <= 0:
        return UnitStatus.EXPIRED, None
    try:
        return UnitStatus.OK, await asyncio.wait_for(worker(item), timeout=timeout)
    except asyncio.TimeoutError:
        if _past(asyncio.get_running_loop(), deadline):
            logger.info(
                "Deadline reached after %.2fs (unit budget %.2fs): %s",
                timeout, unit_timeout, item,
            )
            return UnitStatus.EXPIRED, None
        logger.warning(
            "Unit of work timed out (waited %.2fs, unit budget %.2fs): %s",
            timeout, unit_timeout, item,
        )
    except AppError as exc:
        logger.warning("Unit of work failed for %s: %s", item, exc.message)
    except Exception:
        logger.exception("Unexpected failure in unit of work for %s", item)
    return UnitStatus.FAILED, None
