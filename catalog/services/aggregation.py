"""
Concurrent Lookups

Detail, update and delete pages need an entity plus its related records.
The reads are independent, so gather_named() runs them at the same time and
joins the results:

    results = await gather_named(
        {
            "author": lambda: store.find_by_id(Author, author_id),
            "author_books": lambda: store.find(Book, where=[Book.author_id == author_id]),
        },
        timeout=store.read_timeout,
    )
    results["author"], results["author_books"]

Join Semantics
==============
- Success: every lookup finished; the mapping has one entry per name.
- Failure: the first exception observed is raised and no mapping is returned.
  When several lookups have already failed, the one declared first wins.
  Lookups still running are cancelled and their results discarded.
- Each lookup is bounded by `timeout`; running out raises StoreTimeout.

Blocking callables (the EntityStore API) run in worker threads; coroutine
functions are awaited on the event loop. A worker thread can't be
interrupted, so a timed-out or cancelled store read finishes in the
background and its result is dropped.
"""

import asyncio
import inspect
import logging
from collections.abc import Awaitable, Callable, Mapping
from typing import Any

from catalog.exceptions import StoreTimeout

logger = logging.getLogger(__name__)

Lookup = Callable[[], Any] | Callable[[], Awaitable[Any]]


async def _run(name: str, lookup: Lookup, timeout: float | None) -> Any:
    if inspect.iscoroutinefunction(lookup):
        pending = lookup()
    else:
        pending = asyncio.to_thread(lookup)
    try:
        return await asyncio.wait_for(pending, timeout)
    except TimeoutError as exc:
        raise StoreTimeout(name, timeout) from exc


async def gather_named(
    lookups: Mapping[str, Lookup],
    timeout: float | None = None,
) -> dict[str, Any]:
    """
    Run named lookups concurrently and join their results.

    Args:
        lookups: Result name -> zero-argument callable (sync or async)
        timeout: Seconds each lookup may take (None: unbounded)

    Returns:
        Result name -> lookup result, for every name

    Raises:
        Whatever the first failing lookup raised; StoreTimeout on timeout
    """
    if not lookups:
        return {}

    tasks = {
        name: asyncio.create_task(_run(name, lookup, timeout), name=f"lookup:{name}")
        for name, lookup in lookups.items()
    }

    try:
        await asyncio.wait(tasks.values(), return_when=asyncio.FIRST_EXCEPTION)
    except asyncio.CancelledError:
        for task in tasks.values():
            task.cancel()
        raise

    # exception() is read for every finished task so none is reported as
    # "never retrieved" by the event loop.
    failures = [
        (name, task.exception())
        for name, task in tasks.items()
        if task.done() and not task.cancelled() and task.exception() is not None
    ]
    if failures:
        for task in tasks.values():
            task.cancel()
        name, error = failures[0]
        logger.debug(f"Lookup '{name}' failed: {error!r}")
        raise error

    return {name: task.result() for name, task in tasks.items()}
