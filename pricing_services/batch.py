"""
Module: pricing_services.batch
Responsibility:
    Price many lines concurrently.  One task per line on a thread pool;
    results come back in input order.

Invariants enforced:
    - Lines are independent: a failure in one line becomes that line's
      PriceQuoteFailure and never affects another.
    - Output order equals input order regardless of completion order.
"""

from __future__ import annotations

import time
from concurrent.futures import ThreadPoolExecutor
from contextvars import copy_context
from typing import Iterable
from uuid import uuid4

from pricing_kernel.domain.quote import PriceQuoteRequest, PriceQuoteResult
from pricing_kernel.logging_config import LogContext, get_logger
from pricing_services.quote_service import PriceQuoteService

logger = get_logger("services.batch")


def quote_lines(
    service: PriceQuoteService,
    requests: Iterable[PriceQuoteRequest],
    max_workers: int | None = None,
    batch_id: str | None = None,
) -> list[PriceQuoteResult]:
    """
    Price every request and return results in the same order.

    Args:
        service: The quote service to use for each line.
        requests: Lines to price.
        max_workers: Thread pool size; defaults to the service config's
            batch_max_workers.
        batch_id: Bound into the log context of every line; generated
            when omitted.
    """
    lines = list(requests)
    if not lines:
        return []

    workers = min(max_workers or service.config.batch_max_workers, len(lines))
    batch_id = batch_id or str(uuid4())
    t0 = time.monotonic()

    with LogContext.bind(batch_id=batch_id):
        logger.info("batch_quote_started", extra={
            "line_count": len(lines),
            "max_workers": workers,
        })

        # One copied context per line so worker threads log with batch_id
        contexts = [copy_context() for _ in lines]
        with ThreadPoolExecutor(max_workers=workers) as pool:
            results = list(pool.map(
                lambda ctx, request: ctx.run(service.quote, request), contexts, lines
            ))

        failed = sum(1 for r in results if not r.ok)
        duration_ms = round((time.monotonic() - t0) * 1000, 2)
        logger.info("batch_quote_completed", extra={
            "line_count": len(lines),
            "failed_count": failed,
            "duration_ms": duration_ms,
        })
    return results
