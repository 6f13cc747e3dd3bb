"""Bounded-concurrency batch runner.

Items are processed in sequential chunks of at most max_concurrency; every
item's failure is recorded on its own result and never aborts the batch.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any, Callable, Generic, Iterable, Optional, TypeVar

T = TypeVar("T")
R = TypeVar("R")


@dataclass
class BatchItemResult(Generic[T, R]):
  """Outcome of one item of a batch"""

  item: T
  ok: bool
  result: Optional[R] = None
  error: str = ""

  def to_dict(self, render: Callable[[Any], Any] | None = None) -> dict:
    data = {"ok": self.ok}
    if self.ok:
      data["result"] = render(self.result) if render else self.result
    else:
      data["error"] = self.error
    return data


def _chunks(items: list, size: int) -> Iterable[list]:
  for i in range(0, len(items), size):
    yield items[i:i + size]


def process_batch(
    items: Iterable[T],
    worker: Callable[[T], R],
    max_concurrency: int = 3,
    on_item_done: Callable[[int, BatchItemResult], None] | None = None,
) -> list[BatchItemResult]:
  """Run worker over items, at most max_concurrency at a time.

  Args:
    items: Inputs to process.
    worker: Called once per item; its exception is captured per item.
    max_concurrency: Size of each chunk (values below 1 are treated as 1).
    on_item_done: Optional callback(index, result) after each item settles.
  Returns:
    One BatchItemResult per input, in input order.
  """
  items = list(items)
  size = max(1, int(max_concurrency))
  results: list[BatchItemResult] = []

  for chunk_no, chunk in enumerate(_chunks(items, size)):
    offset = chunk_no * size
    with ThreadPoolExecutor(max_workers=len(chunk)) as pool:
      futures = [pool.submit(worker, item) for item in chunk]
      for i, (item, future) in enumerate(zip(chunk, futures)):
        try:
          outcome = BatchItemResult(item=item, ok=True, result=future.result())
        except Exception as ex:
          logging.error("Batch item %d failed: %s", offset + i, ex)
          outcome = BatchItemResult(item=item, ok=False, error=str(ex) or type(ex).__name__)
        results.append(outcome)
        if on_item_done:
          on_item_done(offset + i, outcome)

  failed = sum(1 for r in results if not r.ok)
  logging.info("Batch finished: %d items, %d failed", len(results), failed)
  return results
