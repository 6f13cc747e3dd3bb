"""Tests for batch_processor.py."""

import threading
import time

from batch_processor import BatchItemResult, process_batch


class TestProcessBatch:
    def test_results_in_input_order(self):
        def worker(n):
            time.sleep(0.01 * (5 - n))
            return n * 10

        results = process_batch(range(5), worker, max_concurrency=3)
        assert [r.item for r in results] == [0, 1, 2, 3, 4]
        assert [r.result for r in results] == [0, 10, 20, 30, 40]
        assert all(r.ok for r in results)

    def test_failures_are_isolated(self):
        def worker(n):
            if n == 2:
                raise ValueError("corrupt file")
            return n

        results = process_batch([1, 2, 3], worker)
        assert [r.ok for r in results] == [True, False, True]
        assert results[1].error == "corrupt file"
        assert results[2].result == 3

    def test_exception_without_message_uses_type(self):
        def worker(_):
            raise KeyError()

        assert process_batch(["a"], worker)[0].error == "KeyError"

    def test_concurrency_bound(self):
        lock = threading.Lock()
        active = {"now": 0, "peak": 0}

        def worker(_):
            with lock:
                active["now"] += 1
                active["peak"] = max(active["peak"], active["now"])
            time.sleep(0.02)
            with lock:
                active["now"] -= 1

        process_batch(range(7), worker, max_concurrency=2)
        assert active["peak"] <= 2

    def test_zero_concurrency_treated_as_one(self):
        assert len(process_batch([1, 2], lambda x: x, max_concurrency=0)) == 2

    def test_empty(self):
        assert process_batch([], lambda x: x) == []

    def test_on_item_done_gets_global_index(self):
        seen = []
        process_batch(["a", "b", "c", "d"], str.upper, max_concurrency=3,
                      on_item_done=lambda i, r: seen.append((i, r.result)))
        assert seen == [(0, "A"), (1, "B"), (2, "C"), (3, "D")]


class TestBatchItemResult:
    def test_ok_to_dict(self):
        assert BatchItemResult("a", True, result=3).to_dict() == {"ok": True, "result": 3}

    def test_render(self):
        data = BatchItemResult("a", True, result=3).to_dict(render=lambda r: r * 2)
        assert data["result"] == 6

    def test_error_to_dict(self):
        assert BatchItemResult("a", False, error="boom").to_dict() == {"ok": False, "error": "boom"}
