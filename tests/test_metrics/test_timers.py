"""
Тесты таймера фаз.
"""

import time

from yinyang.metrics.timers import Timer


class TestTimer:
    """Тесты контекстного менеджера Timer."""

    def test_timer_basic(self):
        with Timer() as t:
            time.sleep(0.05)

        assert t.elapsed >= 0.05
        assert t.end > t.start
        assert abs(t.elapsed - (t.end - t.start)) < 1e-9

    def test_timer_reuse_accumulates_total(self):
        """Повторное использование: elapsed — последний замер, total — сумма."""
        timer = Timer()

        with timer:
            time.sleep(0.02)
        first = timer.elapsed

        with timer:
            time.sleep(0.03)
        second = timer.elapsed

        assert timer.count == 2
        assert timer.total == first + second
        assert second >= 0.03

    def test_timer_records_on_exception(self):
        timer = Timer()
        try:
            with timer:
                raise RuntimeError("boom")
        except RuntimeError:
            pass

        assert timer.count == 1
        assert timer.elapsed >= 0

    def test_timer_nested(self):
        with Timer() as outer:
            time.sleep(0.03)
            with Timer() as inner:
                time.sleep(0.02)

        assert outer.elapsed > inner.elapsed
        assert outer.elapsed >= 0.05
