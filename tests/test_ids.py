"""Tests for record id generation."""

import itertools

from src.ledger import MonotonicIdGenerator


class TestMonotonicIdGenerator:

    def test_ids_follow_the_clock(self):
        ticks = iter([100, 250, 900])
        generate = MonotonicIdGenerator(clock_ns=lambda: next(ticks))

        assert [generate() for _ in range(3)] == ["100", "250", "900"]

    def test_stalled_clock_still_increases(self):
        generate = MonotonicIdGenerator(clock_ns=lambda: 42)

        assert [generate() for _ in range(3)] == ["42", "43", "44"]

    def test_clock_stepping_back(self):
        ticks = itertools.chain([1000, 10], itertools.repeat(2000))
        generate = MonotonicIdGenerator(clock_ns=lambda: next(ticks))

        assert [generate() for _ in range(3)] == ["1000", "1001", "2000"]
