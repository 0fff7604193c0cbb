"""Tests for transaction id generation."""

from __future__ import annotations

import random
import threading
from concurrent.futures import ThreadPoolExecutor

import pytest

from krpc_protocol.transaction import (
    TransactionIdGenerator,
    _thread_generator,
    generate_transaction_id,
)


class TestGenerateTransactionId:
    """Tests for the module-level generator."""

    def test_length(self) -> None:
        """Generated ids are exactly 2 bytes."""
        assert len(generate_transaction_id()) == 2

    def test_byte_range(self) -> None:
        """Every byte is in 1..255; zero is never drawn."""
        for _ in range(2000):
            tid = generate_transaction_id()
            assert all(1 <= b <= 255 for b in tid)

    def test_not_constant(self) -> None:
        """Successive ids are not all identical."""
        assert len({generate_transaction_id() for _ in range(200)}) > 1

    def test_per_thread_generators(self) -> None:
        """Each thread draws from its own generator."""
        seen: list[bytes] = []
        lock = threading.Lock()

        def draw() -> None:
            tids = [generate_transaction_id() for _ in range(100)]
            with lock:
                seen.extend(tids)

        threads = [threading.Thread(target=draw) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert len(seen) == 800
        assert all(len(tid) == 2 and 0 not in tid for tid in seen)


class TestTransactionIdGenerator:
    """Tests for explicit generator instances."""

    def test_injected_rng_is_deterministic(self) -> None:
        """Two generators with equally seeded sources agree."""
        first = TransactionIdGenerator(rng=random.Random(7))
        second = TransactionIdGenerator(rng=random.Random(7))
        assert [first.generate() for _ in range(10)] == [second.generate() for _ in range(10)]

    def test_draws_match_seeded_source(self) -> None:
        """Bytes are drawn in order with randint(1, 255)."""
        generator = TransactionIdGenerator(rng=random.Random(42))
        rng = random.Random(42)
        expected = bytes([rng.randint(1, 255), rng.randint(1, 255)])
        assert generator.generate() == expected

    def test_no_reseed_between_calls(self) -> None:
        """Consecutive ids continue one random stream."""
        generator = TransactionIdGenerator(rng=random.Random(3))
        rng = random.Random(3)
        stream = bytes(rng.randint(1, 255) for _ in range(20))
        assert b"".join(generator.generate() for _ in range(10)) == stream

    @pytest.mark.parametrize("length", [1, 2, 4, 8])
    def test_custom_length(self, length: int) -> None:
        """Generators honor a configured id length."""
        generator = TransactionIdGenerator(length=length)
        assert generator.length == length
        assert len(generator.generate()) == length

    @pytest.mark.parametrize("length", [0, -1])
    def test_invalid_length(self, length: int) -> None:
        """Non-positive lengths are rejected."""
        with pytest.raises(ValueError, match="must be positive"):
            TransactionIdGenerator(length=length)

    def test_shared_across_threads(self) -> None:
        """A shared generator hands out the same stream under concurrency."""
        shared = TransactionIdGenerator(rng=random.Random(99))
        with ThreadPoolExecutor(max_workers=8) as pool:
            tids = list(pool.map(lambda _: shared.generate(), range(400)))

        rng = random.Random(99)
        stream = [bytes(rng.randint(1, 255) for _ in range(2)) for _ in range(400)]
        assert sorted(tids) == sorted(stream)


class TestThreadGenerators:
    """Tests for the per-thread default generators."""

    def test_reused_within_thread(self) -> None:
        """A thread keeps drawing from the same generator."""
        assert _thread_generator(2) is _thread_generator(2)

    def test_one_generator_per_length(self) -> None:
        """Each id length gets its own generator."""
        assert _thread_generator(4).length == 4
        assert _thread_generator(4) is not _thread_generator(2)
        assert len(generate_transaction_id(4)) == 4

    def test_distinct_across_threads(self) -> None:
        """Another thread gets its own generator."""
        here = _thread_generator(2)
        with ThreadPoolExecutor(max_workers=1) as pool:
            there = pool.submit(_thread_generator, 2).result()
        assert there is not here
