"""
Transaction id generation.

A transaction id correlates a query with its response or error on an
unordered datagram transport. The querying node picks it and the remote
node echoes it back unchanged.

Ids are drawn byte by byte from 1..255. Each generator is seeded once from
OS entropy when it is created and is never reseeded, so rapid successive
calls stay independent.
"""

from __future__ import annotations

import random
import threading
from threading import Lock

from .config import TRANSACTION_ID_LENGTH, TRANSACTION_ID_MAX_BYTE, TRANSACTION_ID_MIN_BYTE


class TransactionIdGenerator:
    """
    Source of short random transaction ids.

    Safe to share between threads. Pass a seeded `random.Random` to get a
    reproducible sequence.
    """

    def __init__(self, rng: random.Random | None = None, length: int = TRANSACTION_ID_LENGTH):
        """
        Create a generator.

        Args:
            rng: Random source to draw from. Defaults to one seeded from OS entropy.
            length: Number of bytes per transaction id.
        """
        if length < 1:
            raise ValueError(f"Transaction id length must be positive, got {length}")
        self._rng = rng if rng is not None else random.Random()
        self._length = length
        self._lock = Lock()

    @property
    def length(self) -> int:
        """Number of bytes per transaction id."""
        return self._length

    def generate(self) -> bytes:
        """Draw a transaction id with every byte in 1..255."""
        with self._lock:
            return bytes(
                self._rng.randint(TRANSACTION_ID_MIN_BYTE, TRANSACTION_ID_MAX_BYTE)
                for _ in range(self._length)
            )


_local = threading.local()


def _thread_generator(length: int) -> TransactionIdGenerator:
    """Return the calling thread's generator for `length`, creating it on first use."""
    generators: dict[int, TransactionIdGenerator] | None = getattr(_local, "generators", None)
    if generators is None:
        generators = {}
        _local.generators = generators
    generator = generators.get(length)
    if generator is None:
        generator = TransactionIdGenerator(length=length)
        generators[length] = generator
    return generator


def generate_transaction_id(length: int = TRANSACTION_ID_LENGTH) -> bytes:
    """Generate a transaction id from the calling thread's generator."""
    return _thread_generator(length).generate()
