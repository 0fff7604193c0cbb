"""
Shared pytest fixtures for KRPC encoder tests.

Ids follow the BEP 5 examples so that wire vectors can be compared verbatim.
"""

from __future__ import annotations

import random

import pytest

from krpc_protocol import Encoder, TransactionIdGenerator

QUERYING_NODE_ID = b"abcdefghij0123456789"
"""Node id used by the querying side in BEP 5 examples."""

RESPONDING_NODE_ID = b"mnopqrstuvwxyz123456"
"""Node id used by the responding side in BEP 5 examples."""

SEED = 1234
"""Seed for reproducible transaction ids."""


@pytest.fixture
def node_id() -> bytes:
    """Querying node id."""
    return QUERYING_NODE_ID


@pytest.fixture
def remote_id() -> bytes:
    """Responding node id, also used as target and info-hash."""
    return RESPONDING_NODE_ID


@pytest.fixture
def seeded_encoder() -> Encoder:
    """Encoder whose transaction ids follow `random.Random(SEED)`."""
    return Encoder(tid_generator=TransactionIdGenerator(rng=random.Random(SEED)))


@pytest.fixture
def seeded_tids() -> list[bytes]:
    """First transaction ids drawn by `seeded_encoder`, in order."""
    rng = random.Random(SEED)
    return [bytes(rng.randint(1, 255) for _ in range(2)) for _ in range(8)]
