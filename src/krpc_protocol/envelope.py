"""
KRPC envelope assembly.

Wraps query arguments, response values, and error details in the KRPC
top-level dictionary and serializes it with bencoding.

Bencoding requires dictionary keys in ascending byte order. The tree is
canonicalized here before it reaches the codec, so the output does not
depend on the codec sorting keys itself.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import bencodepy

from krpc_protocol.types import EnvelopeError

from .messages import EnvelopeType

type WireValue = bytes | int | list[WireValue] | dict[bytes, WireValue]
"""Value tree accepted by the bencoding codec."""


def canonicalize(value: Any) -> WireValue:
    """
    Convert a message body into a canonical bencodable tree.

    - Text becomes UTF-8 bytes.
    - Mapping keys become bytes, inserted in ascending byte order.
    - Tuples become lists.

    Raises:
        EnvelopeError: If the tree holds a bool or any other unsupported type.
    """
    # bool is an int subclass: flags must already be folded to 0/1.
    if isinstance(value, bool):
        raise EnvelopeError(f"Boolean values cannot be bencoded: {value!r}")
    if isinstance(value, bytes):
        return value
    if isinstance(value, str):
        return value.encode("utf-8")
    if isinstance(value, int):
        return int(value)
    if isinstance(value, Mapping):
        items = [(_canonical_key(key), canonicalize(item)) for key, item in value.items()]
        items.sort(key=lambda pair: pair[0])
        return dict(items)
    if isinstance(value, (list, tuple)):
        return [canonicalize(item) for item in value]
    raise EnvelopeError(f"Cannot bencode type: {type(value).__name__}")


def _canonical_key(key: Any) -> bytes:
    """Dictionary keys are byte strings on the wire."""
    if isinstance(key, bytes):
        return key
    if isinstance(key, str):
        return key.encode("utf-8")
    raise EnvelopeError(f"Dictionary keys must be text or bytes, got {type(key).__name__}")


def serialize(envelope: Mapping[str, Any]) -> bytes:
    """Canonicalize and bencode a complete envelope."""
    return bencodepy.encode(canonicalize(envelope))


def build_query(command: str, tid: bytes, args: Mapping[str, Any]) -> bytes:
    """
    Bencode a query.

    Args:
        command: Query method name, e.g. "ping".
        tid: Transaction id.
        args: Query arguments (the `a` dictionary).

    Returns:
        Bencoded `{"a": args, "q": command, "t": tid, "y": "q"}`.
    """
    return serialize({"y": EnvelopeType.QUERY.value, "t": tid, "q": command, "a": args})


def build_response(result: Mapping[str, Any], tid: bytes) -> bytes:
    """Bencode a response: `{"r": result, "t": tid, "y": "r"}`."""
    return serialize({"y": EnvelopeType.RESPONSE.value, "t": tid, "r": result})


def build_error(code: int, msg: str, tid: bytes) -> bytes:
    """Bencode an error: `{"e": [code, msg], "t": tid, "y": "e"}`."""
    return serialize({"y": EnvelopeType.ERROR.value, "t": tid, "e": [code, msg]})
