"""
Compact node and peer info packing.

The compact format carries contact information without per-entry framing::

    compact peer (IPv4) = ip (4 bytes) || port (2 bytes)                  =  6 bytes
    compact peer (IPv6) = ip (16 bytes) || port (2 bytes)                 = 18 bytes
    compact node (IPv4) = node-id (20 bytes) || compact peer (IPv4)       = 26 bytes
    compact node (IPv6) = node-id (20 bytes) || compact peer (IPv6)       = 38 bytes

All integers are big-endian. Lists are plain concatenations of entries.

References:
    - https://www.bittorrent.org/beps/bep_0005.html
    - https://www.bittorrent.org/beps/bep_0032.html
"""

from __future__ import annotations

import struct
from collections.abc import Iterable
from typing import Final

from krpc_protocol.types import CompactPackingError, InvalidAddressArityError

type Address = tuple[int, ...]
"""IPv4 address as 4 octets, or IPv6 address as 8 16-bit groups."""

type CompactNode = tuple[bytes, Address, int]
"""Node contact: (node id, address, port)."""

type CompactPeer = tuple[Address, int]
"""Peer contact: (address, port)."""

IPV4_COMPONENTS: Final = 4
"""Octets in an IPv4 address tuple."""

IPV6_COMPONENTS: Final = 8
"""16-bit groups in an IPv6 address tuple."""

NODE_ID_LENGTH: Final = 20
"""Length of a Mainline DHT node id. Not enforced when packing."""

COMPACT_PORT_LENGTH: Final = 2
"""Bytes in a packed port."""

COMPACT_IPV4_LENGTH: Final = 4 + COMPACT_PORT_LENGTH
"""Bytes in a packed IPv4 address and port."""

COMPACT_IPV6_LENGTH: Final = 16 + COMPACT_PORT_LENGTH
"""Bytes in a packed IPv6 address and port."""

_IPV4_FORMAT = struct.Struct(">4BH")
_IPV6_FORMAT = struct.Struct(">8HH")


def pack_address_port(address: Address, port: int) -> bytes:
    """
    Pack an address and port into compact peer format.

    Args:
        address: 4 octets (IPv4) or 8 16-bit groups (IPv6).
        port: UDP/TCP port, 0-65535.

    Returns:
        6 bytes for IPv4, 18 bytes for IPv6.

    Raises:
        InvalidAddressArityError: If the address is neither 4 nor 8 components.
        CompactPackingError: If a component or the port is out of range.
    """
    arity = len(address)
    if arity == IPV4_COMPONENTS:
        layout = _IPV4_FORMAT
    elif arity == IPV6_COMPONENTS:
        layout = _IPV6_FORMAT
    else:
        raise InvalidAddressArityError(arity)

    try:
        return layout.pack(*address, port)
    except struct.error as e:
        raise CompactPackingError(f"Cannot pack {address!r} port {port!r}: {e}") from e


def pack_node_list(entries: Iterable[CompactNode]) -> bytes:
    """
    Pack (node id, address, port) entries into a compact node list.

    Entries are concatenated in input order. Duplicates are kept.
    The node id is emitted as given; its length is not checked.
    """
    return b"".join(
        node_id + pack_address_port(address, port) for node_id, address, port in entries
    )


def pack_value_list(entries: Iterable[CompactPeer]) -> bytes:
    """Pack (address, port) entries into a compact peer list, in input order."""
    return b"".join(pack_address_port(address, port) for address, port in entries)
