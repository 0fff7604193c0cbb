"""
Mainline DHT KRPC Messages

KRPC is the query/response protocol of the BitTorrent Mainline DHT. Every
message is a single bencoded dictionary sent in one UDP datagram.

Envelope:
    query    = {"t": tid, "y": "q", "q": method, "a": arguments}
    response = {"t": tid, "y": "r", "r": return-values}
    error    = {"t": tid, "y": "e", "e": [code, message]}

Each message kind below is an immutable model carrying exactly the fields
that kind accepts. Node ids and info-hashes are 20 bytes on the wire, but
the models pack whatever bytes they are given.

References:
    - https://www.bittorrent.org/beps/bep_0005.html
    - https://www.bittorrent.org/beps/bep_0032.html
    - https://www.bittorrent.org/beps/bep_0033.html
"""

from __future__ import annotations

from enum import IntEnum, StrEnum
from typing import Any, ClassVar

from pydantic import field_validator, model_validator

from krpc_protocol.types import StrictBaseModel

from .compact import CompactNode, CompactPeer


class EnvelopeType(StrEnum):
    """Value of the `y` key, identifying the envelope of a message."""

    QUERY = "q"
    """Request sent to a remote node."""

    RESPONSE = "r"
    """Successful reply to a query."""

    ERROR = "e"
    """Failed reply to a query."""


class QueryMethod(StrEnum):
    """Value of the `q` key in a query."""

    PING = "ping"
    FIND_NODE = "find_node"
    GET_PEERS = "get_peers"
    ANNOUNCE_PEER = "announce_peer"


class KRPCErrorCode(IntEnum):
    """Error codes defined by BEP 5. Any other integer is also legal on the wire."""

    GENERIC_ERROR = 201
    SERVER_ERROR = 202
    PROTOCOL_ERROR = 203
    """Malformed packet, invalid arguments, or bad token."""

    METHOD_UNKNOWN = 204


class MessageKind(StrEnum):
    """Every message this package can encode."""

    ERROR = "error"
    PING = "ping"
    FIND_NODE = "find_node"
    GET_PEERS = "get_peers"
    ANNOUNCE_PEER = "announce_peer"
    PING_REPLY = "ping_reply"
    FIND_NODE_REPLY = "find_node_reply"
    GET_PEERS_REPLY = "get_peers_reply"


# =============================================================================
# Errors
# =============================================================================


class ErrorMessage(StrictBaseModel):
    """
    Error reply to a query.

    Wire format:
        {"t": tid, "y": "e", "e": [code, msg]}
    """

    KIND: ClassVar[MessageKind] = MessageKind.ERROR

    code: int
    """Error code. See `KRPCErrorCode` for the standard ones."""

    msg: str
    """Human-readable error description."""

    tid: bytes
    """Transaction id echoed from the failed query."""

    @field_validator("code", mode="before")
    @classmethod
    def plain_code(cls, value: Any) -> Any:
        """Accept `KRPCErrorCode` members as their integer value."""
        if isinstance(value, IntEnum):
            return int(value)
        return value


# =============================================================================
# Queries
# =============================================================================


class Ping(StrictBaseModel):
    """
    ping query - liveness check.

    Arguments:
        {"id": querying node id}
    """

    KIND: ClassVar[MessageKind] = MessageKind.PING

    node_id: bytes
    """Querying node's id."""

    tid: bytes | None = None
    """Transaction id. Generated at encode time when absent."""


class FindNode(StrictBaseModel):
    """
    find_node query - ask for the contacts closest to a target id.

    Arguments:
        {"id": querying node id, "target": target id, "want": address families}
    """

    KIND: ClassVar[MessageKind] = MessageKind.FIND_NODE

    node_id: bytes
    """Querying node's id."""

    target: bytes
    """Id of the node being searched for."""

    tid: bytes | None = None
    """Transaction id. Generated at encode time when absent."""

    want: str | list[str] | None = None
    """Requested address families (BEP 32), "n4" or a list like ["n4", "n6"]. Defaults to "n4"."""


class GetPeers(StrictBaseModel):
    """
    get_peers query - ask for peers of a torrent.

    Arguments:
        {"id": ..., "info_hash": ..., ["scrape": 1], ["noseed": 1], ["want": ...]}
    """

    KIND: ClassVar[MessageKind] = MessageKind.GET_PEERS

    node_id: bytes
    """Querying node's id."""

    info_hash: bytes
    """Info-hash of the torrent."""

    tid: bytes | None = None
    """Transaction id. Generated at encode time when absent."""

    scrape: bool | None = None
    """Request seed/peer bloom filters (BEP 33)."""

    noseed: bool | None = None
    """Ask the remote node to leave seeds out of the reply (BEP 33)."""

    want: str | list[str] | None = None
    """Requested address families (BEP 32), sent verbatim. Never defaulted."""


class AnnouncePeer(StrictBaseModel):
    """
    announce_peer query - announce that the querying node is downloading a torrent.

    Arguments:
        {"id": ..., "info_hash": ..., ["implied_port": 1], ["port": ...], ["token": ...]}
    """

    KIND: ClassVar[MessageKind] = MessageKind.ANNOUNCE_PEER

    node_id: bytes
    """Querying node's id."""

    info_hash: bytes
    """Info-hash of the torrent."""

    tid: bytes | None = None
    """Transaction id. Generated at encode time when absent."""

    implied_port: bool | None = None
    """Use the UDP source port instead of `port`."""

    port: int | None = None
    """Port the peer is listening on."""

    token: bytes | None = None
    """Token received in an earlier get_peers reply."""


# =============================================================================
# Replies
# =============================================================================


class PingReply(StrictBaseModel):
    """
    Reply to ping.

    Return values:
        {"id": responding node id}
    """

    KIND: ClassVar[MessageKind] = MessageKind.PING_REPLY

    node_id: bytes
    """Responding node's id."""

    tid: bytes
    """Transaction id echoed from the query."""


class FindNodeReply(StrictBaseModel):
    """
    Reply to find_node.

    Return values:
        {"id": ..., "nodes": compact IPv4 node list}
        {"id": ..., "nodes6": compact IPv6 node list}

    Exactly one of `nodes` and `nodes6` is set.
    """

    KIND: ClassVar[MessageKind] = MessageKind.FIND_NODE_REPLY

    node_id: bytes
    """Responding node's id."""

    tid: bytes
    """Transaction id echoed from the query."""

    nodes: list[CompactNode] | None = None
    """IPv4 contacts, packed into the `nodes` key."""

    nodes6: list[CompactNode] | None = None
    """IPv6 contacts, packed into the `nodes6` key."""

    @model_validator(mode="after")
    def exactly_one_node_list(self) -> FindNodeReply:
        """Require exactly one of the two node lists."""
        if (self.nodes is None) == (self.nodes6 is None):
            raise ValueError("exactly one of 'nodes' or 'nodes6' is required")
        return self


class GetPeersReply(StrictBaseModel):
    """
    Reply to get_peers.

    Return values:
        {"id": ..., "token": ..., "nodes": compact node list}    when no peers are known
        {"id": ..., "token": ..., "values": compact peer list}   when peers are known

    Exactly one of `nodes` and `values` is set.
    """

    KIND: ClassVar[MessageKind] = MessageKind.GET_PEERS_REPLY

    node_id: bytes
    """Responding node's id."""

    tid: bytes
    """Transaction id echoed from the query."""

    token: bytes
    """Write token the querier must present in announce_peer."""

    nodes: list[CompactNode] | None = None
    """Closest known contacts."""

    values: list[CompactPeer] | None = None
    """Peers downloading the torrent."""

    @model_validator(mode="after")
    def exactly_one_result_list(self) -> GetPeersReply:
        """Require exactly one of nodes or values."""
        if (self.nodes is None) == (self.values is None):
            raise ValueError("exactly one of 'nodes' or 'values' is required")
        return self


type KRPCMessage = (
    ErrorMessage
    | Ping
    | FindNode
    | GetPeers
    | AnnouncePeer
    | PingReply
    | FindNodeReply
    | GetPeersReply
)
"""Union of all KRPC message variants."""

MESSAGE_TYPES: dict[MessageKind, type[StrictBaseModel]] = {
    message_type.KIND: message_type
    for message_type in (
        ErrorMessage,
        Ping,
        FindNode,
        GetPeers,
        AnnouncePeer,
        PingReply,
        FindNodeReply,
        GetPeersReply,
    )
}
"""Message model for each kind."""
