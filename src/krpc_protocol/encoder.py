"""
KRPC message encoder.

Turns message variants into wire bytes::

    Ping(node_id=...)                      -> d1:ad2:id20:...e1:q4:ping1:t2:..1:y1:qe
    FindNodeReply(node_id=..., nodes=[..]) -> d1:rd2:id20:...5:nodes26:...e1:t2:..1:y1:re

Queries without a transaction id get a fresh one from the encoder's
generator. Replies and errors must echo the id of the query they answer.

Optional query arguments are merged first-write-wins on top of the
required ones. `True` flags are sent as the integer 1; `False` and `None`
leave the key out.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from pydantic import ValidationError

from krpc_protocol.types import ShapeMismatchError

from .compact import pack_node_list, pack_value_list
from .config import EncoderConfig
from .envelope import build_error, build_query, build_response
from .messages import (
    MESSAGE_TYPES,
    AnnouncePeer,
    ErrorMessage,
    FindNode,
    FindNodeReply,
    GetPeers,
    GetPeersReply,
    KRPCMessage,
    MessageKind,
    Ping,
    PingReply,
    QueryMethod,
)
from .transaction import TransactionIdGenerator, generate_transaction_id

logger = logging.getLogger(__name__)


def merge_options(base: Mapping[str, Any], options: Iterable[tuple[str, Any]]) -> dict[str, Any]:
    """
    Merge optional arguments into a required-argument dictionary.

    Options are (key, value) pairs in precedence order. Pairs whose value
    is None or False are dropped and True becomes 1. A key keeps the first
    value it receives, so nothing in `options` can replace a `base` key.

    Args:
        base: Required arguments.
        options: Optional arguments, in precedence order.

    Returns:
        A new dictionary. `base` is not modified.
    """
    present = [
        (key, 1 if value is True else value)
        for key, value in options
        if value is not None and value is not False
    ]

    merged: dict[str, Any] = {}
    for key, value in [*base.items(), *present]:
        merged.setdefault(key, value)
    return merged


def build_message(kind: MessageKind | str, **fields: Any) -> KRPCMessage:
    """
    Build a validated message of the given kind from keyword fields.

    Args:
        kind: Message kind, e.g. `MessageKind.PING` or "get_peers_reply".
        **fields: Message fields.

    Returns:
        The immutable message model.

    Raises:
        ShapeMismatchError: If the kind is unknown, a required field is
            missing, an unknown field is given, or a field has the wrong type.
    """
    try:
        kind = MessageKind(kind)
    except ValueError as e:
        raise ShapeMismatchError(str(kind), "unknown message kind") from e

    try:
        return MESSAGE_TYPES[kind](**fields)
    except ValidationError as e:
        errors = e.errors()
        missing = [str(err["loc"][0]) for err in errors if err["type"] == "missing"]
        unexpected = [str(err["loc"][0]) for err in errors if err["type"] == "extra_forbidden"]
        detail = "; ".join(
            f"{'.'.join(str(part) for part in err['loc']) or kind.value}: {err['msg']}"
            for err in errors
        )
        raise ShapeMismatchError(kind.value, detail, missing=missing, unexpected=unexpected) from e


class Encoder:
    """
    KRPC message encoder.

    Owns a configuration and a transaction id generator. Encoding is
    otherwise stateless, so one encoder can serve many threads.
    """

    def __init__(
        self,
        config: EncoderConfig | None = None,
        tid_generator: TransactionIdGenerator | None = None,
    ):
        """
        Create an encoder.

        Args:
            config: Encoder settings. Defaults to `EncoderConfig()`.
            tid_generator: Source of transaction ids for queries that carry
                none. When omitted, ids come from the calling thread's
                own generator.
        """
        self.config = config if config is not None else EncoderConfig()
        self.tid_generator = tid_generator

    def generate_transaction_id(self) -> bytes:
        """Draw a fresh transaction id."""
        if self.tid_generator is not None:
            return self.tid_generator.generate()
        return generate_transaction_id(self.config.transaction_id_length)

    def encode(self, kind: MessageKind | str, **fields: Any) -> bytes:
        """Validate keyword fields as a message of `kind` and encode it."""
        return self.encode_message(build_message(kind, **fields))

    def encode_message(self, message: KRPCMessage) -> bytes:
        """
        Encode a message model to wire bytes.

        Raises:
            ShapeMismatchError: If `message` is not a KRPC message model.
            KRPCEncodingError: If a field cannot be packed or bencoded.
        """
        if isinstance(message, ErrorMessage):
            tid, data = message.tid, build_error(message.code, message.msg, message.tid)
        elif isinstance(message, Ping):
            tid, data = self._encode_ping(message)
        elif isinstance(message, FindNode):
            tid, data = self._encode_find_node(message)
        elif isinstance(message, GetPeers):
            tid, data = self._encode_get_peers(message)
        elif isinstance(message, AnnouncePeer):
            tid, data = self._encode_announce_peer(message)
        elif isinstance(message, PingReply):
            tid, data = message.tid, build_response({"id": message.node_id}, message.tid)
        elif isinstance(message, FindNodeReply):
            tid, data = message.tid, self._encode_find_node_reply(message)
        elif isinstance(message, GetPeersReply):
            tid, data = message.tid, self._encode_get_peers_reply(message)
        else:
            raise ShapeMismatchError(type(message).__name__, "not a KRPC message")

        logger.debug("Encoded %s tid=%s (%d bytes)", message.KIND.value, tid.hex(), len(data))
        return data

    def _tid(self, tid: bytes | None) -> bytes:
        """Use the caller's transaction id, or draw one."""
        return tid if tid is not None else self.generate_transaction_id()

    def _encode_ping(self, msg: Ping) -> tuple[bytes, bytes]:
        tid = self._tid(msg.tid)
        return tid, build_query(QueryMethod.PING, tid, {"id": msg.node_id})

    def _encode_find_node(self, msg: FindNode) -> tuple[bytes, bytes]:
        tid = self._tid(msg.tid)
        want = msg.want if msg.want is not None else self.config.default_want
        args = {"id": msg.node_id, "target": msg.target, "want": want}
        return tid, build_query(QueryMethod.FIND_NODE, tid, args)

    def _encode_get_peers(self, msg: GetPeers) -> tuple[bytes, bytes]:
        tid = self._tid(msg.tid)
        args = merge_options(
            {"id": msg.node_id, "info_hash": msg.info_hash},
            [("scrape", msg.scrape), ("noseed", msg.noseed), ("want", msg.want)],
        )
        return tid, build_query(QueryMethod.GET_PEERS, tid, args)

    def _encode_announce_peer(self, msg: AnnouncePeer) -> tuple[bytes, bytes]:
        tid = self._tid(msg.tid)
        args = merge_options(
            {"id": msg.node_id, "info_hash": msg.info_hash},
            [("implied_port", msg.implied_port), ("port", msg.port), ("token", msg.token)],
        )
        return tid, build_query(QueryMethod.ANNOUNCE_PEER, tid, args)

    def _encode_find_node_reply(self, msg: FindNodeReply) -> bytes:
        # The model guarantees exactly one list is set.
        if msg.nodes is not None:
            result = {"id": msg.node_id, "nodes": pack_node_list(msg.nodes)}
        else:
            result = {"id": msg.node_id, "nodes6": pack_node_list(msg.nodes6 or [])}
        return build_response(result, msg.tid)

    def _encode_get_peers_reply(self, msg: GetPeersReply) -> bytes:
        result: dict[str, Any] = {"id": msg.node_id, "token": msg.token}
        if msg.nodes is not None:
            result["nodes"] = pack_node_list(msg.nodes)
        else:
            result["values"] = pack_value_list(msg.values or [])
        return build_response(result, msg.tid)


_DEFAULT_ENCODER = Encoder()


def encode(kind: MessageKind | str, **fields: Any) -> bytes:
    """Validate keyword fields as a message of `kind` and encode it."""
    return _DEFAULT_ENCODER.encode(kind, **fields)


def encode_message(message: KRPCMessage) -> bytes:
    """Encode a message model to wire bytes."""
    return _DEFAULT_ENCODER.encode_message(message)


def encode_error(**fields: Any) -> bytes:
    """
    Encode an error reply.

    Fields: `code`, `msg`, `tid`.
    """
    return encode(MessageKind.ERROR, **fields)


def encode_ping(**fields: Any) -> bytes:
    """
    Encode a ping query.

    Fields: `node_id`, optional `tid`.
    """
    return encode(MessageKind.PING, **fields)


def encode_find_node(**fields: Any) -> bytes:
    """
    Encode a find_node query.

    Fields: `node_id`, `target`, optional `tid` and `want` (defaults to "n4").
    """
    return encode(MessageKind.FIND_NODE, **fields)


def encode_get_peers(**fields: Any) -> bytes:
    """
    Encode a get_peers query.

    Fields: `node_id`, `info_hash`, optional `tid`, `scrape`, `noseed` and
    `want`. `want` is only sent when given.
    """
    return encode(MessageKind.GET_PEERS, **fields)


def encode_announce_peer(**fields: Any) -> bytes:
    """
    Encode an announce_peer query.

    Fields: `node_id`, `info_hash`, optional `tid`, `implied_port`, `port` and `token`.
    """
    return encode(MessageKind.ANNOUNCE_PEER, **fields)


def encode_ping_reply(**fields: Any) -> bytes:
    """
    Encode a reply to ping.

    Fields: `node_id`, `tid`.
    """
    return encode(MessageKind.PING_REPLY, **fields)


def encode_find_node_reply(**fields: Any) -> bytes:
    """
    Encode a reply to find_node.

    Fields: `node_id`, `tid`, and either `nodes` (IPv4) or `nodes6` (IPv6).
    """
    return encode(MessageKind.FIND_NODE_REPLY, **fields)


def encode_get_peers_reply(**fields: Any) -> bytes:
    """
    Encode a reply to get_peers.

    Fields: `node_id`, `tid`, `token`, and either closer `nodes` or peer `values`.
    """
    return encode(MessageKind.GET_PEERS_REPLY, **fields)
