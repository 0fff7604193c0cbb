"""Encoder for Mainline DHT KRPC messages."""

from .compact import pack_address_port, pack_node_list, pack_value_list
from .config import EncoderConfig
from .encoder import (
    Encoder,
    build_message,
    encode,
    encode_announce_peer,
    encode_error,
    encode_find_node,
    encode_find_node_reply,
    encode_get_peers,
    encode_get_peers_reply,
    encode_message,
    encode_ping,
    encode_ping_reply,
    merge_options,
)
from .envelope import build_error, build_query, build_response
from .messages import (
    AnnouncePeer,
    EnvelopeType,
    ErrorMessage,
    FindNode,
    FindNodeReply,
    GetPeers,
    GetPeersReply,
    KRPCErrorCode,
    KRPCMessage,
    MessageKind,
    Ping,
    PingReply,
    QueryMethod,
)
from .transaction import TransactionIdGenerator, generate_transaction_id
from .types import (
    CompactPackingError,
    EnvelopeError,
    InvalidAddressArityError,
    KRPCEncodingError,
    KRPCError,
    ShapeMismatchError,
)

__all__ = [
    # Encoding
    "Encoder",
    "EncoderConfig",
    "build_message",
    "encode",
    "encode_message",
    "encode_error",
    "encode_ping",
    "encode_find_node",
    "encode_get_peers",
    "encode_announce_peer",
    "encode_ping_reply",
    "encode_find_node_reply",
    "encode_get_peers_reply",
    "merge_options",
    # Envelopes
    "build_query",
    "build_response",
    "build_error",
    # Compact format
    "pack_address_port",
    "pack_node_list",
    "pack_value_list",
    # Transaction ids
    "TransactionIdGenerator",
    "generate_transaction_id",
    # Messages
    "KRPCMessage",
    "MessageKind",
    "EnvelopeType",
    "QueryMethod",
    "KRPCErrorCode",
    "ErrorMessage",
    "Ping",
    "FindNode",
    "GetPeers",
    "AnnouncePeer",
    "PingReply",
    "FindNodeReply",
    "GetPeersReply",
    # Exceptions
    "KRPCError",
    "KRPCEncodingError",
    "CompactPackingError",
    "InvalidAddressArityError",
    "EnvelopeError",
    "ShapeMismatchError",
]
