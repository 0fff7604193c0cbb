"""
KRPC Encoder Configuration

Protocol constants and runtime configuration for the message encoder.

References:
    - https://www.bittorrent.org/beps/bep_0005.html
    - https://www.bittorrent.org/beps/bep_0032.html
"""

from typing import Final

from krpc_protocol.types import StrictBaseModel

DEFAULT_WANT: Final = "n4"
"""Address family requested by find_node when the caller does not choose one."""

TRANSACTION_ID_LENGTH: Final = 2
"""Bytes in a generated transaction id."""

TRANSACTION_ID_MIN_BYTE: Final = 1
"""Smallest value drawn for a generated transaction id byte."""

TRANSACTION_ID_MAX_BYTE: Final = 255
"""Largest value drawn for a generated transaction id byte."""


class EncoderConfig(StrictBaseModel):
    """Runtime configuration for the KRPC message encoder."""

    default_want: str = DEFAULT_WANT
    """Value of `want` sent with find_node queries that do not specify one."""

    transaction_id_length: int = TRANSACTION_ID_LENGTH
    """Length of transaction ids drawn when a query carries none."""
