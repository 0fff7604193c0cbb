"""Reusable type definitions for the KRPC message encoder."""

from .base import StrictBaseModel
from .exceptions import (
    CompactPackingError,
    EnvelopeError,
    InvalidAddressArityError,
    KRPCEncodingError,
    KRPCError,
    ShapeMismatchError,
)

__all__ = [
    "StrictBaseModel",
    # Exceptions
    "KRPCError",
    "KRPCEncodingError",
    "CompactPackingError",
    "InvalidAddressArityError",
    "EnvelopeError",
    "ShapeMismatchError",
]
