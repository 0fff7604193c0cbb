"""Exception hierarchy for the KRPC message encoder."""

from __future__ import annotations

from collections.abc import Iterable


class KRPCError(Exception):
    """Base class for errors raised while building or encoding a KRPC message."""

    @property
    def message(self) -> str:
        """Human-readable description of the failure."""
        return str(self.args[0]) if self.args else ""


class ShapeMismatchError(KRPCError):
    """
    Raised when a message is built from a field combination it does not recognize.

    This is a caller error: a required field is missing, an unknown field
    was supplied, a field has the wrong type, or mutually exclusive fields
    were combined.

    Attributes:
        kind: The message kind being built.
        detail: Description of the mismatch.
        missing: Required fields that were not supplied.
        unexpected: Supplied fields the message kind does not accept.
    """

    def __init__(
        self,
        kind: str,
        detail: str,
        *,
        missing: Iterable[str] = (),
        unexpected: Iterable[str] = (),
    ) -> None:
        self.kind = kind
        self.detail = detail
        self.missing = tuple(missing)
        self.unexpected = tuple(unexpected)

        msg = f"Invalid fields for {kind}: {detail}"
        if self.missing:
            msg = f"{msg} (missing: {', '.join(self.missing)})"
        if self.unexpected:
            msg = f"{msg} (unexpected: {', '.join(self.unexpected)})"

        super().__init__(msg)


class KRPCEncodingError(KRPCError):
    """Base class for errors raised while producing wire bytes."""


class CompactPackingError(KRPCEncodingError):
    """Raised when an address or port cannot be packed into compact format."""


class InvalidAddressArityError(CompactPackingError):
    """
    Raised when an address tuple is neither IPv4 (4 parts) nor IPv6 (8 parts).

    Attributes:
        arity: The number of components in the rejected address.
    """

    def __init__(self, arity: int) -> None:
        self.arity = arity
        super().__init__(f"Address must have 4 (IPv4) or 8 (IPv6) components, got {arity}")


class EnvelopeError(KRPCEncodingError):
    """Raised when a message body contains a value the wire format cannot carry."""
