"""Strict, immutable pydantic base model for KRPC message variants."""

from pydantic import BaseModel, ConfigDict


class StrictBaseModel(BaseModel):
    """
    A strict, immutable pydantic base model.

    Strict mode rejects implicit coercion, so `str` never passes for `bytes`
    and `bool` never passes for `int`. Unknown fields are forbidden, which
    is what lets a message variant reject a field combination it does not
    recognize.
    """

    model_config = ConfigDict(
        extra="forbid",
        frozen=True,
        strict=True,
        validate_default=True,
    )
