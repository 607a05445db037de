"""Utility functions for libp2p_core."""

from libp2p_core.utils.varint import (
    encode_uvarint,
    encode_varint_prefixed,
)

__all__ = [
    "encode_uvarint",
    "encode_varint_prefixed",
]
