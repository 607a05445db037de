"""
Domain separated signing pre-images.

Envelope signatures never cover a payload alone. The signed bytes are
``uvarint(len(domain)) || domain || uvarint(len(payload_type)) || payload_type
|| uvarint(len(payload)) || payload`` so that a signature produced for one
kind of record cannot be replayed as another.
"""

from libp2p_core.utils.varint import (
    encode_varint_prefixed,
)


def make_unsigned(domain: str, payload_type: bytes, payload: bytes) -> bytes:
    fields = (domain.encode("utf-8"), payload_type, payload)
    return b"".join(encode_varint_prefixed(f) for f in fields)
