"""Protocol buffer messages for peer records and signed envelopes."""

from .envelope_pb2 import (
    Envelope,
)
from .peer_record_pb2 import (
    PeerRecord,
)

__all__ = ["Envelope", "PeerRecord"]
