"""Signed peer records, envelopes and protocol version matching for libp2p."""

from importlib.metadata import version as __version

from libp2p_core.crypto.ed25519 import (
    create_new_key_pair,
)
from libp2p_core.crypto.keys import (
    KeyPair,
)
from libp2p_core.peer.envelope import (
    Envelope,
    consume_envelope,
    open_envelope,
    seal_record,
)
from libp2p_core.peer.id import (
    ID,
)
from libp2p_core.peer.peer_record import (
    PeerRecord,
    unmarshal_record,
)
from libp2p_core.protocol_muxer.semver import (
    SemVerProtocol,
    match,
)
from libp2p_core.utils.logging import (
    setup_logging,
)

# Initialize logging configuration
setup_logging()


def generate_new_identity() -> KeyPair:
    return create_new_key_pair()


def generate_peer_id_from(key_pair: KeyPair) -> ID:
    public_key = key_pair.public_key
    return ID.from_pubkey(public_key)


__version__ = __version("libp2p-core")

__all__ = [
    "Envelope",
    "ID",
    "PeerRecord",
    "SemVerProtocol",
    "consume_envelope",
    "generate_new_identity",
    "generate_peer_id_from",
    "match",
    "open_envelope",
    "seal_record",
    "unmarshal_record",
]
