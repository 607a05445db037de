"""
Peer identities, signed peer records and per-peer data.

``Envelope`` and ``PeerRecord`` live in ``libp2p_core.peer.envelope`` and
``libp2p_core.peer.peer_record``.
"""

from .id import ID
from .peerinfo import PeerInfo
from .peerdata import PeerData
