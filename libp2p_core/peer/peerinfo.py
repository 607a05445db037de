from collections.abc import (
    Sequence,
)
from typing import (
    Any,
)

import multiaddr
from multiaddr.protocols import (
    P_P2P,
)

from .id import (
    ID,
)


class PeerInfo:
    peer_id: ID
    addrs: list[multiaddr.Multiaddr]

    def __init__(self, peer_id: ID, addrs: Sequence[multiaddr.Multiaddr]) -> None:
        self.peer_id = peer_id
        self.addrs = list(addrs)

    def __eq__(self, other: Any) -> bool:
        return (
            isinstance(other, PeerInfo)
            and self.peer_id == other.peer_id
            and self.addrs == other.addrs
        )

    def __repr__(self) -> str:
        return f"PeerInfo(peer_id={self.peer_id}, addrs={[str(a) for a in self.addrs]})"


def info_from_p2p_addr(addr: multiaddr.Multiaddr) -> PeerInfo:
    """
    Split an address ending in ``/p2p/<peer id>`` into a ``PeerInfo``.

    :raises InvalidAddrError: if ``addr`` does not end with a ``/p2p`` part.
    """
    protocols = list(addr.protocols())
    if not protocols:
        raise InvalidAddrError(f"`addr`={addr} should at least have a protocol `P_P2P`")

    if protocols[-1].code != P_P2P:
        raise InvalidAddrError(
            f"The last protocol should be `P_P2P` instead of `{protocols[-1].code}`"
        )

    peer_id_str = addr.value_for_protocol(P_P2P)
    if peer_id_str is None:
        raise InvalidAddrError("Missing value for /p2p protocol in multiaddr")

    try:
        peer_id = ID.from_base58(peer_id_str)
    except ValueError as e:
        raise InvalidAddrError(f"invalid peer id {peer_id_str!r}") from e

    transport_addr = addr.decapsulate(multiaddr.Multiaddr(f"/p2p/{peer_id_str}"))
    if not transport_addr.protocols():
        # nothing but the /p2p part
        return PeerInfo(peer_id, [addr])
    return PeerInfo(peer_id, [transport_addr])


class InvalidAddrError(ValueError):
    pass
