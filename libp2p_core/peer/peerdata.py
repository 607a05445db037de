from collections.abc import (
    Sequence,
)
import logging
import threading

from multiaddr import (
    Multiaddr,
)

from libp2p_core.abc import (
    IPeerData,
    IRecord,
)
from libp2p_core.peer.id import (
    ID,
)
from libp2p_core.peer.metadata import (
    LatencyMetadata,
    MetadataKey,
)
from libp2p_core.protocol_muxer.semver import (
    SemVerProtocol,
    first_matching,
)

logger = logging.getLogger("libp2p_core.peer.peerdata")

# How many signed records ``trim_records`` keeps by default
DEFAULT_RECORDS_TO_KEEP = 3


class PeerData(IPeerData):
    """
    Addresses, protocols, metadata and signed records of one peer.

    Each of the four fields has its own lock. Readers get a consistent copy of
    a single field; nothing is atomic across fields.
    """

    peer_id: ID

    def __init__(self, peer_id: ID) -> None:
        self.peer_id = peer_id

        self._addrs: list[Multiaddr] = []
        self._addrs_lock = threading.Lock()

        self._protocols: list[SemVerProtocol] = []
        self._protocols_lock = threading.Lock()

        self._metadata: dict[str, bytes] = {}
        self._metadata_lock = threading.Lock()

        self._records: list[IRecord] = []
        self._records_lock = threading.Lock()

    def __repr__(self) -> str:
        return f"PeerData(peer_id={self.peer_id})"

    # -------ADDR-BOOK---------

    def add_addrs(self, addrs: Sequence[Multiaddr]) -> None:
        """
        :param addrs: multiaddresses to add
        """
        with self._addrs_lock:
            for addr in addrs:
                if addr not in self._addrs:
                    self._addrs.append(addr)

    def get_addrs(self) -> list[Multiaddr]:
        """
        :return: all multiaddresses
        """
        with self._addrs_lock:
            return list(self._addrs)

    def remove_addr(self, addr: Multiaddr) -> None:
        with self._addrs_lock:
            if addr in self._addrs:
                self._addrs.remove(addr)

    def clear_addrs(self) -> None:
        """Clear all addresses."""
        with self._addrs_lock:
            self._addrs = []

    # --------PROTO-BOOK--------

    def add_protocols(self, protocols: Sequence[SemVerProtocol]) -> None:
        """
        :param protocols: protocols to add
        """
        with self._protocols_lock:
            for protocol in protocols:
                if protocol not in self._protocols:
                    self._protocols.append(protocol)

    def set_protocols(self, protocols: Sequence[SemVerProtocol]) -> None:
        """
        :param protocols: protocols to set
        """
        with self._protocols_lock:
            self._protocols = list(dict.fromkeys(protocols))

    def remove_protocols(self, protocols: Sequence[SemVerProtocol]) -> None:
        """
        :param protocols: protocols to remove
        """
        with self._protocols_lock:
            self._protocols = [p for p in self._protocols if p not in protocols]

    def get_protocols(self) -> list[SemVerProtocol]:
        """
        :return: all protocols associated with the peer
        """
        with self._protocols_lock:
            return list(self._protocols)

    def supports_protocols(
        self, protocols: Sequence[SemVerProtocol]
    ) -> list[SemVerProtocol]:
        """
        :param protocols: protocols to check from
        :return: the given protocols that match one of the peer's protocols
        """
        known = self.get_protocols()
        return [p for p in protocols if any(p.matches(k) for k in known)]

    def first_supported_protocol(
        self, protocols: Sequence[SemVerProtocol]
    ) -> SemVerProtocol | None:
        """
        :param protocols: protocols to check from, in order of preference
        :return: first supported protocol in the given list, if any
        """
        return first_matching(protocols, self.get_protocols())

    def clear_protocol_data(self) -> None:
        """Clear all protocols"""
        with self._protocols_lock:
            self._protocols = []

    # -------METADATA-----------

    def put_metadata(self, key: str, val: bytes) -> None:
        """
        :param key: key in KV pair
        :param val: val to associate with key
        """
        with self._metadata_lock:
            self._metadata[_metadata_key(key)] = bytes(val)

    def get_metadata(self, key: str) -> bytes:
        """
        :param key: key in KV pair
        :return: val for key
        :raise PeerDataError: key not found
        """
        with self._metadata_lock:
            try:
                return self._metadata[_metadata_key(key)]
            except KeyError as e:
                raise PeerDataError(
                    f"metadata key {_metadata_key(key)} not found"
                ) from e

    def get_all_metadata(self) -> dict[str, bytes]:
        with self._metadata_lock:
            return dict(self._metadata)

    def remove_metadata(self, key: str) -> None:
        with self._metadata_lock:
            self._metadata.pop(_metadata_key(key), None)

    def clear_metadata(self) -> None:
        """Clears metadata."""
        with self._metadata_lock:
            self._metadata = {}

    def record_latency(
        self, sample: int, *, connection: bool = False
    ) -> LatencyMetadata:
        """
        Fold a latency sample into the running average kept under the
        ``latency`` metadata key.

        :param sample: the measured latency, in nanoseconds
        :param connection: track the sample as a connection latency instead of
            a stream latency
        :return: the updated latency metadata
        """
        key = MetadataKey.LATENCY.value
        with self._metadata_lock:
            current = self._metadata.get(key)
            latency = (
                LatencyMetadata()
                if current is None
                else LatencyMetadata.from_bytes(current)
            )
            if connection:
                latency = latency.with_connection_latency(sample)
            else:
                latency = latency.with_stream_latency(sample)
            self._metadata[key] = latency.to_bytes()
        return latency

    def get_latency(self) -> LatencyMetadata:
        """
        :return: the latency metadata, all zeroes if nothing was recorded
        """
        with self._metadata_lock:
            current = self._metadata.get(MetadataKey.LATENCY.value)
        if current is None:
            return LatencyMetadata()
        return LatencyMetadata.from_bytes(current)

    # -------RECORDS-----------

    def add_record(self, record: IRecord) -> None:
        """
        :param record: a verified record about this peer
        :raise PeerDataError: if the record is about another peer
        """
        if record.peer_id != self.peer_id:
            raise PeerDataError(
                f"record for {record.peer_id} does not belong to {self.peer_id}"
            )
        with self._records_lock:
            if not any(record.equal(r) for r in self._records):
                self._records.append(record)

    def get_records(self) -> list[IRecord]:
        """
        :return: all stored records, oldest first
        """
        with self._records_lock:
            return sorted(self._records, key=lambda r: r.seq)

    def get_most_recent_record(self) -> IRecord | None:
        with self._records_lock:
            if not self._records:
                return None
            return max(self._records, key=lambda r: r.seq)

    def trim_records(self, keep: int = DEFAULT_RECORDS_TO_KEEP) -> None:
        """
        Drop all but the ``keep`` records with the highest sequence numbers.
        """
        if keep < 0:
            raise ValueError(f"keep must be >= 0, got {keep}")
        with self._records_lock:
            newest_first = sorted(self._records, key=lambda r: r.seq, reverse=True)
            dropped = len(newest_first) - keep
            self._records = newest_first[:keep]
        if dropped > 0:
            logger.debug("trimmed %d records of %s", dropped, self.peer_id)

    def clear_records(self) -> None:
        with self._records_lock:
            self._records = []


def _metadata_key(key: str) -> str:
    if isinstance(key, MetadataKey):
        return key.value
    return key


class PeerDataError(KeyError):
    """Raised when a key is not found in peer metadata."""
