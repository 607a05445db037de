from collections.abc import (
    Iterable,
    Sequence,
)
import logging
import threading
import time
from typing import (
    TYPE_CHECKING,
    Any,
)

from google.protobuf.message import (
    DecodeError,
)
from multiaddr import (
    Multiaddr,
)
from multiaddr.exceptions import (
    Error as MultiaddrError,
)

from libp2p_core.abc import (
    IRecord,
)
from libp2p_core.crypto.keys import (
    PrivateKey,
    PublicKey,
)
from libp2p_core.peer.exceptions import (
    AddressDecodeError,
    PublicKeyMismatchError,
    RecordParseError,
)
from libp2p_core.peer.id import (
    ID,
)
import libp2p_core.peer.pb.peer_record_pb2 as pb
from libp2p_core.peer.peerinfo import (
    PeerInfo,
)
from libp2p_core.peer.signing import (
    make_unsigned,
)

if TYPE_CHECKING:
    from libp2p_core.peer.envelope import Envelope

logger = logging.getLogger("libp2p_core.peer.peer_record")

PEER_RECORD_ENVELOPE_DOMAIN = "libp2p-peer-record"
# NOTE: deployed peers sign over the raw bytes 0x03 0x01 rather than the
# uvarint multicodec prefix of 0x0301, so the tag is spelled out here.
PEER_RECORD_ENVELOPE_PAYLOAD_TYPE = b"\x03\x01"

MAX_SEQ = 2**64 - 1

_last_timestamp_lock = threading.Lock()
_last_timestamp: int = 0


class PeerRecord(IRecord):
    """
    A record that contains metadata about a peer in the libp2p network.

    This includes:
    - `peer_id`: The peer's globally unique identifier.
    - `addrs`: The peer's publicly reachable multiaddrs, in order.
    - `seq`: A strictly monotonically increasing timestamp used
    to order records over time.

    PeerRecords are immutable and are designed to be signed and transmitted in
    Envelopes.
    """

    _peer_id: ID
    _addrs: tuple[Multiaddr, ...]
    _seq: int

    def __init__(
        self,
        peer_id: ID,
        addrs: Iterable[Multiaddr] | None = None,
        seq: int | None = None,
    ) -> None:
        """
        Initialize a new PeerRecord.
        If `seq` is not provided, a timestamp-based strictly increasing sequence
        number will be generated.

        :param peer_id: ID of the peer this record refers to.
        :param addrs: Public multiaddrs of the peer.
        :param seq: Monotonic sequence number, an unsigned 64-bit integer.
        :raises ValueError: if `seq` does not fit in an unsigned 64-bit integer.
        """
        if seq is None:
            seq = timestamp_seq()
        elif not 0 <= seq <= MAX_SEQ:
            raise ValueError(f"seq must fit in an unsigned 64-bit integer, got {seq}")
        self._peer_id = peer_id
        self._addrs = tuple(addrs or ())
        self._seq = seq

    @property
    def peer_id(self) -> ID:
        return self._peer_id

    @property
    def addrs(self) -> list[Multiaddr]:
        return list(self._addrs)

    @property
    def seq(self) -> int:
        return self._seq

    def __repr__(self) -> str:
        return (
            f"PeerRecord(\n"
            f"  peer_id={self.peer_id},\n"
            f"  multiaddrs={[str(m) for m in self._addrs]},\n"
            f"  seq={self.seq}\n"
            f")"
        )

    def domain(self) -> str:
        """
        Return the domain string associated with this PeerRecord.

        Used during record signing and envelope validation to identify the record type.
        """
        return PEER_RECORD_ENVELOPE_DOMAIN

    def codec(self) -> bytes:
        """
        Return the payload type tag for PeerRecords.

        This binary prefix distinguishes PeerRecords in serialized envelopes.
        """
        return PEER_RECORD_ENVELOPE_PAYLOAD_TYPE

    def to_protobuf(self) -> pb.PeerRecord:
        """
        Convert the current PeerRecord into a ProtoBuf PeerRecord message.

        :return: A ProtoBuf-encoded PeerRecord message object.
        """
        msg = pb.PeerRecord()
        msg.peer_id = self.peer_id.to_bytes()
        msg.seq = self.seq
        msg.addresses.extend(addrs_to_protobuf(self._addrs))
        return msg

    def marshal_record(self) -> bytes:
        """
        Serialize a PeerRecord into raw bytes suitable for embedding in an Envelope.

        :return: Serialized PeerRecord bytes.
        """
        return self.to_protobuf().SerializeToString()

    def unsigned_payload(self) -> bytes:
        return make_unsigned(self.domain(), self.codec(), self.marshal_record())

    def seal(self, private_key: PrivateKey) -> "Envelope":
        from libp2p_core.peer.envelope import (
            seal_record,
        )

        return seal_record(self, private_key)

    def equal(self, other: Any) -> bool:
        """
        Check if this PeerRecord is identical to another.

        Two PeerRecords are considered equal if:
        - Their peer IDs match.
        - Their sequence numbers are identical.
        - Their address lists are identical and in the same order.

        :param other: Another PeerRecord instance.
        :return: True if all fields match, False otherwise.
        """
        return (
            isinstance(other, PeerRecord)
            and self.peer_id == other.peer_id
            and self.seq == other.seq
            and self._addrs == other._addrs
        )

    def __eq__(self, other: Any) -> bool:
        return self.equal(other)

    def __hash__(self) -> int:
        return hash((self.peer_id, self._addrs, self.seq))

    def is_newer_than(self, other: "PeerRecord") -> bool:
        return self.seq > other.seq


def unmarshal_record(data: bytes, public_key: PublicKey | None = None) -> PeerRecord:
    """
    Deserialize a PeerRecord from its serialized byte representation.

    Typically used when receiving a PeerRecord inside a signed Envelope.

    :param data: Serialized protobuf-encoded bytes.
    :param public_key: When given, the key the record's peer id must be derived
        from.
    :raises RecordParseError: if ``data`` is not a PeerRecord message.
    :raises PublicKeyMismatchError: if the record belongs to another key.
    :raises AddressDecodeError: if none of the record's addresses decode.
    :return: A valid PeerRecord instance.
    """
    msg = pb.PeerRecord()
    try:
        msg.ParseFromString(data)
    except (DecodeError, TypeError) as e:
        raise RecordParseError(f"failed to parse PeerRecord protobuf: {e}") from e

    return peer_record_from_protobuf(msg, public_key)


def timestamp_seq() -> int:
    """
    Generate a strictly increasing timestamp-based sequence number.

    The value is the current time in milliseconds, bumped past the last value
    handed out so that records built within the same millisecond still get
    increasing numbers.

    :return: A strictly increasing integer timestamp.
    """
    global _last_timestamp
    now = time.time_ns() // 1_000_000
    with _last_timestamp_lock:
        if now <= _last_timestamp:
            now = _last_timestamp + 1
        _last_timestamp = now
    return now


def peer_record_from_peer_info(info: PeerInfo) -> PeerRecord:
    """
    Create a PeerRecord from a PeerInfo object.

    This automatically assigns a timestamp-based sequence number to the record.
    :param info: A PeerInfo instance (contains peer_id and addrs).
    :return: A PeerRecord instance.
    """
    return PeerRecord(info.peer_id, info.addrs)


def peer_record_from_protobuf(
    msg: pb.PeerRecord, public_key: PublicKey | None = None
) -> PeerRecord:
    """
    Convert a protobuf PeerRecord message into a PeerRecord object.

    :param msg: Protobuf PeerRecord message.
    :param public_key: Optional key the embedded peer id is checked against.
    :raises RecordParseError: if the peer_id is not a valid multihash.
    :raises PublicKeyMismatchError: if the peer_id does not match ``public_key``.
    :return: A deserialized PeerRecord instance.
    """
    try:
        peer_id = ID.from_multihash(msg.peer_id)
    except ValueError as e:
        raise RecordParseError(f"failed to unmarshal peer_id: {e}") from e

    if public_key is not None and not peer_id.matches_pubkey(public_key):
        raise PublicKeyMismatchError(
            f"record peer id {peer_id} does not match the signing public key"
        )

    return PeerRecord(peer_id, addrs_from_protobuf(msg.addresses), msg.seq)


def addrs_from_protobuf(addrs: Sequence[pb.PeerRecord.AddressInfo]) -> list[Multiaddr]:
    """
    Convert a list of protobuf address records to Multiaddr objects.

    Entries that fail to decode are dropped.

    :param addrs: A list of protobuf PeerRecord.AddressInfo messages.
    :raises AddressDecodeError: if ``addrs`` is non-empty and no entry decodes.
    :return: A list of decoded Multiaddr instances.
    """
    out = []
    for addr_info in addrs:
        try:
            addr = Multiaddr(addr_info.multiaddr)
            # Multiaddr parses binary input lazily
            str(addr)
        except (MultiaddrError, ValueError) as e:
            logger.debug("dropping undecodable address %r: %s", addr_info.multiaddr, e)
            continue
        out.append(addr)
    if addrs and not out:
        raise AddressDecodeError(f"failed to decode any of {len(addrs)} addresses")
    return out


def addrs_to_protobuf(addrs: Iterable[Multiaddr]) -> list[pb.PeerRecord.AddressInfo]:
    """
    Convert Multiaddr objects into their protobuf representation.

    :param addrs: Multiaddr instances.
    :return: A list of PeerRecord.AddressInfo protobuf messages.
    """
    return [pb.PeerRecord.AddressInfo(multiaddr=addr.to_bytes()) for addr in addrs]
