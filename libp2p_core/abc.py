from abc import (
    ABC,
    abstractmethod,
)
from collections.abc import (
    Sequence,
)
from typing import (
    TYPE_CHECKING,
    Any,
)

from multiaddr import (
    Multiaddr,
)

from libp2p_core.crypto.keys import (
    PrivateKey,
)

if TYPE_CHECKING:
    from libp2p_core.peer.id import ID
    from libp2p_core.peer.envelope import Envelope
    from libp2p_core.peer.metadata import LatencyMetadata
    from libp2p_core.protocol_muxer.semver import SemVerProtocol


class IRecord(ABC):
    """
    A typed payload that can be signed into an ``Envelope``.

    Concrete records are immutable values describing a peer. Each record type
    has a constant signature domain and payload type tag which, together with
    the marshaled record, form the bytes that get signed.
    """

    @property
    @abstractmethod
    def peer_id(self) -> "ID":
        """The peer this record describes."""

    @property
    @abstractmethod
    def addrs(self) -> list[Multiaddr]:
        """The peer's addresses, in record order."""

    @property
    @abstractmethod
    def seq(self) -> int:
        """Sequence number ordering records of the same peer in time."""

    @abstractmethod
    def domain(self) -> str:
        """
        Return the signature domain of this record type.

        Returns
        -------
        str
            A string constant per record type, e.g. ``"libp2p-peer-record"``.

        """

    @abstractmethod
    def codec(self) -> bytes:
        """
        Return the payload type tag placed in envelopes carrying this record.

        Returns
        -------
        bytes
            The binary payload type identifier.

        """

    @abstractmethod
    def marshal_record(self) -> bytes:
        """
        Serialize the record into its wire form.

        Returns
        -------
        bytes
            The protobuf encoded record.

        """

    @abstractmethod
    def equal(self, other: Any) -> bool:
        """
        Compare two records field by field.

        Parameters
        ----------
        other : Any
            The object to compare against.

        Returns
        -------
        bool
            True if ``other`` is a record of the same type with equal fields.

        """

    @abstractmethod
    def unsigned_payload(self) -> bytes:
        """
        Return the domain separated bytes an envelope signature covers.

        Returns
        -------
        bytes
            The signing pre-image of this record.

        """

    @abstractmethod
    def seal(self, private_key: PrivateKey) -> "Envelope":
        """
        Sign this record into an envelope.

        Parameters
        ----------
        private_key : PrivateKey
            The key of the peer vouching for the record.

        Returns
        -------
        Envelope
            The signed envelope wrapping this record.

        """


class IPeerData(ABC):
    """
    Everything known about a single remote peer.

    Implementations keep addresses, protocols, metadata and signed records as
    independent fields so that updates to one never wait on another.
    """

    # --------ADDR-BOOK--------

    @abstractmethod
    def add_addrs(self, addrs: Sequence[Multiaddr]) -> None:
        """
        Add addresses, ignoring ones that are already known.

        Parameters
        ----------
        addrs : Sequence[Multiaddr]
            The addresses to add.

        """

    @abstractmethod
    def get_addrs(self) -> list[Multiaddr]:
        """
        Returns
        -------
        list[Multiaddr]
            A snapshot of the known addresses.

        """

    @abstractmethod
    def clear_addrs(self) -> None:
        """Forget all addresses."""

    # --------PROTO-BOOK--------

    @abstractmethod
    def add_protocols(self, protocols: Sequence["SemVerProtocol"]) -> None:
        """
        Add protocols the peer speaks.

        Parameters
        ----------
        protocols : Sequence[SemVerProtocol]
            The protocols to add.

        """

    @abstractmethod
    def get_protocols(self) -> list["SemVerProtocol"]:
        """
        Returns
        -------
        list[SemVerProtocol]
            A snapshot of the peer's protocols.

        """

    @abstractmethod
    def supports_protocols(
        self, protocols: Sequence["SemVerProtocol"]
    ) -> list["SemVerProtocol"]:
        """
        Filter ``protocols`` down to the ones the peer can speak.

        Parameters
        ----------
        protocols : Sequence[SemVerProtocol]
            Candidate protocols.

        Returns
        -------
        list[SemVerProtocol]
            The candidates matching at least one of the peer's protocols.

        """

    # --------METADATA--------

    @abstractmethod
    def put_metadata(self, key: str, val: bytes) -> None:
        """
        Parameters
        ----------
        key : str
            The metadata key.
        val : bytes
            The value to associate with ``key``.

        """

    @abstractmethod
    def get_metadata(self, key: str) -> bytes:
        """
        Parameters
        ----------
        key : str
            The metadata key.

        Returns
        -------
        bytes
            The value stored under ``key``.

        Raises
        ------
        PeerDataError
            If ``key`` is not present.

        """

    @abstractmethod
    def record_latency(
        self, sample: int, *, connection: bool = False
    ) -> "LatencyMetadata":
        """
        Fold a latency sample into the peer's running average.

        Parameters
        ----------
        sample : int
            The measured latency.
        connection : bool
            Whether the sample is a connection latency rather than a stream
            latency.

        Returns
        -------
        LatencyMetadata
            The updated averages.

        """

    # --------RECORDS--------

    @abstractmethod
    def add_record(self, record: IRecord) -> None:
        """
        Parameters
        ----------
        record : IRecord
            A verified record about this peer.

        """

    @abstractmethod
    def get_most_recent_record(self) -> IRecord | None:
        """
        Returns
        -------
        IRecord | None
            The stored record with the highest sequence number, if any.

        """
