"""
Signed envelopes carrying typed records.

Based on libp2p RFC 0002: https://github.com/libp2p/specs/blob/master/RFC/0002-signed-envelopes.md

An ``Envelope`` only ever exists in a verified state: ``seal_record`` signs a
record into one and ``open_envelope`` rebuilds one from wire bytes, checking
the signature before anything is returned.
"""

from collections.abc import (
    Callable,
)
from enum import (
    Enum,
)
import logging
import threading
from typing import (
    Any,
    Generic,
    TypeVar,
)

from google.protobuf.message import (
    DecodeError,
)

from libp2p_core.abc import (
    IRecord,
)
from libp2p_core.crypto.exceptions import (
    CryptographyError,
)
from libp2p_core.crypto.keys import (
    PrivateKey,
    PublicKey,
)
from libp2p_core.crypto.serialization import (
    public_key_from_protobuf,
)
from libp2p_core.peer.exceptions import (
    EmptyDomainError,
    EmptyPayloadTypeError,
    InvalidSignatureError,
    NoPrivateKeyError,
    NoPublicKeyError,
    PublicKeyMismatchError,
    RecordParseError,
    UnsupportedPayloadTypeError,
)
from libp2p_core.peer.id import (
    ID,
)
from libp2p_core.peer.pb import (
    Envelope as EnvelopePB,
)
from libp2p_core.peer.peer_record import (
    PEER_RECORD_ENVELOPE_DOMAIN,
    PEER_RECORD_ENVELOPE_PAYLOAD_TYPE,
    unmarshal_record,
)
from libp2p_core.peer.signing import (
    make_unsigned,
)

logger = logging.getLogger("libp2p_core.peer.envelope")

T = TypeVar("T")


class PayloadKind(Enum):
    """The record types an envelope may carry, keyed by payload type tag."""

    PEER_RECORD = PEER_RECORD_ENVELOPE_PAYLOAD_TYPE

    @classmethod
    def from_payload_type(cls, payload_type: bytes) -> "PayloadKind":
        """
        :raises EmptyPayloadTypeError: if ``payload_type`` is empty.
        :raises UnsupportedPayloadTypeError: if no record type uses the tag.
        """
        if not payload_type:
            raise EmptyPayloadTypeError("envelope payload type is empty")
        try:
            return cls(bytes(payload_type))
        except ValueError as e:
            raise UnsupportedPayloadTypeError(
                f"unsupported payload type {payload_type.hex()}"
            ) from e

    @property
    def domain(self) -> str:
        return _PAYLOAD_DOMAINS[self]

    def decode(self, payload: bytes, public_key: PublicKey) -> IRecord:
        """Decode ``payload`` as this kind's record, pinned to ``public_key``."""
        return _PAYLOAD_DECODERS[self](payload, public_key)


_PAYLOAD_DOMAINS: dict[PayloadKind, str] = {
    PayloadKind.PEER_RECORD: PEER_RECORD_ENVELOPE_DOMAIN,
}

_PAYLOAD_DECODERS: dict[PayloadKind, Callable[[bytes, PublicKey], IRecord]] = {
    PayloadKind.PEER_RECORD: unmarshal_record,
}


class ComputeOnce(Generic[T]):
    """
    A value computed at most once, safe to read from several threads.

    A failing computation is remembered too, so later reads raise the same
    error instead of retrying.
    """

    def __init__(self, compute: Callable[[], T]) -> None:
        self._compute: Callable[[], T] | None = compute
        self._lock = threading.Lock()
        self._done = False
        self._value: T | None = None
        self._error: Exception | None = None

    def get(self) -> T:
        if not self._done:
            with self._lock:
                if not self._done:
                    assert self._compute is not None
                    try:
                        self._value = self._compute()
                    except Exception as e:
                        self._error = e
                    self._compute = None
                    self._done = True
        if self._error is not None:
            raise self._error
        return self._value  # type: ignore[return-value]


class Envelope:
    """
    A signed, typed record container.

    Constructing an envelope verifies ``signature`` over the domain separated
    pre-image of ``raw_payload``; there is no unverified envelope. Use
    ``seal_record`` and ``open_envelope`` rather than calling this directly.
    """

    _public_key: PublicKey
    _payload_type: bytes
    _raw_payload: bytes
    _signature: bytes

    def __init__(
        self,
        public_key: PublicKey,
        payload_type: bytes,
        raw_payload: bytes,
        signature: bytes,
    ) -> None:
        """
        :raises EmptyPayloadTypeError: if ``payload_type`` is empty.
        :raises UnsupportedPayloadTypeError: if ``payload_type`` is unknown.
        :raises InvalidSignatureError: if ``signature`` does not verify.
        """
        kind = PayloadKind.from_payload_type(payload_type)
        unsigned = make_unsigned(kind.domain, payload_type, raw_payload)
        if not public_key.verify(unsigned, signature):
            raise InvalidSignatureError("envelope signature does not verify")

        self._public_key = public_key
        self._payload_type = bytes(payload_type)
        self._raw_payload = bytes(raw_payload)
        self._signature = bytes(signature)
        self._kind = kind
        self._record = ComputeOnce(self._decode_record)

    @property
    def public_key(self) -> PublicKey:
        return self._public_key

    @property
    def payload_type(self) -> bytes:
        return self._payload_type

    @property
    def raw_payload(self) -> bytes:
        return self._raw_payload

    @property
    def signature(self) -> bytes:
        return self._signature

    @property
    def payload_kind(self) -> PayloadKind:
        return self._kind

    def _decode_record(self) -> IRecord:
        return self._kind.decode(self._raw_payload, self._public_key)

    def record(self) -> IRecord:
        """
        Return the record carried by this envelope.

        The payload is decoded on first access and cached afterwards.

        :raises RecordError: if the payload is not a valid record for the
            envelope's public key.
        """
        return self._record.get()

    def peer_id(self) -> ID:
        """Return the peer id of the signer."""
        return ID.from_pubkey(self._public_key)

    def to_protobuf(self) -> EnvelopePB:
        return EnvelopePB(
            public_key=self._public_key.serialize_to_protobuf(),
            payload_type=self._payload_type,
            payload=self._raw_payload,
            signature=self._signature,
        )

    def marshal_envelope(self) -> bytes:
        """
        Serialize the envelope to bytes.

        :return: The protobuf encoded envelope.
        """
        return self.to_protobuf().SerializeToString()

    def equal(self, other: Any) -> bool:
        return (
            isinstance(other, Envelope)
            and self._public_key == other._public_key
            and self._payload_type == other._payload_type
            and self._raw_payload == other._raw_payload
            and self._signature == other._signature
        )

    def __eq__(self, other: Any) -> bool:
        return self.equal(other)

    def __hash__(self) -> int:
        return hash((self._payload_type, self._raw_payload, self._signature))

    def __repr__(self) -> str:
        return (
            f"Envelope(peer_id={self.peer_id()}, "
            f"payload_type={self._payload_type.hex()}, "
            f"payload_len={len(self._raw_payload)}, "
            f"signature_len={len(self._signature)})"
        )


def seal_record(record: IRecord, private_key: PrivateKey) -> Envelope:
    """
    Sign a record into a new envelope.

    :param record: The record to sign.
    :param private_key: The signer's private key.
    :raises NoPrivateKeyError: if ``private_key`` is not a private key.
    :raises EmptyDomainError: if the record has an empty domain.
    :raises EmptyPayloadTypeError: if the record has an empty codec.
    :raises PublicKeyMismatchError: if the record belongs to another peer than
        the signer.
    :return: The sealed envelope.
    """
    if not isinstance(private_key, PrivateKey):
        raise NoPrivateKeyError("sealing a record requires a private key")
    if not record.domain():
        raise EmptyDomainError("record domain is empty")
    payload_type = record.codec()
    if not payload_type:
        raise EmptyPayloadTypeError("record payload type is empty")
    public_key = private_key.get_public_key()
    if not record.peer_id.matches_pubkey(public_key):
        raise PublicKeyMismatchError(
            f"cannot seal a record of peer {record.peer_id} with another peer's key"
        )

    signature = private_key.sign(record.unsigned_payload())
    envelope = Envelope(
        public_key,
        payload_type,
        record.marshal_record(),
        signature,
    )
    logger.debug("sealed %s record for %s", envelope.payload_kind.name, record.peer_id)
    return envelope


def open_envelope(data: bytes, public_key: PublicKey | None = None) -> Envelope:
    """
    Rebuild an envelope from wire bytes, verifying its signature and record.

    :param data: The serialized envelope.
    :param public_key: The key to verify with. Defaults to the key embedded
        in the envelope.
    :raises RecordParseError: if ``data`` is not an envelope message.
    :raises NoPublicKeyError: if no usable public key is available.
    :raises InvalidSignatureError: if the signature does not verify or the
        payload type is unsupported.
    :raises RecordError: if the verified payload is not a valid record for
        the public key.
    :return: The verified envelope, with its record already decoded.
    """
    msg = EnvelopePB()
    try:
        msg.ParseFromString(data)
    except (DecodeError, TypeError) as e:
        raise RecordParseError(f"failed to parse envelope protobuf: {e}") from e

    if public_key is None:
        public_key = _embedded_public_key(msg)

    envelope = Envelope(public_key, msg.payload_type, msg.payload, msg.signature)
    envelope.record()
    logger.debug(
        "opened %s envelope from %s", envelope.payload_kind.name, envelope.peer_id()
    )
    return envelope


def consume_envelope(
    data: bytes, public_key: PublicKey | None = None
) -> tuple[Envelope, IRecord]:
    """
    Open an envelope and return it together with the record it carries.

    Raises the same errors as ``open_envelope``.
    """
    envelope = open_envelope(data, public_key)
    return envelope, envelope.record()


def _embedded_public_key(msg: EnvelopePB) -> PublicKey:
    if not msg.HasField("public_key"):
        raise NoPublicKeyError("envelope carries no public key")
    try:
        return public_key_from_protobuf(msg.public_key)
    except (CryptographyError, ValueError, TypeError) as e:
        raise NoPublicKeyError(f"cannot decode envelope public key: {e}") from e
