"""
Key interfaces shared by every supported signature scheme.

Keys are exchanged as the ``PublicKey`` / ``PrivateKey`` protobuf messages of
``crypto.proto``. The serialized public key is what a peer ID is derived from
and what a signed envelope embeds, so ``serialize`` must be deterministic.
"""

from abc import (
    ABC,
    abstractmethod,
)
from dataclasses import (
    dataclass,
)
from enum import (
    Enum,
    unique,
)

from libp2p_core.crypto.pb import (
    crypto_pb2,
)


@unique
class KeyType(Enum):
    RSA = crypto_pb2.KeyType.Value("RSA")
    Ed25519 = crypto_pb2.KeyType.Value("Ed25519")
    Secp256k1 = crypto_pb2.KeyType.Value("Secp256k1")
    ECDSA = crypto_pb2.KeyType.Value("ECDSA")


class Key(ABC):
    @abstractmethod
    def to_bytes(self) -> bytes:
        """Raw key bytes in the encoding used inside the protobuf ``data`` field."""

    @abstractmethod
    def get_type(self) -> KeyType: ...

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Key):
            return NotImplemented
        return (
            self.get_type() is other.get_type() and self.to_bytes() == other.to_bytes()
        )

    def __hash__(self) -> int:
        return hash((self.get_type(), self.to_bytes()))

    def __repr__(self) -> str:
        return f"<{type(self).__name__}>"


class PublicKey(Key):
    @abstractmethod
    def verify(self, data: bytes, signature: bytes) -> bool:
        """
        Return whether ``signature`` is a valid signature of ``data``.

        Malformed signatures verify as ``False`` instead of raising.
        """

    def serialize_to_protobuf(self) -> crypto_pb2.PublicKey:
        return crypto_pb2.PublicKey(
            key_type=self.get_type().value, data=self.to_bytes()
        )

    def serialize(self) -> bytes:
        return self.serialize_to_protobuf().SerializeToString(deterministic=True)

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.to_bytes().hex()}>"


class PrivateKey(Key):
    @abstractmethod
    def sign(self, data: bytes) -> bytes: ...

    @abstractmethod
    def get_public_key(self) -> PublicKey: ...

    def serialize_to_protobuf(self) -> crypto_pb2.PrivateKey:
        return crypto_pb2.PrivateKey(
            key_type=self.get_type().value, data=self.to_bytes()
        )

    def serialize(self) -> bytes:
        return self.serialize_to_protobuf().SerializeToString(deterministic=True)


@dataclass(frozen=True)
class KeyPair:
    private_key: PrivateKey
    public_key: PublicKey

    def __post_init__(self) -> None:
        if self.private_key.get_public_key() != self.public_key:
            raise ValueError("public key does not belong to the private key")
