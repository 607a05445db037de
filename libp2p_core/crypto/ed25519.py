"""
Ed25519 keys backed by PyNaCl.

Ed25519 is the default identity key type because its serialized public key is
short enough to be inlined into a peer ID. Private keys use the 64 byte
``seed || public key`` layout that other libp2p implementations put on the
wire. A bare 32 byte seed is accepted when decoding.
"""

from nacl.exceptions import (
    BadSignatureError,
)
from nacl.signing import (
    SigningKey,
    VerifyKey,
)

from libp2p_core.crypto.exceptions import (
    InvalidKeyError,
)
from libp2p_core.crypto.keys import (
    KeyPair,
    KeyType,
    PrivateKey,
    PublicKey,
)

SEED_SIZE = 32
PUBLIC_KEY_SIZE = 32
PRIVATE_KEY_SIZE = SEED_SIZE + PUBLIC_KEY_SIZE
SIGNATURE_SIZE = 64


class Ed25519PublicKey(PublicKey):
    def __init__(self, verify_key: VerifyKey) -> None:
        self._verify_key = verify_key

    @classmethod
    def from_bytes(cls, key_bytes: bytes) -> "Ed25519PublicKey":
        if len(key_bytes) != PUBLIC_KEY_SIZE:
            raise InvalidKeyError(
                f"Ed25519 public key must be {PUBLIC_KEY_SIZE} bytes, "
                f"got {len(key_bytes)}"
            )
        return cls(VerifyKey(bytes(key_bytes)))

    def to_bytes(self) -> bytes:
        return bytes(self._verify_key)

    def get_type(self) -> KeyType:
        return KeyType.Ed25519

    def verify(self, data: bytes, signature: bytes) -> bool:
        if len(signature) != SIGNATURE_SIZE:
            return False
        try:
            self._verify_key.verify(data, signature)
        except BadSignatureError:
            return False
        return True


class Ed25519PrivateKey(PrivateKey):
    def __init__(self, signing_key: SigningKey) -> None:
        self._signing_key = signing_key

    @classmethod
    def new(cls, seed: bytes | None = None) -> "Ed25519PrivateKey":
        if seed is None:
            return cls(SigningKey.generate())
        if len(seed) != SEED_SIZE:
            raise InvalidKeyError(f"Ed25519 seed must be {SEED_SIZE} bytes")
        return cls(SigningKey(bytes(seed)))

    @classmethod
    def from_bytes(cls, data: bytes) -> "Ed25519PrivateKey":
        if len(data) == SEED_SIZE:
            return cls.new(data)
        if len(data) != PRIVATE_KEY_SIZE:
            raise InvalidKeyError(
                f"Ed25519 private key must be {PRIVATE_KEY_SIZE} bytes, "
                f"got {len(data)}"
            )
        key = cls.new(data[:SEED_SIZE])
        if key.get_public_key().to_bytes() != data[SEED_SIZE:]:
            raise InvalidKeyError("Ed25519 private key does not match its public half")
        return key

    def to_bytes(self) -> bytes:
        return bytes(self._signing_key) + bytes(self._signing_key.verify_key)

    def get_type(self) -> KeyType:
        return KeyType.Ed25519

    def sign(self, data: bytes) -> bytes:
        return self._signing_key.sign(data).signature

    def get_public_key(self) -> PublicKey:
        return Ed25519PublicKey(self._signing_key.verify_key)


def create_new_key_pair(seed: bytes | None = None) -> KeyPair:
    private_key = Ed25519PrivateKey.new(seed)
    return KeyPair(private_key, private_key.get_public_key())
