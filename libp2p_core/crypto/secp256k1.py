"""Secp256k1 keys backed by coincurve, with compressed 33 byte public keys."""

import coincurve

from libp2p_core.crypto.exceptions import (
    InvalidKeyError,
)
from libp2p_core.crypto.keys import (
    KeyPair,
    KeyType,
    PrivateKey,
    PublicKey,
)


class Secp256k1PublicKey(PublicKey):
    def __init__(self, point: coincurve.PublicKey) -> None:
        self._point = point

    @classmethod
    def from_bytes(cls, data: bytes) -> "Secp256k1PublicKey":
        try:
            return cls(coincurve.PublicKey(bytes(data)))
        except (ValueError, TypeError) as e:
            raise InvalidKeyError(f"invalid secp256k1 public key: {e}") from e

    def to_bytes(self) -> bytes:
        return self._point.format(compressed=True)

    def get_type(self) -> KeyType:
        return KeyType.Secp256k1

    def verify(self, data: bytes, signature: bytes) -> bool:
        try:
            return self._point.verify(signature, data)
        except ValueError:
            # signature is not valid DER
            return False


class Secp256k1PrivateKey(PrivateKey):
    def __init__(self, secret_key: coincurve.PrivateKey) -> None:
        self._secret_key = secret_key

    @classmethod
    def new(cls, secret: bytes | None = None) -> "Secp256k1PrivateKey":
        """
        Build a key from ``secret``, 32 bytes encoding an integer below the
        group order. A random secret is drawn when ``secret`` is ``None``.
        """
        try:
            return cls(coincurve.PrivateKey(secret))
        except (ValueError, TypeError) as e:
            raise InvalidKeyError(f"invalid secp256k1 secret: {e}") from e

    @classmethod
    def from_bytes(cls, data: bytes) -> "Secp256k1PrivateKey":
        return cls.new(bytes(data))

    def to_bytes(self) -> bytes:
        return self._secret_key.secret

    def get_type(self) -> KeyType:
        return KeyType.Secp256k1

    def sign(self, data: bytes) -> bytes:
        return self._secret_key.sign(data)

    def get_public_key(self) -> PublicKey:
        return Secp256k1PublicKey(self._secret_key.public_key)


def create_new_key_pair(secret: bytes | None = None) -> KeyPair:
    private_key = Secp256k1PrivateKey.new(secret)
    return KeyPair(private_key, private_key.get_public_key())
