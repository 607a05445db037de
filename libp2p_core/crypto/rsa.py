"""
RSA keys backed by pycryptodome.

Public keys are DER encoded SubjectPublicKeyInfo, private keys DER encoded
PKCS#1. Signatures are PKCS#1 v1.5 over SHA-256.
"""

from Crypto.Hash import (
    SHA256,
)
import Crypto.PublicKey.RSA as RSA
from Crypto.PublicKey.RSA import (
    RsaKey,
)
from Crypto.Signature import (
    pkcs1_15,
)

from libp2p_core.crypto.exceptions import (
    CryptographyError,
    InvalidKeyError,
)
from libp2p_core.crypto.keys import (
    KeyPair,
    KeyType,
    PrivateKey,
    PublicKey,
)

MAX_RSA_KEY_SIZE = 4096
DEFAULT_RSA_KEY_SIZE = 2048


def validate_rsa_key_length(key_length: int) -> None:
    """
    :raises CryptographyError: if ``key_length`` is not positive or is larger
        than ``MAX_RSA_KEY_SIZE`` bits.
    """
    if key_length <= 0:
        raise CryptographyError("RSA key size must be positive")
    if key_length > MAX_RSA_KEY_SIZE:
        raise CryptographyError(
            f"RSA key size {key_length} exceeds maximum allowed size {MAX_RSA_KEY_SIZE}"
        )


def _import_key(data: bytes, *, private: bool) -> RsaKey:
    try:
        key = RSA.import_key(bytes(data))
    except (ValueError, IndexError, TypeError) as e:
        raise InvalidKeyError(f"invalid RSA key: {e}") from e
    if key.has_private() is not private:
        kind = "private" if private else "public"
        raise InvalidKeyError(f"expected an RSA {kind} key")
    return key


class RSAPublicKey(PublicKey):
    def __init__(self, key: RsaKey) -> None:
        validate_rsa_key_length(key.size_in_bits())
        self._key = key

    @classmethod
    def from_bytes(cls, key_bytes: bytes) -> "RSAPublicKey":
        return cls(_import_key(key_bytes, private=False))

    @property
    def key_size(self) -> int:
        return self._key.size_in_bits()

    def to_bytes(self) -> bytes:
        return self._key.export_key("DER")

    def get_type(self) -> KeyType:
        return KeyType.RSA

    def verify(self, data: bytes, signature: bytes) -> bool:
        try:
            pkcs1_15.new(self._key).verify(SHA256.new(data), signature)
        except (ValueError, TypeError):
            return False
        return True


class RSAPrivateKey(PrivateKey):
    def __init__(self, key: RsaKey) -> None:
        validate_rsa_key_length(key.size_in_bits())
        self._key = key

    @classmethod
    def new(cls, bits: int = DEFAULT_RSA_KEY_SIZE, e: int = 65537) -> "RSAPrivateKey":
        validate_rsa_key_length(bits)
        return cls(RSA.generate(bits, e=e))

    @classmethod
    def from_bytes(cls, data: bytes) -> "RSAPrivateKey":
        return cls(_import_key(data, private=True))

    @property
    def key_size(self) -> int:
        return self._key.size_in_bits()

    def to_bytes(self) -> bytes:
        return self._key.export_key("DER")

    def get_type(self) -> KeyType:
        return KeyType.RSA

    def sign(self, data: bytes) -> bytes:
        return pkcs1_15.new(self._key).sign(SHA256.new(data))

    def get_public_key(self) -> PublicKey:
        return RSAPublicKey(self._key.publickey())


def create_new_key_pair(bits: int = DEFAULT_RSA_KEY_SIZE, e: int = 65537) -> KeyPair:
    private_key = RSAPrivateKey.new(bits, e)
    return KeyPair(private_key, private_key.get_public_key())
