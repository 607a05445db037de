from collections.abc import (
    Callable,
)

from google.protobuf.message import (
    DecodeError,
)

from libp2p_core.crypto.ed25519 import (
    Ed25519PrivateKey,
    Ed25519PublicKey,
)
from libp2p_core.crypto.exceptions import (
    InvalidKeyError,
    MissingDeserializerError,
)
from libp2p_core.crypto.keys import (
    KeyType,
    PrivateKey,
    PublicKey,
)
from libp2p_core.crypto.pb import (
    crypto_pb2,
)
from libp2p_core.crypto.rsa import (
    RSAPrivateKey,
    RSAPublicKey,
)
from libp2p_core.crypto.secp256k1 import (
    Secp256k1PrivateKey,
    Secp256k1PublicKey,
)

key_type_to_public_key_deserializer: dict[int, Callable[[bytes], PublicKey]] = {
    KeyType.Secp256k1.value: Secp256k1PublicKey.from_bytes,
    KeyType.RSA.value: RSAPublicKey.from_bytes,
    KeyType.Ed25519.value: Ed25519PublicKey.from_bytes,
}

key_type_to_private_key_deserializer: dict[int, Callable[[bytes], PrivateKey]] = {
    KeyType.Secp256k1.value: Secp256k1PrivateKey.from_bytes,
    KeyType.RSA.value: RSAPrivateKey.from_bytes,
    KeyType.Ed25519.value: Ed25519PrivateKey.from_bytes,
}


def public_key_from_protobuf(protobuf_key: crypto_pb2.PublicKey) -> PublicKey:
    """
    Decode an already parsed ``PublicKey`` message.

    :raises MissingDeserializerError: for key types without a decoder.
    :raises InvalidKeyError: if the key bytes do not decode.
    """
    try:
        deserializer = key_type_to_public_key_deserializer[protobuf_key.key_type]
    except KeyError as e:
        raise MissingDeserializerError(
            {"key_type": protobuf_key.key_type, "key": "public_key"}
        ) from e
    return deserializer(protobuf_key.data)


def deserialize_public_key(data: bytes) -> PublicKey:
    try:
        protobuf_key = crypto_pb2.PublicKey.FromString(data)
    except DecodeError as e:
        raise InvalidKeyError(f"malformed public key message: {e}") from e
    return public_key_from_protobuf(protobuf_key)


def deserialize_private_key(data: bytes) -> PrivateKey:
    try:
        protobuf_key = crypto_pb2.PrivateKey.FromString(data)
    except DecodeError as e:
        raise InvalidKeyError(f"malformed private key message: {e}") from e
    try:
        deserializer = key_type_to_private_key_deserializer[protobuf_key.key_type]
    except KeyError as e:
        raise MissingDeserializerError(
            {"key_type": protobuf_key.key_type, "key": "private_key"}
        ) from e
    return deserializer(protobuf_key.data)
