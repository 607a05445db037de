import pytest

from libp2p_core.crypto.exceptions import (
    InvalidKeyError,
    MissingDeserializerError,
)
from libp2p_core.crypto.keys import (
    KeyType,
)
from libp2p_core.crypto.pb import (
    crypto_pb2,
)
from libp2p_core.crypto.serialization import (
    deserialize_private_key,
    deserialize_public_key,
    public_key_from_protobuf,
)


def test_key_type_matches_wire_enum():
    assert KeyType.RSA.value == 0
    assert KeyType.Ed25519.value == 1
    assert KeyType.Secp256k1.value == 2
    assert KeyType.ECDSA.value == 3


def test_missing_public_key_deserializer():
    data = crypto_pb2.PublicKey(key_type=KeyType.ECDSA.value, data=b"\x01")

    with pytest.raises(MissingDeserializerError):
        deserialize_public_key(data.SerializeToString())
    with pytest.raises(MissingDeserializerError):
        public_key_from_protobuf(data)


def test_missing_private_key_deserializer():
    data = crypto_pb2.PrivateKey(key_type=KeyType.ECDSA.value, data=b"\x01")

    with pytest.raises(MissingDeserializerError):
        deserialize_private_key(data.SerializeToString())


def test_public_key_from_protobuf(key_pair):
    protobuf_key = key_pair.public_key.serialize_to_protobuf()

    assert public_key_from_protobuf(protobuf_key) == key_pair.public_key


def test_malformed_key_messages():
    with pytest.raises(InvalidKeyError):
        deserialize_public_key(b"\xff\xff\xff")
    with pytest.raises(InvalidKeyError):
        deserialize_private_key(b"\xff\xff\xff")


def test_undecodable_key_bytes():
    data = crypto_pb2.PublicKey(key_type=KeyType.Ed25519.value, data=b"\x01" * 5)

    with pytest.raises(InvalidKeyError):
        deserialize_public_key(data.SerializeToString())
