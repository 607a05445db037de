import pytest

from libp2p_core.crypto.exceptions import (
    InvalidKeyError,
)
from libp2p_core.crypto.keys import (
    KeyType,
)
from libp2p_core.crypto.secp256k1 import (
    Secp256k1PrivateKey,
    Secp256k1PublicKey,
    create_new_key_pair,
)
from libp2p_core.crypto.serialization import (
    deserialize_private_key,
    deserialize_public_key,
)


def test_public_key_serialize_deserialize_round_trip():
    key_pair = create_new_key_pair()
    public_key = key_pair.public_key

    another_public_key = deserialize_public_key(public_key.serialize())

    assert public_key == another_public_key
    assert another_public_key.get_type() is KeyType.Secp256k1
    assert len(public_key.to_bytes()) == 33


def test_private_key_serialize_deserialize_round_trip():
    key_pair = create_new_key_pair()
    private_key = key_pair.private_key

    another_private_key = deserialize_private_key(private_key.serialize())

    assert private_key == another_private_key


def test_sign_and_verify():
    key_pair = create_new_key_pair()
    signature = key_pair.private_key.sign(b"hello")

    assert key_pair.public_key.verify(b"hello", signature)
    assert not key_pair.public_key.verify(b"other", signature)
    assert not key_pair.public_key.verify(b"hello", b"not-der")


def test_invalid_key_bytes():
    with pytest.raises(InvalidKeyError):
        Secp256k1PublicKey.from_bytes(b"\x02" + b"\xff" * 10)
    with pytest.raises(InvalidKeyError):
        Secp256k1PrivateKey.from_bytes(b"\x00" * 32)
