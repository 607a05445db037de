import pytest

from libp2p_core.crypto.ed25519 import (
    create_new_key_pair,
)
from libp2p_core.peer.id import (
    ID,
)


@pytest.fixture
def key_pair():
    return create_new_key_pair()


@pytest.fixture
def peer_id(key_pair):
    return ID.from_pubkey(key_pair.public_key)
