import base58
import multihash

from libp2p_core.crypto.keys import (
    PublicKey,
)

# NOTE: keys whose protobuf serialization fits in MAX_INLINE_KEY_LENGTH bytes
# are embedded in the ID with the identity multihash, as go-libp2p does.
# See: https://github.com/libp2p/specs/issues/138
MAX_INLINE_KEY_LENGTH = 42


class ID:
    """
    A peer identity: the multihash of the peer's serialized public key.

    IDs compare equal to other IDs with the same bytes, to their raw bytes and
    to their base58 text form.
    """

    _bytes: bytes
    _b58_str: str | None = None

    def __init__(self, peer_id_bytes: bytes) -> None:
        self._bytes = bytes(peer_id_bytes)

    def to_bytes(self) -> bytes:
        return self._bytes

    def to_base58(self) -> str:
        if self._b58_str is None:
            self._b58_str = base58.b58encode(self._bytes).decode()
        return self._b58_str

    def __repr__(self) -> str:
        return f"<libp2p_core.peer.id.ID ({self!s})>"

    __str__ = pretty = to_string = to_base58

    def __eq__(self, other: object) -> bool:
        if isinstance(other, ID):
            return self._bytes == other._bytes
        if isinstance(other, bytes):
            return self._bytes == other
        if isinstance(other, str):
            return self.to_base58() == other
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._bytes)

    def matches_pubkey(self, key: PublicKey) -> bool:
        """Whether this ID was derived from ``key``."""
        return self == ID.from_pubkey(key)

    @classmethod
    def from_base58(cls, b58_encoded_peer_id_str: str) -> "ID":
        """
        :raises ValueError: if the text is not base58 or does not decode to a
            multihash.
        """
        return cls.from_multihash(base58.b58decode(b58_encoded_peer_id_str))

    @classmethod
    def from_multihash(cls, data: bytes) -> "ID":
        """
        Build an ID from its binary form, checking that it is a well-formed
        multihash.

        :raises ValueError: if ``data`` is not a valid multihash.
        """
        try:
            multihash.decode(data)
        except TypeError as e:
            raise ValueError(f"invalid peer id bytes: {e}") from e
        return cls(data)

    @classmethod
    def from_pubkey(cls, key: PublicKey) -> "ID":
        serialized_key = key.serialize()
        if len(serialized_key) <= MAX_INLINE_KEY_LENGTH:
            algo = multihash.Func.identity
        else:
            algo = multihash.Func.sha2_256
        return cls(multihash.digest(serialized_key, algo).encode())
