import threading

from multiaddr import Multiaddr
import pytest

from libp2p_core.abc import (
    IRecord,
)
from libp2p_core.crypto import (
    ed25519,
    rsa,
    secp256k1,
)
from libp2p_core.crypto.keys import (
    KeyType,
)
import libp2p_core.crypto.pb.crypto_pb2 as crypto_pb
from libp2p_core.peer.envelope import (
    ComputeOnce,
    Envelope,
    PayloadKind,
    consume_envelope,
    open_envelope,
    seal_record,
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
from libp2p_core.peer.id import ID
import libp2p_core.peer.pb.envelope_pb2 as env_pb
from libp2p_core.peer.peer_record import (
    PEER_RECORD_ENVELOPE_PAYLOAD_TYPE,
    PeerRecord,
)
from libp2p_core.peer.signing import (
    make_unsigned,
)

DOMAIN = "libp2p-peer-record"
ADDRS = [Multiaddr("/ip4/127.0.0.1/tcp/4001"), Multiaddr("/ip4/127.0.0.1/tcp/4002")]


class FakeRecord(IRecord):
    def __init__(self, peer_id, domain=DOMAIN, codec=PEER_RECORD_ENVELOPE_PAYLOAD_TYPE):
        self._peer_id = peer_id
        self._domain = domain
        self._codec = codec

    @property
    def peer_id(self):
        return self._peer_id

    @property
    def addrs(self):
        return []

    @property
    def seq(self):
        return 1

    def domain(self):
        return self._domain

    def codec(self):
        return self._codec

    def marshal_record(self):
        return b"fake-record"

    def equal(self, other):
        return other is self

    def unsigned_payload(self):
        return make_unsigned(self._domain, self._codec, self.marshal_record())

    def seal(self, private_key):
        return seal_record(self, private_key)


def _make_record(key_pair, seq=12345):
    return PeerRecord(ID.from_pubkey(key_pair.public_key), ADDRS, seq)


def _envelope_message(public_key, payload_type, payload, signature):
    msg = env_pb.Envelope(
        payload_type=payload_type, payload=payload, signature=signature
    )
    if public_key is not None:
        msg.public_key.CopyFrom(public_key.serialize_to_protobuf())
    return msg


def test_basic_protobuf_serialization_deserialization():
    pubkey = crypto_pb.PublicKey()
    pubkey.key_type = crypto_pb.KeyType.Value("Ed25519")
    pubkey.data = b"\x01\x02\x03"

    env = env_pb.Envelope()
    env.public_key.CopyFrom(pubkey)
    env.payload_type = PEER_RECORD_ENVELOPE_PAYLOAD_TYPE
    env.payload = b"test-payload"
    env.signature = b"signature-bytes"

    new_env = env_pb.Envelope()
    new_env.ParseFromString(env.SerializeToString())

    assert new_env.public_key.key_type == KeyType.Ed25519.value
    assert new_env.public_key.data == b"\x01\x02\x03"
    assert new_env.payload_type == PEER_RECORD_ENVELOPE_PAYLOAD_TYPE
    assert new_env.payload == b"test-payload"
    assert new_env.signature == b"signature-bytes"


@pytest.mark.parametrize(
    "new_key_pair",
    [
        ed25519.create_new_key_pair,
        secp256k1.create_new_key_pair,
        rsa.create_new_key_pair,
    ],
    ids=["ed25519", "secp256k1", "rsa"],
)
def test_seal_and_open_roundtrip(new_key_pair):
    key_pair = new_key_pair()
    record = _make_record(key_pair)

    envelope = seal_record(record, key_pair.private_key)
    opened = open_envelope(envelope.marshal_envelope())

    assert opened == envelope
    assert opened.public_key == key_pair.public_key
    assert opened.record() == record
    assert opened.record().addrs == ADDRS


def test_record_seal_matches_seal_record(key_pair):
    record = _make_record(key_pair)

    envelope = record.seal(key_pair.private_key)

    assert envelope.payload_type == b"\x03\x01"
    assert envelope.raw_payload == record.marshal_record()
    assert key_pair.public_key.verify(record.unsigned_payload(), envelope.signature)
    assert envelope.record() == record


def test_seal_and_consume_envelope_roundtrip(key_pair):
    record = _make_record(key_pair)
    serialized = seal_record(record, key_pair.private_key).marshal_envelope()

    env, rec = consume_envelope(serialized)

    assert env.public_key == key_pair.public_key
    assert rec.peer_id == ID.from_pubkey(key_pair.public_key)
    assert rec.seq == 12345
    assert rec.addrs == ADDRS


def test_open_with_explicit_public_key(key_pair):
    record = _make_record(key_pair)
    envelope = seal_record(record, key_pair.private_key)
    msg = _envelope_message(
        None, envelope.payload_type, envelope.raw_payload, envelope.signature
    )

    opened = open_envelope(msg.SerializeToString(), key_pair.public_key)

    assert opened.record() == record


def test_open_with_wrong_explicit_public_key(key_pair):
    envelope = seal_record(_make_record(key_pair), key_pair.private_key)
    stranger = ed25519.create_new_key_pair()

    with pytest.raises(InvalidSignatureError):
        open_envelope(envelope.marshal_envelope(), stranger.public_key)


def test_open_without_public_key(key_pair):
    envelope = seal_record(_make_record(key_pair), key_pair.private_key)
    msg = _envelope_message(
        None, envelope.payload_type, envelope.raw_payload, envelope.signature
    )

    with pytest.raises(NoPublicKeyError):
        open_envelope(msg.SerializeToString())


@pytest.mark.parametrize(
    "key_type, data",
    [("Ed25519", b"\x01\x02"), ("ECDSA", b"\x01\x02\x03")],
)
def test_open_with_undecodable_embedded_key(key_pair, key_type, data):
    envelope = seal_record(_make_record(key_pair), key_pair.private_key)
    msg = _envelope_message(
        None, envelope.payload_type, envelope.raw_payload, envelope.signature
    )
    msg.public_key.key_type = crypto_pb.KeyType.Value(key_type)
    msg.public_key.data = data

    with pytest.raises(NoPublicKeyError):
        open_envelope(msg.SerializeToString())


def test_open_rejects_garbage():
    with pytest.raises(RecordParseError):
        open_envelope(b"\xff\xff\xff")


def test_open_rejects_empty_payload_type(key_pair):
    payload = _make_record(key_pair).marshal_record()
    signature = key_pair.private_key.sign(make_unsigned(DOMAIN, b"", payload))
    msg = _envelope_message(key_pair.public_key, b"", payload, signature)

    with pytest.raises(EmptyPayloadTypeError):
        open_envelope(msg.SerializeToString())


def test_open_rejects_unsupported_payload_type(key_pair):
    payload_type = b"\x03\x02"
    payload = _make_record(key_pair).marshal_record()
    signature = key_pair.private_key.sign(make_unsigned(DOMAIN, payload_type, payload))
    msg = _envelope_message(key_pair.public_key, payload_type, payload, signature)

    with pytest.raises(UnsupportedPayloadTypeError) as excinfo:
        open_envelope(msg.SerializeToString())
    assert isinstance(excinfo.value, InvalidSignatureError)


def test_open_rejects_signature_over_another_domain(key_pair):
    payload = _make_record(key_pair).marshal_record()
    signature = key_pair.private_key.sign(
        make_unsigned("libp2p-other-record", PEER_RECORD_ENVELOPE_PAYLOAD_TYPE, payload)
    )
    msg = _envelope_message(
        key_pair.public_key, PEER_RECORD_ENVELOPE_PAYLOAD_TYPE, payload, signature
    )

    with pytest.raises(InvalidSignatureError):
        open_envelope(msg.SerializeToString())


def test_seal_rejects_record_of_another_peer(key_pair):
    other_peer = ID.from_pubkey(ed25519.create_new_key_pair().public_key)
    record = PeerRecord(other_peer, ADDRS, 1)

    with pytest.raises(PublicKeyMismatchError):
        seal_record(record, key_pair.private_key)
    with pytest.raises(PublicKeyMismatchError):
        record.seal(key_pair.private_key)


def test_open_rejects_record_of_another_peer(key_pair):
    other_peer = ID.from_pubkey(ed25519.create_new_key_pair().public_key)
    record = PeerRecord(other_peer, ADDRS, 1)
    signature = key_pair.private_key.sign(record.unsigned_payload())
    msg = _envelope_message(
        key_pair.public_key,
        PEER_RECORD_ENVELOPE_PAYLOAD_TYPE,
        record.marshal_record(),
        signature,
    )
    data = msg.SerializeToString()

    with pytest.raises(PublicKeyMismatchError):
        open_envelope(data)
    with pytest.raises(PublicKeyMismatchError):
        consume_envelope(data)

    envelope = Envelope(
        key_pair.public_key,
        PEER_RECORD_ENVELOPE_PAYLOAD_TYPE,
        record.marshal_record(),
        signature,
    )
    with pytest.raises(PublicKeyMismatchError):
        envelope.record()


@pytest.mark.parametrize("field", ["signature", "raw_payload"])
def test_flipping_any_bit_breaks_verification(key_pair, field):
    envelope = seal_record(_make_record(key_pair), key_pair.private_key)
    data = envelope.marshal_envelope()
    region = getattr(envelope, field)
    start = data.index(region)

    for offset in range(start, start + len(region)):
        for bit in range(8):
            tampered = bytearray(data)
            tampered[offset] ^= 1 << bit
            with pytest.raises(InvalidSignatureError):
                open_envelope(bytes(tampered))


def test_envelope_construction_verifies_signature(key_pair):
    envelope = seal_record(_make_record(key_pair), key_pair.private_key)

    same = Envelope(
        envelope.public_key,
        envelope.payload_type,
        envelope.raw_payload,
        envelope.signature,
    )
    assert same.equal(envelope)

    with pytest.raises(InvalidSignatureError):
        Envelope(
            envelope.public_key,
            envelope.payload_type,
            envelope.raw_payload,
            b"wrong-signature",
        )
    with pytest.raises(InvalidSignatureError):
        Envelope(
            envelope.public_key,
            envelope.payload_type,
            b"tampered",
            envelope.signature,
        )


def test_envelope_equal(key_pair):
    record = _make_record(key_pair, seq=1)
    env1 = seal_record(record, key_pair.private_key)
    env2 = seal_record(PeerRecord(record.peer_id, ADDRS, 2), key_pair.private_key)

    assert env1 == open_envelope(env1.marshal_envelope())
    assert hash(env1) == hash(open_envelope(env1.marshal_envelope()))
    assert not env1.equal(env2)
    assert not env1.equal("not-an-envelope")


def test_envelope_is_immutable(key_pair):
    envelope = seal_record(_make_record(key_pair), key_pair.private_key)

    with pytest.raises(AttributeError):
        envelope.signature = b"other"
    with pytest.raises(AttributeError):
        envelope.raw_payload = b"other"


def test_envelope_repr(key_pair):
    envelope = seal_record(_make_record(key_pair), key_pair.private_key)

    text = repr(envelope)

    assert text.startswith(f"Envelope(peer_id={ID.from_pubkey(key_pair.public_key)}")
    assert "payload_type=0301" in text
    assert f"signature_len={len(envelope.signature)}" in text


def test_seal_requires_private_key(key_pair):
    record = _make_record(key_pair)

    with pytest.raises(NoPrivateKeyError):
        seal_record(record, key_pair.public_key)
    with pytest.raises(NoPrivateKeyError):
        seal_record(record, None)


def test_seal_rejects_empty_domain(key_pair, peer_id):
    with pytest.raises(EmptyDomainError):
        seal_record(FakeRecord(peer_id, domain=""), key_pair.private_key)


def test_seal_rejects_empty_codec(key_pair, peer_id):
    with pytest.raises(EmptyPayloadTypeError):
        seal_record(FakeRecord(peer_id, codec=b""), key_pair.private_key)


def test_seal_rejects_unknown_codec(key_pair, peer_id):
    with pytest.raises(UnsupportedPayloadTypeError):
        seal_record(FakeRecord(peer_id, codec=b"\x99"), key_pair.private_key)


def test_payload_kind_dispatch():
    assert PayloadKind.from_payload_type(b"\x03\x01") is PayloadKind.PEER_RECORD
    assert PayloadKind.PEER_RECORD.domain == DOMAIN

    with pytest.raises(EmptyPayloadTypeError):
        PayloadKind.from_payload_type(b"")
    with pytest.raises(UnsupportedPayloadTypeError):
        PayloadKind.from_payload_type(b"\x81\x06")


def test_record_is_decoded_once_across_threads(key_pair):
    envelope = seal_record(_make_record(key_pair), key_pair.private_key)
    barrier = threading.Barrier(8)
    results = []

    def read_record():
        barrier.wait()
        results.append(envelope.record())

    threads = [threading.Thread(target=read_record) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(results) == 8
    assert all(r is results[0] for r in results)


def test_compute_once_runs_once_and_remembers_errors():
    calls = []

    def compute():
        calls.append(1)
        return object()

    cell = ComputeOnce(compute)
    assert cell.get() is cell.get()
    assert len(calls) == 1

    def fail():
        calls.append(1)
        raise ValueError("boom")

    failing = ComputeOnce(fail)
    for _ in range(2):
        with pytest.raises(ValueError, match="boom"):
            failing.get()
    assert len(calls) == 2
