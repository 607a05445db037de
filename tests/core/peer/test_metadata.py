import pytest

from libp2p_core.peer.metadata import (
    LatencyMetadata,
    MetadataKey,
    Prunable,
    PrunableMetadata,
    running_average,
)


def test_metadata_keys():
    assert [key.value for key in MetadataKey] == [
        "agentVersion",
        "protocolVersion",
        "latency",
        "lastHandshake",
        "observedAddress",
        "prunable",
    ]


@pytest.mark.parametrize(
    "average, count, sample, expected",
    (
        (0, 0, 100, (100, 1)),
        (100, 1, 200, (150, 2)),
        (150, 2, 400, (233, 3)),
        (10, 4, 10, (10, 5)),
        (7, 1, 0, (3, 2)),
    ),
)
def test_running_average(average, count, sample, expected):
    assert running_average(average, count, sample) == expected


def test_latency_metadata_tracks_streams_and_connections_separately():
    latency = LatencyMetadata()

    latency = latency.with_stream_latency(1_000)
    latency = latency.with_stream_latency(3_000)
    latency = latency.with_connection_latency(10_000)

    assert latency == LatencyMetadata(
        stream_latency=2_000,
        connection_latency=10_000,
        stream_count=2,
        connection_count=1,
    )


def test_latency_metadata_bytes_round_trip():
    latency = LatencyMetadata(5, 6, 7, 8)

    assert LatencyMetadata.from_bytes(latency.to_bytes()) == latency


@pytest.mark.parametrize(
    "data",
    (
        b"not json",
        b"[1, 2]",
        b'{"stream_latency": -1}',
        b'{"unknown": 1}',
        b'{"stream_count": "3"}',
    ),
)
def test_latency_metadata_from_invalid_bytes(data):
    with pytest.raises(ValueError):
        LatencyMetadata.from_bytes(data)


def test_latency_metadata_rejects_negative_samples():
    with pytest.raises(ValueError):
        LatencyMetadata().with_stream_latency(-5)


def test_latency_metadata_str():
    latency = LatencyMetadata(stream_latency=4_000, stream_count=1)

    assert str(latency) == (
        "Connections: 0us averaged over 0 pings\n"
        "Streams: 4us averaged over 1 ping"
    )


def test_prunable_metadata():
    metadata = PrunableMetadata(Prunable.NECESSARY)

    assert PrunableMetadata().prunable is Prunable.PRUNABLE
    assert PrunableMetadata.from_bytes(metadata.to_bytes()) == metadata
    assert str(metadata) == "Peer Importance: necessary"
    assert [p.value for p in Prunable] == [0, 1, 2]

    with pytest.raises(ValueError):
        PrunableMetadata.from_bytes(b'{"prunable": 9}')
