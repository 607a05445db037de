"""Well-known peer metadata keys and the values stored under them."""

from dataclasses import (
    asdict,
    dataclass,
)
from enum import (
    Enum,
    IntEnum,
)
import json
from typing import (
    Any,
)


class MetadataKey(str, Enum):
    AGENT_VERSION = "agentVersion"
    PROTOCOL_VERSION = "protocolVersion"
    LATENCY = "latency"
    LAST_HANDSHAKE = "lastHandshake"
    OBSERVED_ADDRESS = "observedAddress"
    PRUNABLE = "prunable"


def running_average(average: int, count: int, sample: int) -> tuple[int, int]:
    """
    Fold ``sample`` into an average taken over ``count`` samples.

    Plain integer mean with no decay or windowing.

    :return: the new ``(average, count)`` pair.
    """
    return (average * count + sample) // (count + 1), count + 1


def _check_unsigned(**fields: int) -> None:
    for name, value in fields.items():
        if isinstance(value, bool) or not isinstance(value, int):
            raise TypeError(f"{name} must be an int, got {value!r}")
        if value < 0:
            raise ValueError(f"{name} must be >= 0, got {value}")


@dataclass(frozen=True)
class LatencyMetadata:
    """
    Running averages of stream and connection latencies, in nanoseconds.
    """

    stream_latency: int = 0
    connection_latency: int = 0
    stream_count: int = 0
    connection_count: int = 0

    def __post_init__(self) -> None:
        _check_unsigned(**asdict(self))

    def with_stream_latency(self, sample: int) -> "LatencyMetadata":
        _check_unsigned(sample=sample)
        latency, count = running_average(
            self.stream_latency, self.stream_count, sample
        )
        return LatencyMetadata(
            stream_latency=latency,
            connection_latency=self.connection_latency,
            stream_count=count,
            connection_count=self.connection_count,
        )

    def with_connection_latency(self, sample: int) -> "LatencyMetadata":
        _check_unsigned(sample=sample)
        latency, count = running_average(
            self.connection_latency, self.connection_count, sample
        )
        return LatencyMetadata(
            stream_latency=self.stream_latency,
            connection_latency=latency,
            stream_count=self.stream_count,
            connection_count=count,
        )

    def to_bytes(self) -> bytes:
        return json.dumps(asdict(self), sort_keys=True).encode("utf-8")

    @classmethod
    def from_bytes(cls, data: bytes) -> "LatencyMetadata":
        """
        :raises ValueError: if ``data`` is not an encoded ``LatencyMetadata``.
        """
        fields = _load_object(data)
        try:
            return cls(**fields)
        except TypeError as e:
            raise ValueError(f"invalid latency metadata: {e}") from e

    def __str__(self) -> str:
        return (
            f"Connections: {self.connection_latency // 1_000}us averaged over "
            f"{self.connection_count} {_pings(self.connection_count)}\n"
            f"Streams: {self.stream_latency // 1_000}us averaged over "
            f"{self.stream_count} {_pings(self.stream_count)}"
        )


class Prunable(IntEnum):
    PRUNABLE = 0
    PREFERRED = 1
    NECESSARY = 2


@dataclass(frozen=True)
class PrunableMetadata:
    prunable: Prunable = Prunable.PRUNABLE

    def to_bytes(self) -> bytes:
        return json.dumps({"prunable": int(self.prunable)}).encode("utf-8")

    @classmethod
    def from_bytes(cls, data: bytes) -> "PrunableMetadata":
        fields = _load_object(data)
        try:
            return cls(Prunable(fields["prunable"]))
        except (KeyError, ValueError) as e:
            raise ValueError(f"invalid prunable metadata: {e}") from e

    def __str__(self) -> str:
        return f"Peer Importance: {self.prunable.name.lower()}"


def _pings(count: int) -> str:
    return "ping" if count == 1 else "pings"


def _load_object(data: bytes) -> dict[str, Any]:
    try:
        fields = json.loads(data)
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise ValueError(f"metadata is not valid JSON: {e}") from e
    if not isinstance(fields, dict):
        raise ValueError("metadata must be a JSON object")
    return fields
