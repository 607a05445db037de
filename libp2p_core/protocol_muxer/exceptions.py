from libp2p_core.exceptions import (
    ParseError,
)


class ProtocolParseError(ParseError):
    """Raised when a protocol id carries a malformed version suffix."""
