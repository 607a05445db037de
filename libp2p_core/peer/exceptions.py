from libp2p_core.exceptions import (
    BaseLibp2pError,
    ParseError,
)


class RecordError(BaseLibp2pError):
    """Base class for signed record and envelope errors."""


class NoPrivateKeyError(RecordError):
    """Raised when signing is attempted without a private key."""


class NoPublicKeyError(RecordError):
    """Raised when no public key is available to verify an envelope."""


class EmptyDomainError(RecordError):
    """Raised when a record declares an empty signature domain."""


class EmptyPayloadTypeError(RecordError):
    """Raised when a record or envelope carries an empty payload type."""


class InvalidSignatureError(RecordError):
    """Raised when an envelope signature does not verify."""


class UnsupportedPayloadTypeError(InvalidSignatureError):
    """Raised when an envelope carries a payload type no decoder is known for."""


class PublicKeyMismatchError(RecordError):
    """Raised when a record's peer id was not derived from the expected key."""


class AddressDecodeError(RecordError):
    """Raised when none of the addresses in a record can be decoded."""


class RecordParseError(RecordError, ParseError):
    """Raised when record or envelope bytes are not a valid message."""
