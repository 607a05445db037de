from libp2p_core.exceptions import (
    BaseLibp2pError,
)


class CryptographyError(BaseLibp2pError):
    pass


class InvalidKeyError(CryptographyError):
    """Raised when key bytes cannot be decoded into a key of the claimed type."""


class MissingDeserializerError(CryptographyError):
    """
    Raised when a serialized key names a key type this package cannot decode,
    such as ECDSA.
    """
