# Unsigned LEB128 (varint codec) as used for length prefixes in signed
# envelope pre-images.


def encode_uvarint(value: int) -> bytes:
    """Encode an unsigned integer as a varint."""
    if value < 0:
        raise ValueError("Cannot encode negative value as uvarint")

    result = bytearray()
    while value >= 0x80:
        result.append((value & 0x7F) | 0x80)
        value >>= 7
    result.append(value & 0x7F)
    return bytes(result)


def encode_varint_prefixed(data: bytes) -> bytes:
    """Encode data with a varint length prefix."""
    return encode_uvarint(len(data)) + data
