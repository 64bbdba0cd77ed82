"""
Prime field helpers
"""

# Scalar field of BLS12-381
BLS12_381_SCALAR_MODULUS = 0x73eda753299d7d483339d80809a1d80553bda402fffe5bfeffffffff00000001

DEFAULT_MODULUS = BLS12_381_SCALAR_MODULUS


def get_chunk_size(modulus: int) -> int:
    """Number of bytes that always fit in one field element"""
    bits = modulus.bit_length()
    if bits > 256:
        return 32
    elif bits > 128:
        return 16
    elif bits > 64:
        return 8
    elif bits > 32:
        return 4
    elif bits > 16:
        return 2
    else:
        return 1


def to_field_chunks(data: bytes, modulus: int) -> list[int]:
    """
    Pack bytes into field elements, little endian, `get_chunk_size` bytes per element.

    The last chunk can be shorter. An empty input packs to an empty list.
    """
    chunk_size = get_chunk_size(modulus)
    return [
        int.from_bytes(data[i:i + chunk_size], 'little')
        for i in range(0, len(data), chunk_size)
    ]


def inverse(value: int, modulus: int) -> int:
    value %= modulus
    if value == 0:
        raise ZeroDivisionError("0 has no inverse")
    return pow(value, -1, modulus)
