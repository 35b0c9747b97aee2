"""
Copyright (c) 2020, the TinyStacks developers
See LICENSE for details

c32check, the checksummed base-32 text encoding of Stacks addresses. An
address is "S", the c32 character of the version, and the c32 encoding of the
hash160 followed by a 4-byte double-sha256 checksum.
"""

from tinystacks import StacksError
from tinystacks.crypto.crypto import RIPEMD160_SIZE, sha256
from tinystacks.util.encode import ByteArray


C32_ALPHABET = "0123456789ABCDEFGHJKMNPQRSTVWXYZ"
CHECKSUM_SIZE = 4
ADDRESS_PREFIX = "S"


class AddressError(StacksError):
    """
    An AddressError indicates a string that is not valid c32 or c32check, or a
    version or payload that cannot be encoded.
    """

    pass


def c32normalize(s):
    """
    Uppercase the string and map the characters that are easily confused with
    digits onto those digits.
    """
    return s.upper().replace("O", "0").replace("L", "1").replace("I", "1")


def c32encode(b):
    """
    Encode the bytes as c32. Each leading zero byte becomes one leading "0"
    character.

    Args:
        b (byte-like): The bytes to encode.

    Returns:
        str: The c32 string.
    """
    b = ByteArray(b)
    num = b.int()
    chars = []
    while num > 0:
        num, rem = divmod(num, 32)
        chars.append(C32_ALPHABET[rem])
    for v in b.b:
        if v != 0:
            break
        chars.append(C32_ALPHABET[0])
    return "".join(reversed(chars))


def c32decode(s):
    """
    Decode the c32 string. Each leading "0" character becomes one leading zero
    byte.

    Args:
        s (str): The c32 string.

    Returns:
        ByteArray: The decoded bytes.
    """
    s = c32normalize(s)
    num = 0
    for ch in s:
        idx = C32_ALPHABET.find(ch)
        if idx < 0:
            raise AddressError(f"invalid c32 character {ch!r}")
        num = num * 32 + idx
    leadingZeros = len(s) - len(s.lstrip(C32_ALPHABET[0]))
    body = ByteArray(num) if num else ByteArray(b"")
    return ByteArray(bytearray(leadingZeros)) + body


def c32checksum(version, data):
    """
    The first 4 bytes of the double sha256 of the version byte and data.
    """
    return sha256(sha256(bytearray([version]) + ByteArray(data).b).b)[:CHECKSUM_SIZE]


def c32checkEncode(version, data):
    """
    c32check encoding of the version and data.

    Args:
        version (int): The version, 0 through 31.
        data (byte-like): The payload.

    Returns:
        str: The version character followed by c32(data || checksum).
    """
    if version < 0 or version >= len(C32_ALPHABET):
        raise AddressError(f"invalid c32check version {version}")
    data = ByteArray(data)
    return C32_ALPHABET[version] + c32encode(data + c32checksum(version, data))


def c32checkDecode(s):
    """
    Decode a c32check string.

    Args:
        s (str): The c32check string.

    Returns:
        int: The version.
        ByteArray: The payload.
    """
    s = c32normalize(s)
    if len(s) < 2:
        raise AddressError("c32check string too short")
    version = C32_ALPHABET.find(s[0])
    if version < 0:
        raise AddressError(f"invalid c32 version character {s[0]!r}")
    decoded = c32decode(s[1:])
    if len(decoded) < CHECKSUM_SIZE:
        raise AddressError("c32check string too short for a checksum")
    data = decoded[: len(decoded) - CHECKSUM_SIZE].copy()
    checksum = decoded[len(decoded) - CHECKSUM_SIZE :]
    if checksum != c32checksum(version, data):
        raise AddressError("c32check checksum mismatch")
    return version, data


def c32address(version, hash160):
    """
    The text form of a Stacks address.

    Args:
        version (int): The address version.
        hash160 (byte-like): The 20-byte hash.

    Returns:
        str: The address string, e.g. "SP3FGQ8Z7JY9BWYZ5WM53E0M9NK7WHJF0691NZ159".
    """
    hash160 = ByteArray(hash160)
    if len(hash160) != RIPEMD160_SIZE:
        raise AddressError(f"invalid address hash length {len(hash160)}")
    return ADDRESS_PREFIX + c32checkEncode(version, hash160)


def c32addressDecode(addr):
    """
    Decode the text form of a Stacks address.

    Args:
        addr (str): The address string.

    Returns:
        int: The address version.
        ByteArray: The 20-byte hash.
    """
    if len(addr) <= 5 or addr[0] != ADDRESS_PREFIX:
        raise AddressError(f"invalid address {addr!r}")
    version, hash160 = c32checkDecode(addr[1:])
    if len(hash160) != RIPEMD160_SIZE:
        raise AddressError(f"invalid address hash length {len(hash160)}")
    return version, hash160
