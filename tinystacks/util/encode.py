"""
Copyright (c) 2020, the TinyStacks developers
See LICENSE for details

ByteArray is the byte buffer used throughout the wire code, both for building
encodings and as a sequential read cursor when decoding.
"""

from tinystacks import SerializationError, UnexpectedEndOfInput


def intToBytes(i, signed=False):
    """
    Encodes an integer to the shortest big-endian byte string that holds it.

    Args:
        i (int): The integer.
        signed (bool): Whether to encode as a signed integer.

    Returns:
        bytearray: The encoded integer.
    """
    length = ((i + ((i * signed) < 0)).bit_length() + 7 + signed) // 8
    return bytearray(i.to_bytes(length, byteorder="big", signed=signed))


def intFromBytes(b, signed=False):
    """
    Decodes a big-endian integer from bytes.

    Args:
        b (bytes-like): The encoded integer.
        signed (bool): Whether to decode as a signed integer.

    Returns:
        int: The decoded integer.
    """
    return int.from_bytes(b, "big", signed=signed)


def decodeBA(b, copy=False):
    """
    Decode into a bytearray.

    Args:
        b (str, bytes-like, ByteArray, int, list(int)): The value to decode to
            a bytearray. Strings are interpreted as hexadecimal. Integers are
            minimally encoded to an unsigned integer.

    Returns:
        bytearray: The decoded bytes.
    """
    if isinstance(b, ByteArray):
        return bytearray(b.b) if copy else b.b
    if isinstance(b, bytearray):
        return bytearray(b) if copy else b
    if isinstance(b, bytes):
        return bytearray(b)
    if isinstance(b, int):
        return intToBytes(b) if b else bytearray([0])
    if isinstance(b, str):
        return bytearray.fromhex(b)
    if hasattr(b, "__iter__"):
        return bytearray(b)
    raise TypeError("decodeBA: unknown type %s" % type(b))


class ByteArray:
    """
    ByteArray is a bytearray manager. Comparison and concatenation accept hex
    strings, bytes, ints and other ByteArrays interchangeably. An integer
    argument to the constructor results in the shortest possible big-endian
    representation of the integer. To get a zero-padded ByteArray of length
    n, use the `length` keyword argument, e.g. ByteArray(5, length=8) is the
    8-byte big-endian encoding of 5.

    When decoding, a ByteArray is consumed front to back with pop.
    """

    def __init__(self, b=b"", copy=True, length=None):
        """
        Set copy to False if you want to share the memory with another
        bytearray/ByteArray. If the type of b is not bytearray or ByteArray,
        copy has no effect.
        """
        if length:
            self.b = decodeBA(ByteArray(bytearray(length)) | b, copy=False)
        else:
            self.b = decodeBA(b, copy=copy)

    def comp(self, a):
        """
        comp gets the underlying bytearray and length of both this ByteArray
        and a.

        Args:
            a (ByteArray): The other ByteArray.

        Returns:
            bytearray: The other ByteArray's bytearray.
            int: The other ByteArray's length.
            bytearray: This ByteArray's bytearray.
            int: This ByteArray's length.
        """
        a = decodeBA(a)
        aLen, bLen = len(a), len(self.b)
        if aLen > bLen:
            raise SerializationError("value of %i bytes overflows %i" % (aLen, bLen))
        return a, aLen, self.b, bLen

    def __lt__(self, a):
        return bytearray.__lt__(self.b, decodeBA(a))

    def __le__(self, a):
        return bytearray.__le__(self.b, decodeBA(a))

    def __eq__(self, a):
        try:
            return bytearray.__eq__(self.b, decodeBA(a))
        except (TypeError, ValueError):
            return False

    def __ne__(self, a):
        return not self.__eq__(a)

    def __ge__(self, a):
        return bytearray.__ge__(self.b, decodeBA(a))

    def __gt__(self, a):
        return bytearray.__gt__(self.b, decodeBA(a))

    def __repr__(self):
        return "ByteArray(" + self.hex() + ")"

    def __len__(self):
        return len(self.b)

    def __or__(self, a):
        a, aLen, b, bLen = self.comp(a)
        b = ByteArray(b)
        for i in range(bLen):
            b[bLen - i - 1] |= a[aLen - i - 1] if i < aLen else 0
        return b

    def __add__(self, a):
        return self.__iadd__(a)

    def __iadd__(self, a):
        """append the bytes and return a new ByteArray"""
        a = decodeBA(a)
        return ByteArray(self.b + a)

    def __getitem__(self, k):
        if isinstance(k, slice):
            return ByteArray(self.b[k.start : k.stop : k.step], copy=False)
        return self.b[k]

    def __setitem__(self, i, v):
        v = decodeBA(v, copy=False)
        if i + len(v) > len(self.b):
            raise SerializationError("source bytes too long")
        for j in range(len(v)):
            self.b[i + j] = v[j]

    def __hash__(self):
        """Enables ByteArray to be a dict key."""
        return hash(bytes(self.b))

    def hex(self):
        """
        A hexadecimal string representation of the bytes.

        Returns:
            str: The hex bytes.
        """
        return self.b.hex()

    def zero(self):
        """
        Sets the bytes of the underlying bytearray to zero. The benefit of
        zeroing is that the info is destroyed immediately, rather than relying
        on the garbage collector.
        """
        for i in range(len(self.b)):
            self.b[i] = 0

    def iszero(self):
        """
        True if all bytes are zero.
        """
        return all((v == 0 for v in self.b))

    def int(self, signed=False):
        """The bytes as a big-endian integer."""
        return intFromBytes(self.b, signed=signed)

    def bytes(self):
        """The bytes as Python `bytes`."""
        return bytes(self.b)

    def copy(self):
        """A copy of the ByteArray."""
        return ByteArray(self.b)

    def pop(self, n):
        """
        Remove n bytes from the beginning of the ByteArray, returning the bytes.

        Args:
            n (int): The number of bytes to read.

        Returns:
            ByteArray: The first n bytes.

        Raises:
            UnexpectedEndOfInput: Fewer than n bytes remain.
        """
        if n > len(self.b):
            raise UnexpectedEndOfInput(
                "wanted %d bytes, only %d remaining" % (n, len(self.b))
            )
        b = self[:n]
        self.b = self.b[n:]
        return b
