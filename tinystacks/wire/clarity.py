"""
Copyright (c) 2020, the TinyStacks developers
See LICENSE for details

Clarity values. Every value serializes as a 1-byte type ID followed by a
type-specific body. Composite values (responses, optionals, lists and tuples)
contain other values, so the codec is recursive.
"""

import re

from tinystacks import DeserializationError, SerializationError
from tinystacks.util.encode import ByteArray

from . import wire
from .address import Address


# fmt: off
ClarityInt               = 0x00
ClarityUInt              = 0x01
ClarityBuffer            = 0x02
ClarityBoolTrue          = 0x03
ClarityBoolFalse         = 0x04
ClarityPrincipalStandard = 0x05
ClarityPrincipalContract = 0x06
ClarityResponseOk        = 0x07
ClarityResponseErr       = 0x08
ClarityOptionalNone      = 0x09
ClarityOptionalSome      = 0x0A
ClarityList              = 0x0B
ClarityTuple             = 0x0C
# fmt: on

# Clarity integers are 128 bits wide.
ClarityIntSize = 16
MaxInt128 = (1 << 127) - 1
MinInt128 = -(1 << 127)
MaxUInt128 = (1 << 128) - 1

# MaxBufferLength is the largest buffer value, in bytes.
MaxBufferLength = 1000000

# Contract names and tuple keys must be shorter than this many bytes.
MaxClarityNameLength = 128

CLARITY_NAME_RE = re.compile(r"[a-zA-Z]([a-zA-Z0-9]|[-_!?+<>=/*])*|[-+=/*]|[<>]=?")

# MaxValueDepth is the deepest nesting of composite values that will be
# decoded. A value that is not inside another value is at depth 1.
MaxValueDepth = 32


def isClarityName(name):
    """
    Whether name is a legal Clarity identifier, usable as a tuple key.

    Args:
        name (str): The candidate name.

    Returns:
        bool: True if the name is valid.
    """
    if not isinstance(name, str):
        return False
    if len(name.encode("utf-8")) >= MaxClarityNameLength:
        return False
    return CLARITY_NAME_RE.fullmatch(name) is not None


class ClarityValue:
    """
    The base for the Clarity value types. Subclasses set typeID and implement
    serializeBody and, for equality, fields.
    """

    typeID = None

    def serializeBody(self):
        return ByteArray(b"")

    def fields(self):
        return ()

    def serialize(self):
        """
        Serialize the value with its type ID prefix.

        Returns:
            ByteArray: The encoded value.
        """
        return ByteArray(self.typeID, length=1) + self.serializeBody()

    def __eq__(self, other):
        return (
            isinstance(other, ClarityValue)
            and self.typeID == other.typeID
            and self.fields() == other.fields()
        )

    def __ne__(self, other):
        return not self.__eq__(other)

    def __repr__(self):
        return f"{type(self).__name__}({cvToString(self)})"

    @staticmethod
    def deserialize(b):
        return deserializeCV(b)


class IntCV(ClarityValue):
    """A signed 128-bit integer."""

    typeID = ClarityInt

    def __init__(self, value):
        if not isinstance(value, int) or not MinInt128 <= value <= MaxInt128:
            raise SerializationError(f"{value!r} is not a signed 128-bit integer")
        self.value = value

    def fields(self):
        return (self.value,)

    def serializeBody(self):
        return ByteArray(self.value.to_bytes(ClarityIntSize, "big", signed=True))


class UIntCV(ClarityValue):
    """An unsigned 128-bit integer."""

    typeID = ClarityUInt

    def __init__(self, value):
        if not isinstance(value, int) or not 0 <= value <= MaxUInt128:
            raise SerializationError(f"{value!r} is not an unsigned 128-bit integer")
        self.value = value

    def fields(self):
        return (self.value,)

    def serializeBody(self):
        return ByteArray(self.value, length=ClarityIntSize)


class BufferCV(ClarityValue):
    """An opaque byte buffer of at most MaxBufferLength bytes."""

    typeID = ClarityBuffer

    def __init__(self, buffer):
        buffer = ByteArray(buffer)
        if len(buffer) > MaxBufferLength:
            raise SerializationError(
                f"buffer length {len(buffer)} exceeds maximum bytes {MaxBufferLength}"
            )
        self.buffer = buffer

    def fields(self):
        return (self.buffer.bytes(),)

    def serializeBody(self):
        return wire.writeUint(len(self.buffer), 4, "buffer length") + self.buffer


class BooleanCV(ClarityValue):
    """
    True and false are distinct type IDs with empty bodies.
    """

    def __init__(self, value):
        self.value = bool(value)

    @property
    def typeID(self):
        return ClarityBoolTrue if self.value else ClarityBoolFalse


class StandardPrincipalCV(ClarityValue):
    """A principal that is an account address."""

    typeID = ClarityPrincipalStandard

    def __init__(self, address):
        self.address = address

    def fields(self):
        return (self.address,)

    def serializeBody(self):
        return self.address.serialize()


class ContractPrincipalCV(ClarityValue):
    """A principal that is a contract, an address and a contract name."""

    typeID = ClarityPrincipalContract

    def __init__(self, address, contractName):
        wire.checkStringLength(
            contractName, MaxClarityNameLength - 1, "contract name"
        )
        self.address = address
        self.contractName = contractName

    def fields(self):
        return (self.address, self.contractName)

    def serializeBody(self):
        return self.address.serialize() + wire.writeLPString(self.contractName)


class ResponseOkCV(ClarityValue):
    typeID = ClarityResponseOk

    def __init__(self, value):
        self.value = value

    def fields(self):
        return (self.value,)

    def serializeBody(self):
        return self.value.serialize()


class ResponseErrCV(ClarityValue):
    typeID = ClarityResponseErr

    def __init__(self, value):
        self.value = value

    def fields(self):
        return (self.value,)

    def serializeBody(self):
        return self.value.serialize()


class NoneCV(ClarityValue):
    typeID = ClarityOptionalNone


class SomeCV(ClarityValue):
    typeID = ClarityOptionalSome

    def __init__(self, value):
        self.value = value

    def fields(self):
        return (self.value,)

    def serializeBody(self):
        return self.value.serialize()


class ListCV(ClarityValue):
    """An ordered list of values."""

    typeID = ClarityList

    def __init__(self, values):
        self.values = list(values)

    def fields(self):
        return tuple(self.values)

    def serializeBody(self):
        return wire.writeLPList(self.values)


class TupleCV(ClarityValue):
    """
    A record of named values. Entries are kept sorted by the byte order of
    their keys, which is also the order they are serialized in, so two tuples
    with the same entries are equal regardless of construction order.
    """

    typeID = ClarityTuple

    def __init__(self, data):
        """
        Args:
            data (dict(str, ClarityValue)): The entries.
        """
        for key in data:
            if not isClarityName(key):
                raise SerializationError(f"{key!r} is not a valid Clarity name")
        self.data = {k: data[k] for k in sorted(data, key=lambda k: k.encode("utf-8"))}

    def fields(self):
        return tuple(self.data.items())

    def serializeBody(self):
        b = wire.writeUint(len(self.data), 4, "tuple length")
        for key, value in self.data.items():
            b += wire.writeLPString(key)
            b += value.serialize()
        return b


def readInt(b, depth):
    return IntCV(b.pop(ClarityIntSize).int(signed=True))


def readUInt(b, depth):
    return UIntCV(b.pop(ClarityIntSize).int())


def readBuffer(b, depth):
    length = wire.readUint(b, 4)
    if length > MaxBufferLength:
        raise DeserializationError(
            f"buffer length {length} exceeds maximum bytes {MaxBufferLength}"
        )
    return BufferCV(b.pop(length))


def readContractPrincipal(b, depth):
    address = Address.deserialize(b)
    name = wire.readLPString(b, maxLength=MaxClarityNameLength - 1)
    return ContractPrincipalCV(address, name)


def readList(b, depth):
    return ListCV(wire.readLPList(b, lambda b: deserializeCV(b, depth + 1)))


def readTuple(b, depth):
    count = wire.readUint(b, 4)
    data = {}
    for _ in range(count):
        key = wire.readLPString(b)
        if not isClarityName(key):
            raise DeserializationError(f"{key!r} is not a valid Clarity name")
        if key in data:
            raise DeserializationError(f"duplicate tuple key {key!r}")
        data[key] = deserializeCV(b, depth + 1)
    return TupleCV(data)


# Body decoders for each type ID.
cvReaders = {
    ClarityInt: readInt,
    ClarityUInt: readUInt,
    ClarityBuffer: readBuffer,
    ClarityBoolTrue: lambda b, depth: BooleanCV(True),
    ClarityBoolFalse: lambda b, depth: BooleanCV(False),
    ClarityPrincipalStandard: lambda b, depth: StandardPrincipalCV(
        Address.deserialize(b)
    ),
    ClarityPrincipalContract: readContractPrincipal,
    ClarityResponseOk: lambda b, depth: ResponseOkCV(deserializeCV(b, depth + 1)),
    ClarityResponseErr: lambda b, depth: ResponseErrCV(deserializeCV(b, depth + 1)),
    ClarityOptionalNone: lambda b, depth: NoneCV(),
    ClarityOptionalSome: lambda b, depth: SomeCV(deserializeCV(b, depth + 1)),
    ClarityList: readList,
    ClarityTuple: readTuple,
}


def deserializeCV(b, depth=1):
    """
    Read one Clarity value, dispatching on its type ID.

    Args:
        b (ByteArray): The cursor.
        depth (int): The nesting depth of the value. Values nested deeper
            than MaxValueDepth are rejected.

    Returns:
        ClarityValue: The decoded value.
    """
    if depth > MaxValueDepth:
        raise DeserializationError(
            f"Clarity value nesting exceeds maximum depth {MaxValueDepth}"
        )
    typeID = wire.readUint(b, 1)
    reader = cvReaders.get(typeID)
    if reader is None:
        raise DeserializationError(f"unknown Clarity type ID {typeID:#04x}")
    return reader(b, depth)


def cvToString(cv):
    """
    Render the value in Clarity syntax, e.g. "(tuple (a u1) (b (some true)))".

    Args:
        cv (ClarityValue): The value.

    Returns:
        str: The rendering.
    """
    if isinstance(cv, IntCV):
        return str(cv.value)
    if isinstance(cv, UIntCV):
        return f"u{cv.value}"
    if isinstance(cv, BufferCV):
        return "0x" + cv.buffer.hex()
    if isinstance(cv, BooleanCV):
        return "true" if cv.value else "false"
    if isinstance(cv, StandardPrincipalCV):
        return cv.address.string()
    if isinstance(cv, ContractPrincipalCV):
        return f"{cv.address.string()}.{cv.contractName}"
    if isinstance(cv, ResponseOkCV):
        return f"(ok {cvToString(cv.value)})"
    if isinstance(cv, ResponseErrCV):
        return f"(err {cvToString(cv.value)})"
    if isinstance(cv, NoneCV):
        return "none"
    if isinstance(cv, SomeCV):
        return f"(some {cvToString(cv.value)})"
    if isinstance(cv, ListCV):
        return "(list " + " ".join(cvToString(v) for v in cv.values) + ")"
    if isinstance(cv, TupleCV):
        entries = " ".join(f"({k} {cvToString(v)})" for k, v in cv.data.items())
        return f"(tuple {entries})"
    raise SerializationError(f"not a Clarity value: {cv!r}")


def intCV(value):
    return IntCV(value)


def uintCV(value):
    return UIntCV(value)


def bufferCV(buffer):
    return BufferCV(buffer)


def bufferCVFromString(s):
    """A buffer holding the UTF-8 encoding of s."""
    return BufferCV(s.encode("utf-8"))


def trueCV():
    return BooleanCV(True)


def falseCV():
    return BooleanCV(False)


def standardPrincipalCV(addressString):
    """
    Args:
        addressString (str): The c32check address.
    """
    return StandardPrincipalCV(Address.fromString(addressString))


def contractPrincipalCV(addressString, contractName):
    """
    Args:
        addressString (str): The c32check address of the deployer.
        contractName (str): The contract name.
    """
    return ContractPrincipalCV(Address.fromString(addressString), contractName)


def responseOkCV(value):
    return ResponseOkCV(value)


def responseErrorCV(value):
    return ResponseErrCV(value)


def noneCV():
    return NoneCV()


def someCV(value):
    return SomeCV(value)


def listCV(values):
    return ListCV(values)


def tupleCV(data):
    return TupleCV(data)
