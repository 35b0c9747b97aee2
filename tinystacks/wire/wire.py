"""
Copyright (c) 2020, the TinyStacks developers
See LICENSE for details

Constants and common routines for the Stacks transaction wire format. All
integers are big-endian.
"""

from tinystacks import DeserializationError, SerializationError
from tinystacks.util.encode import ByteArray


# fmt: off
MaxUint8  = (1 << 8) - 1
MaxUint16 = (1 << 16) - 1
MaxUint32 = (1 << 32) - 1
MaxUint64 = (1 << 64) - 1

# Transaction versions.
TxVersionMainnet = 0x00
TxVersionTestnet = 0x80

# Chain IDs.
ChainIDMainnet = 0x00000001
ChainIDTestnet = 0x80000000

# Address versions. The c32 characters are P, M, T and N respectively.
AddressVersionMainnetSingleSig = 22
AddressVersionMainnetMultiSig  = 20
AddressVersionTestnetSingleSig = 26
AddressVersionTestnetMultiSig  = 21

# Payload types.
PayloadTokenTransfer    = 0x00
PayloadSmartContract    = 0x01
PayloadContractCall     = 0x02
PayloadPoisonMicroblock = 0x03
PayloadCoinbase         = 0x04

# Anchor modes.
AnchorOnChainOnly  = 0x01
AnchorOffChainOnly = 0x02
AnchorAny          = 0x03

# Post-condition modes.
PostConditionModeAllow = 0x01
PostConditionModeDeny  = 0x02

# Post-condition types.
PostConditionSTX         = 0x00
PostConditionFungible    = 0x01
PostConditionNonFungible = 0x02

# Post-condition principal prefixes.
PrincipalOrigin   = 0x01
PrincipalStandard = 0x02
PrincipalContract = 0x03

# Authorization types.
AuthStandard  = 0x04
AuthSponsored = 0x05

# Address hash modes.
HashModeP2PKH  = 0x00
HashModeP2SH   = 0x01
HashModeP2WPKH = 0x02
HashModeP2WSH  = 0x03

# Public key encodings.
PubKeyEncodingCompressed   = 0x00
PubKeyEncodingUncompressed = 0x01

# Fungible condition codes.
FungibleEqual        = 0x01
FungibleGreater      = 0x02
FungibleGreaterEqual = 0x03
FungibleLess         = 0x04
FungibleLessEqual    = 0x05

# Non-fungible condition codes.
NonFungibleDoesNotOwn = 0x10
NonFungibleOwns       = 0x11

# Multi-sig auth field types.
AuthFieldPublicKeyCompressed   = 0x00
AuthFieldPublicKeyUncompressed = 0x01
AuthFieldSignatureCompressed   = 0x02
AuthFieldSignatureUncompressed = 0x03
# fmt: on

TxVersions = (TxVersionMainnet, TxVersionTestnet)
PayloadTypes = (
    PayloadTokenTransfer,
    PayloadSmartContract,
    PayloadContractCall,
    PayloadPoisonMicroblock,
    PayloadCoinbase,
)
AnchorModes = (AnchorOnChainOnly, AnchorOffChainOnly, AnchorAny)
PostConditionModes = (PostConditionModeAllow, PostConditionModeDeny)
PostConditionTypes = (
    PostConditionSTX,
    PostConditionFungible,
    PostConditionNonFungible,
)
PrincipalPrefixes = (PrincipalOrigin, PrincipalStandard, PrincipalContract)
AuthTypes = (AuthStandard, AuthSponsored)
SingleSigHashModes = (HashModeP2PKH, HashModeP2WPKH)
MultiSigHashModes = (HashModeP2SH, HashModeP2WSH)
HashModes = SingleSigHashModes + MultiSigHashModes
PubKeyEncodings = (PubKeyEncodingCompressed, PubKeyEncodingUncompressed)
FungibleConditionCodes = (
    FungibleEqual,
    FungibleGreater,
    FungibleGreaterEqual,
    FungibleLess,
    FungibleLessEqual,
)
NonFungibleConditionCodes = (NonFungibleDoesNotOwn, NonFungibleOwns)
AuthFieldTypes = (
    AuthFieldPublicKeyCompressed,
    AuthFieldPublicKeyUncompressed,
    AuthFieldSignatureCompressed,
    AuthFieldSignatureUncompressed,
)

# MaxStringLength is the default maximum byte length of a length-prefixed
# string, e.g. a contract, function or asset name.
MaxStringLength = 128

# MaxCodeBodyLength is the maximum byte length of smart contract source code,
# which is prefixed with a 4-byte length.
MaxCodeBodyLength = 100000

# MemoLength is the fixed, zero-padded byte length of a token transfer memo.
MemoLength = 34

# CoinbaseBufferLength is the byte length of a coinbase payload.
CoinbaseBufferLength = 32

# RecoverableSigLength is the byte length of a recoverable ECDSA signature,
# a 1-byte recovery id followed by the 32-byte r and s values.
RecoverableSigLength = 65

# Hash160Length is the byte length of an address hash.
Hash160Length = 20


def writeUint(val, size, name="value"):
    """
    writeUint encodes the unsigned integer into exactly size bytes.

    Args:
        val (int): The value.
        size (int): The byte width.
        name (str): A name for error messages.

    Returns:
        ByteArray: The encoded integer.
    """
    if not isinstance(val, int) or val < 0 or val >= 1 << (8 * size):
        raise SerializationError(
            f"{name} {val!r} is not a {8 * size}-bit unsigned integer"
        )
    return ByteArray(val, length=size)


def readUint(b, size):
    """
    readUint reads a big-endian unsigned integer of size bytes.

    Args:
        b (ByteArray): The cursor.
        size (int): The byte width.

    Returns:
        int: The value.
    """
    return b.pop(size).int()


def readEnum(b, allowed, name):
    """
    readEnum reads a single byte and checks that it is one of the allowed
    values.

    Args:
        b (ByteArray): The cursor.
        allowed (tuple(int)): The valid values.
        name (str): The field name used in the error message.

    Returns:
        int: The value.
    """
    v = readUint(b, 1)
    if v not in allowed:
        raise DeserializationError(f"could not parse {v:#04x} as {name}")
    return v


def checkStringLength(s, maxLength=MaxStringLength, name="string"):
    """
    Check the UTF-8 byte length of s against maxLength.

    Args:
        s (str): The string.
        maxLength (int): The maximum byte length.
        name (str): A name for the error message.

    Returns:
        bytes: The UTF-8 encoding of s.
    """
    if not isinstance(s, str):
        raise SerializationError(f"{name} must be a str, got {type(s).__name__}")
    enc = s.encode("utf-8")
    if len(enc) > maxLength:
        raise SerializationError(
            f"{name} length {len(enc)} exceeds maximum bytes {maxLength}"
        )
    return enc


def writeLPString(s, prefixBytes=1, maxLength=MaxStringLength):
    """
    writeLPString encodes the string as its UTF-8 byte length in prefixBytes
    bytes followed by the bytes themselves. A string longer than maxLength
    bytes is an error, it is never truncated.

    Args:
        s (str): The string.
        prefixBytes (int): The width of the length prefix.
        maxLength (int): The maximum byte length.

    Returns:
        ByteArray: The encoded string.
    """
    enc = checkStringLength(s, maxLength)
    return writeUint(len(enc), prefixBytes, "string length") + enc


def readLPString(b, prefixBytes=1, maxLength=MaxStringLength):
    """
    readLPString reads a length-prefixed UTF-8 string.

    Args:
        b (ByteArray): The cursor.
        prefixBytes (int): The width of the length prefix.
        maxLength (int): The maximum byte length.

    Returns:
        str: The string.
    """
    length = readUint(b, prefixBytes)
    if length > maxLength:
        raise DeserializationError(
            f"string length {length} exceeds maximum bytes {maxLength}"
        )
    raw = b.pop(length)
    try:
        return raw.bytes().decode("utf-8")
    except UnicodeDecodeError:
        raise DeserializationError("string is not valid UTF-8")


def checkMemo(memo):
    """
    checkMemo checks that the memo fits in MemoLength bytes and does not end
    in a NUL character, which could not be told apart from the padding.

    Args:
        memo (str): The memo.

    Returns:
        bytes: The UTF-8 encoded memo.
    """
    enc = checkStringLength(memo, MemoLength, "memo")
    if enc.endswith(b"\x00"):
        raise SerializationError("memo cannot end with a NUL character")
    return enc


def writeMemo(memo):
    """
    writeMemo encodes the memo right-padded with zero bytes to MemoLength
    bytes. There is no length prefix.
    """
    enc = checkMemo(memo)
    return ByteArray(enc) + bytearray(MemoLength - len(enc))


def readMemo(b):
    """
    readMemo reads a fixed-length memo, stripping the zero padding.
    """
    raw = b.pop(MemoLength).bytes().rstrip(b"\x00")
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError:
        raise DeserializationError("memo is not valid UTF-8")


def writeLPList(items, prefixBytes=4):
    """
    writeLPList encodes the item count followed by each item's serialization.

    Args:
        items (list): Objects implementing serialize().
        prefixBytes (int): The width of the count prefix.

    Returns:
        ByteArray: The encoded list.
    """
    b = writeUint(len(items), prefixBytes, "list length")
    for item in items:
        b += item.serialize()
    return b


def readLPList(b, readItem, prefixBytes=4):
    """
    readLPList reads a count followed by exactly that many items.

    Args:
        b (ByteArray): The cursor.
        readItem (func(ByteArray) -> object): Decodes one item.
        prefixBytes (int): The width of the count prefix.

    Returns:
        list: The items.
    """
    count = readUint(b, prefixBytes)
    return [readItem(b) for _ in range(count)]
