"""
Copyright (c) 2020, the TinyStacks developers
See LICENSE for details

Transaction authorization. A spending condition names the account paying for
a transaction, its nonce and fee, and carries the signature(s) authorizing it.
A standard authorization has only the origin's condition. A sponsored
authorization adds a sponsor who pays the fee.

Signatures are chained. Each signer signs a hash that commits to the hash the
previous signer produced, so the order of signers is fixed.
"""

from tinystacks import DeserializationError, SerializationError, SigningError
from tinystacks.crypto.crypto import (
    KeyFormatError,
    PublicKey,
    recoverPublicKey,
    sha512_256,
)
from tinystacks.util.encode import ByteArray

from . import wire
from .address import Address, addressHashFromPublicKeys


def checkUint64(val, name):
    wire.writeUint(val, 8, name)
    return val


class MessageSignature:
    """
    A 65-byte recoverable signature, recovery id first. An all-zero signature
    marks a slot that has not been signed yet.
    """

    def __init__(self, signature):
        signature = ByteArray(signature)
        if len(signature) != wire.RecoverableSigLength:
            raise SerializationError(
                f"signature must be {wire.RecoverableSigLength} bytes, "
                f"got {len(signature)}"
            )
        self.signature = signature

    @staticmethod
    def empty():
        return MessageSignature(bytearray(wire.RecoverableSigLength))

    def isEmpty(self):
        return self.signature.iszero()

    def __eq__(self, other):
        return isinstance(other, MessageSignature) and self.signature == other.signature

    def __repr__(self):
        return f"MessageSignature({self.signature.hex()})"

    def hex(self):
        return self.signature.hex()

    def serialize(self):
        return self.signature.copy()

    @staticmethod
    def deserialize(b):
        return MessageSignature(b.pop(wire.RecoverableSigLength))


class TransactionAuthField:
    """
    An entry of a multi-sig spending condition, either a public key or a
    signature. The field type also records the key's compression.
    """

    def __init__(self, fieldType, contents):
        """
        Args:
            fieldType (int): One of the wire.AuthField* constants.
            contents (PublicKey or MessageSignature): The key or signature.
        """
        if fieldType not in wire.AuthFieldTypes:
            raise SerializationError(f"invalid auth field type {fieldType!r}")
        if fieldType in (
            wire.AuthFieldPublicKeyCompressed,
            wire.AuthFieldPublicKeyUncompressed,
        ):
            if not isinstance(contents, PublicKey):
                raise SerializationError("public key auth field requires a PublicKey")
            compressed = fieldType == wire.AuthFieldPublicKeyCompressed
            if contents.compressed() != compressed:
                raise SerializationError("auth field type does not match key encoding")
        elif not isinstance(contents, MessageSignature):
            raise SerializationError("signature auth field requires a MessageSignature")
        self.fieldType = fieldType
        self.contents = contents

    @staticmethod
    def fromPublicKey(pubKey):
        if pubKey.compressed():
            return TransactionAuthField(wire.AuthFieldPublicKeyCompressed, pubKey)
        return TransactionAuthField(wire.AuthFieldPublicKeyUncompressed, pubKey)

    @staticmethod
    def fromSignature(signature, compressed=True):
        if compressed:
            return TransactionAuthField(wire.AuthFieldSignatureCompressed, signature)
        return TransactionAuthField(wire.AuthFieldSignatureUncompressed, signature)

    def isSignature(self):
        return isinstance(self.contents, MessageSignature)

    def __eq__(self, other):
        return (
            isinstance(other, TransactionAuthField)
            and self.fieldType == other.fieldType
            and self.contents == other.contents
        )

    def __repr__(self):
        return f"TransactionAuthField({self.fieldType}, {self.contents!r})"

    def serialize(self):
        return ByteArray(self.fieldType, length=1) + self.contents.serialize()

    @staticmethod
    def deserialize(b):
        fieldType = wire.readEnum(b, wire.AuthFieldTypes, "auth field type")
        if fieldType == wire.AuthFieldPublicKeyCompressed:
            raw = b.pop(33)
        elif fieldType == wire.AuthFieldPublicKeyUncompressed:
            raw = b.pop(65)
        else:
            return TransactionAuthField(fieldType, MessageSignature.deserialize(b))
        try:
            return TransactionAuthField(fieldType, PublicKey(raw))
        except (KeyFormatError, SerializationError) as e:
            raise DeserializationError(f"invalid auth field public key: {e}")


class SingleSigSpendingCondition:
    """
    SingleSigSpendingCondition is authorized by one signature from the key
    whose hash is the signer.
    """

    signaturesRequired = 1

    def __init__(self, hashMode, signer, nonce, fee, keyEncoding, signature=None):
        """
        Args:
            hashMode (int): P2PKH or P2WPKH.
            signer (byte-like): The 20-byte hash of the signing key.
            nonce (int): The account nonce.
            fee (int): The fee in micro-STX.
            keyEncoding (int): Compressed or uncompressed public key.
            signature (MessageSignature): The signature. Optional, defaults
                to an empty signature.
        """
        if hashMode not in wire.SingleSigHashModes:
            raise SerializationError(f"invalid single-sig hash mode {hashMode!r}")
        if keyEncoding not in wire.PubKeyEncodings:
            raise SerializationError(f"invalid public key encoding {keyEncoding!r}")
        signer = ByteArray(signer)
        if len(signer) != wire.Hash160Length:
            raise SerializationError(f"invalid signer hash length {len(signer)}")
        self.hashMode = hashMode
        self.signer = signer
        self.nonce = checkUint64(nonce, "nonce")
        self.fee = checkUint64(fee, "fee")
        self.keyEncoding = keyEncoding
        if signature is None:
            signature = MessageSignature.empty()
        self.signature = signature

    def __eq__(self, other):
        return (
            isinstance(other, SingleSigSpendingCondition)
            and self.hashMode == other.hashMode
            and self.signer == other.signer
            and self.nonce == other.nonce
            and self.fee == other.fee
            and self.keyEncoding == other.keyEncoding
            and self.signature == other.signature
        )

    def __repr__(self):
        return (
            f"SingleSigSpendingCondition(hashMode={self.hashMode}, "
            f"signer={self.signer.hex()}, nonce={self.nonce}, fee={self.fee}, "
            f"signed={not self.signature.isEmpty()})"
        )

    def numSignatures(self):
        return 0 if self.signature.isEmpty() else 1

    def compressed(self):
        return self.keyEncoding == wire.PubKeyEncodingCompressed

    def address(self, txVersion):
        """
        The address of the signer on the network of txVersion.
        """
        return Address.fromHashMode(self.hashMode, txVersion, self.signer)

    def clear(self):
        """
        A copy with the nonce and fee zeroed and the signature emptied, the
        form the condition takes in the initial sighash.
        """
        return SingleSigSpendingCondition(
            self.hashMode, self.signer, 0, 0, self.keyEncoding
        )

    def withSignature(self, signature):
        """
        A copy of the condition carrying the signature.

        Args:
            signature (MessageSignature): The new signature.

        Returns:
            SingleSigSpendingCondition: The signed condition.
        """
        return SingleSigSpendingCondition(
            self.hashMode,
            self.signer,
            self.nonce,
            self.fee,
            self.keyEncoding,
            signature,
        )

    def verify(self, curSigHash, authType):
        """
        Recover the signing key from the signature, check that it hashes to
        the signer, and return the next sighash in the chain.

        Args:
            curSigHash (ByteArray): The sighash the signature commits to.
            authType (int): The auth type the signer signed with.

        Returns:
            ByteArray: The next sighash.
        """
        if self.signature.isEmpty():
            raise SigningError("spending condition is not signed")
        pubKey, nextSigHash = nextVerification(
            curSigHash,
            authType,
            self.fee,
            self.nonce,
            self.keyEncoding,
            self.signature,
        )
        signer = addressHashFromPublicKeys(self.hashMode, 1, [pubKey])
        if signer != self.signer:
            raise SigningError(
                f"signature is from {signer.hex()}, expected {self.signer.hex()}"
            )
        return nextSigHash

    def serialize(self):
        b = ByteArray(self.hashMode, length=1)
        b += self.signer
        b += wire.writeUint(self.nonce, 8, "nonce")
        b += wire.writeUint(self.fee, 8, "fee")
        b += ByteArray(self.keyEncoding, length=1)
        b += self.signature.serialize()
        return b

    @staticmethod
    def deserialize(b, hashMode):
        """
        Read the condition following its hash mode byte.
        """
        signer = b.pop(wire.Hash160Length)
        nonce = wire.readUint(b, 8)
        fee = wire.readUint(b, 8)
        keyEncoding = wire.readEnum(b, wire.PubKeyEncodings, "public key encoding")
        signature = MessageSignature.deserialize(b)
        return SingleSigSpendingCondition(
            hashMode, signer, nonce, fee, keyEncoding, signature
        )


class MultiSigSpendingCondition:
    """
    MultiSigSpendingCondition is authorized by signaturesRequired signatures
    from the keys committed to by the signer hash. The public keys and
    signatures are interleaved in fields, in key order.
    """

    def __init__(self, hashMode, signer, nonce, fee, fields, signaturesRequired):
        """
        Args:
            hashMode (int): P2SH or P2WSH.
            signer (byte-like): The 20-byte hash of the redeem script.
            nonce (int): The account nonce.
            fee (int): The fee in micro-STX.
            fields (list(TransactionAuthField)): Keys and signatures.
            signaturesRequired (int): The number of signatures required.
        """
        if hashMode not in wire.MultiSigHashModes:
            raise SerializationError(f"invalid multi-sig hash mode {hashMode!r}")
        signer = ByteArray(signer)
        if len(signer) != wire.Hash160Length:
            raise SerializationError(f"invalid signer hash length {len(signer)}")
        wire.writeUint(signaturesRequired, 2, "signatures required")
        self.hashMode = hashMode
        self.signer = signer
        self.nonce = checkUint64(nonce, "nonce")
        self.fee = checkUint64(fee, "fee")
        self.fields = list(fields)
        self.signaturesRequired = signaturesRequired

    def __eq__(self, other):
        return (
            isinstance(other, MultiSigSpendingCondition)
            and self.hashMode == other.hashMode
            and self.signer == other.signer
            and self.nonce == other.nonce
            and self.fee == other.fee
            and self.fields == other.fields
            and self.signaturesRequired == other.signaturesRequired
        )

    def __repr__(self):
        return (
            f"MultiSigSpendingCondition(hashMode={self.hashMode}, "
            f"signer={self.signer.hex()}, nonce={self.nonce}, fee={self.fee}, "
            f"{self.numSignatures()}-of-{self.signaturesRequired} signed)"
        )

    def numSignatures(self):
        return sum(1 for f in self.fields if f.isSignature())

    def address(self, txVersion):
        return Address.fromHashMode(self.hashMode, txVersion, self.signer)

    def clear(self):
        return MultiSigSpendingCondition(
            self.hashMode, self.signer, 0, 0, [], self.signaturesRequired
        )

    def withSignature(self, signature):
        raise NotImplementedError("multi-sig signing is not supported")

    def verify(self, curSigHash, authType):
        raise NotImplementedError("multi-sig verification is not supported")

    def serialize(self):
        b = ByteArray(self.hashMode, length=1)
        b += self.signer
        b += wire.writeUint(self.nonce, 8, "nonce")
        b += wire.writeUint(self.fee, 8, "fee")
        b += wire.writeLPList(self.fields)
        b += wire.writeUint(self.signaturesRequired, 2, "signatures required")
        return b

    @staticmethod
    def deserialize(b, hashMode):
        signer = b.pop(wire.Hash160Length)
        nonce = wire.readUint(b, 8)
        fee = wire.readUint(b, 8)
        fields = wire.readLPList(b, TransactionAuthField.deserialize)
        signaturesRequired = wire.readUint(b, 2)
        return MultiSigSpendingCondition(
            hashMode, signer, nonce, fee, fields, signaturesRequired
        )


def deserializeSpendingCondition(b):
    """
    Read a spending condition, dispatching on its hash mode.

    Args:
        b (ByteArray): The cursor.

    Returns:
        SingleSigSpendingCondition or MultiSigSpendingCondition.
    """
    hashMode = wire.readEnum(b, wire.HashModes, "address hash mode")
    if hashMode in wire.SingleSigHashModes:
        return SingleSigSpendingCondition.deserialize(b, hashMode)
    return MultiSigSpendingCondition.deserialize(b, hashMode)


def createSingleSigSpendingCondition(hashMode, pubKey, nonce, fee):
    """
    Create an unsigned single-sig condition for the public key.

    Args:
        hashMode (int): P2PKH or P2WPKH.
        pubKey (PublicKey): The signing key.
        nonce (int): The account nonce.
        fee (int): The fee in micro-STX.

    Returns:
        SingleSigSpendingCondition: The condition.
    """
    signer = addressHashFromPublicKeys(hashMode, 1, [pubKey])
    if pubKey.compressed():
        keyEncoding = wire.PubKeyEncodingCompressed
    else:
        keyEncoding = wire.PubKeyEncodingUncompressed
    return SingleSigSpendingCondition(hashMode, signer, nonce, fee, keyEncoding)


def createMultiSigSpendingCondition(hashMode, numSigs, pubKeys, nonce, fee):
    """
    Create an unsigned multi-sig condition for numSigs-of-len(pubKeys) keys.
    """
    signer = addressHashFromPublicKeys(hashMode, numSigs, pubKeys)
    return MultiSigSpendingCondition(hashMode, signer, nonce, fee, [], numSigs)


def initialSponsorCondition():
    """
    The placeholder sponsor condition used when computing the initial
    sighash, and attached to sponsored transactions before a sponsor is
    known.
    """
    return SingleSigSpendingCondition(
        wire.HashModeP2PKH,
        bytearray(wire.Hash160Length),
        0,
        0,
        wire.PubKeyEncodingCompressed,
    )


class StandardAuthorization:
    """
    StandardAuthorization is authorized by the origin alone.
    """

    authType = wire.AuthStandard

    def __init__(self, originCondition):
        self.originCondition = originCondition

    def __eq__(self, other):
        return (
            isinstance(other, StandardAuthorization)
            and self.originCondition == other.originCondition
        )

    def __repr__(self):
        return f"StandardAuthorization({self.originCondition!r})"

    def intoInitialSighashAuth(self):
        """
        The authorization in the form that the initial sighash is computed
        over.
        """
        return StandardAuthorization(self.originCondition.clear())

    def serialize(self):
        return ByteArray(self.authType, length=1) + self.originCondition.serialize()


class SponsoredAuthorization:
    """
    SponsoredAuthorization is signed first by the origin and then by a sponsor
    who pays the transaction fee.
    """

    authType = wire.AuthSponsored

    def __init__(self, originCondition, sponsorCondition=None):
        """
        Args:
            originCondition: The origin's spending condition.
            sponsorCondition: The sponsor's spending condition. Optional,
                defaults to the initial sponsor condition.
        """
        self.originCondition = originCondition
        self.sponsorCondition = (
            sponsorCondition
            if sponsorCondition is not None
            else initialSponsorCondition()
        )

    def __eq__(self, other):
        return (
            isinstance(other, SponsoredAuthorization)
            and self.originCondition == other.originCondition
            and self.sponsorCondition == other.sponsorCondition
        )

    def __repr__(self):
        return (
            f"SponsoredAuthorization({self.originCondition!r}, "
            f"{self.sponsorCondition!r})"
        )

    def intoInitialSighashAuth(self):
        return SponsoredAuthorization(
            self.originCondition.clear(), initialSponsorCondition()
        )

    def serialize(self):
        b = ByteArray(self.authType, length=1)
        b += self.originCondition.serialize()
        b += self.sponsorCondition.serialize()
        return b


def deserializeAuthorization(b):
    """
    Read an authorization, dispatching on its auth type.

    Args:
        b (ByteArray): The cursor.

    Returns:
        StandardAuthorization or SponsoredAuthorization.
    """
    authType = wire.readEnum(b, wire.AuthTypes, "authorization type")
    origin = deserializeSpendingCondition(b)
    if authType == wire.AuthStandard:
        return StandardAuthorization(origin)
    return SponsoredAuthorization(origin, deserializeSpendingCondition(b))


def makeSigHashPreSign(curSigHash, authType, fee, nonce):
    """
    The hash a signer signs: the current sighash extended with the auth type,
    fee and nonce.

    Args:
        curSigHash (byte-like): The current 32-byte sighash.
        authType (int): The auth type of the signer.
        fee (int): The signer's fee.
        nonce (int): The signer's nonce.

    Returns:
        ByteArray: The 32-byte pre-sign hash.
    """
    curSigHash = ByteArray(curSigHash)
    if len(curSigHash) != 32:
        raise SigningError(f"invalid sighash length {len(curSigHash)}")
    b = curSigHash + ByteArray(authType, length=1)
    b += wire.writeUint(fee, 8, "fee")
    b += wire.writeUint(nonce, 8, "nonce")
    return sha512_256(b.b)


def makeSigHashPostSign(preSignSigHash, keyEncoding, signature):
    """
    The sighash handed to the next signer: the pre-sign hash extended with
    the signer's key encoding and signature.

    Args:
        preSignSigHash (ByteArray): The hash that was signed.
        keyEncoding (int): The signer's public key encoding.
        signature (MessageSignature): The signature.

    Returns:
        ByteArray: The 32-byte sighash.
    """
    b = ByteArray(preSignSigHash) + ByteArray(keyEncoding, length=1)
    b += signature.serialize()
    return sha512_256(b.b)


def nextSignature(curSigHash, authType, fee, nonce, privKey):
    """
    Sign for one spending condition.

    Args:
        curSigHash (ByteArray): The current sighash.
        authType (int): The auth type of the signer.
        fee (int): The signer's fee.
        nonce (int): The signer's nonce.
        privKey (PrivateKey): The signing key.

    Returns:
        MessageSignature: The signature.
        ByteArray: The next sighash.
    """
    preSign = makeSigHashPreSign(curSigHash, authType, fee, nonce)
    signature = MessageSignature(privKey.sign(preSign))
    if privKey.compressed:
        keyEncoding = wire.PubKeyEncodingCompressed
    else:
        keyEncoding = wire.PubKeyEncodingUncompressed
    return signature, makeSigHashPostSign(preSign, keyEncoding, signature)


def nextVerification(curSigHash, authType, fee, nonce, keyEncoding, signature):
    """
    Recover the public key that produced the signature for one spending
    condition.

    Returns:
        PublicKey: The recovered key.
        ByteArray: The next sighash.
    """
    preSign = makeSigHashPreSign(curSigHash, authType, fee, nonce)
    compressed = keyEncoding == wire.PubKeyEncodingCompressed
    pubKey = recoverPublicKey(preSign, signature.signature, compressed=compressed)
    return pubKey, makeSigHashPostSign(preSign, keyEncoding, signature)
