"""
Copyright (c) 2020, the TinyStacks developers
See LICENSE for details

The Stacks transaction envelope and the per-signer steps of the signing
protocol.
"""

import copy

from tinystacks import (
    DeserializationError,
    SerializationError,
    SigningError,
    StacksError,
)
from tinystacks.crypto.crypto import sha512_256
from tinystacks.util import helpers
from tinystacks.util.encode import ByteArray

from . import wire
from .address import addressHashFromPublicKeys
from .authorization import (
    SponsoredAuthorization,
    checkUint64,
    deserializeAuthorization,
    nextSignature,
)
from .payload import deserializePayload
from .postcondition import deserializePostCondition


log = helpers.getLogger("TX")


def defaultAnchorMode(payload):
    """
    Coinbase and poison-microblock transactions must be anchored on chain.
    Everything else may go anywhere.
    """
    if payload.payloadType in (wire.PayloadCoinbase, wire.PayloadPoisonMicroblock):
        return wire.AnchorOnChainOnly
    return wire.AnchorAny


def defaultChainID(version):
    if version == wire.TxVersionMainnet:
        return wire.ChainIDMainnet
    return wire.ChainIDTestnet


class StacksTransaction:
    """
    StacksTransaction is a transaction: who authorizes it, how it may be
    anchored, which asset movements it permits, and what it does.
    """

    def __init__(
        self,
        version,
        auth,
        payload,
        postConditions=None,
        anchorMode=None,
        postConditionMode=wire.PostConditionModeDeny,
        chainID=None,
    ):
        """
        Args:
            version (int): The transaction version, mainnet or testnet.
            auth (StandardAuthorization or SponsoredAuthorization): The
                authorization.
            payload (object): The payload.
            postConditions (list): The post-conditions. Optional, default
                no post-conditions.
            anchorMode (int): The anchor mode. Optional, default depends on
                the payload type.
            postConditionMode (int): Allow or deny asset movements not
                covered by a post-condition. Optional, default deny.
            chainID (int): The chain ID. Optional, default is the chain ID
                for the network of the version.
        """
        if version not in wire.TxVersions:
            raise SerializationError(f"invalid transaction version {version!r}")
        if postConditionMode not in wire.PostConditionModes:
            raise SerializationError(
                f"invalid post-condition mode {postConditionMode!r}"
            )
        self.version = version
        self.chainID = chainID if chainID is not None else defaultChainID(version)
        wire.writeUint(self.chainID, 4, "chain ID")
        self.auth = auth
        self.payload = payload
        self.postConditions = list(postConditions) if postConditions else []
        self.anchorMode = anchorMode if anchorMode else defaultAnchorMode(payload)
        if self.anchorMode not in wire.AnchorModes:
            raise SerializationError(f"invalid anchor mode {self.anchorMode!r}")
        self.postConditionMode = postConditionMode

    def __eq__(self, other):
        return (
            isinstance(other, StacksTransaction)
            and self.version == other.version
            and self.chainID == other.chainID
            and self.auth == other.auth
            and self.anchorMode == other.anchorMode
            and self.postConditionMode == other.postConditionMode
            and self.postConditions == other.postConditions
            and self.payload == other.payload
        )

    def __repr__(self):
        return (
            f"StacksTransaction(version={self.version:#04x}, "
            f"chainID={self.chainID:#010x}, auth={self.auth!r}, "
            f"anchorMode={self.anchorMode}, "
            f"postConditionMode={self.postConditionMode}, "
            f"postConditions={self.postConditions!r}, payload={self.payload!r})"
        )

    def isSponsored(self):
        return isinstance(self.auth, SponsoredAuthorization)

    def serialize(self):
        """
        Serialize the transaction.

        Returns:
            ByteArray: The encoded transaction.
        """
        b = ByteArray(self.version, length=1)
        b += wire.writeUint(self.chainID, 4, "chain ID")
        b += self.auth.serialize()
        b += ByteArray(self.anchorMode, length=1)
        b += ByteArray(self.postConditionMode, length=1)
        b += wire.writeLPList(self.postConditions)
        b += self.payload.serialize()
        return b

    @staticmethod
    def deserialize(b):
        """
        Decode a transaction. The input must hold exactly one transaction.

        Args:
            b (str, byte-like, ByteArray): The encoded transaction. Strings
                are interpreted as hexadecimal.

        Returns:
            StacksTransaction: The transaction.
        """
        b = ByteArray(b)
        version = wire.readEnum(b, wire.TxVersions, "transaction version")
        chainID = wire.readUint(b, 4)
        auth = deserializeAuthorization(b)
        anchorMode = wire.readEnum(b, wire.AnchorModes, "anchor mode")
        postConditionMode = wire.readEnum(
            b, wire.PostConditionModes, "post-condition mode"
        )
        postConditions = wire.readLPList(b, deserializePostCondition)
        payload = deserializePayload(b)
        if len(b) > 0:
            raise DeserializationError(
                f"{len(b)} unexpected bytes after the transaction"
            )
        return StacksTransaction(
            version,
            auth,
            payload,
            postConditions=postConditions,
            anchorMode=anchorMode,
            postConditionMode=postConditionMode,
            chainID=chainID,
        )

    def txid(self):
        """
        The transaction ID.

        Returns:
            str: The hex-encoded sha512/256 hash of the serialized transaction.
        """
        return sha512_256(self.serialize().b).hex()

    def txHex(self):
        """
        The hex encoding of the serialized transaction, the form that is
        broadcast.
        """
        return self.serialize().hex()

    def signBegin(self):
        """
        Compute the initial sighash, the hash of the transaction with its
        authorization stripped of signatures, nonces and fees. The transaction
        itself is not modified.

        Returns:
            ByteArray: The initial sighash.
        """
        tx = copy.deepcopy(self)
        tx.auth = tx.auth.intoInitialSighashAuth()
        sigHash = sha512_256(tx.serialize().b)
        log.debug(f"initial sighash {sigHash.hex()}")
        return sigHash

    def signNextOrigin(self, sigHash, privKey):
        """
        Sign the origin's spending condition.

        Args:
            sigHash (ByteArray): The current sighash.
            privKey (PrivateKey): The origin's key.

        Returns:
            ByteArray: The next sighash.
        """
        condition, nextSigHash = self.signCondition(
            self.auth.originCondition, sigHash, wire.AuthStandard, privKey
        )
        self.auth.originCondition = condition
        return nextSigHash

    def signNextSponsor(self, sigHash, privKey):
        """
        Sign the sponsor's spending condition.

        Args:
            sigHash (ByteArray): The sighash following the origin's signature.
            privKey (PrivateKey): The sponsor's key.

        Returns:
            ByteArray: The next sighash.
        """
        if not self.isSponsored():
            raise SigningError("cannot sign the sponsor of a non-sponsored transaction")
        condition, nextSigHash = self.signCondition(
            self.auth.sponsorCondition, sigHash, wire.AuthSponsored, privKey
        )
        self.auth.sponsorCondition = condition
        return nextSigHash

    def signCondition(self, condition, sigHash, authType, privKey):
        """
        Sign for the condition without modifying it.

        Returns:
            object: A signed copy of the condition.
            ByteArray: The next sighash.
        """
        if privKey is None:
            raise SigningError("no private key")
        if condition.hashMode in wire.MultiSigHashModes:
            raise NotImplementedError("multi-sig signing is not supported")
        signer = addressHashFromPublicKeys(condition.hashMode, 1, [privKey.pubKey()])
        if signer != condition.signer:
            raise SigningError(
                f"key hashes to {signer.hex()}, "
                f"spending condition signer is {condition.signer.hex()}"
            )
        signature, nextSigHash = nextSignature(
            sigHash, authType, condition.fee, condition.nonce, privKey
        )
        log.debug(f"signed sighash {ByteArray(sigHash).hex()} -> {nextSigHash.hex()}")
        return condition.withSignature(signature), nextSigHash

    def verifyOrigin(self):
        """
        Verify the origin's signature.

        Returns:
            ByteArray: The sighash following the origin's signature.
        """
        return self.auth.originCondition.verify(self.signBegin(), wire.AuthStandard)

    def verifySponsor(self):
        """
        Verify the origin's and then the sponsor's signature.

        Returns:
            ByteArray: The sighash following the sponsor's signature.
        """
        if not self.isSponsored():
            raise SigningError("transaction is not sponsored")
        sigHash = self.verifyOrigin()
        return self.auth.sponsorCondition.verify(sigHash, wire.AuthSponsored)

    def setFee(self, fee):
        """
        Set the fee. The sponsor pays the fee of a sponsored transaction.

        Args:
            fee (int): The fee in micro-STX.
        """
        checkUint64(fee, "fee")
        if self.isSponsored():
            self.auth.sponsorCondition.fee = fee
        else:
            self.auth.originCondition.fee = fee

    def setNonce(self, nonce):
        """
        Set the origin's nonce.
        """
        self.auth.originCondition.nonce = checkUint64(nonce, "nonce")

    def setSponsor(self, sponsorCondition):
        """
        Replace the sponsor's spending condition.

        Args:
            sponsorCondition (SingleSigSpendingCondition): The sponsor's
                condition.
        """
        if not self.isSponsored():
            raise StacksError("cannot set the sponsor of a non-sponsored transaction")
        self.auth.sponsorCondition = sponsorCondition

    def setSponsorNonce(self, nonce):
        if not self.isSponsored():
            raise StacksError(
                "cannot set the sponsor nonce of a non-sponsored transaction"
            )
        self.auth.sponsorCondition.nonce = checkUint64(nonce, "nonce")

    def addPostCondition(self, postCondition):
        """
        Append a post-condition.
        """
        self.postConditions.append(postCondition)
