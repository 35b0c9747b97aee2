"""
Copyright (c) 2020, the TinyStacks developers
See LICENSE for details

The TransactionSigner walks a transaction through its signers in the required
order, carrying the running sighash from one signature to the next.
"""

from tinystacks import SigningError
from tinystacks.util import helpers


log = helpers.getLogger("SIGNER")


class SignerState:
    """
    The stages of signing. A standard transaction goes from Unsigned straight
    to Complete once the origin has signed. A sponsored transaction stops at
    OriginSigned until the sponsor signs. OriginSigning and SponsorSigning
    describe a multi-sig condition with some, but not all, of its signatures.
    """

    Unsigned = "unsigned"
    OriginSigning = "origin signing"
    OriginSigned = "origin signed"
    SponsorSigning = "sponsor signing"
    Complete = "complete"


class TransactionSigner:
    """
    TransactionSigner owns a transaction while it is being signed. Each
    signing step either succeeds completely or leaves the transaction, the
    sighash and the state as they were.
    """

    def __init__(self, transaction):
        """
        Args:
            transaction (StacksTransaction): The transaction to sign. It is
                modified in place as signatures are added.
        """
        self.transaction = transaction
        self.sigHash = transaction.signBegin()
        self.originDone = False
        self.checkOversign = True
        self.checkOverlap = True
        self.state = SignerState.Unsigned

    @staticmethod
    def createSponsorSigner(transaction, sponsorCondition):
        """
        Create a signer for the sponsor of a transaction that the origin has
        already signed. The origin's signature is verified to recover the
        sighash that the sponsor signs.

        Args:
            transaction (StacksTransaction): A sponsored transaction with a
                signed origin.
            sponsorCondition (SingleSigSpendingCondition): The sponsor's
                unsigned spending condition.

        Returns:
            TransactionSigner: A signer ready for signSponsor.
        """
        if not transaction.isSponsored():
            raise SigningError("cannot sponsor a non-sponsored transaction")
        sigHash = transaction.verifyOrigin()
        transaction.setSponsor(sponsorCondition)
        signer = TransactionSigner(transaction)
        signer.sigHash = sigHash
        signer.originDone = True
        signer.state = SignerState.OriginSigned
        return signer

    def signOrigin(self, privKey):
        """
        Add the origin's signature.

        Args:
            privKey (PrivateKey): The origin's key.
        """
        if self.state == SignerState.Complete:
            raise SigningError("transaction is already fully signed")
        if self.checkOverlap and self.originDone:
            raise SigningError("origin has already signed")
        condition = self.transaction.auth.originCondition
        if self.checkOversign and (
            condition.numSignatures() >= condition.signaturesRequired
        ):
            raise SigningError("origin would have too many signatures")

        self.sigHash = self.transaction.signNextOrigin(self.sigHash, privKey)
        condition = self.transaction.auth.originCondition
        if condition.numSignatures() < condition.signaturesRequired:
            self.state = SignerState.OriginSigning
            return
        self.originDone = True
        if self.transaction.isSponsored():
            self.state = SignerState.OriginSigned
        else:
            self.state = SignerState.Complete
        log.debug(f"origin signed, state {self.state}")

    def signSponsor(self, privKey):
        """
        Add the sponsor's signature. The origin must have signed already.

        Args:
            privKey (PrivateKey): The sponsor's key.
        """
        if not self.transaction.isSponsored():
            raise SigningError("cannot sign the sponsor of a non-sponsored transaction")
        if self.state == SignerState.Complete:
            raise SigningError("transaction is already fully signed")
        if not self.originDone:
            raise SigningError("the origin must sign before the sponsor")
        condition = self.transaction.auth.sponsorCondition
        if self.checkOversign and (
            condition.numSignatures() >= condition.signaturesRequired
        ):
            raise SigningError("sponsor would have too many signatures")

        self.sigHash = self.transaction.signNextSponsor(self.sigHash, privKey)
        condition = self.transaction.auth.sponsorCondition
        if condition.numSignatures() < condition.signaturesRequired:
            self.state = SignerState.SponsorSigning
            return
        self.state = SignerState.Complete
        log.debug(f"sponsor signed, state {self.state}")
