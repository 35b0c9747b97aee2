"""
Copyright (c) 2020, the TinyStacks developers
See LICENSE for details

Stacks addresses: a version byte and a 20-byte hash.
"""

from tinystacks.crypto import c32
from tinystacks.crypto.c32 import AddressError
from tinystacks.crypto.crypto import hash160, sha256
from tinystacks.util.encode import ByteArray

from . import wire


OP_CHECKMULTISIG = 0xAE
# OP_1 through OP_16 are OP_1 - 1 + n.
OP_1 = 0x51
MaxMultiSigKeys = 16


class Address:
    """
    Address is a version and a hash160. The version selects the network and
    whether the hash commits to a single key or a multi-sig script.
    """

    def __init__(self, version, hash160):
        """
        Args:
            version (int): The address version, 0 - 255.
            hash160 (byte-like): The 20-byte hash.
        """
        hash160 = ByteArray(hash160)
        if not 0 <= version <= wire.MaxUint8:
            raise AddressError(f"invalid address version {version}")
        if len(hash160) != wire.Hash160Length:
            raise AddressError(f"invalid address hash length {len(hash160)}")
        self.version = version
        self.hash160 = hash160

    @staticmethod
    def fromString(addr):
        """
        Decode the c32check text form.

        Args:
            addr (str): The address string.

        Returns:
            Address: The decoded address.
        """
        version, h = c32.c32addressDecode(addr)
        return Address(version, h)

    @staticmethod
    def fromHashMode(hashMode, txVersion, hash160):
        """
        The address for a spending condition's signer hash.

        Args:
            hashMode (int): The address hash mode.
            txVersion (int): The transaction version, which picks the network.
            hash160 (byte-like): The signer hash.

        Returns:
            Address: The address.
        """
        return Address(hashModeToVersion(hashMode, txVersion), hash160)

    @staticmethod
    def fromPublicKeys(version, hashMode, numSigs, pubKeys):
        """
        Derive the address that the public keys spend from under hashMode.

        Args:
            version (int): The address version.
            hashMode (int): The address hash mode.
            numSigs (int): The number of signatures required.
            pubKeys (list(PublicKey)): The keys.

        Returns:
            Address: The address.
        """
        return Address(version, addressHashFromPublicKeys(hashMode, numSigs, pubKeys))

    def __eq__(self, other):
        return (
            isinstance(other, Address)
            and self.version == other.version
            and self.hash160 == other.hash160
        )

    def __hash__(self):
        return hash((self.version, self.hash160.bytes()))

    def __repr__(self):
        return f"Address({self.version}, {self.hash160.hex()})"

    def string(self):
        """
        The c32check text form of the address.

        Returns:
            str: The address string.
        """
        return c32.c32address(self.version, self.hash160)

    def serialize(self):
        """
        The version byte followed by the hash.
        """
        return ByteArray(self.version, length=1) + self.hash160

    @staticmethod
    def deserialize(b):
        version = wire.readUint(b, 1)
        return Address(version, b.pop(wire.Hash160Length))


def hashModeToVersion(hashMode, txVersion):
    """
    Translate an address hash mode to the address version for the network of
    the transaction version.

    Args:
        hashMode (int): The address hash mode.
        txVersion (int): The transaction version.

    Returns:
        int: The address version.
    """
    if txVersion not in wire.TxVersions:
        raise AddressError(f"unexpected transaction version {txVersion}")
    mainnet = txVersion == wire.TxVersionMainnet
    if hashMode == wire.HashModeP2PKH:
        if mainnet:
            return wire.AddressVersionMainnetSingleSig
        return wire.AddressVersionTestnetSingleSig
    if hashMode in (wire.HashModeP2SH, wire.HashModeP2WPKH, wire.HashModeP2WSH):
        if mainnet:
            return wire.AddressVersionMainnetMultiSig
        return wire.AddressVersionTestnetMultiSig
    raise AddressError(f"unexpected hash mode {hashMode}")


def multiSigRedeemScript(numSigs, pubKeys):
    """
    Create the bitcoin-style m-of-n multi-sig redeem script.

    Args:
        numSigs (int): The number of signatures required.
        pubKeys (list(PublicKey)): The keys.

    Returns:
        ByteArray: The script.
    """
    if not 1 <= numSigs <= len(pubKeys) <= MaxMultiSigKeys:
        raise AddressError(
            f"cannot build a {numSigs}-of-{len(pubKeys)} multi-sig script"
        )
    script = ByteArray(OP_1 - 1 + numSigs, length=1)
    for pubKey in pubKeys:
        key = pubKey.serialize()
        script += ByteArray(len(key), length=1) + key
    script += ByteArray(OP_1 - 1 + len(pubKeys), length=1)
    script += ByteArray(OP_CHECKMULTISIG, length=1)
    return script


def addressHashFromPublicKeys(hashMode, numSigs, pubKeys):
    """
    Compute the 20-byte signer hash for the public keys.

    P2PKH hashes the key. P2SH hashes the multi-sig redeem script. P2WPKH and
    P2WSH hash the version 0 witness program of the key hash and script hash
    respectively, and require compressed keys.

    Args:
        hashMode (int): The address hash mode.
        numSigs (int): The number of signatures required.
        pubKeys (list(PublicKey)): The keys.

    Returns:
        ByteArray: The hash.
    """
    if not pubKeys:
        raise AddressError("no public keys")
    if hashMode in wire.SingleSigHashModes and (len(pubKeys) != 1 or numSigs != 1):
        raise AddressError("single-sig hash modes take exactly one key and signature")
    if hashMode in (wire.HashModeP2WPKH, wire.HashModeP2WSH):
        if not all(k.compressed() for k in pubKeys):
            raise AddressError("public keys must be compressed for segwit hash modes")

    if hashMode == wire.HashModeP2PKH:
        return pubKeys[0].hash160()
    if hashMode == wire.HashModeP2WPKH:
        program = ByteArray([0x00, wire.Hash160Length]) + pubKeys[0].hash160()
        return hash160(program.b)
    if hashMode == wire.HashModeP2SH:
        return hash160(multiSigRedeemScript(numSigs, pubKeys).b)
    if hashMode == wire.HashModeP2WSH:
        scriptHash = sha256(multiSigRedeemScript(numSigs, pubKeys).b)
        program = ByteArray([0x00, len(scriptHash)]) + scriptHash
        return hash160(program.b)
    raise AddressError(f"unexpected hash mode {hashMode}")
