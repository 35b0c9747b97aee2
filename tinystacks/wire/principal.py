"""
Copyright (c) 2020, the TinyStacks developers
See LICENSE for details

Principals as they appear in post-conditions, and the asset descriptors that
post-conditions constrain.
"""

from tinystacks import SerializationError
from tinystacks.util.encode import ByteArray

from . import wire
from .address import Address


class OriginPrincipal:
    """
    The transaction's origin account, whatever its address. Encoded as the
    prefix byte alone.
    """

    prefix = wire.PrincipalOrigin

    def __eq__(self, other):
        return isinstance(other, OriginPrincipal)

    def __repr__(self):
        return "OriginPrincipal()"

    def serialize(self):
        return ByteArray(self.prefix, length=1)


class StandardPrincipal:
    """
    An account identified by its address.
    """

    prefix = wire.PrincipalStandard

    def __init__(self, address):
        """
        Args:
            address (Address): The account address.
        """
        self.address = address

    def __eq__(self, other):
        return isinstance(other, StandardPrincipal) and self.address == other.address

    def __repr__(self):
        return f"StandardPrincipal({self.address.string()})"

    def serialize(self):
        return ByteArray(self.prefix, length=1) + self.address.serialize()


class ContractPrincipal:
    """
    A contract, identified by its deployer's address and its name.
    """

    prefix = wire.PrincipalContract

    def __init__(self, address, contractName):
        """
        Args:
            address (Address): The deploying account's address.
            contractName (str): The contract name.
        """
        wire.checkStringLength(contractName, name="contract name")
        self.address = address
        self.contractName = contractName

    def __eq__(self, other):
        return (
            isinstance(other, ContractPrincipal)
            and self.address == other.address
            and self.contractName == other.contractName
        )

    def __repr__(self):
        return f"ContractPrincipal({self.address.string()}.{self.contractName})"

    def serialize(self):
        b = ByteArray(self.prefix, length=1) + self.address.serialize()
        return b + wire.writeLPString(self.contractName)


def deserializePrincipal(b):
    """
    Read a post-condition principal, dispatching on its prefix byte.

    Args:
        b (ByteArray): The cursor.

    Returns:
        OriginPrincipal, StandardPrincipal or ContractPrincipal.
    """
    prefix = wire.readEnum(b, wire.PrincipalPrefixes, "principal prefix")
    if prefix == wire.PrincipalOrigin:
        return OriginPrincipal()
    address = Address.deserialize(b)
    if prefix == wire.PrincipalStandard:
        return StandardPrincipal(address)
    return ContractPrincipal(address, wire.readLPString(b))


class AssetInfo:
    """
    AssetInfo identifies a fungible or non-fungible asset type by the address
    and name of the contract that defines it, and the asset's name within
    that contract.
    """

    def __init__(self, address, contractName, assetName):
        """
        Args:
            address (Address): The contract deployer's address.
            contractName (str): The contract name.
            assetName (str): The asset name.
        """
        wire.checkStringLength(contractName, name="contract name")
        wire.checkStringLength(assetName, name="asset name")
        self.address = address
        self.contractName = contractName
        self.assetName = assetName

    def __eq__(self, other):
        return (
            isinstance(other, AssetInfo)
            and self.address == other.address
            and self.contractName == other.contractName
            and self.assetName == other.assetName
        )

    def __repr__(self):
        return (
            f"AssetInfo({self.address.string()}.{self.contractName}"
            f"::{self.assetName})"
        )

    def serialize(self):
        b = self.address.serialize()
        b += wire.writeLPString(self.contractName)
        b += wire.writeLPString(self.assetName)
        return b

    @staticmethod
    def deserialize(b):
        address = Address.deserialize(b)
        contractName = wire.readLPString(b)
        assetName = wire.readLPString(b)
        return AssetInfo(address, contractName, assetName)


def createAssetInfo(addressString, contractName, assetName):
    """
    Create an AssetInfo from the text form of the contract address.

    Args:
        addressString (str): The contract deployer's address.
        contractName (str): The contract name.
        assetName (str): The asset name.

    Returns:
        AssetInfo: The asset descriptor.
    """
    return AssetInfo(Address.fromString(addressString), contractName, assetName)


def checkPrincipal(principal):
    """
    Raise SerializationError unless principal is a post-condition principal.
    """
    principalTypes = (OriginPrincipal, StandardPrincipal, ContractPrincipal)
    if not isinstance(principal, principalTypes):
        raise SerializationError(f"not a post-condition principal: {principal!r}")
