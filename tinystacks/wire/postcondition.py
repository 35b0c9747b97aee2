"""
Copyright (c) 2020, the TinyStacks developers
See LICENSE for details

Post-conditions constrain the assets a transaction may move. Each kind has a
fixed set of fields, and which fields are on the wire depends only on the
kind.
"""

from tinystacks import SerializationError
from tinystacks.util.encode import ByteArray

from . import wire
from .principal import AssetInfo, checkPrincipal, deserializePrincipal


def checkCode(code, allowed, kind):
    if code not in allowed:
        raise SerializationError(f"invalid {kind} condition code {code!r}")


class STXPostCondition:
    """
    STXPostCondition compares the micro-STX sent by the principal to an
    amount.
    """

    conditionType = wire.PostConditionSTX

    def __init__(self, principal, conditionCode, amount):
        """
        Args:
            principal (OriginPrincipal, StandardPrincipal, ContractPrincipal):
                The sender whose transfers are constrained.
            conditionCode (int): A fungible condition code.
            amount (int): The amount to compare against.
        """
        checkPrincipal(principal)
        checkCode(conditionCode, wire.FungibleConditionCodes, "fungible")
        wire.writeUint(amount, 8, "amount")
        self.principal = principal
        self.conditionCode = conditionCode
        self.amount = amount

    def __eq__(self, other):
        return (
            isinstance(other, STXPostCondition)
            and self.principal == other.principal
            and self.conditionCode == other.conditionCode
            and self.amount == other.amount
        )

    def __repr__(self):
        return (
            f"STXPostCondition({self.principal!r}, code={self.conditionCode}, "
            f"amount={self.amount})"
        )

    def serialize(self):
        b = ByteArray(self.conditionType, length=1)
        b += self.principal.serialize()
        b += ByteArray(self.conditionCode, length=1)
        b += wire.writeUint(self.amount, 8, "amount")
        return b


class FungiblePostCondition:
    """
    FungiblePostCondition compares the amount of a fungible token sent by the
    principal to an amount.
    """

    conditionType = wire.PostConditionFungible

    def __init__(self, principal, conditionCode, amount, assetInfo):
        """
        Args:
            principal (OriginPrincipal, StandardPrincipal, ContractPrincipal):
                The sender whose transfers are constrained.
            conditionCode (int): A fungible condition code.
            amount (int): The amount to compare against.
            assetInfo (AssetInfo): The token.
        """
        checkPrincipal(principal)
        checkCode(conditionCode, wire.FungibleConditionCodes, "fungible")
        wire.writeUint(amount, 8, "amount")
        self.principal = principal
        self.conditionCode = conditionCode
        self.amount = amount
        self.assetInfo = assetInfo

    def __eq__(self, other):
        return (
            isinstance(other, FungiblePostCondition)
            and self.principal == other.principal
            and self.conditionCode == other.conditionCode
            and self.amount == other.amount
            and self.assetInfo == other.assetInfo
        )

    def __repr__(self):
        return (
            f"FungiblePostCondition({self.principal!r}, {self.assetInfo!r}, "
            f"code={self.conditionCode}, amount={self.amount})"
        )

    def serialize(self):
        b = ByteArray(self.conditionType, length=1)
        b += self.principal.serialize()
        b += self.assetInfo.serialize()
        b += ByteArray(self.conditionCode, length=1)
        b += wire.writeUint(self.amount, 8, "amount")
        return b


class NonFungiblePostCondition:
    """
    NonFungiblePostCondition asserts whether the principal still owns a
    specific non-fungible asset after the transaction.
    """

    conditionType = wire.PostConditionNonFungible

    def __init__(self, principal, conditionCode, assetInfo, assetName):
        """
        Args:
            principal (OriginPrincipal, StandardPrincipal, ContractPrincipal):
                The owner.
            conditionCode (int): A non-fungible condition code.
            assetInfo (AssetInfo): The asset class.
            assetName (str): The name of the asset instance.
        """
        checkPrincipal(principal)
        checkCode(conditionCode, wire.NonFungibleConditionCodes, "non-fungible")
        wire.checkStringLength(assetName, name="asset name")
        self.principal = principal
        self.conditionCode = conditionCode
        self.assetInfo = assetInfo
        self.assetName = assetName

    def __eq__(self, other):
        return (
            isinstance(other, NonFungiblePostCondition)
            and self.principal == other.principal
            and self.conditionCode == other.conditionCode
            and self.assetInfo == other.assetInfo
            and self.assetName == other.assetName
        )

    def __repr__(self):
        return (
            f"NonFungiblePostCondition({self.principal!r}, {self.assetInfo!r}, "
            f"{self.assetName!r}, code={self.conditionCode:#04x})"
        )

    def serialize(self):
        b = ByteArray(self.conditionType, length=1)
        b += self.principal.serialize()
        b += self.assetInfo.serialize()
        b += wire.writeLPString(self.assetName)
        b += ByteArray(self.conditionCode, length=1)
        return b


def deserializePostCondition(b):
    """
    Read a post-condition, dispatching on its type byte.

    Args:
        b (ByteArray): The cursor.

    Returns:
        STXPostCondition, FungiblePostCondition or NonFungiblePostCondition.
    """
    conditionType = wire.readEnum(b, wire.PostConditionTypes, "post-condition type")
    principal = deserializePrincipal(b)
    if conditionType == wire.PostConditionSTX:
        code = wire.readEnum(b, wire.FungibleConditionCodes, "fungible condition code")
        return STXPostCondition(principal, code, wire.readUint(b, 8))

    assetInfo = AssetInfo.deserialize(b)
    if conditionType == wire.PostConditionFungible:
        code = wire.readEnum(b, wire.FungibleConditionCodes, "fungible condition code")
        return FungiblePostCondition(principal, code, wire.readUint(b, 8), assetInfo)

    assetName = wire.readLPString(b)
    code = wire.readEnum(
        b, wire.NonFungibleConditionCodes, "non-fungible condition code"
    )
    return NonFungiblePostCondition(principal, code, assetInfo, assetName)
