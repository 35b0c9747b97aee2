"""
Copyright (c) 2020, the TinyStacks developers
See LICENSE for details

Transaction payloads. A payload is a type byte followed by a body whose
layout depends on the type.
"""

from tinystacks import DeserializationError, SerializationError
from tinystacks.util.encode import ByteArray

from . import wire
from .address import Address
from .clarity import ContractPrincipalCV, StandardPrincipalCV, deserializeCV


class TokenTransferPayload:
    """
    TokenTransferPayload sends micro-STX to a standard or contract principal.
    """

    payloadType = wire.PayloadTokenTransfer

    def __init__(self, recipient, amount, memo=""):
        """
        Args:
            recipient (StandardPrincipalCV or ContractPrincipalCV): The
                recipient.
            amount (int): The amount in micro-STX.
            memo (str): An optional note of at most 34 bytes.
        """
        if not isinstance(recipient, (StandardPrincipalCV, ContractPrincipalCV)):
            raise SerializationError(
                f"token transfer recipient must be a principal, got {recipient!r}"
            )
        wire.writeUint(amount, 8, "amount")
        wire.checkMemo(memo)
        self.recipient = recipient
        self.amount = amount
        self.memo = memo

    def __eq__(self, other):
        return (
            isinstance(other, TokenTransferPayload)
            and self.recipient == other.recipient
            and self.amount == other.amount
            and self.memo == other.memo
        )

    def __repr__(self):
        return (
            f"TokenTransferPayload({self.recipient!r}, amount={self.amount}, "
            f"memo={self.memo!r})"
        )

    def serialize(self):
        b = ByteArray(self.payloadType, length=1)
        b += self.recipient.serialize()
        b += wire.writeUint(self.amount, 8, "amount")
        b += wire.writeMemo(self.memo)
        return b

    @staticmethod
    def deserialize(b):
        recipient = deserializeCV(b)
        if not isinstance(recipient, (StandardPrincipalCV, ContractPrincipalCV)):
            raise DeserializationError(
                f"token transfer recipient is not a principal: {recipient!r}"
            )
        amount = wire.readUint(b, 8)
        return TokenTransferPayload(recipient, amount, wire.readMemo(b))


class SmartContractPayload:
    """
    SmartContractPayload deploys Clarity source code under a contract name.
    """

    payloadType = wire.PayloadSmartContract

    def __init__(self, contractName, codeBody):
        """
        Args:
            contractName (str): The contract name.
            codeBody (str): The Clarity source.
        """
        wire.checkStringLength(contractName, name="contract name")
        wire.checkStringLength(codeBody, wire.MaxCodeBodyLength, "code body")
        self.contractName = contractName
        self.codeBody = codeBody

    def __eq__(self, other):
        return (
            isinstance(other, SmartContractPayload)
            and self.contractName == other.contractName
            and self.codeBody == other.codeBody
        )

    def __repr__(self):
        return (
            f"SmartContractPayload({self.contractName!r}, "
            f"{len(self.codeBody)} characters of code)"
        )

    def serialize(self):
        b = ByteArray(self.payloadType, length=1)
        b += wire.writeLPString(self.contractName)
        b += wire.writeLPString(
            self.codeBody, prefixBytes=4, maxLength=wire.MaxCodeBodyLength
        )
        return b

    @staticmethod
    def deserialize(b):
        contractName = wire.readLPString(b)
        codeBody = wire.readLPString(
            b, prefixBytes=4, maxLength=wire.MaxCodeBodyLength
        )
        return SmartContractPayload(contractName, codeBody)


class ContractCallPayload:
    """
    ContractCallPayload calls a public function of a deployed contract.
    """

    payloadType = wire.PayloadContractCall

    def __init__(self, contractAddress, contractName, functionName, functionArgs):
        """
        Args:
            contractAddress (Address): The contract deployer's address.
            contractName (str): The contract name.
            functionName (str): The function to call.
            functionArgs (list(ClarityValue)): The arguments.
        """
        wire.checkStringLength(contractName, name="contract name")
        wire.checkStringLength(functionName, name="function name")
        self.contractAddress = contractAddress
        self.contractName = contractName
        self.functionName = functionName
        self.functionArgs = list(functionArgs)

    def __eq__(self, other):
        return (
            isinstance(other, ContractCallPayload)
            and self.contractAddress == other.contractAddress
            and self.contractName == other.contractName
            and self.functionName == other.functionName
            and self.functionArgs == other.functionArgs
        )

    def __repr__(self):
        return (
            f"ContractCallPayload({self.contractAddress.string()}."
            f"{self.contractName}::{self.functionName}, "
            f"{len(self.functionArgs)} args)"
        )

    def serialize(self):
        b = ByteArray(self.payloadType, length=1)
        b += self.contractAddress.serialize()
        b += wire.writeLPString(self.contractName)
        b += wire.writeLPString(self.functionName)
        b += wire.writeLPList(self.functionArgs)
        return b

    @staticmethod
    def deserialize(b):
        contractAddress = Address.deserialize(b)
        contractName = wire.readLPString(b)
        functionName = wire.readLPString(b)
        functionArgs = wire.readLPList(b, deserializeCV)
        return ContractCallPayload(
            contractAddress, contractName, functionName, functionArgs
        )


class PoisonPayload:
    """
    PoisonPayload would report a pair of conflicting microblock headers.
    Encoding it is not supported.
    """

    payloadType = wire.PayloadPoisonMicroblock

    def __eq__(self, other):
        return isinstance(other, PoisonPayload)

    def __repr__(self):
        return "PoisonPayload()"

    def serialize(self):
        raise NotImplementedError("poison-microblock payloads are not supported")

    @staticmethod
    def deserialize(b):
        raise NotImplementedError("poison-microblock payloads are not supported")


class CoinbasePayload:
    """
    CoinbasePayload carries the 32-byte coinbase buffer of a block.
    """

    payloadType = wire.PayloadCoinbase

    def __init__(self, coinbaseBuffer):
        """
        Args:
            coinbaseBuffer (byte-like): Exactly 32 bytes.
        """
        coinbaseBuffer = ByteArray(coinbaseBuffer)
        if len(coinbaseBuffer) != wire.CoinbaseBufferLength:
            raise SerializationError(
                f"coinbase buffer must be {wire.CoinbaseBufferLength} bytes, "
                f"got {len(coinbaseBuffer)}"
            )
        self.coinbaseBuffer = coinbaseBuffer

    def __eq__(self, other):
        return (
            isinstance(other, CoinbasePayload)
            and self.coinbaseBuffer == other.coinbaseBuffer
        )

    def __repr__(self):
        return f"CoinbasePayload({self.coinbaseBuffer.hex()})"

    def serialize(self):
        return ByteArray(self.payloadType, length=1) + self.coinbaseBuffer

    @staticmethod
    def deserialize(b):
        return CoinbasePayload(b.pop(wire.CoinbaseBufferLength))


payloadTypes = {
    wire.PayloadTokenTransfer: TokenTransferPayload,
    wire.PayloadSmartContract: SmartContractPayload,
    wire.PayloadContractCall: ContractCallPayload,
    wire.PayloadPoisonMicroblock: PoisonPayload,
    wire.PayloadCoinbase: CoinbasePayload,
}


def deserializePayload(b):
    """
    Read a payload, dispatching on its type byte.

    Args:
        b (ByteArray): The cursor.

    Returns:
        object: One of the payload classes.
    """
    payloadType = wire.readEnum(b, wire.PayloadTypes, "payload type")
    return payloadTypes[payloadType].deserialize(b)
