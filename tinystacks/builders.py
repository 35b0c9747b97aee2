"""
Copyright (c) 2020, the TinyStacks developers
See LICENSE for details

Builders for signed transactions and post-conditions.
"""

from tinystacks import SerializationError
from tinystacks import config, nets
from tinystacks.crypto.crypto import PrivateKey
from tinystacks.signer import TransactionSigner
from tinystacks.util import helpers
from tinystacks.wire import wire
from tinystacks.wire.address import Address
from tinystacks.wire.authorization import (
    SponsoredAuthorization,
    StandardAuthorization,
    createSingleSigSpendingCondition,
)
from tinystacks.wire.clarity import (
    ContractPrincipalCV,
    StandardPrincipalCV,
    contractPrincipalCV,
    standardPrincipalCV,
)
from tinystacks.wire.payload import (
    ContractCallPayload,
    SmartContractPayload,
    TokenTransferPayload,
)
from tinystacks.wire.postcondition import (
    FungiblePostCondition,
    NonFungiblePostCondition,
    STXPostCondition,
)
from tinystacks.wire.principal import (
    ContractPrincipal,
    StandardPrincipal,
    createAssetInfo,  # noqa: F401
)
from tinystacks.wire.transaction import StacksTransaction


log = helpers.getLogger("BUILDER")


def netParams(network):
    """
    Resolve the network parameters. A network name is parsed. With no
    network, the configured network is used.

    Args:
        network (str or module): The network name or parameters.

    Returns:
        module: The network parameters.
    """
    if network is None:
        return config.load().netParams
    if isinstance(network, str):
        return nets.parse(network)
    return network


def privateKey(key):
    if isinstance(key, PrivateKey):
        return key
    return PrivateKey(key)


def recipientCV(recipient):
    """
    Convert a recipient to a principal Clarity value. The recipient may be an
    address, an "address.contract-name" string, or a principal Clarity value.
    """
    if isinstance(recipient, (StandardPrincipalCV, ContractPrincipalCV)):
        return recipient
    if isinstance(recipient, str):
        addr, dot, name = recipient.partition(".")
        if dot:
            return contractPrincipalCV(addr, name)
        return standardPrincipalCV(addr)
    raise SerializationError(f"invalid recipient {recipient!r}")


def buildAndSign(
    payload,
    senderKey,
    network=None,
    fee=0,
    nonce=0,
    anchorMode=None,
    postConditionMode=wire.PostConditionModeDeny,
    postConditions=None,
    sponsored=False,
):
    """
    Create a single-sig P2PKH transaction for the payload and sign it as the
    origin.

    Returns:
        StacksTransaction: The signed transaction.
    """
    net = netParams(network)
    privKey = privateKey(senderKey)
    condition = createSingleSigSpendingCondition(
        wire.HashModeP2PKH, privKey.pubKey(), nonce, fee
    )
    if sponsored:
        auth = SponsoredAuthorization(condition)
    else:
        auth = StandardAuthorization(condition)
    tx = StacksTransaction(
        net.TransactionVersion,
        auth,
        payload,
        postConditions=postConditions,
        anchorMode=anchorMode,
        postConditionMode=postConditionMode,
        chainID=net.ChainID,
    )
    TransactionSigner(tx).signOrigin(privKey)
    log.debug(f"built {net.Name} transaction {tx.txid()}")
    return tx


def makeSTXTokenTransfer(recipient, amount, senderKey, memo="", **kwargs):
    """
    Create a signed STX token transfer.

    Args:
        recipient (str or principal CV): The recipient.
        amount (int): The amount in micro-STX.
        senderKey (str or PrivateKey): The sender's private key.
        memo (str): An optional memo.
        **kwargs: network, fee, nonce, anchorMode, postConditionMode,
            postConditions and sponsored. See buildAndSign.

    Returns:
        StacksTransaction: The signed transaction.
    """
    payload = TokenTransferPayload(recipientCV(recipient), amount, memo)
    return buildAndSign(payload, senderKey, **kwargs)


def makeSmartContractDeploy(contractName, codeBody, senderKey, **kwargs):
    """
    Create a signed contract deployment.

    Args:
        contractName (str): The contract name.
        codeBody (str): The Clarity source code.
        senderKey (str or PrivateKey): The deployer's private key.

    Returns:
        StacksTransaction: The signed transaction.
    """
    payload = SmartContractPayload(contractName, codeBody)
    return buildAndSign(payload, senderKey, **kwargs)


def makeContractCall(
    contractAddress, contractName, functionName, functionArgs, senderKey, **kwargs
):
    """
    Create a signed contract call.

    Args:
        contractAddress (str): The contract deployer's address.
        contractName (str): The contract name.
        functionName (str): The public function to call.
        functionArgs (list(ClarityValue)): The arguments.
        senderKey (str or PrivateKey): The caller's private key.

    Returns:
        StacksTransaction: The signed transaction.
    """
    payload = ContractCallPayload(
        Address.fromString(contractAddress), contractName, functionName, functionArgs
    )
    return buildAndSign(payload, senderKey, **kwargs)


def sponsorTransaction(transaction, sponsorKey, fee, sponsorNonce=0):
    """
    Sign an origin-signed sponsored transaction as its sponsor.

    Args:
        transaction (StacksTransaction): The transaction.
        sponsorKey (str or PrivateKey): The sponsor's private key.
        fee (int): The fee the sponsor pays, in micro-STX.
        sponsorNonce (int): The sponsor account's nonce.

    Returns:
        StacksTransaction: The transaction, with the sponsor's signature.
    """
    privKey = privateKey(sponsorKey)
    condition = createSingleSigSpendingCondition(
        wire.HashModeP2PKH, privKey.pubKey(), sponsorNonce, fee
    )
    signer = TransactionSigner.createSponsorSigner(transaction, condition)
    signer.signSponsor(privKey)
    log.debug(f"sponsored transaction {transaction.txid()}")
    return transaction


def makeStandardSTXPostCondition(address, conditionCode, amount):
    principal = StandardPrincipal(Address.fromString(address))
    return STXPostCondition(principal, conditionCode, amount)


def makeContractSTXPostCondition(address, contractName, conditionCode, amount):
    principal = ContractPrincipal(Address.fromString(address), contractName)
    return STXPostCondition(principal, conditionCode, amount)


def makeStandardFungiblePostCondition(address, conditionCode, amount, assetInfo):
    principal = StandardPrincipal(Address.fromString(address))
    return FungiblePostCondition(principal, conditionCode, amount, assetInfo)


def makeContractFungiblePostCondition(
    address, contractName, conditionCode, amount, assetInfo
):
    principal = ContractPrincipal(Address.fromString(address), contractName)
    return FungiblePostCondition(principal, conditionCode, amount, assetInfo)


def makeStandardNonFungiblePostCondition(address, conditionCode, assetInfo, assetName):
    principal = StandardPrincipal(Address.fromString(address))
    return NonFungiblePostCondition(principal, conditionCode, assetInfo, assetName)


def makeContractNonFungiblePostCondition(
    address, contractName, conditionCode, assetInfo, assetName
):
    """
    A post-condition on the ownership of a non-fungible asset by a contract.

    Args:
        address (str): The contract deployer's address.
        contractName (str): The contract name.
        conditionCode (int): wire.NonFungibleOwns or wire.NonFungibleDoesNotOwn.
        assetInfo (AssetInfo): The asset class.
        assetName (str): The asset instance.

    Returns:
        NonFungiblePostCondition: The post-condition.
    """
    principal = ContractPrincipal(Address.fromString(address), contractName)
    return NonFungiblePostCondition(principal, conditionCode, assetInfo, assetName)
