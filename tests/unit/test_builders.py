"""
Copyright (c) 2020, the TinyStacks developers
See LICENSE for details
"""

import os

import pytest

from tinystacks import SerializationError, SigningError, builders, nets
from tinystacks.crypto.crypto import PrivateKey
from tinystacks.signer import TransactionSigner
from tinystacks.wire import wire
from tinystacks.wire.clarity import (
    ContractPrincipalCV,
    StandardPrincipalCV,
    bufferCVFromString,
    standardPrincipalCV,
)
from tinystacks.wire.postcondition import (
    FungiblePostCondition,
    NonFungiblePostCondition,
    STXPostCondition,
)
from tinystacks.wire.principal import ContractPrincipal, StandardPrincipal
from tinystacks.wire.transaction import StacksTransaction


transferKey = "edf9aee84d9b7abc145504dde6726c64f369d37ee34ded868fabd876c26570bc01"
contractKey = "e494f188c2d35887531ba474c433b1e41fadd8eb824aca983447fd4bb8b277a801"
recipient = "SP3FGQ8Z7JY9BWYZ5WM53E0M9NK7WHJF0691NZ159"
contractAddress = "ST3KC0MTNW34S1ZXD36JYKFD3JJMWA01M55DSJ4JE"

# Signed transactions, hex-encoded.
mainnetTransferTx = (
    "0000000001040015c31b8c1c11c515e244b75806bac48d1399c77500000000000000000000000000000000"
    "00008b316d56e35b3b8d03ab3b9dbe05eb44d64c53e7ba3c468f9a78c82a13f2174c32facb0f29faeb2107"
    "5ec933db935ebc28a8793cc60e14b8ee4ef05f52c94016030200000000000516df0ba3e79792be7be5e50a"
    "370289accfc8c9e032000000000000303974657374206d656d6f0000000000000000000000000000000000"
    "0000000000000000"
)

testnetTransferTx = (
    "8080000000040015c31b8c1c11c515e244b75806bac48d1399c77500000000000000000000000000000000"
    "00014199f63f7e010141a36a4624d032758f54e08ff03b24ed2667463eb405b4d81505631b32a1f13b5737"
    "1f29a6095b81741b32b5864b178e3546ff2bfb3dc08682030200000000000516df0ba3e79792be7be5e50a"
    "370289accfc8c9e032000000000000303974657374206d656d6f0000000000000000000000000000000000"
    "0000000000000000"
)

postConditionTransferTx = (
    "0000000001040015c31b8c1c11c515e244b75806bac48d1399c77500000000000000000000000000000000"
    "0001601ceb46ef6988c8b226c80fef4051de6acf344dc67a9421d3e734a72ae310104b061e69cee5d9ee7a"
    "6e1cef17f23b07d7fe4db5fcdb83de0d5f08043a06a36a030200000001000216df0ba3e79792be7be5e50a"
    "370289accfc8c9e03203000000000000d431000516df0ba3e79792be7be5e50a370289accfc8c9e0320000"
    "00000000303974657374206d656d6f00000000000000000000000000000000000000000000000000"
)

# Followed by the contract source.
deployTxPrefix = (
    "80800000000400e6c05355e0c990ffad19a5e9bda394a9c500342900000000000000000000000000000000"
    "0000c9c499f85df311348f81520268e11acadb8be0df1bb8db85989f71e32db7192e2806a1179fce6bf775"
    "932b28976c9e78c645d7acac8eefaf416a14f4fd14a49303020000000001086b762d73746f726500000156"
)

contractCallTx = (
    "80800000000400e6c05355e0c990ffad19a5e9bda394a9c500342900000000000000010000000000000000"
    "0000b2c4262b8716891ee4a3361b31b3847cdb3d4897538f0f7716a3720686aee96f01be6610141c6afb36"
    "f32c60575147b7e08191bae5cf9706c528adf46f28473e030200000000021ae6c05355e0c990ffad19a5e9"
    "bda394a9c5003429086b762d73746f7265096765742d76616c7565000000010200000003666f6f"
)

contractCallAllowTx = (
    "80800000000400e6c05355e0c990ffad19a5e9bda394a9c50034290000000000000001000000000000000"
    "0000074ba5083c1b444e5d1eb7bc7add66a9a511f57fc4b2514f5b0e54892962d5b453ea0ec6e473bc695"
    "22fd3fdd9104b7a354f830ad7ceabd0b3f2859d15697ad9b030100000000021ae6c05355e0c990ffad19a"
    "5e9bda394a9c5003429086b762d73746f7265096765742d76616c7565000000010200000003666f6f"
)


def readContract():
    path = os.path.join(
        os.path.dirname(os.path.realpath(__file__)), "wire", "kv-store.clar"
    )
    with open(path) as f:
        return f.read()


class TestTokenTransfer:
    def test_mainnet(self):
        tx = builders.makeSTXTokenTransfer(
            recipient, 12345, transferKey, memo="test memo", network="mainnet"
        )
        assert tx.txHex() == mainnetTransferTx
        tx.verifyOrigin()

    def test_testnet(self):
        tx = builders.makeSTXTokenTransfer(
            standardPrincipalCV(recipient),
            12345,
            PrivateKey(transferKey),
            memo="test memo",
            network=nets.testnet,
            fee=0,
            nonce=0,
        )
        assert tx.txHex() == testnetTransferTx

    def test_post_condition(self):
        pc = builders.makeStandardSTXPostCondition(
            recipient, wire.FungibleGreaterEqual, 54321
        )
        tx = builders.makeSTXTokenTransfer(
            recipient,
            12345,
            transferKey,
            memo="test memo",
            network="mainnet",
            postConditions=[pc],
        )
        assert tx.txHex() == postConditionTransferTx

    def test_fee(self):
        tx = builders.makeSTXTokenTransfer(
            recipient,
            12345,
            transferKey,
            memo="test memo",
            network="mainnet",
            fee=180,
        )
        assert tx.auth.originCondition.fee == 180
        assert tx.txHex().startswith(
            "0000000001040015c31b8c1c11c515e244b75806bac48d1399c775"
            "0000000000000000" + "00000000000000b4" + "00" + "01e5ac1152"
        )

    def test_contract_recipient(self):
        tx = builders.makeSTXTokenTransfer(
            contractAddress + ".kv-store", 1, PrivateKey.random(), network="testnet"
        )
        assert isinstance(tx.payload.recipient, ContractPrincipalCV)
        assert tx.payload.recipient.contractName == "kv-store"
        tx = builders.makeSTXTokenTransfer(
            contractAddress, 1, PrivateKey.random(), network="testnet"
        )
        assert isinstance(tx.payload.recipient, StandardPrincipalCV)
        with pytest.raises(SerializationError):
            builders.makeSTXTokenTransfer(1, 1, PrivateKey.random(), network="testnet")

    def test_configured_network(self, tmpConfig):
        tx = builders.makeSTXTokenTransfer(recipient, 1, PrivateKey.random())
        assert tx.version == wire.TxVersionTestnet
        assert tx.chainID == wire.ChainIDTestnet


class TestContracts:
    def test_deploy(self):
        codeBody = readContract()
        tx = builders.makeSmartContractDeploy(
            "kv-store", codeBody, contractKey, network="testnet"
        )
        assert tx.txHex() == deployTxPrefix + codeBody.encode().hex()
        decoded = StacksTransaction.deserialize(tx.txHex())
        assert decoded.payload.codeBody == codeBody
        decoded.verifyOrigin()

    def test_call(self):
        args = [bufferCVFromString("foo")]
        tx = builders.makeContractCall(
            contractAddress,
            "kv-store",
            "get-value",
            args,
            contractKey,
            network="testnet",
            nonce=1,
        )
        assert tx.txHex() == contractCallTx

        tx = builders.makeContractCall(
            contractAddress,
            "kv-store",
            "get-value",
            args,
            contractKey,
            network="testnet",
            nonce=1,
            postConditionMode=wire.PostConditionModeAllow,
        )
        assert tx.txHex() == contractCallAllowTx

    def test_anchor_mode(self):
        tx = builders.makeContractCall(
            contractAddress,
            "kv-store",
            "get-value",
            [],
            PrivateKey.random(),
            network="testnet",
            anchorMode=wire.AnchorOnChainOnly,
        )
        assert tx.anchorMode == wire.AnchorOnChainOnly


class TestSponsorship:
    def test_sponsor(self):
        originKey = PrivateKey.random()
        sponsorKey = PrivateKey.random()
        tx = builders.makeContractCall(
            contractAddress,
            "kv-store",
            "get-value",
            [bufferCVFromString("foo")],
            originKey,
            network="testnet",
            nonce=2,
            sponsored=True,
        )
        assert tx.isSponsored()
        assert tx.auth.sponsorCondition.signer.iszero()
        originSigHash = tx.verifyOrigin()

        received = StacksTransaction.deserialize(tx.txHex())
        sponsored = builders.sponsorTransaction(
            received, sponsorKey.hex(), 1000, sponsorNonce=5
        )
        assert sponsored is received
        assert sponsored.auth.sponsorCondition.fee == 1000
        assert sponsored.auth.sponsorCondition.nonce == 5
        assert sponsored.auth.originCondition.nonce == 2
        assert sponsored.verifyOrigin() == originSigHash
        sponsored.verifySponsor()

    def test_sponsor_unsigned(self):
        originKey = PrivateKey.random()
        tx = builders.makeSTXTokenTransfer(
            recipient, 1, originKey, network="testnet", sponsored=True
        )
        tx.auth.originCondition = tx.auth.originCondition.clear()
        with pytest.raises(SigningError):
            builders.sponsorTransaction(tx, PrivateKey.random(), 1000)


class TestPostConditionBuilders:
    def test_builders(self):
        address = "ST1EXHZSN8MJSJ9DSG994G1V8CNKYXGMK7Z4SA6DH"
        info = builders.createAssetInfo(
            "ST34RKEJKQES7MXQFBT29KSJZD73QK3YNT5N56C6X",
            "test-asset-contract",
            "test-asset-name",
        )

        pc = builders.makeStandardSTXPostCondition(
            address, wire.FungibleGreaterEqual, 10
        )
        assert isinstance(pc, STXPostCondition)
        assert isinstance(pc.principal, StandardPrincipal)
        assert pc.serialize().hex() == (
            "00021a5dd8ff3545259925b982524807686567eec2933f03000000000000000a"
        )

        pc = builders.makeContractSTXPostCondition(
            contractAddress, "kv-store", wire.FungibleGreaterEqual, 12345
        )
        assert isinstance(pc.principal, ContractPrincipal)
        assert pc.serialize().hex() == (
            "00031ae6c05355e0c990ffad19a5e9bda394a9c5003429086b762d73746f7265"
            "030000000000003039"
        )

        pc = builders.makeStandardFungiblePostCondition(
            address, wire.FungibleLess, 1000, info
        )
        assert isinstance(pc, FungiblePostCondition)
        assert pc.serialize().hex().endswith("0400000000000003e8")

        pc = builders.makeContractFungiblePostCondition(
            address, "kv-store", wire.FungibleEqual, 1, info
        )
        assert isinstance(pc.principal, ContractPrincipal)
        assert pc.serialize().hex().endswith("010000000000000001")

        pc = builders.makeStandardNonFungiblePostCondition(
            address, wire.NonFungibleOwns, info, "token-asset-name"
        )
        assert isinstance(pc, NonFungiblePostCondition)
        assert pc.serialize().hex().endswith(
            "10746f6b656e2d61737365742d6e616d6511"
        )

        pc = builders.makeContractNonFungiblePostCondition(
            address, "kv-store", wire.NonFungibleDoesNotOwn, info, "token-asset-name"
        )
        assert isinstance(pc.principal, ContractPrincipal)
        assert pc.serialize().hex().endswith("10")

        with pytest.raises(SerializationError):
            builders.makeStandardSTXPostCondition(address, wire.NonFungibleOwns, 10)

    def test_signed_with_post_conditions(self):
        privKey = PrivateKey.random()
        pcs = [
            builders.makeStandardSTXPostCondition(
                recipient, wire.FungibleGreaterEqual, 1
            ),
            builders.makeStandardNonFungiblePostCondition(
                recipient,
                wire.NonFungibleOwns,
                builders.createAssetInfo(contractAddress, "nft", "asset"),
                "instance",
            ),
        ]
        tx = builders.makeContractCall(
            contractAddress,
            "kv-store",
            "get-value",
            [],
            privKey,
            network="testnet",
            postConditions=pcs,
        )
        decoded = StacksTransaction.deserialize(tx.txHex())
        assert decoded.postConditions == pcs
        decoded.verifyOrigin()
        assert TransactionSigner(decoded).sigHash == tx.signBegin()
