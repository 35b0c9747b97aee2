"""
Copyright (c) 2020, the TinyStacks developers
See LICENSE for details
"""

import pytest

from tinystacks import DeserializationError, SerializationError
from tinystacks.util.encode import ByteArray
from tinystacks.wire import wire
from tinystacks.wire.address import Address
from tinystacks.wire.postcondition import (
    FungiblePostCondition,
    NonFungiblePostCondition,
    STXPostCondition,
    deserializePostCondition,
)
from tinystacks.wire.principal import (
    ContractPrincipal,
    OriginPrincipal,
    StandardPrincipal,
    createAssetInfo,
)


address = "SP2JXKMSH007NPYAQHKJPQMAQYAD90NQGTVJVQ02B"
assetAddress = "SP2ZP4GJDZJ1FDHTQ963F0292PE9J9752TZJ68F21"


def standardPrincipal():
    return StandardPrincipal(Address.fromString(address))


def assetInfo():
    return createAssetInfo(assetAddress, "contract_name", "asset_name")


def roundTrip(postCondition):
    b = postCondition.serialize()
    decoded = deserializePostCondition(b)
    assert len(b) == 0
    return decoded


class TestPostConditions:
    def test_stx(self):
        pc = STXPostCondition(standardPrincipal(), wire.FungibleGreaterEqual, 1000000)
        decoded = roundTrip(pc)
        assert isinstance(decoded, STXPostCondition)
        assert decoded == pc
        assert decoded.principal.address.string() == address
        assert decoded.conditionCode == wire.FungibleGreaterEqual
        assert decoded.amount == 1000000

    def test_fungible(self):
        pc = FungiblePostCondition(
            standardPrincipal(), wire.FungibleGreaterEqual, 1000000, assetInfo()
        )
        decoded = roundTrip(pc)
        assert isinstance(decoded, FungiblePostCondition)
        assert decoded == pc
        assert decoded.assetInfo.contractName == "contract_name"
        assert decoded.assetInfo.assetName == "asset_name"

    def test_non_fungible(self):
        principal = ContractPrincipal(Address.fromString(address), "contract-name")
        pc = NonFungiblePostCondition(
            principal, wire.NonFungibleDoesNotOwn, assetInfo(), "bitcoin.id"
        )
        b = pc.serialize()
        assert b[0] == wire.PostConditionNonFungible
        assert b[-1] == wire.NonFungibleDoesNotOwn
        decoded = roundTrip(pc)
        assert isinstance(decoded, NonFungiblePostCondition)
        assert decoded == pc
        assert decoded.principal.contractName == "contract-name"
        assert decoded.assetName == "bitcoin.id"
        assert decoded.conditionCode == wire.NonFungibleDoesNotOwn

    def test_origin_principal(self):
        pc = STXPostCondition(OriginPrincipal(), wire.FungibleLess, 5)
        assert pc.serialize() == "0001040000000000000005"
        assert roundTrip(pc) == pc

    def test_vectors(self):
        addr = "ST1EXHZSN8MJSJ9DSG994G1V8CNKYXGMK7Z4SA6DH"
        info = createAssetInfo(
            "ST34RKEJKQES7MXQFBT29KSJZD73QK3YNT5N56C6X",
            "test-asset-contract",
            "test-asset-name",
        )
        encodedInfo = (
            "1ac989ba53bbb27a76ef5e8499e65f69c7798fd5d1"
            "13746573742d61737365742d636f6e7472616374"
            "0f746573742d61737365742d6e616d65"
        )

        pc = STXPostCondition(
            StandardPrincipal(Address.fromString(addr)), wire.FungibleGreaterEqual, 10
        )
        assert pc.serialize().hex() == (
            "00021a5dd8ff3545259925b982524807686567eec2933f03000000000000000a"
        )

        principal = ContractPrincipal(
            Address.fromString("ST3KC0MTNW34S1ZXD36JYKFD3JJMWA01M55DSJ4JE"), "kv-store"
        )
        pc = STXPostCondition(principal, wire.FungibleGreaterEqual, 12345)
        assert pc.serialize().hex() == (
            "00031ae6c05355e0c990ffad19a5e9bda394a9c5003429086b762d73746f7265"
            "030000000000003039"
        )

        pc = FungiblePostCondition(
            StandardPrincipal(Address.fromString(addr)), wire.FungibleLess, 1000, info
        )
        assert pc.serialize().hex() == (
            "01021a5dd8ff3545259925b982524807686567eec2933f"
            + encodedInfo
            + "0400000000000003e8"
        )

        principal = ContractPrincipal(Address.fromString(addr), "kv-store")
        pc = FungiblePostCondition(principal, wire.FungibleEqual, 1, info)
        assert pc.serialize().hex() == (
            "01031a5dd8ff3545259925b982524807686567eec2933f086b762d73746f7265"
            + encodedInfo
            + "010000000000000001"
        )

    def test_errors(self):
        with pytest.raises(SerializationError):
            STXPostCondition(address, wire.FungibleEqual, 1)
        with pytest.raises(SerializationError):
            STXPostCondition(standardPrincipal(), wire.NonFungibleOwns, 1)
        with pytest.raises(SerializationError):
            STXPostCondition(standardPrincipal(), wire.FungibleEqual, -1)
        with pytest.raises(SerializationError):
            FungiblePostCondition(standardPrincipal(), 0x06, 1, assetInfo())
        with pytest.raises(SerializationError):
            NonFungiblePostCondition(
                standardPrincipal(), wire.FungibleEqual, assetInfo(), "name"
            )
        with pytest.raises(SerializationError):
            NonFungiblePostCondition(
                standardPrincipal(), wire.NonFungibleOwns, assetInfo(), "a" * 129
            )

        # Unknown post-condition type.
        with pytest.raises(DeserializationError):
            deserializePostCondition(ByteArray("0301"))
        # An STX post-condition with a non-fungible code.
        with pytest.raises(DeserializationError):
            deserializePostCondition(ByteArray("000111" + "00" * 8))
        # A non-fungible post-condition with a fungible code.
        b = NonFungiblePostCondition(
            OriginPrincipal(), wire.NonFungibleOwns, assetInfo(), "x"
        ).serialize()
        b = b[: len(b) - 1] + "01"
        with pytest.raises(DeserializationError):
            deserializePostCondition(b)
